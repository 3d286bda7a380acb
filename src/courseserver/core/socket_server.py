"""
=============================================================================
TCP SOCKET SERVER
=============================================================================

The listening socket and the accept loop.

=============================================================================
SOCKET LIFECYCLE
=============================================================================

    socket() ──► setsockopt() ──► bind() ──► listen() ──► accept() loop
                                    │                         │
                           OSError propagates        one Connection per
                           (port in use, EACCES)     client, handed to
                                                     the HTTP server

=============================================================================
SHUTDOWN
=============================================================================

The server does not own its stop flag. A threading.Event is passed in at
construction and the accept loop polls it:

    ┌─────────────────────────────────────────────────────────────────────┐
    │   SIGINT / SIGTERM ──► handler: event.set()   (nothing else!)       │
    │                                                                      │
    │   accept loop:                                                       │
    │       while not event.is_set():                                      │
    │           accept()  ← 1 second timeout, then re-check the event     │
    └─────────────────────────────────────────────────────────────────────┘

Setting an Event is safe from a signal handler. Closing sockets and
joining threads is not, so all of that happens in HTTPServer.stop(), on
an ordinary thread, after the event is seen.

=============================================================================
INTERVIEW QUESTIONS
=============================================================================

Q: "What does SO_REUSEADDR do?"
A: "After a server closes, its port sits in TIME_WAIT for up to a couple
   of minutes. SO_REUSEADDR lets a restarted server bind to it anyway,
   instead of failing with 'Address already in use'."

Q: "Why a timeout on accept()?"
A: "A blocking accept() can't notice that shutdown was requested. With a
   1 second timeout the loop wakes up at least once a second to check."

=============================================================================
"""

import socket
import signal
import threading
import logging
from typing import Callable, Dict, Optional, Tuple

from .connection import Connection
from ..config import ServerConfig


logger = logging.getLogger(__name__)


class SocketServer:
    """
    TCP server that accepts connections and hands them to a callback.

    Usage:
        shutdown = threading.Event()
        server = SocketServer(config, shutdown)
        server.bind()                         # raises OSError on failure
        server.serve_forever(handle)          # blocks until shutdown.set()
        server.close()
    """

    def __init__(self, config: ServerConfig, shutdown_event: threading.Event):
        """
        Args:
            config: Server configuration (host, port, backlog, timeouts).
            shutdown_event: Set by whoever wants the accept loop to stop.

        The socket is not created until bind().
        """
        self.config = config
        self._shutdown_event = shutdown_event
        self._socket: Optional[socket.socket] = None

        # Signal handlers in place before install_signal_handlers()
        self._original_handlers: Dict[int, object] = {}

    @property
    def address(self) -> Tuple[str, int]:
        """
        The address actually bound.

        With port 0 the OS picks a free port, so this can differ from
        config.port.
        """
        if self._socket is None:
            return (self.config.host, self.config.port)
        host, port = self._socket.getsockname()[:2]
        return (host, port)

    def _create_socket(self) -> socket.socket:
        """Create and configure the listening socket."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)

        # Avoid "Address already in use" while the old socket is in TIME_WAIT
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        # Send responses immediately instead of waiting to coalesce packets
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)

        # accept() wakes up once a second to check the shutdown event
        sock.settimeout(1.0)

        return sock

    def bind(self) -> Tuple[str, int]:
        """
        Create the socket, bind and listen.

        Returns:
            The bound (host, port).

        Raises:
            OSError: If the address can't be bound (in use, no permission).
        """
        sock = self._create_socket()

        try:
            sock.bind((self.config.host, self.config.port))
            sock.listen(self.config.backlog)
        except OSError as e:
            logger.error(f"Failed to bind to {self.config.host}:{self.config.port}: {e}")
            sock.close()
            raise

        self._socket = sock
        host, port = self.address
        logger.info(f"Server listening on {host}:{port}")
        return (host, port)

    def serve_forever(self, connection_handler: Callable[[Connection], None]):
        """
        Accept connections until the shutdown event is set.

        ┌─────────────────────────────────────────────────────────────────┐
        │   while not shutdown_event.is_set():                            │
        │       ├──► accept()            (1 second timeout)               │
        │       ├──► wrap in Connection  (read timeout, buffer size)      │
        │       └──► connection_handler(conn)                             │
        └─────────────────────────────────────────────────────────────────┘

        An accept error while running is logged and the loop continues.
        Once the event is set (or the socket is closed by stop()) the loop
        exits.
        """
        if self._socket is None:
            raise RuntimeError("serve_forever() called before bind()")

        while not self._shutdown_event.is_set():
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                continue
            except OSError as e:
                if self._shutdown_event.is_set() or self._socket is None:
                    break
                logger.error(f"Accept error: {e}")
                continue

            logger.debug(f"Accepted connection from {client_address[0]}:{client_address[1]}")

            try:
                conn = Connection(
                    socket=client_socket,
                    address=client_address,
                    buffer_size=self.config.buffer_size,
                    timeout=self.config.timeout,
                )
            except OSError as e:
                # The client went away between accept() and setup
                logger.warning(f"Dropping connection from {client_address[0]}: {e}")
                client_socket.close()
                continue

            connection_handler(conn)

        logger.debug("Accept loop exited")

    def close(self):
        """Close the listening socket. Safe to call more than once."""
        sock, self._socket = self._socket, None
        if sock is not None:
            try:
                sock.close()
            except OSError:
                pass
            logger.info("Socket server stopped")

    # =========================================================================
    # SIGNALS
    # =========================================================================

    def install_signal_handlers(self):
        """
        Route SIGINT and SIGTERM to the shutdown event.

        Must be called from the main thread (a Python restriction on
        signal.signal()).
        """
        def shutdown_handler(signum, frame):
            logger.info(f"Received {signal.Signals(signum).name}, initiating shutdown...")
            self._shutdown_event.set()

        for sig in (signal.SIGINT, signal.SIGTERM):
            self._original_handlers[sig] = signal.signal(sig, shutdown_handler)

    def restore_signal_handlers(self):
        """Put back whatever handlers were installed before ours."""
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()
