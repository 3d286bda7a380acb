"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps one accepted client socket for the lifetime of a single request.

=============================================================================
ONE READ, ONE RESPONSE
=============================================================================

TCP is a byte stream and a request may arrive split across several
segments. This server deliberately does NOT reassemble: it makes exactly
one recv() of buffer_size bytes and parses whatever arrived.

    Client sends:                     Server sees:
    ─────────────                     ────────────
    GET / HTTP/1.1\r\n                one recv(4096)
    Host: localhost\r\n         ──►   → everything that is in the
    \r\n                                kernel buffer at that moment

For browsers and curl, a GET request fits in one segment and one read,
which is all the course site needs. Requests bigger than buffer_size are
truncated; a client that opens the socket and sends nothing hits the
read timeout and the connection is closed without a response.

=============================================================================
CONNECTION STATE MACHINE
=============================================================================

    IDLE ──► READING ──► PARSED ──► DISPATCHING ──► RESPONDING ──► CLOSED
               │                                                    ▲
               └──── nothing received / timeout / reset ────────────┘

Every response carries "Connection: close", so there is no keep-alive
state: a connection is always closed after one request.

=============================================================================
"""

import socket
import time
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional, Tuple
import uuid


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Connection lifecycle states, mainly useful in debug logs."""

    IDLE = "idle"                # Accepted, nothing read yet
    READING = "reading"          # Inside recv()
    PARSED = "parsed"            # Bytes turned into an HTTPRequest
    DISPATCHING = "dispatching"  # Route / handler running
    RESPONDING = "responding"    # Inside sendall()
    CLOSED = "closed"            # Socket released


@dataclass
class Connection:
    """
    Represents a client connection.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    Connection Responsibilities                       │
    ├─────────────────────────────────────────────────────────────────────┤
    │  1. SINGLE READ     one recv(buffer_size), no reassembly             │
    │  2. TIMEOUT         read timeout from ServerConfig.timeout           │
    │  3. STATE TRACKING  what phase the request is in                     │
    │  4. GRACEFUL CLOSE  FIN, drain, close; never leak the descriptor     │
    └─────────────────────────────────────────────────────────────────────┘

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Short connection identifier (for logging).
        state: Current connection state.
        created_at: Timestamp when connection was accepted.
    """

    # Required parameters
    socket: socket.socket
    address: Tuple[str, int]

    # Generated/default parameters
    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.IDLE
    created_at: float = field(default_factory=time.time)

    # Configuration (passed from ServerConfig)
    buffer_size: int = 4096
    timeout: Optional[float] = 30.0

    def __post_init__(self):
        # Accepted sockets inherit nothing useful from the listener's
        # 1s polling timeout; set the read timeout explicitly.
        self.socket.setblocking(True)
        self.socket.settimeout(self.timeout)

    @property
    def client_ip(self) -> str:
        return self.address[0]

    @property
    def age(self) -> float:
        """Connection age in seconds."""
        return time.time() - self.created_at

    # =========================================================================
    # READING
    # =========================================================================

    def read_request(self) -> Optional[bytes]:
        """
        Read the request with a single recv().

        Returns:
            The bytes received, or None if the client sent nothing,
            reset the connection or did not send within the timeout.
        """
        self.state = ConnectionState.READING

        try:
            data = self.socket.recv(self.buffer_size)
        except socket.timeout:
            logger.debug(f"[{self.id}] Read timed out after {self.timeout}s")
            return None
        except (ConnectionResetError, BrokenPipeError):
            logger.debug(f"[{self.id}] Client reset the connection")
            return None

        if not data:
            return None  # Client closed without sending

        return data

    def mark(self, state: ConnectionState) -> None:
        """Advance the lifecycle state (PARSED, DISPATCHING)."""
        self.state = state

    # =========================================================================
    # WRITING
    # =========================================================================

    def send_response(self, data: bytes) -> bool:
        """
        Send response bytes to the client.

        Uses sendall() so a large page is never half-written.

        Returns:
            True if send succeeded, False if the connection was lost.
        """
        self.state = ConnectionState.RESPONDING

        try:
            self.socket.sendall(data)
            return True
        except OSError as e:
            # Covers ConnectionResetError, BrokenPipeError and timeouts
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self, drain_timeout: float = 2.0):
        """
        Close the connection gracefully.

        ┌─────────────────────────────────────────────────────────────────┐
        │   Server                              Client                     │
        │      │   FIN ──────────────────────────► │  (shutdown SHUT_WR)  │
        │      │ ◄───────────────────────── FIN   │  (client closes)      │
        │   (socket closed)                  (socket closed)               │
        └─────────────────────────────────────────────────────────────────┘

        Draining before close() keeps the kernel from answering unread
        request bytes with an RST, which could discard the response before
        the client reads it. The drain stops after drain_timeout seconds in
        total, however slowly the client keeps sending; 0 skips it.
        """
        if self.state == ConnectionState.CLOSED:
            return

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Already disconnected

        deadline = time.monotonic() + drain_timeout
        try:
            while True:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    break
                self.socket.settimeout(min(remaining, 0.5))
                if not self.socket.recv(1024):
                    break
        except OSError:
            pass  # socket.timeout is an OSError subclass

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age:.3f}s")

    # =========================================================================
    # CONTEXT MANAGER
    # =========================================================================

    def __enter__(self):
        """
        Allows:
            with Connection(sock, addr) as conn:
                raw = conn.read_request()
            # Connection automatically closed here
        """
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False  # Don't suppress exceptions
