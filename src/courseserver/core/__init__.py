"""
=============================================================================
CORE NETWORKING
=============================================================================

The TCP layer: everything below HTTP.

    ┌─────────────────────────────────────────────────────────────────────┐
    │   SocketServer        one thread, accept() loop                      │
    │        │                                                             │
    │        │ Connection (client socket + read timeout)                   │
    │        ▼                                                             │
    │   ThreadPool          bounded queue, min..max workers                │
    │        │                                                             │
    │        ▼                                                             │
    │   HTTPServer._handle_connection(conn)   (in a worker thread)        │
    │        read → parse → route → send → close                          │
    └─────────────────────────────────────────────────────────────────────┘

Each component has ONE job:
- SocketServer: Accept connections
- ThreadPool: Bound concurrency and apply backpressure
- Connection: One read, one write, clean close

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState
from .thread_pool import ThreadPool

__all__ = [
    "SocketServer",     # Listening socket and accept loop
    "Connection",       # Wrapper for client socket
    "ConnectionState",  # Enum for connection lifecycle states
    "ThreadPool",       # Bounded worker threads
]
