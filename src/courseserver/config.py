"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Centralized configuration for the course server.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    Priority (highest to lowest):

    1. Command-line arguments
       └── python -m courseserver 3000 --lessons ./lessons

    2. Environment variables
       └── HTTP_PORT=3000 python -m courseserver

    3. Default values (in this dataclass)

Everything the server needs to know about its surroundings lives here:
where to listen, how many workers to run, where lessons and static assets
are on disk, and how to log. Nothing else in the package reads the
environment directly.

=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class ServerConfig:
    """
    Configuration for the course server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK SETTINGS
    - host, port, backlog, buffer_size, timeout

    THREADING SETTINGS
    - min_workers, max_workers, queue_size

    CONTENT
    - lessons_dir, static_dir, site_title

    LOGGING
    - log_level, log_format

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """
    The IP address to bind to.
    - "127.0.0.1" - Localhost only (development)
    - "0.0.0.0" - All network interfaces (containers)
    """

    port: int = 8080
    """
    The port number to listen on. 0 lets the OS pick a free port,
    which is what the tests use.
    """

    backlog: int = 128
    """Maximum number of queued connections waiting for accept()."""

    buffer_size: int = 4096
    """
    Size of the single receive call made per connection.
    Requests larger than this are truncated: there is no reassembly.
    """

    timeout: Optional[float] = 30.0
    """
    Read timeout on client sockets in seconds.
    None = block until the client sends something.
    """

    # ─────────────────────────────────────────────────────────────────────
    # THREAD POOL SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    min_workers: int = 4
    """Worker threads created at startup."""

    max_workers: int = 16
    """Upper bound on worker threads. The pool grows up to this under load."""

    queue_size: int = 100
    """
    Connections allowed to wait for a worker.
    Beyond this, new connections get 503 Service Unavailable.
    """

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT
    # ─────────────────────────────────────────────────────────────────────

    lessons_dir: Optional[str] = None
    """
    Root of the lesson tree (one subdirectory per module).
    None = search the usual locations next to the working directory.
    """

    static_dir: Optional[str] = None
    """
    Root of the static assets (css/ and js/ subtrees).
    None = search the usual locations next to the working directory.
    """

    site_title: str = "Server Development Course"
    """Title shown in the page template and on course pages."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    log_format: str = "text"
    """Access log format: 'text' (one line per request) or 'json'."""

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        HTTP_HOST        Server host (default: 127.0.0.1)
        HTTP_PORT        Server port (default: 8080)
        HTTP_WORKERS     Max worker threads (default: 16)
        HTTP_TIMEOUT     Client read timeout in seconds (default: 30)
        HTTP_LESSONS_DIR Lessons root directory (default: auto-detect)
        HTTP_STATIC_DIR  Static files directory (default: auto-detect)
        HTTP_LOG_LEVEL   Logging level (default: INFO)
        """
        max_workers = int(os.getenv("HTTP_WORKERS", "16"))

        return cls(
            host=os.getenv("HTTP_HOST", "127.0.0.1"),
            port=int(os.getenv("HTTP_PORT", "8080")),
            min_workers=min(4, max_workers),
            max_workers=max_workers,
            timeout=float(os.getenv("HTTP_TIMEOUT", "30")),
            lessons_dir=os.getenv("HTTP_LESSONS_DIR"),
            static_dir=os.getenv("HTTP_STATIC_DIR"),
            log_level=os.getenv("HTTP_LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Called from HTTPServer.__init__ so a bad value stops the process
        before any socket is opened.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535 (0 picks a free port).")

        if self.min_workers < 1:
            raise ValueError("min_workers must be >= 1")

        if self.max_workers < self.min_workers:
            raise ValueError("max_workers must be >= min_workers")

        if self.queue_size < 1:
            raise ValueError("queue_size must be >= 1")

        if self.buffer_size < 1024:
            raise ValueError("buffer_size must be >= 1024")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if self.log_format not in ("text", "json"):
            raise ValueError(f"Invalid log_format: {self.log_format!r}")
