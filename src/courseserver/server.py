"""
=============================================================================
MAIN HTTP SERVER
=============================================================================

The orchestrator: owns the lesson catalog, the route registry, the static
responder, the listening socket and the worker pool, and decides which of
them answers each request.

=============================================================================
ARCHITECTURE OVERVIEW
=============================================================================

    ┌──────────────────────────────────────────────────────────────────┐
    │                           HTTPServer                             │
    │                                                                  │
    │   accept thread                     worker threads               │
    │   ┌──────────────┐   submit()   ┌──────────────────────────────┐ │
    │   │ SocketServer │ ───────────► │ ThreadPool                   │ │
    │   │  accept()    │   (full →    │  _handle_connection(conn)    │ │
    │   └──────────────┘    503)      │   read → parse → route → send│ │
    │                                 └──────────────┬───────────────┘ │
    │                                                │                 │
    │                    ┌───────────────────────────┼──────────────┐  │
    │                    ▼                           ▼              ▼  │
    │            ┌───────────────┐        ┌──────────────┐  ┌────────┐ │
    │            │ LessonCatalog │        │ StaticFile-  │  │ Router │ │
    │            │ + course_page │        │ Handler      │  │        │ │
    │            └───────────────┘        └──────────────┘  └────────┘ │
    │             /course/...              /css/... /js/...  the rest  │
    └──────────────────────────────────────────────────────────────────┘

=============================================================================
REQUEST LIFECYCLE
=============================================================================

    1. CLIENT CONNECTS
       └── SocketServer accepts, wraps the socket in a Connection
    2. QUEUE FOR PROCESSING
       └── ThreadPool.submit(); a full queue answers 503 and closes
    3. READ (worker thread)
       └── one recv() of buffer_size bytes, no reassembly
    4. PARSE
       └── parse_request() never raises; garbage becomes an empty method
    5. ROUTE
       └── /course/ → /css/ or /js/ → Router, first match wins
    6. SEND AND CLOSE
       └── every response carries "Connection: close"

=============================================================================
INTERVIEW QUESTIONS ABOUT WEB SERVERS
=============================================================================

Q: "Why a bounded pool instead of a thread per connection?"
A: "A thread per connection lets a burst of clients create an unbounded
   number of threads. The pool caps workers and queue length, and once
   the queue is full we answer 503 straight from the accept thread.
   That is backpressure: the client learns immediately instead of the
   server slowly falling over."

Q: "What happens during graceful shutdown?"
A: "1. The signal handler only sets an Event (no work in signal context)
   2. The accept loop sees the Event within one second and exits
   3. The listening socket is closed
   4. Queued and in-flight requests finish, then workers get poison pills"

Q: "Why is the route table not locked?"
A: "It's filled before start() and frozen by it. After that every access
   is a read, and dict reads are safe to share between threads."

=============================================================================
"""

import logging
import threading
import time
from typing import Dict, List, Optional, Tuple
from urllib.parse import unquote

from .access_log import AccessLogger
from .config import ServerConfig
from .core import Connection, ConnectionState, SocketServer, ThreadPool
from .course import outline
from .course.catalog import LessonCatalog, discover_lessons_dir
from .course.pages import course_page, render_page
from .handlers.static import StaticFileHandler, discover_static_dir
from .http import (
    HTTPRequest,
    HTTPResponse,
    HTTPStatus,
    Handler,
    Router,
    bad_request,
    internal_error,
    parse_request,
    service_unavailable,
)


logger = logging.getLogger(__name__)


COURSE_PREFIX = "/course/"
STATIC_PREFIXES = ("/css/", "/js/")
JSON_PATHS = ("/health",)
JSON_PREFIX = "/api/"

# A rejected connection runs on the accept thread; keep its close short
REJECT_DRAIN_TIMEOUT = 0.1


class HTTPServer:
    """
    Course website server.

    =========================================================================
    USAGE
    =========================================================================

        server = HTTPServer(ServerConfig(port=8080))

        @server.get("/hello")
        def hello(body, headers):
            return "Hello"

        server.run()              # blocks until SIGINT/SIGTERM

    Or, embedded (tests do this):

        server.start()            # returns once listening
        host, port = server.address
        ...
        server.stop()

    =========================================================================
    """

    def __init__(self, config: Optional[ServerConfig] = None, catalog: Optional[LessonCatalog] = None):
        """
        Args:
            config: Server configuration. Defaults if not provided.
            catalog: A pre-built catalog. If omitted one is built from
                config.lessons_dir (or a discovered lessons directory) and
                loaded here.
        """
        self.config = config or ServerConfig()
        self.config.validate()  # Fail-fast on invalid config
        self._setup_logging()

        if catalog is None:
            lessons_dir = self.config.lessons_dir or discover_lessons_dir()
            catalog = LessonCatalog(lessons_dir, site_title=self.config.site_title)
            catalog.load()
        self.catalog = catalog

        # The module → lessons map the course pages and /health trust
        if self.catalog.loaded:
            self.course_index: Dict[str, List[str]] = self.catalog.lesson_index()
        else:
            logger.warning("No lessons loaded, using the built-in course outline")
            self.course_index = outline.fallback_index()

        self.router = Router()
        self.static = StaticFileHandler(self.config.static_dir or discover_static_dir())
        self.access_log = AccessLogger(log_format=self.config.log_format)

        self._shutdown_event = threading.Event()
        self._socket_server = SocketServer(self.config, self._shutdown_event)
        self._thread_pool = ThreadPool(
            min_workers=self.config.min_workers,
            max_workers=self.config.max_workers,
            queue_size=self.config.queue_size,
        )
        self._accept_thread: Optional[threading.Thread] = None

    # ─── Route registration ─────────────────────────────────────────────────

    def add_route(self, path: str, handler: Handler, method: str = "GET") -> None:
        self.router.add_route(path, handler, method)

    def get(self, path: str):
        """Register a GET route."""
        return self.router.get(path)

    def post(self, path: str):
        """Register a POST route."""
        return self.router.post(path)

    # ─── Lifecycle ──────────────────────────────────────────────────────────

    @property
    def address(self) -> Tuple[str, int]:
        """The bound (host, port); the configured one before start()."""
        return self._socket_server.address

    @property
    def running(self) -> bool:
        return self._accept_thread is not None and self._accept_thread.is_alive()

    def start(self) -> Tuple[str, int]:
        """
        Bind, start the workers and the accept thread, then return.

        Raises:
            OSError: If the address can't be bound.
        """
        self.router.freeze()
        self._shutdown_event.clear()

        host, port = self._socket_server.bind()
        self._thread_pool.start()

        self._accept_thread = threading.Thread(
            target=self._socket_server.serve_forever,
            args=(self._dispatch,),
            name="accept",
            daemon=True,
        )
        self._accept_thread.start()

        logger.info(
            f"Serving {self.config.site_title} on http://{host}:{port} "
            f"({self.config.min_workers}-{self.config.max_workers} workers, "
            f"{len(self.router)} routes, {self.catalog.lesson_count} lessons)"
        )
        return (host, port)

    def stop(self, timeout: float = 30.0) -> None:
        """
        Graceful shutdown.

        =====================================================================
        GRACEFUL SHUTDOWN PROCESS
        =====================================================================

        1. Set the shutdown event (the accept loop exits within a second)
        2. Close the listening socket
        3. Join the accept thread
        4. Let queued connections finish, then stop the workers

        =====================================================================
        """
        logger.info("Shutting down server...")
        self._shutdown_event.set()
        self._socket_server.close()

        if self._accept_thread is not None:
            self._accept_thread.join(timeout=5.0)
            self._accept_thread = None

        self._thread_pool.shutdown(wait=True, timeout=timeout)
        logger.info("Server stopped")

    def run(self) -> None:
        """
        Start and block until SIGINT or SIGTERM.

        Must be called from the main thread (signal handlers).
        """
        self._socket_server.install_signal_handlers()
        try:
            self.start()
            self._shutdown_event.wait()
        finally:
            self.stop()
            self._socket_server.restore_signal_handlers()

    def _setup_logging(self):
        """Configure logging based on config."""
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)
        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("courseserver").setLevel(level)

    # ─── Connection handling ────────────────────────────────────────────────

    def _dispatch(self, conn: Connection):
        """
        Queue a connection for a worker (runs on the accept thread).

        A full queue gets an immediate 503 and the connection is closed.
        """
        submitted = self._thread_pool.submit(self._handle_connection, args=(conn,))
        if not submitted:
            logger.warning(f"[{conn.id}] Thread pool full, rejecting connection")
            conn.send_response(service_unavailable().to_bytes())
            conn.close(drain_timeout=REJECT_DRAIN_TIMEOUT)

    def _handle_connection(self, conn: Connection):
        """
        Serve exactly one request on a connection (runs in a worker thread).

        No exception escapes: routing failures are already 500s, and socket
        errors only close this connection.
        """
        with conn:  # Context manager ensures connection is closed
            raw = conn.read_request()
            if raw is None:
                return

            started = time.perf_counter()
            request = parse_request(raw, conn.address)
            conn.mark(ConnectionState.PARSED)
            logger.debug(f"[{conn.id}] {request.method} {request.path}")

            conn.mark(ConnectionState.DISPATCHING)
            response = self.route(request)

            conn.mark(ConnectionState.RESPONDING)
            conn.send_response(response.to_bytes())

            duration_ms = (time.perf_counter() - started) * 1000
            self.access_log.log(request, response, duration_ms, request_id=conn.id)

    # ─── Routing ────────────────────────────────────────────────────────────

    def route(self, request: HTTPRequest) -> HTTPResponse:
        """
        Produce the response for a parsed request.

        ┌─────────────────────────────────────────────────────────────────┐
        │  /course/<module>/<lesson>  → course page (text/html)           │
        │  /css/*, /js/*              → static file                       │
        │  anything else              → Router (405 / 404 / handler)      │
        └─────────────────────────────────────────────────────────────────┘

        The course and static branches answer any method.
        """
        try:
            if request.path.startswith(COURSE_PREFIX):
                return self._course(request.path[len(COURSE_PREFIX):])

            if request.path.startswith(STATIC_PREFIXES):
                return self.static.handle(request.path)

            response = self.router.handle(request)
        except Exception as e:
            logger.exception(f"Handler error for {request.method} {request.path}: {e}")
            return internal_error()

        if response.status == HTTPStatus.OK:
            response.content_type = self._content_type(request.path)
            if request.path == "/":
                response.set_body(render_page(self.config.site_title, response.text, self.config.site_title))
        return response

    def _course(self, remainder: str) -> HTTPResponse:
        module, sep, lesson = remainder.partition("/")
        if not sep:
            return bad_request("Invalid course path")

        # Split on the raw "/" first; an encoded %2F stays inside a name
        module, lesson = unquote(module), unquote(lesson)
        page = course_page(self.catalog, self.course_index, module, lesson, self.config.site_title)
        response = HTTPResponse(content_type="text/html")
        return response.set_body(page)

    @staticmethod
    def _content_type(path: str) -> str:
        if path == "/":
            return "text/html"
        if path in JSON_PATHS or path.startswith(JSON_PREFIX):
            return "application/json"
        return "text/plain"
