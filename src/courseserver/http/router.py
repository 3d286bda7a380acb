"""
=============================================================================
ROUTE REGISTRY
=============================================================================

Exact (method, path) → handler lookup for the hardcoded routes.

=============================================================================
ROUTING ARCHITECTURE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        ROUTING FLOW                                 │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   GET /api/users/2                                                   │
    │        │                                                             │
    │        ▼                                                             │
    │   ┌─────────────────────────────────────────────────────────────┐   │
    │   │  ROUTER                                                      │   │
    │   │                                                              │   │
    │   │  _routes = {                                                 │   │
    │   │    "GET": {                                                  │   │
    │   │      "/":            home,                                   │   │
    │   │      "/health":      health,                                 │   │
    │   │      "/api/users":   list_users,                             │   │
    │   │      "/api/users/2": user_2,        ← MATCH!                 │   │
    │   │    }                                                         │   │
    │   │  }                                                           │   │
    │   └─────────────────────────────────────────────────────────────┘   │
    │        │                                                             │
    │        ▼                                                             │
    │   user_2(body, headers) → '{"success": true, ...}'                  │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

There are no path parameters and no wildcards: "/api/users/2" is its own
route. Two dict lookups per request, O(1) regardless of route count.

=============================================================================
LIFECYCLE
=============================================================================

    add_route() ... add_route()  →  freeze()  →  match() / handle()
    ──────────── startup ───────     start()     ─── any thread ───

Routes are only registered before the server starts. freeze() is called
from HTTPServer.start(); after that the table is read-only and can be
shared by every worker thread without a lock. Registering a route on a
frozen router raises RuntimeError.

=============================================================================
INTERVIEW QUESTIONS ABOUT ROUTING
=============================================================================

Q: "When do you return 404 and when 405?"
A: "405 when no route at all exists for the request method, 404 when the
   method is known but the path isn't. This router checks the method
   first, so POST / on a GET-only server is a 405."

Q: "Why is it safe to read the route table from many threads?"
A: "Dict reads don't mutate anything, and the table is frozen before the
   first connection is accepted. Only concurrent writes would need a lock."

=============================================================================
"""

from typing import Callable, Dict, List, Optional
import logging

from .request import HTTPRequest
from .response import HTTPResponse, ok, not_found, method_not_allowed


logger = logging.getLogger(__name__)


# =============================================================================
# TYPE ALIASES
# =============================================================================

# Handler: (request body, request headers) → response body
Handler = Callable[[str, Dict[str, str]], str]


class Router:
    """
    HTTP route registry with exact path matching.

    ==========================================================================
    DECORATOR-BASED API
    ==========================================================================

        router = Router()

        @router.get("/health")
        def health(body, headers):
            return '{"status": "healthy"}'

    Handlers receive the request body and headers and return the response
    body as a string. Status code and Content-Type are decided by the
    caller (see HTTPServer.route).

    ==========================================================================
    """

    def __init__(self):
        self._routes: Dict[str, Dict[str, Handler]] = {}
        self._frozen = False

    # =========================================================================
    # ROUTE REGISTRATION
    # =========================================================================

    def add_route(self, path: str, handler: Handler, method: str = "GET") -> None:
        """
        Register a route.

        Registering the same (method, path) twice replaces the first
        handler.

        Raises:
            RuntimeError: If the router has been frozen.
        """
        if self._frozen:
            raise RuntimeError(
                f"Cannot register {method} {path}: router is frozen"
            )

        self._routes.setdefault(method.upper(), {})[path] = handler
        logger.debug(f"Registered route {method.upper()} {path}")

    def route(self, path: str, method: str = "GET") -> Callable[[Handler], Handler]:
        """
        Decorator to register a route.

        Example:
            @router.route("/api/users", method="GET")
            def list_users(body, headers):
                ...
        """
        def decorator(handler: Handler) -> Handler:
            self.add_route(path, handler, method)
            return handler
        return decorator

    def get(self, path: str) -> Callable[[Handler], Handler]:
        """Decorator for GET routes."""
        return self.route(path, "GET")

    def post(self, path: str) -> Callable[[Handler], Handler]:
        """Decorator for POST routes."""
        return self.route(path, "POST")

    def freeze(self) -> None:
        """Make the route table read-only. Idempotent."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    # =========================================================================
    # ROUTE MATCHING
    # =========================================================================

    def has_method(self, method: str) -> bool:
        """Check whether any route is registered for the method."""
        return method in self._routes

    def match(self, method: str, path: str) -> Optional[Handler]:
        """
        Find the handler for an exact (method, path) pair.

        Returns:
            The handler, or None if either the method or the path is unknown.
        """
        return self._routes.get(method, {}).get(path)

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Route a request to its handler.

            method not registered  → 405 "Method Not Allowed"
            path not registered    → 404 "Not Found"
            match                  → 200 with the handler's body

        Method matching is case-sensitive: "get" is not "GET".
        Exceptions raised by the handler propagate to the caller, which
        turns them into a 500.
        """
        paths = self._routes.get(request.method)
        if paths is None:
            return method_not_allowed()

        handler = paths.get(request.path)
        if handler is None:
            return not_found()

        return ok(handler(request.body, request.headers))

    @property
    def routes(self) -> List[tuple]:
        """All registered (method, path) pairs, for logging and debugging."""
        return [
            (method, path)
            for method, paths in self._routes.items()
            for path in paths
        ]

    def __len__(self) -> int:
        return sum(len(paths) for paths in self._routes.values())
