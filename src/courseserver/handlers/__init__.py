"""
=============================================================================
REQUEST HANDLERS
=============================================================================

Route handlers for the hardcoded pages and the static file responder.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ GET /                HomeHandler        HTML fragment (templated)    │
    │ GET /health          HealthHandler      JSON                         │
    │ GET /api/users       list_users         JSON                         │
    │ GET /api/users/{id}  user_detail(user)  JSON                         │
    │ GET /css/*, /js/*    StaticFileHandler  file bytes, MIME by suffix   │
    └─────────────────────────────────────────────────────────────────────┘

Route handlers all share one signature:

    def handler(body: str, headers: Dict[str, str]) -> str

and return only the response body. Status and Content-Type are decided
by HTTPServer.route from the request path.

=============================================================================
"""

from .static import StaticFileHandler, discover_static_dir
from .health import HealthHandler
from .home import HomeHandler
from .users import SAMPLE_USERS, list_users, user_detail, register_user_routes

__all__ = [
    "StaticFileHandler",
    "discover_static_dir",
    "HealthHandler",
    "HomeHandler",
    "SAMPLE_USERS",
    "list_users",
    "user_detail",
    "register_user_routes",
]
