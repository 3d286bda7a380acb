"""
Application factory: an HTTPServer with the course site's routes.

    GET /                 home page (wrapped in the site template)
    GET /health           health check JSON
    GET /api/users        sample user list
    GET /api/users/{id}   one sample user (ids 1, 2, 3)

/course/..., /css/... and /js/... are answered by the server itself and
need no registration.
"""

import logging
from typing import Optional

from .config import ServerConfig
from .course.catalog import LessonCatalog
from .handlers import HealthHandler, HomeHandler, register_user_routes
from .server import HTTPServer


logger = logging.getLogger(__name__)


def create_app(config: Optional[ServerConfig] = None, catalog: Optional[LessonCatalog] = None) -> HTTPServer:
    """
    Create the course server with all hardcoded routes registered.

    The returned server is not started; call run() or start().
    """
    server = HTTPServer(config, catalog=catalog)
    site_title = server.config.site_title

    server.add_route("/", HomeHandler(site_title))
    server.add_route("/health", HealthHandler(server.course_index, site_title))
    register_user_routes(server.router)

    logger.debug(f"Registered {len(server.router)} routes")
    return server
