"""
=============================================================================
COURSESERVER - A COURSE WEBSITE ON A FROM-SCRATCH HTTP/1.1 SERVER
=============================================================================

A raw-socket HTTP server that serves an interactive course: Markdown
lessons loaded from disk and rendered to HTML, plus a few hardcoded pages
and JSON endpoints.

=============================================================================
PACKAGE LAYOUT
=============================================================================

    courseserver/
    ├── __main__.py       CLI entry point (python -m courseserver)
    ├── app.py            create_app(): server + hardcoded routes
    ├── server.py         HTTPServer: lifecycle and request routing
    ├── config.py         ServerConfig
    ├── access_log.py     Per-request access log
    ├── core/             Socket server, connections, thread pool
    ├── http/             Request parsing, responses, route registry
    ├── course/           Markdown converter, lesson catalog, pages
    └── handlers/         Home, health, users, static files

=============================================================================
QUICK START
=============================================================================

    from courseserver import create_app, ServerConfig

    server = create_app(ServerConfig(port=8080, lessons_dir="lessons"))
    server.run()

=============================================================================
"""

__version__ = "1.0.0"

from .config import ServerConfig
from .server import HTTPServer
from .app import create_app

__all__ = ["HTTPServer", "ServerConfig", "create_app", "__version__"]
