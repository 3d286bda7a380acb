"""
=============================================================================
STATIC FILE HANDLER
=============================================================================

Serves the site's stylesheets and scripts from the static directory.

    GET /css/style.css   →   <static_dir>/css/style.css   (text/css)
    GET /js/app.js       →   <static_dir>/js/app.js       (application/javascript)

Only /css/ and /js/ paths are sent here (see HTTPServer.route).

=============================================================================
SECURITY: PATH TRAVERSAL
=============================================================================

    GET /css/../../../etc/passwd

    full_path = (root_dir / "css/../../../etc/passwd").resolve()
              = /etc/passwd
    full_path.relative_to(root_dir)   → ValueError → 404

Anything that resolves outside the static root is answered exactly like a
missing file, so probing reveals nothing about the filesystem.

=============================================================================
"""

import logging
from pathlib import Path
from typing import Optional, Union

from ..http.response import HTTPResponse, ok, not_found
from ..http.mime_types import get_mime_type


logger = logging.getLogger(__name__)


FILE_NOT_FOUND = "File not found"


class StaticFileHandler:
    """
    Handler for serving static files.

    Usage:
        static = StaticFileHandler("static")
        response = static.handle("/css/style.css")
    """

    def __init__(self, root_dir: Union[str, Path]):
        # Resolve once so the traversal check compares absolute paths
        self.root_dir = Path(root_dir).resolve()

        if not self.root_dir.is_dir():
            logger.warning(f"Static directory does not exist: {self.root_dir}")

    def resolve(self, url_path: str) -> Optional[Path]:
        """
        Map a URL path to a file inside the static root.

        Returns:
            The file path, or None if it escapes the root or isn't a file.
        """
        relative = url_path.lstrip("/")
        full_path = (self.root_dir / relative).resolve()

        try:
            full_path.relative_to(self.root_dir)
        except ValueError:
            logger.warning(f"Path traversal attempt: {url_path}")
            return None

        if not full_path.is_file():
            return None

        return full_path

    def handle(self, url_path: str) -> HTTPResponse:
        """
        Serve one file.

        Content-Type comes from the URL suffix. Missing, unreadable or
        out-of-root files all give 404 "File not found".
        """
        full_path = self.resolve(url_path)
        if full_path is None:
            return not_found(FILE_NOT_FOUND)

        try:
            content = full_path.read_bytes()
        except OSError as e:
            logger.error(f"Error reading {full_path}: {e}")
            return not_found(FILE_NOT_FOUND)

        return ok(content, get_mime_type(url_path))


def discover_static_dir(cwd: Optional[Path] = None) -> Path:
    """
    Find the static directory when none is configured.

    ./static if it exists, otherwise ../static (the layout when the server
    is started from a build/ subdirectory).
    """
    cwd = Path(cwd) if cwd is not None else Path.cwd()
    local = cwd / "static"
    if local.is_dir():
        return local
    return cwd.parent / "static"
