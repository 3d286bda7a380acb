"""
=============================================================================
MIME TYPE DETECTION
=============================================================================

Maps static asset file names to the Content-Type sent with them.

The site only ships HTML, CSS, JavaScript and JSON assets, so the table is
short. Anything else is served as text/plain rather than
application/octet-stream: the static tree is text-only and browsers render
plain text inline instead of downloading it.

Lookup is by SUFFIX, not substring:

    "/js/app.js"        → application/javascript
    "/js/data.json"     → application/json   (not javascript!)
    "/css/style.css"    → text/css

=============================================================================
"""

from pathlib import Path
from typing import Optional, Union


MIME_TYPES = {
    ".html": "text/html",
    ".css": "text/css",
    ".js": "application/javascript",
    ".json": "application/json",
}

DEFAULT_MIME_TYPE = "text/plain"


def get_mime_type(path: Union[str, Path], default: Optional[str] = None) -> str:
    """
    Get the MIME type for a file based on its extension.

    Args:
        path: File path, URL path or bare file name.
        default: MIME type for unknown extensions (text/plain if omitted).

    Examples:
        >>> get_mime_type("/css/style.css")
        'text/css'
        >>> get_mime_type("README")
        'text/plain'
    """
    if isinstance(path, str):
        path = Path(path)

    extension = path.suffix.lower()  # .CSS → .css
    return MIME_TYPES.get(extension, default or DEFAULT_MIME_TYPE)
