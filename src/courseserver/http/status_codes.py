"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The status codes this server actually emits, and the reason phrases it
writes on the status line.

=============================================================================
REASON PHRASES ON THE WIRE
=============================================================================

    HTTP/1.1 404 Not Found
             ─── ─────────
              │      │
              │      └── Reason phrase
              └───────── Status code

The server only knows three phrases: 200, 404 and 405 get their RFC text,
every other code is written as "Internal Server Error". Clients key off
the number, never the phrase (RFC 7230 §3.1.2), so this keeps the framing
table tiny:

    400 Bad Request          → "HTTP/1.1 400 Internal Server Error"
    503 Service Unavailable  → "HTTP/1.1 503 Internal Server Error"

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes used by the course server.

    IntEnum members compare equal to plain ints, so both
    ``response.status == 404`` and ``response.status == HTTPStatus.NOT_FOUND``
    work.
    """

    OK = 200
    BAD_REQUEST = 400                   # Malformed course path
    NOT_FOUND = 404                     # Unknown route or static file
    METHOD_NOT_ALLOWED = 405            # No route registered for the method
    INTERNAL_SERVER_ERROR = 500         # Handler raised
    SERVICE_UNAVAILABLE = 503           # Worker queue full

    @property
    def phrase(self) -> str:
        """Reason phrase written on the status line."""
        return reason_phrase(self)

    @property
    def is_success(self) -> bool:
        """Check if this is a 2xx status code."""
        return 200 <= self < 300

    @property
    def is_error(self) -> bool:
        """Check if this is an error status code (4xx or 5xx)."""
        return self >= 400


_STATUS_PHRASES = {
    200: "OK",
    404: "Not Found",
    405: "Method Not Allowed",
}

DEFAULT_PHRASE = "Internal Server Error"


def reason_phrase(status: int) -> str:
    """
    Get the reason phrase for any status code.

    Examples:
        >>> reason_phrase(200)
        'OK'
        >>> reason_phrase(400)
        'Internal Server Error'
    """
    return _STATUS_PHRASES.get(int(status), DEFAULT_PHRASE)
