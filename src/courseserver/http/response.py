"""
=============================================================================
HTTP RESPONSE BUILDER
=============================================================================

Builds the HTTP/1.1 responses the course server writes back to clients.

=============================================================================
HTTP RESPONSE ANATOMY
=============================================================================

Every response uses the same fixed framing:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP RESPONSE STRUCTURE                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  ┌─ STATUS LINE ──────────────────────────────────────────────────┐ │
    │  │    HTTP/1.1 200 OK\r\n                                         │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ HEADERS (always these four, in this order) ───────────────────┐ │
    │  │    Content-Type: text/html\r\n                                 │ │
    │  │    Content-Length: 1432\r\n          ← UTF-8 byte count       │ │
    │  │    Access-Control-Allow-Origin: *\r\n                          │ │
    │  │    Connection: close\r\n                                       │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ EMPTY LINE (separator) ───────────────────────────────────────┐ │
    │  │    \r\n                                                         │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ BODY ─────────────────────────────────────────────────────────┐ │
    │  │    <!DOCTYPE html>...                                           │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The server never keeps a connection alive, so "Connection: close" is sent
on every response and the client reads until Content-Length bytes arrive
or the socket closes.

=============================================================================
BUILDER PATTERN
=============================================================================

    response = (ResponseBuilder()
        .status(HTTPStatus.OK)
        .json({"success": True})
        .build())

The convenience functions at the bottom of this module (not_found,
bad_request, ...) wrap the builder for the error responses the router and
the server emit.

=============================================================================
INTERVIEW QUESTIONS ABOUT HTTP RESPONSES
=============================================================================

Q: "How does the client know when the response body ends?"
A: "Content-Length gives the exact byte count. It must be the length of
   the ENCODED body, not the number of characters: 'é' is one character
   but two UTF-8 bytes."

Q: "Why send Access-Control-Allow-Origin: * everywhere?"
A: "The course pages call the JSON endpoints from browser JavaScript.
   A wildcard origin lets a page served from a different host or port
   (e.g. a dev server) read those responses."

=============================================================================
"""

from dataclasses import dataclass
from typing import Any, Union
import json

from .status_codes import HTTPStatus, reason_phrase


@dataclass
class HTTPResponse:
    """
    Represents an HTTP response to be sent to the client.

    =========================================================================
    RESPONSE LIFECYCLE
    =========================================================================

        Router / server          to_bytes()              Connection sends
        builds HTTPResponse ──►  serializes    ─────►    raw bytes
            │                       │                        │
        HTTPResponse(            b"HTTP/1.1 200 OK\r\n   socket.sendall(
          status=200,              Content-Type: ...\r\n     response_bytes
          content_type=...,        \r\n                    )
          body=b"..."              <html>..."
        )

    =========================================================================
    """

    status: int = HTTPStatus.OK                 # HTTP status code
    content_type: str = "text/plain"            # Content-Type header value
    body: bytes = b""                           # Response body (UTF-8)
    version: str = "HTTP/1.1"                   # HTTP version

    @property
    def status_line(self) -> str:
        """
        Get the HTTP status line.

        Example: "HTTP/1.1 404 Not Found"
        """
        return f"{self.version} {int(self.status)} {reason_phrase(self.status)}"

    @property
    def text(self) -> str:
        """Body decoded as UTF-8 (handy in handlers and tests)."""
        return self.body.decode("utf-8", errors="replace")

    def set_body(self, body: Union[str, bytes]) -> "HTTPResponse":
        """
        Set the response body.

        Automatically encodes strings to UTF-8 bytes.
        """
        if isinstance(body, str):
            self.body = body.encode("utf-8")
        else:
            self.body = body
        return self

    def to_bytes(self) -> bytes:
        """
        Serialize the response to bytes for sending over socket.

        =====================================================================
        SERIALIZATION FORMAT
        =====================================================================

            HTTP/1.1 200 OK\r\n
            Content-Type: application/json\r\n
            Content-Length: 27\r\n       ← len(body) in bytes
            Access-Control-Allow-Origin: *\r\n
            Connection: close\r\n
            \r\n                         ← Empty line (separator)
            {"success": true, ...}       ← Body bytes

        =====================================================================
        """
        lines = [
            self.status_line,
            f"Content-Type: {self.content_type}",
            f"Content-Length: {len(self.body)}",
            "Access-Control-Allow-Origin: *",
            "Connection: close",
            "",
        ]

        # Join with CRLF; the trailing "" gives the blank separator line
        header_bytes = "\r\n".join(lines).encode("utf-8") + b"\r\n"

        return header_bytes + self.body


class ResponseBuilder:
    """
    Fluent builder for constructing HTTP responses.

    Each method returns ``self`` except ``build()``:

        builder.status(404).text("Not Found").build()
        ────────┬───────────────┬──────────────┬───
                └───────────────┴──────────────┘
                      All return 'self'
    """

    def __init__(self):
        self._status: int = HTTPStatus.OK       # Default to 200 OK
        self._content_type = "text/plain"       # Overwritten by body helpers
        self._body: bytes = b""

    def status(self, status: int) -> "ResponseBuilder":
        """Set the HTTP status code."""
        self._status = status
        return self

    def content_type(self, content_type: str) -> "ResponseBuilder":
        """Set the Content-Type header."""
        self._content_type = content_type
        return self

    def body(self, body: Union[str, bytes]) -> "ResponseBuilder":
        """
        Set the response body (raw bytes or string).

        Leaves the Content-Type alone; call content_type() separately.
        """
        if isinstance(body, str):
            self._body = body.encode("utf-8")
        else:
            self._body = body
        return self

    def text(self, text: str) -> "ResponseBuilder":
        """Set a text/plain response body."""
        self._body = text.encode("utf-8")
        self._content_type = "text/plain"
        return self

    def html(self, html: str) -> "ResponseBuilder":
        """Set a text/html response body."""
        self._body = html.encode("utf-8")
        self._content_type = "text/html"
        return self

    def json(self, data: Any) -> "ResponseBuilder":
        """
        Set a JSON response body.

        Accepts either Python data (serialized with json.dumps) or a string
        that is already JSON, which is what route handlers return.
        """
        if isinstance(data, str):
            payload = data
        else:
            payload = json.dumps(data, ensure_ascii=False)
        self._body = payload.encode("utf-8")
        self._content_type = "application/json"
        return self

    def build(self) -> HTTPResponse:
        """Build and return the HTTPResponse object."""
        return HTTPResponse(
            status=self._status,
            content_type=self._content_type,
            body=self._body,
        )


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================
#
# Quick one-liners for the responses the server emits itself.
#
#     return not_found()
#     return bad_request("Invalid course path")
#
# =============================================================================

def ok(body: Union[str, bytes] = "", content_type: str = "text/plain") -> HTTPResponse:
    """Create a 200 OK response."""
    return (ResponseBuilder()
        .status(HTTPStatus.OK)
        .body(body)
        .content_type(content_type)
        .build())


def bad_request(message: str = "Bad Request") -> HTTPResponse:
    """
    Create a 400 response.

    Sent for a /course/ path with no "/" between module and lesson.
    The status line still reads "Internal Server Error" (see status_codes).
    """
    return ResponseBuilder().status(HTTPStatus.BAD_REQUEST).text(message).build()


def not_found(message: str = "Not Found") -> HTTPResponse:
    """Create a 404 Not Found response."""
    return ResponseBuilder().status(HTTPStatus.NOT_FOUND).text(message).build()


def method_not_allowed(message: str = "Method Not Allowed") -> HTTPResponse:
    """Create a 405 Method Not Allowed response."""
    return ResponseBuilder().status(HTTPStatus.METHOD_NOT_ALLOWED).text(message).build()


def internal_error(message: str = "Internal Server Error") -> HTTPResponse:
    """
    Create a 500 Internal Server Error response.

    Security note: never put exception details or stack traces in the
    message. Log them server-side instead.
    """
    return ResponseBuilder().status(HTTPStatus.INTERNAL_SERVER_ERROR).text(message).build()


def service_unavailable(message: str = "Service Unavailable") -> HTTPResponse:
    """Create a 503 response (worker queue full)."""
    return ResponseBuilder().status(HTTPStatus.SERVICE_UNAVAILABLE).text(message).build()
