"""
=============================================================================
HTTP PROTOCOL IMPLEMENTATION
=============================================================================

The HTTP/1.1 subset the course server speaks: translating the bytes of one
recv() into a request, and a response object back into bytes.

=============================================================================
HTTP REQUEST-RESPONSE CYCLE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   CLIENT                                         SERVER              │
    │      │   GET /course/fundamentals/sockets HTTP/1.1  │                │
    │      │  ─────────────────────────────────────────►  │                │
    │      │                                              │  parse_request │
    │      │                                              │  route         │
    │      │               HTTP/1.1 200 OK               │  to_bytes      │
    │      │  ◄─────────────────────────────────────────  │                │
    │      │               Connection: close              │                │
    │      ╳                                              ╳                │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

One request per connection: no keep-alive, no chunked encoding, no TLS.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ request.py      parse_request() → HTTPRequest (never raises)        │
    │ response.py     HTTPResponse, ResponseBuilder, error helpers        │
    │ router.py       Router: exact (method, path) → handler              │
    │ status_codes.py HTTPStatus and the status-line reason phrases       │
    │ mime_types.py   file suffix → Content-Type for static assets        │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .request import HTTPRequest, parse_request
from .response import (
    HTTPResponse,
    ResponseBuilder,
    # Convenience functions for common responses
    ok,                  # 200 OK
    bad_request,         # 400 Bad Request
    not_found,           # 404 Not Found
    method_not_allowed,  # 405 Method Not Allowed
    internal_error,      # 500 Internal Server Error
    service_unavailable, # 503 Service Unavailable
)
from .router import Router, Handler
from .status_codes import HTTPStatus, reason_phrase
from .mime_types import get_mime_type

__all__ = [
    # Request parsing
    "HTTPRequest",
    "parse_request",

    # Response building
    "HTTPResponse",
    "ResponseBuilder",
    "ok",
    "bad_request",
    "not_found",
    "method_not_allowed",
    "internal_error",
    "service_unavailable",

    # Routing
    "Router",
    "Handler",

    # Status codes
    "HTTPStatus",
    "reason_phrase",

    # MIME types
    "get_mime_type",
]
