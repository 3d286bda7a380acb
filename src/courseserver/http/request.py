"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Parses the bytes of a single recv() into an HTTPRequest.

=============================================================================
HTTP REQUEST ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP REQUEST STRUCTURE                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  ┌─ REQUEST LINE ─────────────────────────────────────────────────┐ │
    │  │    GET /course/fundamentals/sockets?tab=2 HTTP/1.1\r\n          │ │
    │  │    ─┬─ ───────────────┬──────────────────  ────┬────            │ │
    │  │   Method            Target                  Version             │ │
    │  │                       │                                         │ │
    │  │         ┌─────────────┴────────────┐                            │ │
    │  │       Path                    Query String                      │ │
    │  │    /course/fundamentals/sockets     tab=2                       │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ HEADERS ──────────────────────────────────────────────────────┐ │
    │  │    Host: localhost:8080\r\n                                    │ │
    │  │    User-Agent: curl/8.0\r\n                                    │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ EMPTY LINE ───────────────────────────────────────────────────┐ │
    │  │    \r\n                                                         │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ BODY (whatever arrived in the same read) ─────────────────────┐ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
BEST-EFFORT PARSING
=============================================================================

This parser NEVER raises. A malformed request still produces an
HTTPRequest, and the router answers it with 404 or 405:

    b""                   → method="", path=""       → 405
    b"garbage"            → method="garbage", path="" → 405
    b"GET\r\n\r\n"        → method="GET", path=""    → 404

Header lines are split once on ":" and the key is kept exactly as the
client sent it. The value keeps everything after the colon (including
the usual leading space) minus a trailing "\r". Lines without a colon are
skipped. When a header repeats, the last one wins.

=============================================================================
INTERVIEW QUESTIONS ABOUT HTTP PARSING
=============================================================================

Q: "How do you know when the HTTP headers end?"
A: "At the first empty line. With CRLF line endings, splitting on \\n
   leaves a lone '\\r' for that line, so both '' and '\\r' count."

Q: "What's the difference between path and target?"
A: "The target is what the client sent (/path?query). The path is the
   target minus the query string, still percent-encoded, so an encoded
   %2F can never pass for a path separator. Routing uses the path."

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
from urllib.parse import parse_qs


@dataclass
class HTTPRequest:
    """
    Represents a parsed HTTP request.

    =========================================================================
    ATTRIBUTES EXPLAINED
    =========================================================================

        method:         First token of the request line ("" if missing)
        target:         Second token, exactly as sent (with query string)
        path:           Target without the query string, still percent-encoded
        version:        Third token ("HTTP/1.1" if missing)
        headers:        Header name → value, names as sent by the client
        body:           Lines after the blank line, each followed by "\\n"
        query_params:   "?a=1&a=2&b=3" → {"a": ["1", "2"], "b": ["3"]}
        client_address: (ip, port) of the peer, filled in by Connection
        raw:            The bytes this request was parsed from

    =========================================================================
    """

    method: str
    path: str
    target: str = ""
    version: str = "HTTP/1.1"

    headers: Dict[str, str] = field(default_factory=dict)
    body: str = ""
    query_params: Dict[str, List[str]] = field(default_factory=dict)

    # Metadata
    client_address: Tuple[str, int] = ("", 0)
    raw: bytes = b""

    def get_header(self, name: str, default: str = "") -> str:
        """
        Get a header value with surrounding whitespace removed.

        Lookup is case-insensitive, so "host" finds "Host".
        """
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.strip().lower() == wanted:
                return value.strip()
        return default

    def get_query(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """
        Get the first value of a query parameter.

        Example:
            # URL: /course/fundamentals/sockets?tab=2&tab=3
            request.get_query("tab")  # Returns "2"
        """
        values = self.query_params.get(name, [])
        return values[0] if values else default

    @property
    def user_agent(self) -> str:
        return self.get_header("User-Agent")


def parse_request(raw: bytes, client_address: Tuple[str, int] = ("", 0)) -> HTTPRequest:
    """
    Parse raw request bytes into an HTTPRequest.

    Never raises: invalid UTF-8 is replaced, missing request-line tokens
    become empty strings.

    Args:
        raw: Bytes from a single recv()
        client_address: (ip, port) of the peer

    Returns:
        Parsed HTTPRequest
    """
    text = raw.decode("utf-8", errors="replace")

    lines = text.split("\n")
    if text.endswith("\n"):
        # "a\nb\n" splits to ["a", "b", ""]; the last entry is not a line
        lines.pop()

    # ─────────────────────────────────────────────────────────────────────
    # REQUEST LINE
    # ─────────────────────────────────────────────────────────────────────
    tokens = lines[0].split() if lines else []
    method = tokens[0] if len(tokens) > 0 else ""
    target = tokens[1] if len(tokens) > 1 else ""
    version = tokens[2] if len(tokens) > 2 else "HTTP/1.1"

    path, _, query_string = target.partition("?")
    query_params = parse_qs(query_string, keep_blank_values=True)

    # ─────────────────────────────────────────────────────────────────────
    # HEADERS (up to the first blank line)
    # ─────────────────────────────────────────────────────────────────────
    headers: Dict[str, str] = {}
    index = 1
    while index < len(lines):
        line = lines[index]
        index += 1

        if line == "" or line == "\r":
            break

        key, colon, value = line.partition(":")
        if not colon:
            continue

        if value.endswith("\r"):
            value = value[:-1]
        headers[key] = value

    # ─────────────────────────────────────────────────────────────────────
    # BODY (everything after the blank line)
    # ─────────────────────────────────────────────────────────────────────
    body = "".join(line + "\n" for line in lines[index:])

    return HTTPRequest(
        method=method,
        path=path,
        target=target,
        version=version,
        headers=headers,
        body=body,
        query_params=query_params,
        client_address=client_address,
        raw=raw,
    )
