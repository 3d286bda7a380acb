"""
=============================================================================
ACCESS LOGGING
=============================================================================

One log line per request on the "courseserver.access" logger.

    127.0.0.1 - - [01/Jan/2026:12:00:00 +0000] "GET /course/fundamentals/sockets" 200 5312 1.84ms

or, with log_format="json":

    {"request_id": "3f2a9c1e", "method": "GET", "path": "/health", ...}

Because it is an ordinary named logger, it can be routed separately from
the application logs:

    logging.getLogger("courseserver.access").addHandler(file_handler)
    logging.getLogger("courseserver.access").propagate = False

=============================================================================
"""

import json
import logging
import time
from dataclasses import dataclass
from typing import Iterable, Optional

from .http.request import HTTPRequest
from .http.response import HTTPResponse


logger = logging.getLogger("courseserver.access")


@dataclass
class RequestLog:
    """
    Structured log entry for a request.

    request_id:     Connection id, to correlate with debug logs
    method:         HTTP method ("" for an empty request line)
    path:           Request path as sent, minus the query
    query:          Raw query string
    client_ip:      Client's IP address
    user_agent:     User-Agent header or "-"
    status_code:    HTTP response code
    content_length: Response body size in bytes
    duration_ms:    Time from parse to framed response
    timestamp:      Apache-style local time
    """

    request_id: str
    method: str
    path: str
    query: str
    client_ip: str
    user_agent: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        return {
            "request_id": self.request_id,
            "method": self.method,
            "path": self.path,
            "query": self.query,
            "client_ip": self.client_ip,
            "user_agent": self.user_agent,
            "status_code": self.status_code,
            "content_length": self.content_length,
            "duration_ms": round(self.duration_ms, 2),
            "timestamp": self.timestamp,
        }

    def to_text(self) -> str:
        """Apache common-log style line."""
        path = f"{self.path}?{self.query}" if self.query else self.path
        return (
            f'{self.client_ip} - - [{self.timestamp}] '
            f'"{self.method} {path}" {self.status_code} '
            f'{self.content_length} {self.duration_ms:.2f}ms'
        )


class AccessLogger:
    """
    Emits a RequestLog for each handled request.

    Usage:
        access = AccessLogger(log_format="json", skip_paths=["/health"])
        access.log(request, response, duration_ms, request_id=conn.id)
    """

    def __init__(
        self,
        log_format: str = "text",
        log_level: int = logging.INFO,
        skip_paths: Optional[Iterable[str]] = None,
    ):
        self.log_format = log_format
        self.log_level = log_level
        self.skip_paths = set(skip_paths or [])

    def build(
        self,
        request: HTTPRequest,
        response: HTTPResponse,
        duration_ms: float,
        request_id: str = "-",
    ) -> RequestLog:
        _, _, query = request.target.partition("?")
        return RequestLog(
            request_id=request_id,
            method=request.method,
            path=request.path,
            query=query,
            client_ip=request.client_address[0] or "-",
            user_agent=request.user_agent or "-",
            status_code=int(response.status),
            content_length=len(response.body),
            duration_ms=duration_ms,
            timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
        )

    def log(
        self,
        request: HTTPRequest,
        response: HTTPResponse,
        duration_ms: float,
        request_id: str = "-",
    ) -> None:
        if request.path in self.skip_paths:
            return
        if not logger.isEnabledFor(self.log_level):
            return

        entry = self.build(request, response, duration_ms, request_id)
        if self.log_format == "json":
            logger.log(self.log_level, json.dumps(entry.to_dict()))
        else:
            logger.log(self.log_level, entry.to_text())
