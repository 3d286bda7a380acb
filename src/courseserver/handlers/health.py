"""
=============================================================================
HEALTH CHECK HANDLER
=============================================================================

GET /health: a small JSON document for load balancers and uptime checks.

    {
        "status": "healthy",
        "timestamp": 1767225600,      ← seconds since the epoch
        "uptime": 3600,               ← seconds since the handler was created
        "version": "1.0.0",
        "course": "Server Development Course",
        "modules": 4,
        "lessons": 16
    }

The module and lesson counts come from the same course index the course
pages use, so they reflect what the server will actually serve: the
loaded catalog, or the built-in outline if no lessons were found.

=============================================================================
INTERVIEW QUESTIONS ABOUT HEALTH CHECKS
=============================================================================

Q: "Why is this a shallow check?"
A: "The server has no database or downstream service. If the process can
   accept a connection and run a handler, it is healthy. A deep check
   would only add ways for the probe itself to fail."

=============================================================================
"""

import json
import time
from typing import Dict, List

from .. import __version__


class HealthHandler:
    """
    Health check route handler.

    Usage:
        health = HealthHandler(course_index, course_name="Server Development Course")
        router.add_route("/health", health)
    """

    def __init__(self, course_index: Dict[str, List[str]], course_name: str):
        self.course_index = course_index
        self.course_name = course_name
        self._start_time = time.time()

    @property
    def uptime(self) -> int:
        return int(time.time() - self._start_time)

    def payload(self) -> dict:
        return {
            "status": "healthy",
            "timestamp": int(time.time()),
            "uptime": self.uptime,
            "version": __version__,
            "course": self.course_name,
            "modules": len(self.course_index),
            "lessons": sum(len(lessons) for lessons in self.course_index.values()),
        }

    def __call__(self, body: str, headers: Dict[str, str]) -> str:
        return json.dumps(self.payload())
