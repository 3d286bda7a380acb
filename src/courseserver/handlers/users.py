"""
Sample user API: a fixed, in-memory list served as JSON.

    GET /api/users      → {"success": true, "count": 3, "users": [...]}
    GET /api/users/2    → {"success": true, "user": {...}}

There is no persistence and no path parameters: each user id is its own
exact route, registered by register_user_routes().
"""

import json
from typing import Callable, Dict, List

from ..http.router import Router


SAMPLE_USERS: List[dict] = [
    {"id": "1", "name": "John Doe", "email": "john@example.com", "age": 30},
    {"id": "2", "name": "Jane Smith", "email": "jane@example.com", "age": 25},
    {"id": "3", "name": "Bob Johnson", "email": "bob@example.com", "age": 35},
]


def list_users(body: str, headers: Dict[str, str]) -> str:
    return json.dumps({
        "success": True,
        "count": len(SAMPLE_USERS),
        "users": SAMPLE_USERS,
    })


def user_detail(user: dict) -> Callable[[str, Dict[str, str]], str]:
    """Build the handler for one user's route."""
    def handler(body: str, headers: Dict[str, str]) -> str:
        return json.dumps({"success": True, "user": user})
    return handler


def register_user_routes(router: Router) -> None:
    router.add_route("/api/users", list_users)
    for user in SAMPLE_USERS:
        router.add_route(f"/api/users/{user['id']}", user_detail(user))
