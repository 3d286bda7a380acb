"""
pytest configuration and fixtures.
"""

import socket
import time
from pathlib import Path
from typing import Generator

import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from courseserver import ServerConfig, create_app
from courseserver.course import LessonCatalog
from courseserver.server import HTTPServer


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request."""
    return (
        b"GET /api/users?page=1&limit=10 HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: application/json\r\n"
        b"\r\n"
    )


@pytest.fixture
def sample_post_request() -> bytes:
    """Sample HTTP POST request with JSON body."""
    body = b'{"name": "John", "email": "john@example.com"}'
    return (
        b"POST /api/users HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"Content-Type: application/json\r\n"
        + f"Content-Length: {len(body)}\r\n".encode()
        + b"\r\n"
    ) + body


@pytest.fixture
def lessons_dir(tmp_path: Path) -> Path:
    """
    A lessons root with one module:

        lessons/fundamentals/introduction.md   "# Intro\\nHello **world**"
        lessons/fundamentals/sockets.md
    """
    module = tmp_path / "lessons" / "fundamentals"
    module.mkdir(parents=True)
    (module / "introduction.md").write_text("# Intro\nHello **world**", encoding="utf-8")
    (module / "sockets.md").write_text(
        "# Sockets\n\n```cpp\nint fd = socket(AF_INET, SOCK_STREAM, 0);\n```\n",
        encoding="utf-8",
    )
    return tmp_path / "lessons"


@pytest.fixture
def static_dir(tmp_path: Path) -> Path:
    """A static root with css/style.css and js/app.js."""
    root = tmp_path / "static"
    (root / "css").mkdir(parents=True)
    (root / "js").mkdir()
    (root / "css" / "style.css").write_text("body { margin: 0; }\n", encoding="utf-8")
    (root / "js" / "app.js").write_text("console.log('ok');\n", encoding="utf-8")
    return root


@pytest.fixture
def catalog(lessons_dir: Path) -> LessonCatalog:
    """A loaded catalog over the lessons_dir fixture."""
    catalog = LessonCatalog(lessons_dir)
    assert catalog.load()
    return catalog


@pytest.fixture
def config(lessons_dir: Path, static_dir: Path) -> ServerConfig:
    """Default test server configuration."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,  # Let OS pick a free port
        min_workers=2,
        max_workers=4,
        timeout=5.0,
        lessons_dir=str(lessons_dir),
        static_dir=str(static_dir),
        log_level="WARNING",
    )


@pytest.fixture
def app(config: ServerConfig) -> HTTPServer:
    """The full course server, not started."""
    return create_app(config)


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(('127.0.0.1', 0))
        return s.getsockname()[1]


@pytest.fixture
def running_server(app: HTTPServer) -> Generator[HTTPServer, None, None]:
    """The course server, started on a free port and stopped afterwards."""
    app.start()

    # Wait for server to be ready
    host, port = app.address
    for _ in range(50):  # 5 seconds max
        try:
            with socket.create_connection((host, port), timeout=1.0):
                break
        except ConnectionRefusedError:
            time.sleep(0.1)
    else:
        raise RuntimeError("Server failed to start")

    yield app

    app.stop(timeout=5.0)
