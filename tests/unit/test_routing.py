"""
Unit tests for HTTPServer.route(): path classification, content types and
course pages, without opening a socket.
"""

import json
from pathlib import Path

import pytest

from courseserver import ServerConfig, create_app
from courseserver.http.request import HTTPRequest, parse_request
from courseserver.server import HTTPServer


def get(server: HTTPServer, path: str, method: str = "GET"):
    """Helper to route a request through the server."""
    return server.route(parse_request(f"{method} {path} HTTP/1.1\r\nHost: localhost\r\n\r\n".encode()))


class TestRegistryRoutes:
    """Tests for routes answered by the registry."""

    def test_home(self, app: HTTPServer):
        """Test GET / is a full HTML page."""
        response = get(app, "/")

        assert response.status == 200
        assert response.content_type == "text/html"
        assert response.text.startswith("<!DOCTYPE html>")
        assert "<title>Server Development Course</title>" in response.text
        assert 'class="hero-section"' in response.text
        assert 'href="/course/fundamentals/introduction"' in response.text

    def test_not_found(self, app: HTTPServer):
        """Test an unknown path."""
        response = get(app, "/nope")

        assert response.status == 404
        assert response.content_type == "text/plain"
        assert response.body == b"Not Found"

    def test_method_not_allowed(self, app: HTTPServer):
        """Test POST / with no POST routes registered."""
        response = get(app, "/", method="POST")

        assert response.status == 405
        assert response.body == b"Method Not Allowed"

    def test_health(self, app: HTTPServer):
        """Test /health is JSON with counts from the loaded catalog."""
        response = get(app, "/health")

        assert response.status == 200
        assert response.content_type == "application/json"
        data = json.loads(response.body)
        assert data["status"] == "healthy"
        assert data["version"] == "1.0.0"
        assert data["course"] == "Server Development Course"
        assert data["modules"] == 1
        assert data["lessons"] == 2
        assert isinstance(data["uptime"], int)
        assert isinstance(data["timestamp"], int)

    def test_users(self, app: HTTPServer):
        """Test the user list."""
        response = get(app, "/api/users")

        assert response.content_type == "application/json"
        data = json.loads(response.body)
        assert data["success"] is True
        assert data["count"] == 3
        assert [user["name"] for user in data["users"]] == ["John Doe", "Jane Smith", "Bob Johnson"]

    def test_user_detail(self, app: HTTPServer):
        """Test one user by id."""
        data = json.loads(get(app, "/api/users/2").body)

        assert data == {
            "success": True,
            "user": {"id": "2", "name": "Jane Smith", "email": "jane@example.com", "age": 25},
        }

    def test_unknown_user(self, app: HTTPServer):
        """Test an id with no route."""
        assert get(app, "/api/users/4").status == 404

    def test_query_string_ignored_for_matching(self, app: HTTPServer):
        """Test routing uses the path without the query."""
        assert get(app, "/api/users?page=2").status == 200

    def test_other_paths_are_text(self, config: ServerConfig):
        """Test a route outside / /health /api/ is text/plain."""
        server = create_app(config)
        server.add_route("/ping", lambda body, headers: "pong")

        response = get(server, "/ping")

        assert response.content_type == "text/plain"
        assert response.body == b"pong"

    def test_handler_error_is_500(self, config: ServerConfig):
        """Test a raising handler becomes a 500 and doesn't escape."""
        server = HTTPServer(config)

        @server.get("/broken")
        def broken(body, headers):
            raise ValueError("boom")

        response = get(server, "/broken")

        assert response.status == 500
        assert response.body == b"Internal Server Error"
        assert b"boom" not in response.to_bytes()

    def test_handler_receives_body_and_headers(self, config: ServerConfig):
        """Test handlers get the raw body and parsed headers."""
        server = HTTPServer(config)

        @server.post("/echo")
        def echo(body, headers):
            return f"{headers['Host'].strip()}:{body}"

        raw = b"POST /echo HTTP/1.1\r\nHost: example\r\n\r\nhello"
        response = server.route(parse_request(raw))

        assert response.body == b"example:hello\n"


class TestCourseRoutes:
    """Tests for /course/<module>/<lesson>."""

    def test_lesson_page(self, app: HTTPServer):
        """Test a lesson from the catalog with navigation."""
        response = get(app, "/course/fundamentals/introduction")

        assert response.status == 200
        assert response.content_type == "text/html"
        assert "<title>Server Development Course - fundamentals - introduction</title>" in response.text
        assert '<div class="lesson-content"><h1>Intro</h1>' in response.text
        assert "<strong>world</strong>" in response.text
        assert 'class="nav-btn next-btn"' in response.text

    def test_lesson_not_found(self, app: HTTPServer):
        """Test an unknown lesson in a known module is a 200 page."""
        response = get(app, "/course/fundamentals/doesnotexist")

        assert response.status == 200
        assert "Lesson Not Found" in response.text
        assert "The requested lesson does not exist." in response.text

    def test_module_not_found(self, app: HTTPServer):
        """Test an unknown module."""
        response = get(app, "/course/nope/introduction")

        assert response.status == 200
        assert "Module Not Found" in response.text

    def test_invalid_course_path(self, app: HTTPServer):
        """Test a course path with no lesson part."""
        response = get(app, "/course/fundamentals")

        assert response.status == 400
        assert response.content_type == "text/plain"
        assert response.body == b"Invalid course path"

    def test_empty_lesson_name(self, app: HTTPServer):
        """Test a trailing slash gives an empty lesson name, not a 400."""
        response = get(app, "/course/fundamentals/")

        assert response.status == 200
        assert "Lesson Not Found" in response.text

    def test_encoded_slash_is_not_a_separator(self, app: HTTPServer):
        """Test %2F doesn't count as the module/lesson separator."""
        response = get(app, "/course/fundamentals%2Fintroduction")

        assert response.status == 400
        assert response.body == b"Invalid course path"

    def test_escapes_decoded_after_split(self, app: HTTPServer):
        """Test %XX escapes in the module and lesson names are decoded."""
        response = get(app, "/course/fundamentals/intro%64uction")

        assert response.status == 200
        assert '<div class="lesson-content"><h1>Intro</h1>' in response.text

    def test_any_method(self, app: HTTPServer):
        """Test course pages don't go through the method table."""
        assert get(app, "/course/fundamentals/introduction", method="POST").status == 200

    def test_fallback_outline(self, config: ServerConfig, tmp_path: Path):
        """Test a missing lessons directory falls back to the outline."""
        config.lessons_dir = str(tmp_path / "missing")
        server = create_app(config)

        response = get(server, "/course/fundamentals/threading")

        assert response.status == 200
        assert "<h2>threading</h2><p>Lesson content is not available.</p>" in response.text
        assert '<li class="active"><a href="/course/fundamentals/threading">threading</a></li>' in response.text

        health = json.loads(get(server, "/health").body)
        assert health["modules"] == 4
        assert health["lessons"] == 16

    def test_fallback_unknown_lesson(self, config: ServerConfig, tmp_path: Path):
        """Test the outline still rejects lessons it doesn't list."""
        config.lessons_dir = str(tmp_path / "missing")
        server = create_app(config)

        assert "Lesson Not Found" in get(server, "/course/fundamentals/nope").text


class TestStaticRoutes:
    """Tests for /css/ and /js/."""

    @pytest.mark.parametrize("path, content_type", [
        ("/css/style.css", "text/css"),
        ("/js/app.js", "application/javascript"),
    ])
    def test_static_file(self, app: HTTPServer, path, content_type):
        """Test files are served with a MIME type from the suffix."""
        response = get(app, path)

        assert response.status == 200
        assert response.content_type == content_type

    def test_missing_file(self, app: HTTPServer):
        """Test a missing static file."""
        response = get(app, "/css/missing.css")

        assert response.status == 404
        assert response.body == b"File not found"

    def test_other_prefix_goes_to_registry(self, app: HTTPServer):
        """Test /static/ is not a static prefix."""
        assert get(app, "/static/css/style.css").body == b"Not Found"

    def test_encoded_slash_is_not_a_prefix(self, app: HTTPServer):
        """Test /css%2F is not the /css/ prefix."""
        response = get(app, "/css%2Fstyle.css")

        assert response.status == 404
        assert response.body == b"Not Found"


class TestConstruction:
    """Tests for HTTPServer construction."""

    def test_invalid_config_raises(self):
        """Test validation runs before anything else."""
        with pytest.raises(ValueError):
            HTTPServer(ServerConfig(port=70000))

    def test_prebuilt_catalog(self, config: ServerConfig, catalog):
        """Test a catalog passed in is used as is."""
        server = HTTPServer(config, catalog=catalog)

        assert server.catalog is catalog
        assert server.course_index == {"fundamentals": ["introduction", "sockets"]}

    def test_address_before_start(self, config: ServerConfig):
        """Test address reports the configured values before binding."""
        assert HTTPServer(config).address == ("127.0.0.1", 0)
