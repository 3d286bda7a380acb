"""
Unit tests for HTTP request parsing.
"""

from courseserver.http.request import HTTPRequest, parse_request


class TestParseRequest:
    """Tests for parse_request()."""

    def test_parse_simple_get(self, sample_get_request: bytes):
        """Test parsing a simple GET request."""
        request = parse_request(sample_get_request, ("127.0.0.1", 12345))

        assert request.method == "GET"
        assert request.path == "/api/users"
        assert request.target == "/api/users?page=1&limit=10"
        assert request.version == "HTTP/1.1"
        assert request.client_address == ("127.0.0.1", 12345)
        assert request.raw == sample_get_request

    def test_header_values_kept_verbatim(self, sample_get_request: bytes):
        """Only the trailing \\r is trimmed; the space after the colon stays."""
        request = parse_request(sample_get_request)

        assert request.headers["Host"] == " localhost:8080"
        assert request.headers["User-Agent"] == " pytest"
        assert "Accept" in request.headers

    def test_header_split_on_first_colon(self):
        """A value containing colons is kept whole."""
        request = parse_request(b"GET / HTTP/1.1\r\nHost: localhost:8080\r\n\r\n")

        assert request.headers["Host"] == " localhost:8080"

    def test_last_header_wins(self):
        """A repeated header keeps the last value."""
        request = parse_request(b"GET / HTTP/1.1\r\nX-Id: 1\r\nX-Id: 2\r\n\r\n")

        assert request.headers["X-Id"] == " 2"

    def test_lines_without_colon_skipped(self):
        """Header lines with no colon are ignored."""
        request = parse_request(b"GET / HTTP/1.1\r\ngarbage\r\nHost: x\r\n\r\n")

        assert request.headers == {"Host": " x"}

    def test_parse_query_params(self, sample_get_request: bytes):
        """Test query parameter parsing."""
        request = parse_request(sample_get_request)

        assert request.get_query("page") == "1"
        assert request.get_query("limit") == "10"
        assert request.get_query("missing") is None
        assert request.get_query("missing", "default") == "default"

    def test_parse_post_with_body(self, sample_post_request: bytes):
        """Each body line is followed by a newline."""
        request = parse_request(sample_post_request)

        assert request.method == "POST"
        assert request.path == "/api/users"
        assert request.body == '{"name": "John", "email": "john@example.com"}\n'

    def test_multiline_body(self):
        """Body lines are joined back with newlines."""
        request = parse_request(b"POST /x HTTP/1.1\r\n\r\nline1\nline2")

        assert request.body == "line1\nline2\n"

    def test_no_body(self, sample_get_request: bytes):
        """Test that a request ending at the blank line has an empty body."""
        request = parse_request(sample_get_request)

        assert request.body == ""

    def test_path_keeps_percent_escapes(self):
        """Test that the query is removed but %XX escapes are left alone."""
        request = parse_request(b"GET /course/fundamentals%2Fintroduction?x=1 HTTP/1.1\r\n\r\n")

        assert request.path == "/course/fundamentals%2Fintroduction"
        assert request.target == "/course/fundamentals%2Fintroduction?x=1"

    def test_missing_headers(self):
        """A bare request line parses with no headers."""
        request = parse_request(b"GET /health HTTP/1.1")

        assert request.method == "GET"
        assert request.path == "/health"
        assert request.headers == {}

    def test_empty_input_never_raises(self):
        """Empty or garbage input gives empty fields instead of an error."""
        request = parse_request(b"")

        assert request.method == ""
        assert request.path == ""
        assert request.headers == {}

    def test_invalid_utf8_never_raises(self):
        """Invalid bytes are replaced, not rejected."""
        request = parse_request(b"GET /\xff\xfe HTTP/1.1\r\n\r\n")

        assert request.method == "GET"
        assert request.path.startswith("/")

    def test_version_ignored_when_missing(self):
        """Test that a missing version defaults to HTTP/1.1."""
        request = parse_request(b"GET /\r\n\r\n")

        assert request.method == "GET"
        assert request.path == "/"
        assert request.version == "HTTP/1.1"


class TestHTTPRequest:
    """Tests for HTTPRequest helpers."""

    def test_get_header_case_insensitive(self):
        """Test header lookup ignores case and surrounding space."""
        request = HTTPRequest(method="GET", path="/", headers={"Content-Type": " text/plain"})

        assert request.get_header("content-type") == "text/plain"
        assert request.get_header("CONTENT-TYPE") == "text/plain"

    def test_get_header_default(self):
        """Test getting header with default value."""
        request = HTTPRequest(method="GET", path="/")

        assert request.get_header("X-Missing") == ""
        assert request.get_header("X-Missing", "default") == "default"

    def test_user_agent(self, sample_get_request: bytes):
        """Test the user_agent shortcut."""
        assert parse_request(sample_get_request).user_agent == "pytest"

    def test_query_list(self):
        """Test the first value wins for repeated query parameters."""
        request = HTTPRequest(
            method="GET",
            path="/",
            query_params={"tag": ["python", "http"]},
        )

        assert request.get_query("tag") == "python"
        assert request.query_params["tag"] == ["python", "http"]
