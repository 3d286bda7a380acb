"""
Unit tests for HTTP response building and serialization.
"""

import json

import pytest

from courseserver.http.response import (
    HTTPResponse,
    ResponseBuilder,
    ok,
    bad_request,
    not_found,
    method_not_allowed,
    internal_error,
    service_unavailable,
)
from courseserver.http.status_codes import HTTPStatus, reason_phrase


class TestHTTPResponse:
    """Tests for HTTPResponse class."""

    def test_status_line(self):
        """Test status line generation."""
        response = HTTPResponse(status=HTTPStatus.OK)
        assert response.status_line == "HTTP/1.1 200 OK"

        response = HTTPResponse(status=HTTPStatus.NOT_FOUND)
        assert response.status_line == "HTTP/1.1 404 Not Found"

    def test_to_bytes_framing(self):
        """Test the exact header block and body."""
        response = HTTPResponse(content_type="text/html", body=b"<p>hi</p>")

        assert response.to_bytes() == (
            b"HTTP/1.1 200 OK\r\n"
            b"Content-Type: text/html\r\n"
            b"Content-Length: 9\r\n"
            b"Access-Control-Allow-Origin: *\r\n"
            b"Connection: close\r\n"
            b"\r\n"
            b"<p>hi</p>"
        )

    def test_content_length_counts_bytes(self):
        """Content-Length is the UTF-8 byte length, not the character count."""
        response = HTTPResponse().set_body("Start Module →")

        assert len("Start Module →") == 14
        assert b"Content-Length: 16\r\n" in response.to_bytes()

    def test_empty_body(self):
        """An empty body still gets Content-Length: 0 and the blank line."""
        data = HTTPResponse().to_bytes()

        assert b"Content-Length: 0\r\n" in data
        assert data.endswith(b"\r\n\r\n")

    def test_set_body_chaining(self):
        """Test set_body encodes strings and returns self."""
        response = HTTPResponse()
        assert response.set_body("hello") is response
        assert response.body == b"hello"
        assert response.text == "hello"


class TestResponseBuilder:
    """Tests for ResponseBuilder class."""

    def test_status(self):
        """Test setting status code."""
        response = ResponseBuilder().status(HTTPStatus.NOT_FOUND).build()
        assert response.status == 404

    def test_json_body(self):
        """Test JSON response body."""
        response = ResponseBuilder().json({"key": "value"}).build()

        assert response.content_type == "application/json"
        assert json.loads(response.body) == {"key": "value"}

    def test_json_string_passthrough(self):
        """A string is taken as already-encoded JSON."""
        response = ResponseBuilder().json('{"a": 1}').build()

        assert response.body == b'{"a": 1}'

    def test_html_body(self):
        """Test HTML response body."""
        response = ResponseBuilder().html("<h1>Hello</h1>").build()

        assert response.content_type == "text/html"
        assert response.body == b"<h1>Hello</h1>"

    def test_text_body(self):
        """Test plain text response body."""
        response = ResponseBuilder().text("Hello, World!").build()

        assert response.content_type == "text/plain"
        assert response.body == b"Hello, World!"

    def test_method_chaining(self):
        """Test that all methods can be chained."""
        response = (ResponseBuilder()
            .status(HTTPStatus.OK)
            .body(b"body { }")
            .content_type("text/css")
            .build())

        assert response.status == 200
        assert response.content_type == "text/css"
        assert response.body == b"body { }"


class TestConvenienceFunctions:
    """Tests for convenience response functions."""

    def test_ok(self):
        """Test ok() function."""
        response = ok("hello", "application/json")

        assert response.status == 200
        assert response.content_type == "application/json"
        assert response.body == b"hello"

    @pytest.mark.parametrize("factory, status, message", [
        (bad_request, 400, b"Bad Request"),
        (not_found, 404, b"Not Found"),
        (method_not_allowed, 405, b"Method Not Allowed"),
        (internal_error, 500, b"Internal Server Error"),
        (service_unavailable, 503, b"Service Unavailable"),
    ])
    def test_error_helpers(self, factory, status, message):
        """Each helper gives a text/plain response with a default message."""
        response = factory()

        assert response.status == status
        assert response.content_type == "text/plain"
        assert response.body == message

    def test_custom_message(self):
        """Test a helper with a custom message."""
        assert bad_request("Invalid course path").body == b"Invalid course path"


class TestHTTPStatus:
    """Tests for HTTPStatus enum."""

    def test_status_phrases(self):
        """Test the three explicit reason phrases."""
        assert HTTPStatus.OK.phrase == "OK"
        assert HTTPStatus.NOT_FOUND.phrase == "Not Found"
        assert HTTPStatus.METHOD_NOT_ALLOWED.phrase == "Method Not Allowed"

    def test_other_statuses_read_internal_server_error(self):
        """Every other status line reads "Internal Server Error"."""
        assert reason_phrase(400) == "Internal Server Error"
        assert reason_phrase(503) == "Internal Server Error"
        assert bad_request().status_line == "HTTP/1.1 400 Internal Server Error"

    def test_status_categories(self):
        """Test status code category properties."""
        assert HTTPStatus.OK.is_success
        assert not HTTPStatus.OK.is_error
        assert HTTPStatus.NOT_FOUND.is_error
        assert HTTPStatus.INTERNAL_SERVER_ERROR.is_error
