"""
Unit tests for static file serving and MIME lookup.
"""

from pathlib import Path

import pytest

from courseserver.handlers.static import StaticFileHandler, discover_static_dir
from courseserver.http.mime_types import get_mime_type


class TestMimeTypes:
    """Tests for get_mime_type()."""

    @pytest.mark.parametrize("path, expected", [
        ("/index.html", "text/html"),
        ("/css/style.css", "text/css"),
        ("/js/app.js", "application/javascript"),
        ("/data.json", "application/json"),
        ("/CSS/STYLE.CSS", "text/css"),
        ("/readme.txt", "text/plain"),
        ("/image.png", "text/plain"),
        ("/noext", "text/plain"),
    ])
    def test_lookup(self, path, expected):
        assert get_mime_type(path) == expected

    def test_custom_default(self):
        assert get_mime_type("/x.bin", "application/octet-stream") == "application/octet-stream"


class TestStaticFileHandler:
    """Tests for StaticFileHandler."""

    def test_serve_file(self, static_dir: Path):
        """Test serving an existing file byte for byte."""
        response = StaticFileHandler(static_dir).handle("/css/style.css")

        assert response.status == 200
        assert response.content_type == "text/css"
        assert response.body == b"body { margin: 0; }\n"

    def test_missing_file(self, static_dir: Path):
        response = StaticFileHandler(static_dir).handle("/js/missing.js")

        assert response.status == 404
        assert response.body == b"File not found"

    def test_directory_is_not_a_file(self, static_dir: Path):
        """Test a directory path is a 404."""
        assert StaticFileHandler(static_dir).handle("/css/").status == 404

    def test_path_traversal_blocked(self, static_dir: Path, tmp_path: Path):
        """Test ../ can't escape the static root."""
        (tmp_path / "secret.txt").write_text("secret", encoding="utf-8")
        handler = StaticFileHandler(static_dir)

        assert handler.resolve("/css/../../secret.txt") is None
        response = handler.handle("/css/../../secret.txt")
        assert response.status == 404
        assert b"secret" not in response.body

    def test_missing_root(self, tmp_path: Path):
        """Test a handler over a missing directory serves nothing."""
        assert StaticFileHandler(tmp_path / "nope").handle("/css/style.css").status == 404


class TestDiscoverStaticDir:
    """Tests for discover_static_dir()."""

    def test_local(self, tmp_path: Path):
        (tmp_path / "static").mkdir()
        assert discover_static_dir(tmp_path) == tmp_path / "static"

    def test_parent_fallback(self, tmp_path: Path):
        nested = tmp_path / "build"
        nested.mkdir()
        assert discover_static_dir(nested) == tmp_path / "static"
