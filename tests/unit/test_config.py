"""
Unit tests for ServerConfig.
"""

import pytest

from courseserver.config import ServerConfig


class TestDefaults:
    """Tests for default values."""

    def test_defaults(self):
        config = ServerConfig()

        assert config.host == "127.0.0.1"
        assert config.port == 8080
        assert config.buffer_size == 4096
        assert config.timeout == 30.0
        assert config.lessons_dir is None
        assert config.static_dir is None
        assert config.log_format == "text"

    def test_defaults_are_valid(self):
        ServerConfig().validate()


class TestFromEnv:
    """Tests for ServerConfig.from_env()."""

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("HTTP_HOST", "0.0.0.0")
        monkeypatch.setenv("HTTP_PORT", "9090")
        monkeypatch.setenv("HTTP_WORKERS", "8")
        monkeypatch.setenv("HTTP_TIMEOUT", "5")
        monkeypatch.setenv("HTTP_LESSONS_DIR", "/srv/lessons")
        monkeypatch.setenv("HTTP_STATIC_DIR", "/srv/static")
        monkeypatch.setenv("HTTP_LOG_LEVEL", "DEBUG")

        config = ServerConfig.from_env()

        assert config.host == "0.0.0.0"
        assert config.port == 9090
        assert config.max_workers == 8
        assert config.timeout == 5.0
        assert config.lessons_dir == "/srv/lessons"
        assert config.static_dir == "/srv/static"
        assert config.log_level == "DEBUG"

    def test_defaults_without_environment(self, monkeypatch):
        for name in ["HTTP_HOST", "HTTP_PORT", "HTTP_WORKERS", "HTTP_TIMEOUT",
                     "HTTP_LESSONS_DIR", "HTTP_STATIC_DIR", "HTTP_LOG_LEVEL"]:
            monkeypatch.delenv(name, raising=False)

        assert ServerConfig.from_env() == ServerConfig()

    def test_few_workers_still_valid(self, monkeypatch):
        """Test HTTP_WORKERS below the default minimum lowers min_workers too."""
        monkeypatch.setenv("HTTP_WORKERS", "2")

        config = ServerConfig.from_env()

        assert config.min_workers == 2
        config.validate()

    def test_bad_port_raises(self, monkeypatch):
        monkeypatch.setenv("HTTP_PORT", "eighty")

        with pytest.raises(ValueError):
            ServerConfig.from_env()


class TestValidate:
    """Tests for fail-fast validation."""

    @pytest.mark.parametrize("overrides", [
        {"port": -1},
        {"port": 65536},
        {"min_workers": 0},
        {"min_workers": 8, "max_workers": 4},
        {"queue_size": 0},
        {"buffer_size": 512},
        {"timeout": 0},
        {"log_format": "xml"},
    ])
    def test_invalid(self, overrides):
        with pytest.raises(ValueError):
            ServerConfig(**overrides).validate()

    def test_port_zero_allowed(self):
        """Test port 0 (OS-assigned) passes."""
        ServerConfig(port=0).validate()

    def test_no_timeout_allowed(self):
        ServerConfig(timeout=None).validate()
