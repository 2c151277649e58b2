"""
Tests for ServerConfig and application assembly.
"""

from pathlib import Path

import pytest
from fastapi import FastAPI

from mapcrud.runtime.server import ServerConfig, create_app


class TestServerConfig:
    """Tests for ServerConfig.from_env."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("HOST", "PORT", "LOG_LEVEL", "LOG_DIR", "FILE_LOGGING"):
            monkeypatch.delenv(f"MAPCRUD_{name}", raising=False)

        config = ServerConfig.from_env()
        assert config.host == "127.0.0.1"
        assert config.port == 3000
        assert config.log_level == "INFO"
        assert config.enable_file_logging is False
        assert config.docs_url == "/api"

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAPCRUD_HOST", "0.0.0.0")
        monkeypatch.setenv("MAPCRUD_PORT", "8080")
        monkeypatch.setenv("MAPCRUD_LOG_LEVEL", "debug")
        monkeypatch.setenv("MAPCRUD_LOG_DIR", "/tmp/mapcrud-logs")
        monkeypatch.setenv("MAPCRUD_FILE_LOGGING", "yes")

        config = ServerConfig.from_env()
        assert config.host == "0.0.0.0"
        assert config.port == 8080
        assert config.log_level == "DEBUG"
        assert config.log_dir == Path("/tmp/mapcrud-logs")
        assert config.enable_file_logging is True

    def test_overrides_win(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAPCRUD_PORT", "8080")
        config = ServerConfig.from_env(port=9000, host=None)
        assert config.port == 9000
        assert config.host == "127.0.0.1"

    def test_invalid_port(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAPCRUD_PORT", "eighty")
        with pytest.raises(ValueError, match="MAPCRUD_PORT must be an integer"):
            ServerConfig.from_env()


class TestCreateApp:
    """Tests for create_app."""

    def test_default_routers(self) -> None:
        app = create_app(ServerConfig(log_level="WARNING", title="Test API"))
        assert isinstance(app, FastAPI)
        assert app.title == "Test API"
        paths = {route.path for route in app.routes}
        assert "/payments" in paths
        assert "/payments/{id}/refund" in paths

    def test_explicit_routers(self) -> None:
        app = create_app(ServerConfig(log_level="WARNING", docs_url=None), routers=[])
        assert not any(route.path.startswith("/payments") for route in app.routes)

    def test_file_logging(self, tmp_path: Path) -> None:
        create_app(
            ServerConfig(log_level="INFO", enable_file_logging=True, log_dir=tmp_path),
            routers=[],
        )
        assert (tmp_path / "mapcrud.log").exists()
