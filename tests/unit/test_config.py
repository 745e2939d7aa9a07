"""
Unit tests for configuration and the command line.
"""

from pathlib import Path

import pytest

from pageserver import __version__, create_app
from pageserver.__main__ import build_config, build_parser, main
from pageserver.config import DEFAULT_PORT, ServerConfig
from pageserver.pages import ConfigurationError


class TestServerConfig:
    """Tests for ServerConfig."""

    def test_defaults(self):
        config = ServerConfig()

        assert config.host == "127.0.0.1"
        assert config.port == DEFAULT_PORT == 8015
        assert config.strict_not_found is False
        assert config.server_name == "pageserver/1.0"

    def test_validate_requires_root(self):
        with pytest.raises(ConfigurationError, match="root"):
            ServerConfig().validate()

    @pytest.mark.parametrize("overrides", [
        {"port": 70000},
        {"min_workers": 0},
        {"min_workers": 4, "max_workers": 2},
        {"timeout": 0},
        {"buffer_size": 10},
        {"log_level": "LOUD"},
        {"log_format": "xml"},
    ])
    def test_validate_rejects(self, overrides):
        config = ServerConfig(root_dir="/srv/site", **overrides)
        with pytest.raises(ConfigurationError):
            config.validate()

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("PAGESERVER_HOST", "0.0.0.0")
        monkeypatch.setenv("PAGESERVER_PORT", "9000")
        monkeypatch.setenv("PAGESERVER_ROOT", "/srv/site")
        monkeypatch.setenv("PAGESERVER_WORKERS", "3")
        monkeypatch.setenv("PAGESERVER_TIMEOUT", "12.5")
        monkeypatch.setenv("PAGESERVER_LOG_LEVEL", "debug")
        monkeypatch.setenv("PAGESERVER_STRICT_404", "true")

        config = ServerConfig.from_env()

        assert config.host == "0.0.0.0"
        assert config.port == 9000
        assert config.root_dir == "/srv/site"
        assert (config.min_workers, config.max_workers) == (3, 6)
        assert config.timeout == 12.5
        assert config.log_level == "DEBUG"
        assert config.strict_not_found is True

    def test_from_env_defaults(self, monkeypatch):
        for name in ("PAGESERVER_PORT", "PAGESERVER_ROOT", "PAGESERVER_STRICT_404"):
            monkeypatch.delenv(name, raising=False)

        config = ServerConfig.from_env()
        assert config.port == DEFAULT_PORT
        assert config.root_dir is None
        assert config.strict_not_found is False

    def test_from_env_bad_number(self, monkeypatch):
        monkeypatch.setenv("PAGESERVER_PORT", "eighty")
        with pytest.raises(ConfigurationError):
            ServerConfig.from_env()


class TestCreateApp:
    """Tests for the application factory."""

    def test_routes_in_order(self, site_dir: Path):
        server = create_app(ServerConfig(root_dir=str(site_dir), port=0))
        assert [route.path for route in server.router.routes()] == ["/", "/style.css", "/*path"]

    def test_root_is_canonicalized(self, site_dir: Path):
        config = ServerConfig(root_dir=str(site_dir / "blog" / ".."), port=0)
        create_app(config)
        assert config.root_dir == str(site_dir.resolve())

    def test_missing_root(self, tmp_path: Path):
        with pytest.raises(ConfigurationError):
            create_app(ServerConfig(root_dir=str(tmp_path / "nope")))


class TestCommandLine:
    """Tests for pageserver.__main__."""

    def test_parse_defaults(self):
        args = build_parser().parse_args(["./site"])
        config = build_config(args)

        assert config.root_dir == "./site"
        assert config.port == 8015
        assert config.host == "127.0.0.1"
        assert (config.min_workers, config.max_workers) == (4, 8)
        assert config.log_format == "text"
        assert config.strict_not_found is False

    def test_parse_options(self):
        args = build_parser().parse_args([
            "./site", "-p", "9000", "-H", "0.0.0.0", "-w", "2",
            "-l", "DEBUG", "--log-format", "json", "--strict-404",
        ])
        config = build_config(args)

        assert config.port == 9000
        assert config.host == "0.0.0.0"
        assert (config.min_workers, config.max_workers) == (2, 4)
        assert config.log_level == "DEBUG"
        assert config.log_format == "json"
        assert config.strict_not_found is True

    def test_serve_dir_is_required(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args([])
        assert exc_info.value.code == 2

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])

        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_missing_root_exits_1(self, tmp_path: Path, capsys):
        assert main([str(tmp_path / "nope")]) == 1
        assert capsys.readouterr().err.startswith("Error: ")
