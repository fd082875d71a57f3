"""Tests for minigql.config -- XDG paths, config loading, precedence."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from minigql.config import (
    ENV_RETRY,
    ENV_URI,
    get_config_dir,
    global_config_path,
    load_global_config,
    resolve_config,
)
from minigql.exceptions import ConfigurationError
from minigql.exit_codes import EXIT_INVALID_USAGE


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_json(path: Path, data: Any) -> None:
    """Write a dict as JSON to *path*, creating parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(ENV_URI, raising=False)
    monkeypatch.delenv(ENV_RETRY, raising=False)


@pytest.fixture()
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "config.json"
    _write_json(
        path,
        {
            "uri": "https://file.example/graphql",
            "headers": {"authorization": "Bearer file"},
            "retry": 1,
            "output": {"format": "plain"},
        },
    )
    return path


# ---------------------------------------------------------------------------
# XDG path resolution
# ---------------------------------------------------------------------------


class TestConfigDir:
    def test_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("minigql.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_config_dir() == tmp_path / ".config" / "minigql"

    def test_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("minigql.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))

        assert get_config_dir() == tmp_path / "xdg" / "minigql"

    def test_non_xdg_platform(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("minigql.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_config_dir() == tmp_path / ".minigql"

    def test_directory_is_not_created(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("minigql.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

        assert not get_config_dir().exists()

    def test_global_config_path(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("minigql.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

        assert global_config_path() == tmp_path / "minigql" / "config.json"


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


class TestLoadGlobalConfig:
    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        config = load_global_config(tmp_path / "absent.json")
        assert config.uri is None
        assert config.retry == 0
        assert config.output.format == "auto"

    def test_reads_file(self, config_file: Path) -> None:
        config = load_global_config(config_file)
        assert config.uri == "https://file.example/graphql"
        assert config.headers == {"authorization": "Bearer file"}
        assert config.retry == 1

    def test_default_path(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("minigql.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        _write_json(tmp_path / "minigql" / "config.json", {"uri": "https://xdg.example"})

        assert load_global_config().uri == "https://xdg.example"

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="Invalid config") as exc_info:
            load_global_config(path)
        assert exc_info.value.exit_code == EXIT_INVALID_USAGE

    def test_validation_failure(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        _write_json(path, {"retry": -3})

        with pytest.raises(ConfigurationError, match="Invalid config"):
            load_global_config(path)


# ---------------------------------------------------------------------------
# Precedence
# ---------------------------------------------------------------------------


class TestResolveConfig:
    def test_file_values(self, config_file: Path) -> None:
        config = resolve_config(path=config_file)
        assert config.uri == "https://file.example/graphql"
        assert config.retry == 1

    def test_env_overrides_file(self, config_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(ENV_URI, "https://env.example/graphql")
        monkeypatch.setenv(ENV_RETRY, "4")

        config = resolve_config(path=config_file)
        assert config.uri == "https://env.example/graphql"
        assert config.retry == 4

    def test_cli_overrides_env(self, config_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(ENV_URI, "https://env.example/graphql")
        monkeypatch.setenv(ENV_RETRY, "4")

        config = resolve_config(
            cli_uri="https://cli.example/graphql",
            cli_retry=0,
            cli_format="json",
            path=config_file,
        )
        assert config.uri == "https://cli.example/graphql"
        assert config.retry == 0
        assert config.output.format == "json"

    def test_empty_env_is_ignored(self, config_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(ENV_URI, "")
        assert resolve_config(path=config_file).uri == "https://file.example/graphql"

    def test_headers_come_from_file(self, config_file: Path) -> None:
        config = resolve_config(cli_uri="https://cli.example", path=config_file)
        assert config.headers == {"authorization": "Bearer file"}

    def test_defaults_without_file(self, tmp_path: Path) -> None:
        config = resolve_config(path=tmp_path / "absent.json")
        assert config.uri is None
        assert config.timeout == 30.0

    @pytest.mark.parametrize("value", ["many", "1.5"])
    def test_env_retry_must_be_integer(
        self, value: str, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv(ENV_RETRY, value)
        with pytest.raises(ConfigurationError, match="must be an integer"):
            resolve_config(path=tmp_path / "absent.json")

    def test_env_retry_must_not_be_negative(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv(ENV_RETRY, "-1")
        with pytest.raises(ConfigurationError, match="must not be negative"):
            resolve_config(path=tmp_path / "absent.json")
