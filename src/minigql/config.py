"""CLI configuration with XDG paths and precedence resolution.

This module handles the persistent configuration read by the ``minigql``
command line:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.minigql/`` on macOS and Windows. See :func:`get_config_dir`.
* **Global config** -- A single :class:`~minigql.models.GlobalConfig`
  JSON file storing defaults (endpoint, headers, retry, timeout, output).
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, and the config file into the effective
  configuration.

The library itself never reads these files: :class:`~minigql.client.GraphQLClient`
is configured purely through its constructor.
"""

from __future__ import annotations

import json
import os
import platform
from pathlib import Path
from typing import Optional

from minigql.exceptions import ConfigurationError
from minigql.models import GlobalConfig

_APP_NAME = "minigql"
_CONFIG_FILENAME = "config.json"

ENV_URI = "MINIGQL_URI"
ENV_RETRY = "MINIGQL_RETRY"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform uses the XDG Base Directory layout (Linux/BSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def get_config_dir() -> Path:
    """Return the configuration directory. It is not created.

    On Linux/BSD: ``$XDG_CONFIG_HOME/minigql/`` (default ``~/.config/minigql/``).
    On macOS/Windows: ``~/.minigql/``.
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_CONFIG_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".config"
        return base / _APP_NAME
    return Path.home() / f".{_APP_NAME}"


def global_config_path() -> Path:
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


# --- Global config ---


def load_global_config(path: Optional[Path] = None) -> GlobalConfig:
    """Load the global configuration.

    Args:
        path: Explicit config file. Defaults to :func:`global_config_path`.

    Returns:
        The deserialised :class:`~minigql.models.GlobalConfig`. If the
        file does not exist, a default instance is returned.

    Raises:
        ConfigurationError: If the file exists but contains invalid JSON or
            fails Pydantic validation.
    """
    if path is None:
        path = global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid config at {path}: {exc}") from exc


# --- Precedence resolution ---


def resolve_config(
    cli_uri: Optional[str] = None,
    cli_retry: Optional[int] = None,
    cli_format: Optional[str] = None,
    path: Optional[Path] = None,
) -> GlobalConfig:
    """Resolve the effective CLI configuration.

    Precedence (high to low):
        1. CLI flags (``cli_uri``, ``cli_retry``, ``cli_format``)
        2. Environment variables (``MINIGQL_URI``, ``MINIGQL_RETRY``)
        3. Config file (``~/.config/minigql/config.json``)
        4. Defaults

    Raises:
        ConfigurationError: If the config file is invalid or
            ``MINIGQL_RETRY`` is not a non-negative integer.
    """
    config = load_global_config(path)

    env_uri = os.environ.get(ENV_URI)
    if env_uri:
        config.uri = env_uri
    env_retry = os.environ.get(ENV_RETRY)
    if env_retry:
        try:
            retry = int(env_retry)
        except ValueError as exc:
            raise ConfigurationError(f"{ENV_RETRY} must be an integer, got {env_retry!r}") from exc
        if retry < 0:
            raise ConfigurationError(f"{ENV_RETRY} must not be negative, got {retry}")
        config.retry = retry

    if cli_uri is not None:
        config.uri = cli_uri
    if cli_retry is not None:
        config.retry = cli_retry
    if cli_format is not None:
        config.output.format = cli_format

    return config
