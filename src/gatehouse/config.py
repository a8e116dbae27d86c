"""Configuration loading with XDG paths, env overlays, and credential resolution.

The effective :class:`~gatehouse.models.StrategyConfig` is assembled from,
lowest precedence first:

1. Model defaults (GitHub endpoints, no scopes).
2. A JSON config file -- an explicit path, or ``config.json`` in the
   gatehouse config directory (see :func:`get_config_dir`).
3. ``GATEHOUSE_*`` environment variables (see :data:`ENV_VARS`).

Client credentials may be written as credential sources instead of literal
values; :func:`resolve_credential` turns them into strings before the model
is validated.
"""

from __future__ import annotations

import json
import os
import platform
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from gatehouse.exceptions import ConfigError
from gatehouse.models import StrategyConfig

_APP_NAME = "gatehouse"
_CONFIG_FILENAME = "config.json"

ENV_VARS: dict[str, str] = {
    "GATEHOUSE_CLIENT_ID": "oauth_client_id",
    "GATEHOUSE_CLIENT_SECRET": "oauth_client_secret",
    "GATEHOUSE_SCOPES": "oauth_scopes",
    "GATEHOUSE_CALLBACK_URL": "oauth_callback_url",
    "GATEHOUSE_AUTHORIZE_URL": "authorize_url",
    "GATEHOUSE_TOKEN_URL": "token_url",
    "GATEHOUSE_USER_URL": "user_url",
}
"""Environment variable name -> :class:`StrategyConfig` field."""

_SECRET_FIELDS = ("oauth_client_id", "oauth_client_secret")


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform follows the XDG Base Directory spec (Linux/BSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def get_config_dir() -> Path:
    """Return the configuration directory.

    On Linux/BSD: ``$XDG_CONFIG_HOME/gatehouse/`` (default ``~/.config/gatehouse/``).
    On macOS/Windows: ``~/.gatehouse/``.

    The directory is not created; gatehouse only ever reads from it.
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_CONFIG_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".config"
        return base / _APP_NAME
    return Path.home() / f".{_APP_NAME}"


def default_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


# --- Credential sources ---


def resolve_credential(value: str) -> str:
    """Resolve a credential from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- reads file content, stripped of whitespace
        - anything else is returned unchanged as a literal value

    Raises:
        ConfigError: If the environment variable is unset or the file
            cannot be read.
    """
    if value.startswith("env:"):
        var_name = value[4:]
        resolved = os.environ.get(var_name)
        if resolved is None:
            raise ConfigError(
                f"Environment variable '{var_name}' is not set (source: {value})"
            )
        return resolved

    if value.startswith("file:"):
        path = Path(value[5:]).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {value})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc

    return value


# --- Loading ---


def _read_config_file(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in config file {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object")
    return data


def _env_overrides() -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for var, field in ENV_VARS.items():
        value = os.environ.get(var)
        if value is None:
            continue
        if field == "oauth_scopes":
            overrides[field] = [s.strip() for s in value.split(",") if s.strip()]
        else:
            overrides[field] = value
    return overrides


def load_config(path: Optional[Path] = None) -> StrategyConfig:
    """Load the effective strategy configuration.

    Args:
        path: Explicit config file. When ``None``, the default
            ``config.json`` is used if it exists; a missing default file is
            not an error.

    Returns:
        The validated :class:`StrategyConfig`.

    Raises:
        ConfigError: If an explicit *path* does not exist, the file is not
            valid JSON, a credential source cannot be resolved, or the merged
            values fail validation.
    """
    data: dict[str, Any] = {}
    if path is not None:
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}")
        data = _read_config_file(path)
    else:
        default = default_config_path()
        if default.is_file():
            data = _read_config_file(default)

    data.update(_env_overrides())

    for field in _SECRET_FIELDS:
        value = data.get(field)
        if isinstance(value, str):
            data[field] = resolve_credential(value)

    try:
        return StrategyConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def validate_config(config: StrategyConfig) -> list[str]:
    """Return human-readable problems with *config*; empty when usable."""
    errors: list[str] = []
    if not config.oauth_client_id:
        errors.append("'oauth_client_id' is required")
    if not config.oauth_client_secret:
        errors.append("'oauth_client_secret' is required")
    if not config.oauth_scopes:
        errors.append("'oauth_scopes' is empty; the provider will grant its default scope")
    if config.oauth_callback_url and not config.oauth_callback_url.startswith("/"):
        errors.append("'oauth_callback_url' must be a path starting with '/'")
    return errors
