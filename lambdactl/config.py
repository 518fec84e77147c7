"""Persistent JSON config helpers.

Stores the API key and menu preferences. Reads are defensive: a missing or
malformed file behaves like an empty config, and bad values fall back to
defaults. ``LAMBDA_API_KEY`` overrides the stored key.
"""

from __future__ import annotations

import json
import os
from pathlib import Path

from platformdirs import user_config_dir

from .api.client import DEFAULT_BASE_URL
from .menu.producers import DEFAULT_POLL_INTERVAL_SECONDS
from .menu.session import DEFAULT_MENU_LINES

APP_NAME = "lambdactl"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
API_KEY_ENV = "LAMBDA_API_KEY"
DEFAULT_SSH_USER = "ubuntu"


def load_config(path: Path | None = None) -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    config_path = path if path is not None else CONFIG_PATH
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object], path: Path | None = None) -> None:
    """Persist config data as pretty-printed JSON, ignoring filesystem errors."""
    config_path = path if path is not None else CONFIG_PATH
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError:
        pass


def load_api_key(path: Path | None = None) -> str | None:
    """Return the API key from the environment or the config file."""
    env_value = os.environ.get(API_KEY_ENV, "").strip()
    if env_value:
        return env_value
    value = load_config(path).get("api_key")
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def save_api_key(api_key: str, path: Path | None = None) -> None:
    stripped = str(api_key).strip()
    if not stripped:
        return
    config = load_config(path)
    config["api_key"] = stripped
    save_config(config, path)


def load_menu_lines(path: Path | None = None) -> int:
    """Rows shown at once; booleans and non-positive values are ignored."""
    value = load_config(path).get("menu_lines")
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return DEFAULT_MENU_LINES
    return value


def load_poll_interval(path: Path | None = None) -> float:
    value = load_config(path).get("poll_interval")
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        return DEFAULT_POLL_INTERVAL_SECONDS
    return float(value)


def load_ssh_user(path: Path | None = None) -> str:
    value = load_config(path).get("ssh_user")
    if isinstance(value, str) and value.strip():
        return value.strip()
    return DEFAULT_SSH_USER


def load_api_base_url(path: Path | None = None) -> str:
    value = load_config(path).get("api_base_url")
    if isinstance(value, str) and value.strip():
        return value.strip()
    return DEFAULT_BASE_URL


__all__ = [
    "API_KEY_ENV",
    "CONFIG_PATH",
    "DEFAULT_SSH_USER",
    "load_api_base_url",
    "load_api_key",
    "load_config",
    "load_menu_lines",
    "load_poll_interval",
    "load_ssh_user",
    "save_api_key",
    "save_config",
]
