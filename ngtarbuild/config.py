"""Persistent JSON defaults for build and packaging options.

Lives in the platform config directory. Missing or malformed config falls back
to built-in defaults, and each key is validated on its own.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from .build import DEFAULT_BUILD_COMMAND
from .paths import DEFAULT_BUILD_OUTPUT_DIRNAME

APP_NAME = "ngtarbuild"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


@dataclass(frozen=True)
class Settings:
    """Resolved defaults; CLI flags override these per run."""

    build_command: str = DEFAULT_BUILD_COMMAND
    build_output_dir: str = DEFAULT_BUILD_OUTPUT_DIRNAME
    compress: bool = True
    reproducible_mtime: int | None = None


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON."""
    CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
    CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")


def _load_string(data: dict[str, object], key: str, default: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        return default
    return value


def _load_segment(data: dict[str, object], key: str, default: str) -> str:
    value = _load_string(data, key, default)
    if value in {".", ".."} or "/" in value or "\\" in value or value != value.strip():
        return default
    return value


def _load_mtime(data: dict[str, object], key: str) -> int | None:
    """Booleans and negative numbers are rejected; ``null`` means preserve."""
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return None
    return value


def load_settings() -> Settings:
    """Build ``Settings`` from config, falling back per key."""
    data = load_config()
    compress = data.get("compress")
    return Settings(
        build_command=_load_string(data, "build_command", DEFAULT_BUILD_COMMAND),
        build_output_dir=_load_segment(data, "build_output_dir", DEFAULT_BUILD_OUTPUT_DIRNAME),
        compress=compress if isinstance(compress, bool) else True,
        reproducible_mtime=_load_mtime(data, "reproducible_mtime"),
    )
