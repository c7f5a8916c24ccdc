"""User configuration for WavePlay (read-only)."""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

MIN_TICK_MS = 50
MAX_TICK_MS = 1000
MIN_VOLUME = 0.0
MAX_VOLUME = 2.0


@dataclass(frozen=True)
class AppConfig:
    """Immutable user configuration loaded from disk."""

    music_dir: Optional[str] = None
    volume: float = 1.0
    tick_ms: int = 200
    recursive: bool = True


def get_config_dir(app_name: str = "waveplay") -> Path:
    """Return the per-user config directory for the current platform."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        root = Path(base) if base else Path.home() / "AppData" / "Roaming"
        return root / app_name
    if os.name == "posix" and _is_macos():
        return Path.home() / "Library" / "Application Support" / app_name
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    return root / app_name


def get_config_path() -> Path:
    """Return the full config file path."""
    return get_config_dir() / "config.json"


def load_config(path: Optional[Path] = None) -> AppConfig:
    """Load configuration from disk, falling back to defaults on error."""
    path = path or get_config_path()
    if not path.exists():
        return AppConfig()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        logger.exception("Failed to load config from %s", path)
        return AppConfig()
    if not isinstance(raw, dict):
        logger.warning("Ignoring config %s: top level is not an object", path)
        return AppConfig()
    return _config_from_mapping(raw)


def _is_macos() -> bool:
    return os.uname().sysname == "Darwin" if hasattr(os, "uname") else False


def _get_bool(raw: dict[str, Any], key: str, default: bool) -> bool:
    value = raw.get(key, default)
    return value if isinstance(value, bool) else default


def _get_int(
    raw: dict[str, Any],
    key: str,
    default: int,
    *,
    min_value: int | None = None,
    max_value: int | None = None,
) -> int:
    """Fetch an integer value with optional clamping."""
    value = raw.get(key, default)
    if not isinstance(value, int) or isinstance(value, bool):
        value = default
    if min_value is not None:
        value = max(min_value, value)
    if max_value is not None:
        value = min(max_value, value)
    return value


def _get_float(
    raw: dict[str, Any],
    key: str,
    default: float,
    *,
    min_value: float,
    max_value: float,
) -> float:
    """Fetch a numeric value as float, clamped to the given range."""
    value = raw.get(key, default)
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        value = default
    return max(min_value, min(max_value, float(value)))


def _get_optional_str(raw: dict[str, Any], key: str) -> Optional[str]:
    value = raw.get(key)
    if isinstance(value, str) and value:
        return value
    return None


def _config_from_mapping(raw: dict[str, Any]) -> AppConfig:
    """Normalize raw JSON data into an AppConfig."""
    return AppConfig(
        music_dir=_get_optional_str(raw, "music_dir"),
        volume=_get_float(
            raw, "volume", 1.0, min_value=MIN_VOLUME, max_value=MAX_VOLUME
        ),
        tick_ms=_get_int(
            raw, "tick_ms", 200, min_value=MIN_TICK_MS, max_value=MAX_TICK_MS
        ),
        recursive=_get_bool(raw, "recursive", True),
    )
