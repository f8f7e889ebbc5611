"""Configuration persistence for Bubble Replay."""

from __future__ import annotations

from dataclasses import asdict, dataclass
import json
import logging
import os
from pathlib import Path
from typing import Any

from bubble_replay.playback import MAX_SPEED, MIN_SPEED

logger = logging.getLogger(__name__)

MIN_SIZE = 5
MAX_SIZE = 100


@dataclass(frozen=True)
class AppConfig:
    """Immutable user preferences loaded from disk."""

    array_size: int = 20
    early_exit: bool = False
    speed: int = 50
    muted: bool = False
    volume: int = 80


def clamp_size(size: int) -> int:
    return max(MIN_SIZE, min(MAX_SIZE, int(size)))


def get_config_dir(app_name: str = "bubble-replay") -> Path:
    """Return the per-user config directory for the current platform."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        root = Path(base) if base else Path.home() / "AppData" / "Roaming"
        return _ensure_dir(root / app_name)
    if os.name == "posix" and _is_macos():
        root = Path.home() / "Library" / "Application Support"
        return _ensure_dir(root / app_name)
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    return _ensure_dir(root / app_name)


def get_config_path() -> Path:
    return get_config_dir() / "config.json"


def load_config() -> AppConfig:
    """Load configuration from disk, falling back to defaults on error."""
    path = get_config_path()
    if not path.exists():
        return AppConfig()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        logger.exception("Failed to load config from %s", path)
        return AppConfig()
    if not isinstance(raw, dict):
        logger.warning("Ignoring config %s: expected an object", path)
        return AppConfig()
    return _config_from_mapping(raw)


def save_config(cfg: AppConfig) -> None:
    """Persist configuration to disk atomically."""
    path = get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.with_suffix(".tmp")
    temp_path.write_text(json.dumps(asdict(cfg), indent=2), encoding="utf-8")
    os.replace(temp_path, path)


def _ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def _is_macos() -> bool:
    return os.uname().sysname == "Darwin" if hasattr(os, "uname") else False


def _get_bool(raw: dict[str, Any], key: str, default: bool) -> bool:
    value = raw.get(key, default)
    return value if isinstance(value, bool) else default


def _get_int(
    raw: dict[str, Any], key: str, default: int, *, min_value: int, max_value: int
) -> int:
    """Fetch an integer value with clamping; bools are not integers here."""
    value = raw.get(key, default)
    if not isinstance(value, int) or isinstance(value, bool):
        value = default
    return max(min_value, min(max_value, value))


def _config_from_mapping(raw: dict[str, Any]) -> AppConfig:
    return AppConfig(
        array_size=_get_int(
            raw, "array_size", 20, min_value=MIN_SIZE, max_value=MAX_SIZE
        ),
        early_exit=_get_bool(raw, "early_exit", False),
        speed=_get_int(raw, "speed", 50, min_value=MIN_SPEED, max_value=MAX_SPEED),
        muted=_get_bool(raw, "muted", False),
        volume=_get_int(raw, "volume", 80, min_value=0, max_value=100),
    )
