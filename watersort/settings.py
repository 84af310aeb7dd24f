"""
Settings Module for the Water Sort solver

Solver preferences persisted as a JSON object in config.json. Known keys
are type-checked on load; a value of the wrong type falls back to its
default. Unknown keys are kept so newer files survive a round trip.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

# Settings file location (working directory)
SETTINGS_FILE = Path("config.json")

# Default settings
DEFAULT_SETTINGS: Dict[str, Any] = {
    "max_steps": 2000,
    "strategy_name": "bfs",
    "yield_delay_ms": 50,
    "debug_enabled": False,
}


def _valid(key: str, value: Any) -> bool:
    default = DEFAULT_SETTINGS[key]
    if isinstance(default, bool):
        return isinstance(value, bool)
    if isinstance(default, int):
        return isinstance(value, int) and not isinstance(value, bool) and value >= 0
    return isinstance(value, type(default))


def _merge(raw: Dict[str, Any]) -> Dict[str, Any]:
    result = DEFAULT_SETTINGS.copy()
    for key, value in raw.items():
        if key in DEFAULT_SETTINGS and not _valid(key, value):
            logger.warning(f"Ignoring setting {key}={value!r}, using {DEFAULT_SETTINGS[key]!r}")
            continue
        result[key] = value
    return result


def load_settings(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load settings, merged over DEFAULT_SETTINGS.

    Args:
        path: Settings file (default SETTINGS_FILE)

    Returns:
        Settings dictionary. Defaults if the file is missing or unreadable.
    """
    path = path or SETTINGS_FILE
    if not path.exists():
        logger.debug(f"No settings file at {path}, using defaults")
        return DEFAULT_SETTINGS.copy()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (ValueError, OSError) as e:
        logger.warning(f"Failed to read settings from {path}: {e}, using defaults")
        return DEFAULT_SETTINGS.copy()

    if not isinstance(raw, dict):
        logger.warning(f"Settings in {path} are not a JSON object, using defaults")
        return DEFAULT_SETTINGS.copy()

    return _merge(raw)


def save_settings(settings: Dict[str, Any], path: Optional[Path] = None) -> bool:
    """
    Write settings as indented JSON.

    Args:
        settings: Settings dictionary to save
        path: Settings file (default SETTINGS_FILE)

    Returns:
        True if the file was written
    """
    path = path or SETTINGS_FILE
    try:
        path.write_text(json.dumps(settings, indent=2), encoding="utf-8")
    except OSError as e:
        logger.error(f"Failed to save settings to {path}: {e}")
        return False
    logger.info(f"Settings saved to {path}")
    return True


def update_settings(changes: Dict[str, Any], path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Apply changes on top of the stored settings and persist the result.

    Args:
        changes: Keys to overwrite; None values are skipped
        path: Settings file (default SETTINGS_FILE)

    Returns:
        The merged settings that were saved
    """
    current = load_settings(path)
    current.update({key: value for key, value in changes.items() if value is not None})
    merged = _merge(current)
    save_settings(merged, path)
    return merged
