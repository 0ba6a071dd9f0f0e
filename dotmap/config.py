"""
Configuration management for DotMap.

Settings are resolved in three layers, later layers winning:
1. Built-in defaults
2. config.json next to the project root / executable
3. DOTMAP_* environment variables (a .env file is loaded by app.py)

Invalid values never stop the app; they fall back to the default with a warning.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from dotmap.edit.constants import CANVAS_HEIGHT, HIT_RADIUS, MIN_CANVAS_WIDTH
from dotmap.history import DEFAULT_HISTORY_LIMIT
from dotmap.paths import get_config_path

logger = logging.getLogger(__name__)

HIT_POLICIES = ('first', 'nearest')
SELF_CLICK_POLICIES = ('ignore', 'cancel')
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')

_TRUE_VALUES = {'1', 'true', 'yes', 'on'}
_FALSE_VALUES = {'0', 'false', 'no', 'off'}


@dataclass(frozen=True)
class Settings:
    """Resolved runtime settings."""
    history_limit: int = DEFAULT_HISTORY_LIMIT
    hit_radius: float = HIT_RADIUS
    hit_policy: str = 'first'
    self_click: str = 'ignore'
    check_invariants: bool = __debug__
    canvas_height: int = CANVAS_HEIGHT
    min_canvas_width: int = MIN_CANVAS_WIDTH
    log_level: str = 'INFO'


def load_config(config_path: Optional[Path] = None) -> dict:
    """Load configuration from config.json."""
    config_path = config_path or get_config_path()
    if config_path.exists():
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
                return data if isinstance(data, dict) else {}
        except (json.JSONDecodeError, IOError):
            logger.warning(f"Ignoring unreadable config file {config_path}")
            return {}
    return {}


def save_config(config: dict, config_path: Optional[Path] = None) -> None:
    """Save configuration to config.json."""
    config_path = config_path or get_config_path()
    with open(config_path, 'w', encoding='utf-8') as f:
        json.dump(config, f, indent=2)


def _parse_positive_int(value: Any) -> int:
    parsed = int(value)
    if parsed < 1:
        raise ValueError(f"expected a positive integer, got {value!r}")
    return parsed


def _parse_positive_float(value: Any) -> float:
    parsed = float(value)
    if not parsed > 0:
        raise ValueError(f"expected a positive number, got {value!r}")
    return parsed


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ValueError(f"expected a boolean, got {value!r}")


def _choice(options) -> Callable[[Any], str]:
    def parse(value: Any) -> str:
        text = str(value).strip().lower()
        if text not in options:
            raise ValueError(f"expected one of {options}, got {value!r}")
        return text
    return parse


def _parse_log_level(value: Any) -> str:
    text = str(value).strip().upper()
    if text not in LOG_LEVELS:
        raise ValueError(f"expected one of {LOG_LEVELS}, got {value!r}")
    return text


# setting name -> (environment variable, parser)
_FIELDS: Dict[str, tuple] = {
    'history_limit': ('DOTMAP_HISTORY_LIMIT', _parse_positive_int),
    'hit_radius': ('DOTMAP_HIT_RADIUS', _parse_positive_float),
    'hit_policy': ('DOTMAP_HIT_POLICY', _choice(HIT_POLICIES)),
    'self_click': ('DOTMAP_SELF_CLICK', _choice(SELF_CLICK_POLICIES)),
    'check_invariants': ('DOTMAP_CHECK_INVARIANTS', _parse_bool),
    'canvas_height': ('DOTMAP_CANVAS_HEIGHT', _parse_positive_int),
    'min_canvas_width': ('DOTMAP_MIN_CANVAS_WIDTH', _parse_positive_int),
    'log_level': ('DOTMAP_LOG_LEVEL', _parse_log_level),
}


def get_settings(config: Optional[dict] = None, environ: Optional[Dict[str, str]] = None) -> Settings:
    """
    Resolve the effective settings.

    Args:
        config: Parsed config.json contents (loaded from disk when None)
        environ: Environment mapping (os.environ when None)

    Returns:
        Settings with every field validated
    """
    if config is None:
        config = load_config()
    if environ is None:
        environ = os.environ

    values = {}
    for name, (env_var, parse) in _FIELDS.items():
        raw = environ.get(env_var)
        source = env_var
        if raw is None or raw == '':
            raw = config.get(name)
            source = f"config.json:{name}"
        if raw is None:
            continue
        try:
            values[name] = parse(raw)
        except (TypeError, ValueError) as e:
            logger.warning(f"Invalid value for {source}, using default: {e}")
    return Settings(**values)
