"""Typed application settings and their string encoding for storage.

Settings are persisted as flat key -> string rows. Each key has its own
decoding rule; values that fail to decode fall back to the default.
"""

import logging
from enum import Enum
from typing import Any, Callable, Dict

from pydantic import BaseModel, Field, ValidationError

from daydeck.models.constants import (
    DEFAULT_REMINDER_OFFSET_MINUTES,
    DEFAULT_SLEEP_TIME,
    DEFAULT_TASK_DURATION_MINUTES,
    DEFAULT_WAKE_TIME,
    TIMELINE_END_HOUR,
    TIMELINE_START_HOUR,
)

logger = logging.getLogger(__name__)


class CarryOverBehavior(str, Enum):
    AUTO = "auto"
    ASK = "ask"
    NEVER = "never"


class ThemeSetting(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


class AppSettings(BaseModel):
    """User-configurable settings."""

    day_start_hour: int = Field(TIMELINE_START_HOUR, ge=0, le=23)
    day_end_hour: int = Field(TIMELINE_END_HOUR, ge=1, le=24)
    default_task_duration_minutes: int = Field(DEFAULT_TASK_DURATION_MINUTES, gt=0)
    quiet_hours_start: str = Field(DEFAULT_SLEEP_TIME, pattern=r"^\d{2}:\d{2}$")
    quiet_hours_end: str = Field(DEFAULT_WAKE_TIME, pattern=r"^\d{2}:\d{2}$")
    carry_over_behavior: CarryOverBehavior = CarryOverBehavior.AUTO
    reminder_offset_minutes: int = Field(DEFAULT_REMINDER_OFFSET_MINUTES, ge=0)
    theme: ThemeSetting = ThemeSetting.SYSTEM
    calendar_sync_enabled: bool = False

    class Config:
        use_enum_values = True


def _decode_bool(raw: str) -> bool:
    return raw == "true"


_DECODERS: Dict[str, Callable[[str], Any]] = {
    "day_start_hour": int,
    "day_end_hour": int,
    "default_task_duration_minutes": int,
    "reminder_offset_minutes": int,
    "quiet_hours_start": str,
    "quiet_hours_end": str,
    "carry_over_behavior": CarryOverBehavior,
    "theme": ThemeSetting,
    "calendar_sync_enabled": _decode_bool,
}

SETTING_KEYS = tuple(_DECODERS)


def encode_setting(value: Any) -> str:
    """Encode a typed setting value as its stored string form."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def decode_setting(key: str, raw: str) -> Any:
    """Decode a stored string using the rule registered for `key`.

    Raises:
        KeyError: if `key` is not a known setting
        ValueError: if `raw` cannot be decoded for that key
    """
    decoder = _DECODERS[key]
    value = decoder(raw)
    if isinstance(value, Enum):
        return value.value
    return value


def validate_setting(key: str, value: Any) -> Any:
    """Validate a typed value for `key` against the settings model and return it normalized."""
    if key not in _DECODERS:
        raise KeyError(key)
    validated = AppSettings.model_validate({key: value})
    return getattr(validated, key)


def settings_from_raw(raw: Dict[str, str]) -> AppSettings:
    """Build typed settings from stored rows, ignoring unknown keys and bad values."""
    values: Dict[str, Any] = {}
    for key in SETTING_KEYS:
        if key not in raw:
            continue
        try:
            values[key] = validate_setting(key, decode_setting(key, raw[key]))
        except (ValueError, ValidationError) as e:
            logger.warning(f"Ignoring stored setting {key}={raw[key]!r}: {type(e).__name__}")
    return AppSettings(**values)
