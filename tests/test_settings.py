"""Tests for typed settings decoding."""

import logging

import pytest
from pydantic import ValidationError

from daydeck.models.settings import (
    AppSettings,
    decode_setting,
    encode_setting,
    settings_from_raw,
    validate_setting,
)


class TestSettingsDecoding:
    def test_defaults(self):
        settings = settings_from_raw({})
        assert settings == AppSettings()
        assert settings.carry_over_behavior == "auto"
        assert settings.calendar_sync_enabled is False

    def test_typed_values(self):
        settings = settings_from_raw({
            "day_start_hour": "6",
            "calendar_sync_enabled": "true",
            "theme": "dark",
            "quiet_hours_start": "21:30",
        })
        assert settings.day_start_hour == 6
        assert settings.calendar_sync_enabled is True
        assert settings.theme == "dark"
        assert settings.quiet_hours_start == "21:30"

    def test_invalid_values_fall_back(self, caplog):
        with caplog.at_level(logging.WARNING):
            settings = settings_from_raw({"day_start_hour": "early", "theme": "neon", "day_end_hour": "99"})
        assert settings.day_start_hour == AppSettings().day_start_hour
        assert settings.theme == "system"
        assert settings.day_end_hour == AppSettings().day_end_hour
        assert "day_start_hour" in caplog.text

    def test_unknown_keys_ignored(self):
        assert settings_from_raw({"font": "mono"}) == AppSettings()

    def test_encoding(self):
        assert encode_setting(True) == "true"
        assert encode_setting(False) == "false"
        assert encode_setting(15) == "15"
        assert decode_setting("calendar_sync_enabled", encode_setting(True)) is True

    def test_validate_setting(self):
        assert validate_setting("reminder_offset_minutes", 30) == 30
        with pytest.raises(KeyError):
            validate_setting("font", "mono")
        with pytest.raises(ValidationError):
            validate_setting("day_start_hour", 30)
