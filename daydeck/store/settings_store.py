"""Typed settings over the flat key/value table."""

import logging
from datetime import datetime
from typing import Any, Optional

from daydeck.database.settings_repository import SettingsRepository
from daydeck.engine.quiet_hours import is_in_quiet_hours
from daydeck.models.settings import AppSettings, encode_setting, settings_from_raw, validate_setting

logger = logging.getLogger(__name__)


class SettingsStore:
    def __init__(self, repository: SettingsRepository, writer):
        self.repository = repository
        self.writer = writer
        self.settings = AppSettings()

    def hydrate(self) -> AppSettings:
        self.settings = settings_from_raw(self.repository.load_all())
        return self.settings

    def update(self, key: str, value: Any) -> AppSettings:
        """Set one setting.

        Raises:
            KeyError: unknown key
            pydantic.ValidationError: value not valid for that key
        """
        value = validate_setting(key, value)
        self.settings = self.settings.model_copy(update={key: value})
        raw = encode_setting(value)
        self.writer.submit(f"save setting {key}", lambda: self.repository.save(key, raw))
        return self.settings

    def in_quiet_hours(self, moment: Optional[datetime] = None) -> bool:
        return is_in_quiet_hours(
            moment or datetime.now(),
            self.settings.quiet_hours_start,
            self.settings.quiet_hours_end,
        )
