"""DayPlan data model for DayDeck."""

import datetime
from typing import List

from pydantic import BaseModel, Field

from daydeck.models.constants import DEFAULT_SLEEP_TIME, DEFAULT_WAKE_TIME


class DayPlan(BaseModel):
    """Per-date wake/sleep bounds and membership lists. Does not own tasks or blocks."""

    date: datetime.date = Field(..., description="Calendar date the plan belongs to")
    wake_time: str = Field(DEFAULT_WAKE_TIME, pattern=r"^\d{2}:\d{2}$")
    sleep_time: str = Field(DEFAULT_SLEEP_TIME, pattern=r"^\d{2}:\d{2}$")
    task_ids: List[str] = Field(default_factory=list)
    time_block_ids: List[str] = Field(default_factory=list)
