"""TimeBlock data model for DayDeck."""

from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class TimeBlockType(str, Enum):
    """What a block on the timeline represents."""
    TASK = "task"
    FOCUS = "focus"
    EVENT = "event"
    BREAK = "break"


class TimeBlock(BaseModel):
    """A titled [start_time, end_time) interval on the daily timeline."""

    id: str = Field(..., description="Unique block identifier (generated by the client)")
    task_id: Optional[str] = Field(None, description="Linked task, cleared if the task is deleted")
    title: str = Field(..., description="Block title")
    start_time: datetime = Field(..., description="Block start (inclusive)")
    end_time: datetime = Field(..., description="Block end (exclusive)")
    color: str = Field("#818CF8", description="Display color")
    type: TimeBlockType = Field(TimeBlockType.TASK, description="Block type")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True

    @model_validator(mode="after")
    def _check_interval(self):
        if self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        return self

    @property
    def duration(self) -> timedelta:
        return self.end_time - self.start_time
