"""Read-only calendar events shown as an overlay on the timeline."""

from datetime import datetime

from pydantic import BaseModel, Field


class CalendarEvent(BaseModel):
    """An event owned by an external calendar. Never moved by DayDeck."""

    id: str
    title: str
    start_time: datetime
    end_time: datetime
    calendar_id: str = Field("", description="Source calendar identifier")
    color: str = "#EF4444"

    class Config:
        frozen = True
