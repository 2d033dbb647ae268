"""Template data model for DayDeck."""

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from daydeck.models.time_block import TimeBlockType


class TemplateBlock(BaseModel):
    """Blueprint for one block, positioned by time of day."""

    title: str
    type: TimeBlockType = TimeBlockType.TASK
    start_hour: int = Field(..., ge=0, le=23)
    start_minute: int = Field(0, ge=0, le=59)
    duration_minutes: int = Field(..., gt=0)
    color: str

    class Config:
        use_enum_values = True


class Template(BaseModel):
    """A named, reusable set of block blueprints."""

    id: str
    name: str
    icon: str = ""
    blocks: List[TemplateBlock] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


# Seeded once into an empty templates table.
DEFAULT_TEMPLATES = [
    {
        "name": "Morning Routine",
        "icon": "\U0001F305",
        "blocks": [
            {"title": "Wake up & stretch", "type": "break", "start_hour": 6, "start_minute": 0, "duration_minutes": 30, "color": "#34D399"},
            {"title": "Breakfast", "type": "break", "start_hour": 6, "start_minute": 30, "duration_minutes": 30, "color": "#34D399"},
            {"title": "Daily planning", "type": "focus", "start_hour": 7, "start_minute": 0, "duration_minutes": 30, "color": "#FBBF24"},
        ],
    },
    {
        "name": "Deep Work",
        "icon": "\U0001F9E0",
        "blocks": [
            {"title": "Focus block 1", "type": "focus", "start_hour": 9, "start_minute": 0, "duration_minutes": 90, "color": "#FBBF24"},
            {"title": "Short break", "type": "break", "start_hour": 10, "start_minute": 30, "duration_minutes": 15, "color": "#34D399"},
            {"title": "Focus block 2", "type": "focus", "start_hour": 10, "start_minute": 45, "duration_minutes": 75, "color": "#FBBF24"},
        ],
    },
    {
        "name": "Afternoon Sprint",
        "icon": "⚡",
        "blocks": [
            {"title": "Task block 1", "type": "task", "start_hour": 13, "start_minute": 0, "duration_minutes": 90, "color": "#818CF8"},
            {"title": "Break", "type": "break", "start_hour": 14, "start_minute": 30, "duration_minutes": 15, "color": "#34D399"},
            {"title": "Task block 2", "type": "task", "start_hour": 14, "start_minute": 45, "duration_minutes": 90, "color": "#818CF8"},
            {"title": "Wrap up", "type": "task", "start_hour": 16, "start_minute": 15, "duration_minutes": 45, "color": "#818CF8"},
        ],
    },
    {
        "name": "Evening Wind Down",
        "icon": "\U0001F319",
        "blocks": [
            {"title": "Day review", "type": "task", "start_hour": 19, "start_minute": 0, "duration_minutes": 30, "color": "#818CF8"},
            {"title": "Light tasks", "type": "task", "start_hour": 19, "start_minute": 30, "duration_minutes": 30, "color": "#818CF8"},
            {"title": "Relax", "type": "break", "start_hour": 20, "start_minute": 0, "duration_minutes": 60, "color": "#34D399"},
        ],
    },
]
