"""Data models for DayDeck."""

from daydeck.models.time_block import TimeBlock, TimeBlockType
from daydeck.models.task import (
    Task,
    TaskStatus,
    Priority,
    Subtask,
    Recurrence,
    RecurrenceFrequency,
    TaskNotification,
)
from daydeck.models.day_plan import DayPlan
from daydeck.models.template import Template, TemplateBlock
from daydeck.models.settings import AppSettings, CarryOverBehavior, ThemeSetting
from daydeck.models.calendar_event import CalendarEvent

__all__ = [
    "TimeBlock",
    "TimeBlockType",
    "Task",
    "TaskStatus",
    "Priority",
    "Subtask",
    "Recurrence",
    "RecurrenceFrequency",
    "TaskNotification",
    "DayPlan",
    "Template",
    "TemplateBlock",
    "AppSettings",
    "CarryOverBehavior",
    "ThemeSetting",
    "CalendarEvent",
]
