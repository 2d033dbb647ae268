"""Constants for DayDeck.

This module centralizes default values used throughout the application.
"""

# Day plan defaults (used when a date is first opened)
DEFAULT_WAKE_TIME = "07:00"
DEFAULT_SLEEP_TIME = "22:00"

# Timeline geometry
TIMELINE_HOUR_HEIGHT = 60  # px per hour
TIMELINE_START_HOUR = 7
TIMELINE_END_HOUR = 23
SNAP_MINUTES = 15
MIN_BLOCK_DURATION_MINUTES = 15

# Tasks
DEFAULT_TASK_DURATION_MINUTES = 30
MAX_SUBTASKS = 20
DEFAULT_REMINDER_OFFSET_MINUTES = 15

# Templates
MIN_TEMPLATE_BLOCK_MINUTES = 15

# Block colors by type
BLOCK_COLORS = {
    "task": "#818CF8",
    "focus": "#FBBF24",
    "event": "#F87171",
    "break": "#34D399",
}
