"""Half-open interval arithmetic for time blocks.

A block covers [start_time, end_time). Touching endpoints do not overlap.
"""

from datetime import datetime, timedelta
from typing import Optional, Tuple

from daydeck.models.time_block import TimeBlock


def overlaps(a, b) -> bool:
    """True iff intervals a and b share any instant.

    Works for anything exposing `start_time` / `end_time` (blocks, calendar events).
    """
    return a.start_time < b.end_time and a.end_time > b.start_time


def duration(block) -> timedelta:
    return block.end_time - block.start_time


def shift_to(block: TimeBlock, new_start: datetime) -> TimeBlock:
    """Return a copy of `block` starting at `new_start` with its length unchanged."""
    return block.model_copy(update={
        "start_time": new_start,
        "end_time": new_start + duration(block),
    })


def overlap_window(a, b) -> Optional[Tuple[datetime, datetime]]:
    """Intersection of two intervals, or None if they do not overlap."""
    if not overlaps(a, b):
        return None
    return max(a.start_time, b.start_time), min(a.end_time, b.end_time)
