"""Conflicts between time blocks and read-only calendar events.

Calendar events are an overlay: they are reported, never moved.
"""

from datetime import datetime
from typing import List

from pydantic import BaseModel

from daydeck.engine.interval import overlap_window
from daydeck.models.calendar_event import CalendarEvent
from daydeck.models.time_block import TimeBlock


class Conflict(BaseModel):
    time_block_id: str
    calendar_event_id: str
    overlap_start_time: datetime
    overlap_end_time: datetime


def detect_conflicts(time_blocks: List[TimeBlock], calendar_events: List[CalendarEvent]) -> List[Conflict]:
    """Every (block, event) pair whose intervals overlap, with the shared window."""
    conflicts: List[Conflict] = []
    for block in time_blocks:
        for event in calendar_events:
            window = overlap_window(block, event)
            if window is None:
                continue
            conflicts.append(Conflict(
                time_block_id=block.id,
                calendar_event_id=event.id,
                overlap_start_time=window[0],
                overlap_end_time=window[1],
            ))
    return conflicts


def has_conflict(block_id: str, conflicts: List[Conflict]) -> bool:
    return any(c.time_block_id == block_id for c in conflicts)


def conflicting_event_ids(block_id: str, conflicts: List[Conflict]) -> List[str]:
    return [c.calendar_event_id for c in conflicts if c.time_block_id == block_id]
