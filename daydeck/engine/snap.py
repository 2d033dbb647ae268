"""Snap-to-grid and clamping math for dragging and resizing blocks.

All functions are pure and unit-free: the caller decides what a unit is
(pixels on the timeline, minutes, ...). `TimelineGeometry` binds them to a
concrete pixel scale and converts committed gestures into absolute times.
"""

import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Tuple

from daydeck.models.constants import (
    MIN_BLOCK_DURATION_MINUTES,
    SNAP_MINUTES,
    TIMELINE_END_HOUR,
    TIMELINE_HOUR_HEIGHT,
    TIMELINE_START_HOUR,
)


def snap(value: float, grid_size: float) -> float:
    """Round `value` to the nearest multiple of `grid_size` (halves round up)."""
    if grid_size <= 0:
        raise ValueError("grid_size must be positive")
    return math.floor(value / grid_size + 0.5) * grid_size


def clamp_position(top: float, block_length: float, total_length: float) -> float:
    """Bound a block's leading edge to [0, total_length - block_length]."""
    return max(0, min(top, total_length - block_length))


def clamp_length(length: float, top: float, total_length: float, min_length: float) -> float:
    """Bound a resized length to [min_length, total_length - top]."""
    return max(min_length, min(length, total_length - top))


@dataclass(frozen=True)
class TimelineGeometry:
    """Pixel scale of the day timeline."""

    hour_height: float = TIMELINE_HOUR_HEIGHT
    start_hour: int = TIMELINE_START_HOUR
    end_hour: int = TIMELINE_END_HOUR
    snap_minutes: int = SNAP_MINUTES
    min_duration_minutes: int = MIN_BLOCK_DURATION_MINUTES

    @property
    def snap_px(self) -> float:
        return self.minutes_to_length(self.snap_minutes)

    @property
    def min_length(self) -> float:
        return self.minutes_to_length(self.min_duration_minutes)

    @property
    def total_length(self) -> float:
        return (self.end_hour - self.start_hour) * self.hour_height

    def minutes_to_length(self, minutes: float) -> float:
        return minutes / 60 * self.hour_height

    def length_to_minutes(self, length: float) -> float:
        return length / self.hour_height * 60

    def day_origin(self, day: date) -> datetime:
        return datetime.combine(day, time(self.start_hour, 0))

    def offset_to_time(self, day: date, offset: float) -> datetime:
        return self.day_origin(day) + timedelta(minutes=self.length_to_minutes(offset))

    def time_to_offset(self, moment: datetime) -> float:
        minutes = (moment - self.day_origin(moment.date())).total_seconds() / 60
        return self.minutes_to_length(minutes)

    def block_position(self, start_time: datetime, end_time: datetime) -> Tuple[float, float]:
        """(top, length) of an interval on this timeline."""
        top = self.time_to_offset(start_time)
        length = self.minutes_to_length((end_time - start_time).total_seconds() / 60)
        return top, length

    def preview_move(self, top: float, block_length: float) -> float:
        """Where a block being dragged would land. Never touches schedule state."""
        return clamp_position(snap(top, self.snap_px), block_length, self.total_length)

    def preview_resize(self, length: float, top: float) -> float:
        return clamp_length(snap(length, self.snap_px), top, self.total_length, self.min_length)

    def commit_move(self, start_time: datetime, end_time: datetime, new_top: float) -> Tuple[datetime, datetime]:
        """Translate a dropped block's pixel offset into a new [start, end) interval.

        The block keeps its duration; only the placement is snapped and clamped.
        """
        _, length = self.block_position(start_time, end_time)
        top = self.preview_move(new_top, length)
        new_start = self.offset_to_time(start_time.date(), top)
        return new_start, new_start + (end_time - start_time)

    def commit_resize(self, start_time: datetime, new_length: float) -> datetime:
        """Translate a resized block's pixel length into a new end time."""
        top = self.time_to_offset(start_time)
        length = self.preview_resize(new_length, top)
        return start_time + timedelta(minutes=self.length_to_minutes(length))
