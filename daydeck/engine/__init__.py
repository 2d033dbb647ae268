"""Scheduling engine for DayDeck."""

from daydeck.engine.interval import overlaps, duration, shift_to, overlap_window
from daydeck.engine.snap import snap, clamp_position, clamp_length, TimelineGeometry
from daydeck.engine.scheduler import DaySchedule, MutationResult, MutationStatus
from daydeck.engine.conflicts import Conflict, detect_conflicts, has_conflict, conflicting_event_ids
from daydeck.engine.carry_over import (
    CarryOverResult,
    get_carry_over_candidates,
    carry_over_tasks,
    undo_carry_over,
    clear_carry_over_badge,
)
from daydeck.engine.templates import instantiate_template, template_from_blocks, build_default_templates
from daydeck.engine.quiet_hours import is_in_quiet_hours

__all__ = [
    "overlaps",
    "duration",
    "shift_to",
    "overlap_window",
    "snap",
    "clamp_position",
    "clamp_length",
    "TimelineGeometry",
    "DaySchedule",
    "MutationResult",
    "MutationStatus",
    "Conflict",
    "detect_conflicts",
    "has_conflict",
    "conflicting_event_ids",
    "CarryOverResult",
    "get_carry_over_candidates",
    "carry_over_tasks",
    "undo_carry_over",
    "clear_carry_over_badge",
    "instantiate_template",
    "template_from_blocks",
    "build_default_templates",
    "is_in_quiet_hours",
]
