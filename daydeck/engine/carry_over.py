"""Carry-over of unfinished tasks onto a new day.

A task scheduled before today that is still todo or in progress is a
candidate. Carrying it over moves it to the target date and records where it
came from; a task carried over twice keeps its first origin.
"""

from datetime import date, datetime
from typing import List, Optional

from daydeck.models.task import Task


class CarryOverResult:
    """Tasks after carry-over, plus snapshots taken before it (for undo)."""

    def __init__(self, carried_over: List[Task], original_snapshots: List[Task]):
        self.carried_over = carried_over
        self.original_snapshots = original_snapshots


def get_carry_over_candidates(tasks: List[Task], today: date) -> List[Task]:
    return [t for t in tasks if t.scheduled_date < today and t.is_open]


def carry_over_tasks(candidates: List[Task], target_date: date, now: Optional[datetime] = None) -> CarryOverResult:
    now = now or datetime.utcnow()
    snapshots = [t.model_copy(deep=True) for t in candidates]
    carried = [
        t.model_copy(update={
            "carried_over_from": t.carried_over_from or t.scheduled_date,
            "scheduled_date": target_date,
            "updated_at": now,
        })
        for t in candidates
    ]
    return CarryOverResult(carried, snapshots)


def undo_carry_over(original_snapshots: List[Task]) -> List[Task]:
    return [t.model_copy(deep=True) for t in original_snapshots]


def clear_carry_over_badge(task: Task, now: Optional[datetime] = None) -> Task:
    """Acknowledge a carried-over task so it no longer shows its origin."""
    return task.model_copy(update={
        "carried_over_from": None,
        "updated_at": now or datetime.utcnow(),
    })
