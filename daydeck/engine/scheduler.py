"""Scheduling engine for DayDeck.

`DaySchedule` owns the working set of time blocks and keeps it free of
overlaps. Edits (`insert`, `update`, `delete`) never resolve overlaps on their
own; resolution is an explicit pass run after a committed move, so a drag
gesture's intermediate positions never reach the schedule.

Resolution is a single left-to-right pass over the blocks sorted by start
time. The pass tracks the latest end of every block placed so far; a block
starting before it is pushed to start there, keeping its duration. A chain of
overlapping blocks therefore collapses into a back-to-back run anchored at the
first block that did not move, and a short block nested inside a long one is
pushed past the long one. Blocks may end up past the end of the day; only
the UI clamps placement.
"""

import logging
from datetime import date, datetime
from enum import Enum
from typing import Iterable, List, Optional

from daydeck.engine.interval import shift_to
from daydeck.errors import DuplicateBlockError
from daydeck.models.time_block import TimeBlock

logger = logging.getLogger(__name__)


class MutationStatus(str, Enum):
    APPLIED = "applied"
    NOT_FOUND = "not_found"


class MutationResult:
    """Outcome of a schedule edit.

    `dirty` lists every block whose stored state must be rewritten, including
    siblings shifted by overlap resolution.
    """

    def __init__(
        self,
        status: MutationStatus,
        block: Optional[TimeBlock] = None,
        dirty: Optional[List[TimeBlock]] = None,
    ):
        self.status = status
        self.block = block
        self.dirty: List[TimeBlock] = dirty or []

    @property
    def found(self) -> bool:
        return self.status == MutationStatus.APPLIED

    @classmethod
    def not_found(cls) -> "MutationResult":
        return cls(MutationStatus.NOT_FOUND)


class DaySchedule:
    """Ordered working set of time blocks."""

    def __init__(self, blocks: Optional[Iterable[TimeBlock]] = None):
        self._blocks: List[TimeBlock] = []
        for block in blocks or []:
            self.insert(block)

    @property
    def blocks(self) -> List[TimeBlock]:
        """Blocks in working order (sorted by start after each resolution pass)."""
        return list(self._blocks)

    def __len__(self) -> int:
        return len(self._blocks)

    def _index_of(self, block_id: str) -> Optional[int]:
        for i, block in enumerate(self._blocks):
            if block.id == block_id:
                return i
        return None

    def get(self, block_id: str) -> Optional[TimeBlock]:
        idx = self._index_of(block_id)
        return self._blocks[idx] if idx is not None else None

    def blocks_on(self, day: date) -> List[TimeBlock]:
        """Blocks starting on `day`, sorted by start time."""
        return sorted(
            (b for b in self._blocks if b.start_time.date() == day),
            key=lambda b: b.start_time,
        )

    def insert(self, block: TimeBlock) -> MutationResult:
        if self._index_of(block.id) is not None:
            raise DuplicateBlockError(block.id)
        self._blocks.append(block)
        return MutationResult(MutationStatus.APPLIED, block, [block])

    def update(self, block_id: str, **patch) -> MutationResult:
        """Merge `patch` into the block. The result is re-validated (start < end)."""
        idx = self._index_of(block_id)
        if idx is None:
            logger.debug(f"Update ignored, time block {block_id} not found")
            return MutationResult.not_found()
        patch.pop("id", None)
        updated = TimeBlock.model_validate({**self._blocks[idx].model_dump(), **patch})
        self._blocks[idx] = updated
        return MutationResult(MutationStatus.APPLIED, updated, [updated])

    def delete(self, block_id: str) -> MutationResult:
        idx = self._index_of(block_id)
        if idx is None:
            logger.debug(f"Delete ignored, time block {block_id} not found")
            return MutationResult.not_found()
        removed = self._blocks.pop(idx)
        return MutationResult(MutationStatus.APPLIED, removed)

    def move(self, block_id: str, new_start: datetime, new_end: datetime) -> MutationResult:
        """Place the block at a new interval, then resolve overlaps.

        The moved block is always part of `dirty`, followed by any block the
        resolution pass shifted.
        """
        result = self.update(block_id, start_time=new_start, end_time=new_end)
        if not result.found:
            return result
        shifted = self.resolve_overlaps()
        moved = self.get(block_id)
        dirty = [moved] + [b for b in shifted if b.id != block_id]
        return MutationResult(MutationStatus.APPLIED, moved, dirty)

    def clear_task_link(self, task_id: str) -> List[TimeBlock]:
        """Drop the task reference from every block linked to `task_id`."""
        changed: List[TimeBlock] = []
        for i, block in enumerate(self._blocks):
            if block.task_id == task_id:
                self._blocks[i] = block.model_copy(update={"task_id": None})
                changed.append(self._blocks[i])
        return changed

    def resolve_overlaps(self) -> List[TimeBlock]:
        """Sort by start time and push overlapping blocks forward.

        Returns the blocks whose interval changed, in timeline order.
        """
        if len(self._blocks) < 2:
            return []

        ordered = sorted(self._blocks, key=lambda b: b.start_time)
        dirty: List[TimeBlock] = []
        # Latest end among all blocks placed so far.
        frontier = ordered[0].end_time

        for i in range(1, len(ordered)):
            curr = ordered[i]
            if curr.start_time < frontier:
                curr = shift_to(curr, frontier)
                ordered[i] = curr
                dirty.append(curr)
            frontier = max(frontier, curr.end_time)

        self._blocks = ordered
        if dirty:
            logger.debug(f"Overlap resolution shifted {len(dirty)} time blocks")
        return dirty
