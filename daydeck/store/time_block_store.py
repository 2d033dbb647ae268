"""Time block store: the schedule in memory, mirrored to storage.

Every edit is applied to the `DaySchedule` synchronously. The blocks the edit
touched (for a move, every sibling shifted by overlap resolution as well) are
then written through the writer. Drag and resize previews never reach this
store; only committed gestures do.
"""

import logging
from datetime import date, datetime
from typing import Callable, List, Optional

from daydeck.database.time_block_repository import TimeBlockRepository
from daydeck.engine.scheduler import DaySchedule, MutationResult
from daydeck.engine.snap import TimelineGeometry
from daydeck.errors import UnknownTaskError
from daydeck.models.time_block import TimeBlock

logger = logging.getLogger(__name__)


class TimeBlockStore:
    def __init__(self, repository: TimeBlockRepository, writer, geometry: Optional[TimelineGeometry] = None):
        self.repository = repository
        self.writer = writer
        self.geometry = geometry or TimelineGeometry()
        self.schedule = DaySchedule()
        # Callable(task_id) -> bool; blocks may only link to known tasks.
        self.task_exists: Optional[Callable[[str], bool]] = None

    def hydrate(self) -> int:
        """Replace the in-memory schedule with what storage holds."""
        self.schedule = DaySchedule(self.repository.load_all())
        logger.info(f"Loaded {len(self.schedule)} time blocks")
        return len(self.schedule)

    def blocks_for_date(self, day: date) -> List[TimeBlock]:
        return self.schedule.blocks_on(day)

    def get(self, block_id: str) -> Optional[TimeBlock]:
        return self.schedule.get(block_id)

    def _persist(self, result: MutationResult) -> MutationResult:
        if result.found and result.dirty:
            dirty = list(result.dirty)
            self.writer.submit(
                f"upsert {len(dirty)} time blocks",
                lambda: self.repository.upsert_many(dirty),
            )
        return result

    def _check_task_link(self, task_id: Optional[str]) -> None:
        if task_id is not None and self.task_exists is not None and not self.task_exists(task_id):
            raise UnknownTaskError(task_id)

    def add(self, block: TimeBlock) -> MutationResult:
        """Add a block as-is. Overlaps are left for the next committed move.

        Raises:
            UnknownTaskError: the block links to a task that does not exist
        """
        self._check_task_link(block.task_id)
        return self._persist(self.schedule.insert(block))

    def add_many(self, blocks: List[TimeBlock]) -> List[TimeBlock]:
        for block in blocks:
            self._check_task_link(block.task_id)
        added = [self.schedule.insert(block).block for block in blocks]
        if added:
            self.writer.submit(
                f"upsert {len(added)} time blocks",
                lambda: self.repository.upsert_many(added),
            )
        return added

    def update(self, block_id: str, **patch) -> MutationResult:
        self._check_task_link(patch.get("task_id"))
        return self._persist(self.schedule.update(block_id, **patch))

    def delete(self, block_id: str) -> MutationResult:
        result = self.schedule.delete(block_id)
        if result.found:
            self.writer.submit(f"delete time block {block_id}", lambda: self.repository.delete(block_id))
        return result

    def move(self, block_id: str, new_start: datetime, new_end: datetime) -> MutationResult:
        """Commit a move and persist the block plus every sibling resolution shifted."""
        result = self.schedule.move(block_id, new_start, new_end)
        if result.found:
            logger.debug(f"Moved time block {block_id}, {len(result.dirty)} blocks to persist")
        return self._persist(result)

    def commit_drop(self, block_id: str, new_top: float) -> MutationResult:
        """Commit a drag that ended at pixel offset `new_top` on the block's day."""
        block = self.schedule.get(block_id)
        if block is None:
            return MutationResult.not_found()
        new_start, new_end = self.geometry.commit_move(block.start_time, block.end_time, new_top)
        return self.move(block_id, new_start, new_end)

    def commit_resize(self, block_id: str, new_length: float) -> MutationResult:
        """Commit a resize that ended at pixel length `new_length`."""
        block = self.schedule.get(block_id)
        if block is None:
            return MutationResult.not_found()
        new_end = self.geometry.commit_resize(block.start_time, new_length)
        return self.move(block_id, block.start_time, new_end)

    def resolve_overlaps(self) -> List[TimeBlock]:
        shifted = self.schedule.resolve_overlaps()
        if shifted:
            self.writer.submit(
                f"upsert {len(shifted)} time blocks",
                lambda: self.repository.upsert_many(shifted),
            )
        return shifted

    def unlink_task(self, task_id: str) -> List[TimeBlock]:
        """Clear the task link in memory; storage clears it when the task row is deleted."""
        return self.schedule.clear_task_link(task_id)
