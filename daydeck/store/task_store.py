"""Task store: tasks (with their subtasks) in memory, mirrored to storage.

Every change to a task, including any change to one of its subtasks, is
persisted as a save of the whole task so the subtask rows are replaced
atomically.
"""

import logging
import uuid
from datetime import date, datetime
from typing import Dict, List, Optional

from daydeck.database.task_repository import TaskRepository
from daydeck.engine.carry_over import (
    CarryOverResult,
    carry_over_tasks,
    clear_carry_over_badge,
    get_carry_over_candidates,
    undo_carry_over,
)
from daydeck.errors import SubtaskLimitError
from daydeck.models.constants import MAX_SUBTASKS
from daydeck.models.task import Subtask, Task, TaskStatus

logger = logging.getLogger(__name__)


class TaskStore:
    """In-memory tasks keyed by id.

    Lookups of unknown ids return None; mutations of unknown ids change
    nothing and return None.
    """

    def __init__(self, repository: TaskRepository, writer, time_blocks=None):
        self.repository = repository
        self.writer = writer
        # Optional TimeBlockStore whose links are cleared when a task is deleted.
        self.time_blocks = time_blocks
        self._tasks: Dict[str, Task] = {}
        self._last_carry_over: Optional[CarryOverResult] = None

    def hydrate(self) -> int:
        self._tasks = {task.id: task for task in self.repository.load_all()}
        logger.info(f"Loaded {len(self._tasks)} tasks")
        return len(self._tasks)

    @property
    def tasks(self) -> List[Task]:
        return sorted(self._tasks.values(), key=lambda t: (t.sort_order, t.created_at))

    def get(self, task_id: str) -> Optional[Task]:
        return self._tasks.get(task_id)

    def tasks_for_date(self, day: date) -> List[Task]:
        return [t for t in self.tasks if t.scheduled_date == day]

    def incomplete_before(self, day: date) -> List[Task]:
        return get_carry_over_candidates(self.tasks, day)

    def _save(self, task: Task) -> Task:
        self._tasks[task.id] = task
        self.writer.submit(f"save task {task.id}", lambda: self.repository.save(task))
        return task

    def _save_all(self, tasks: List[Task]) -> None:
        for task in tasks:
            self._tasks[task.id] = task

        def write():
            for task in tasks:
                self.repository.save(task)

        if tasks:
            self.writer.submit(f"save {len(tasks)} tasks", write)

    def add(self, task: Task) -> Task:
        subtasks = [s.model_copy(update={"parent_task_id": task.id}) for s in task.subtasks]
        return self._save(task.model_copy(update={"subtasks": subtasks}))

    def update(self, task_id: str, **patch) -> Optional[Task]:
        """Merge `patch` into the task and re-validate it. `id` and `created_at` are fixed."""
        task = self._tasks.get(task_id)
        if task is None:
            logger.debug(f"Update ignored, task {task_id} not found")
            return None
        patch.pop("id", None)
        patch.pop("created_at", None)
        patch.setdefault("updated_at", datetime.utcnow())
        updated = Task.model_validate({**task.model_dump(), **patch})
        return self._save(updated)

    def delete(self, task_id: str) -> bool:
        if self._tasks.pop(task_id, None) is None:
            logger.debug(f"Delete ignored, task {task_id} not found")
            return False
        if self.time_blocks is not None:
            self.time_blocks.unlink_task(task_id)
        self.writer.submit(f"delete task {task_id}", lambda: self.repository.delete(task_id))
        return True

    def set_status(self, task_id: str, status: TaskStatus) -> Optional[Task]:
        """Change status; entering done stamps completed_at, leaving it clears it."""
        task = self._tasks.get(task_id)
        if task is None:
            return None
        now = datetime.utcnow()
        status = TaskStatus(status)
        completed_at = task.completed_at
        if status == TaskStatus.DONE:
            completed_at = completed_at or now
        else:
            completed_at = None
        return self.update(task_id, status=status, completed_at=completed_at, updated_at=now)

    def add_subtask(self, task_id: str, title: str, subtask_id: Optional[str] = None) -> Optional[Task]:
        task = self._tasks.get(task_id)
        if task is None:
            return None
        if len(task.subtasks) >= MAX_SUBTASKS:
            raise SubtaskLimitError(task_id, MAX_SUBTASKS)
        subtask = Subtask(id=subtask_id or str(uuid.uuid4()), title=title, parent_task_id=task_id)
        return self.update(task_id, subtasks=[*task.subtasks, subtask])

    def toggle_subtask(self, task_id: str, subtask_id: str) -> Optional[Task]:
        task = self._tasks.get(task_id)
        if task is None or not any(s.id == subtask_id for s in task.subtasks):
            return None
        subtasks = [
            s.model_copy(update={"completed": not s.completed}) if s.id == subtask_id else s
            for s in task.subtasks
        ]
        return self.update(task_id, subtasks=subtasks)

    def remove_subtask(self, task_id: str, subtask_id: str) -> Optional[Task]:
        task = self._tasks.get(task_id)
        if task is None or not any(s.id == subtask_id for s in task.subtasks):
            return None
        return self.update(task_id, subtasks=[s for s in task.subtasks if s.id != subtask_id])

    def carry_over(self, today: date, target_date: Optional[date] = None) -> CarryOverResult:
        """Move every open task from before `today` onto `target_date` (default today)."""
        candidates = self.incomplete_before(today)
        result = carry_over_tasks(candidates, target_date or today)
        self._save_all(result.carried_over)
        self._last_carry_over = result
        if result.carried_over:
            logger.info(f"Carried over {len(result.carried_over)} tasks to {target_date or today}")
        return result

    def undo_carry_over(self) -> List[Task]:
        """Restore the tasks touched by the last carry-over. Empty if there is none."""
        if self._last_carry_over is None:
            return []
        restored = undo_carry_over(self._last_carry_over.original_snapshots)
        self._last_carry_over = None
        self._save_all(restored)
        return restored

    def clear_carry_over_badge(self, task_id: str) -> Optional[Task]:
        task = self._tasks.get(task_id)
        if task is None:
            return None
        return self._save(clear_carry_over_badge(task))
