"""Repository for Task/Subtask database operations.

A task and its subtasks are persisted as one unit: every save rewrites the
full subtask list inside the same transaction as the task row, so a reader
never observes a partial, duplicated or orphaned subtask set.
"""

import logging
from collections import defaultdict
from typing import Dict, List, Optional

from daydeck.database.database import Database
from daydeck.database.models import SubtaskDB, TaskDB, TimeBlockDB
from daydeck.models.task import Task

logger = logging.getLogger(__name__)


class TaskRepository:
    """Repository for Task database operations."""

    def __init__(self, db: Database):
        self.db = db

    def load_all(self) -> List[Task]:
        """All tasks ordered by sort_order, ties broken by creation time."""
        session = self.db.session()
        try:
            task_rows = (
                session.query(TaskDB)
                .order_by(TaskDB.sort_order.asc(), TaskDB.created_at.asc())
                .all()
            )
            if not task_rows:
                return []
            subtask_rows = (
                session.query(SubtaskDB)
                .order_by(SubtaskDB.parent_task_id, SubtaskDB.position)
                .all()
            )
            by_parent: Dict[str, List[SubtaskDB]] = defaultdict(list)
            for row in subtask_rows:
                by_parent[row.parent_task_id].append(row)
            return [row.to_pydantic(by_parent.get(row.id, [])) for row in task_rows]
        finally:
            session.close()

    def get(self, task_id: str) -> Optional[Task]:
        session = self.db.session()
        try:
            row = session.get(TaskDB, task_id)
            if row is None:
                return None
            subtasks = (
                session.query(SubtaskDB)
                .filter(SubtaskDB.parent_task_id == task_id)
                .order_by(SubtaskDB.position)
                .all()
            )
            return row.to_pydantic(subtasks)
        finally:
            session.close()

    def save(self, task: Task) -> None:
        """Upsert the task and replace its subtasks, atomically.

        The stored created_at is kept when the task already exists.
        """
        try:
            with self.db.transaction() as session:
                incoming = TaskDB.from_pydantic(task)
                row = session.get(TaskDB, task.id)
                if row is None:
                    session.add(incoming)
                else:
                    for field in TaskDB.MUTABLE_FIELDS:
                        setattr(row, field, getattr(incoming, field))
                # The task row must exist before subtasks reference it.
                session.flush()

                session.query(SubtaskDB).filter(
                    SubtaskDB.parent_task_id == task.id
                ).delete(synchronize_session=False)
                session.add_all([
                    SubtaskDB.from_pydantic(subtask, task.id, position)
                    for position, subtask in enumerate(task.subtasks)
                ])
            logger.debug(f"Saved task {task.id} with {len(task.subtasks)} subtasks: {task.title[:50]}")
        except Exception as e:
            logger.error(f"Failed to save task {task.id}: {type(e).__name__}: {str(e)}")
            raise

    def delete(self, task_id: str) -> bool:
        """Delete a task with its subtasks; linked time blocks keep existing, unlinked.

        Does not rely on the storage layer enforcing foreign key actions.
        """
        try:
            with self.db.transaction() as session:
                session.query(SubtaskDB).filter(
                    SubtaskDB.parent_task_id == task_id
                ).delete(synchronize_session=False)
                session.query(TimeBlockDB).filter(
                    TimeBlockDB.task_id == task_id
                ).update({TimeBlockDB.task_id: None}, synchronize_session=False)
                deleted = session.query(TaskDB).filter(TaskDB.id == task_id).delete(synchronize_session=False)
            logger.debug(f"Deleted task {task_id}")
            return bool(deleted)
        except Exception as e:
            logger.error(f"Failed to delete task {task_id}: {type(e).__name__}: {str(e)}")
            raise
