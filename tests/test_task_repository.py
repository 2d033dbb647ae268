"""Tests for TaskRepository: atomic task + subtask persistence."""

import logging
from datetime import date, datetime, timedelta
import uuid

import pytest
from sqlalchemy.exc import IntegrityError

from daydeck.database.models import SubtaskDB, TaskDB
from daydeck.models.task import Recurrence, Subtask, Task, TaskNotification


def _subtasks(task_id, *titles):
    return [Subtask(id=str(uuid.uuid4()), title=title, parent_task_id=task_id) for title in titles]


class TestTaskRepository:
    """Test TaskRepository save/load/delete."""

    def test_save_and_get(self, task_repository, sample_task):
        task_repository.save(sample_task)
        retrieved = task_repository.get(sample_task.id)

        assert retrieved is not None
        assert retrieved.id == sample_task.id
        assert retrieved.title == sample_task.title
        assert retrieved.status == "todo"
        assert retrieved.scheduled_date == sample_task.scheduled_date

    def test_get_nonexistent_task(self, task_repository):
        """Test retrieving a nonexistent task returns None."""
        assert task_repository.get("nonexistent-id") is None

    def test_repeated_saves_do_not_duplicate_subtasks(self, task_repository, sample_task_base):
        """Saving N subtasks any number of times loads exactly those N."""
        task_id = sample_task_base["id"]
        task = Task(**{**sample_task_base, "subtasks": _subtasks(task_id, "one", "two", "three")})

        for _ in range(4):
            task_repository.save(task)

        loaded = task_repository.get(task_id)
        assert [s.title for s in loaded.subtasks] == ["one", "two", "three"]
        assert [s.id for s in loaded.subtasks] == [s.id for s in task.subtasks]
        assert all(s.parent_task_id == task_id for s in loaded.subtasks)

    def test_save_replaces_subtask_list(self, task_repository, sample_task_base):
        task_id = sample_task_base["id"]
        task = Task(**{**sample_task_base, "subtasks": _subtasks(task_id, "one", "two", "three")})
        task_repository.save(task)

        trimmed = task.model_copy(update={"subtasks": [task.subtasks[2], task.subtasks[0]]})
        task_repository.save(trimmed)

        loaded = task_repository.get(task_id)
        assert [s.title for s in loaded.subtasks] == ["three", "one"]

    def test_failed_save_leaves_previous_state(self, task_repository, sample_task_base):
        """A save that fails part-way changes nothing."""
        task_id = sample_task_base["id"]
        task = Task(**{**sample_task_base, "subtasks": _subtasks(task_id, "one", "two")})
        task_repository.save(task)

        # Bypasses validation so the insert hits the NOT NULL constraint.
        untitled = Subtask.model_construct(id="bad", title=None, completed=False, parent_task_id=task_id)
        broken = task.model_copy(update={"title": "Changed", "subtasks": [untitled]})
        with pytest.raises(IntegrityError):
            task_repository.save(broken)

        loaded = task_repository.get(task_id)
        assert loaded.title == "Test Task"
        assert [s.title for s in loaded.subtasks] == ["one", "two"]

    def test_save_preserves_created_at(self, task_repository, sample_task):
        task_repository.save(sample_task)
        later = datetime.utcnow() + timedelta(days=1)
        task_repository.save(sample_task.model_copy(update={"created_at": later, "title": "Updated"}))

        loaded = task_repository.get(sample_task.id)
        assert loaded.title == "Updated"
        assert loaded.created_at == sample_task.created_at

    def test_load_all_orders_by_sort_order_then_creation(self, task_repository, sample_task_base):
        now = datetime.utcnow()
        task_repository.save(Task(**{**sample_task_base, "id": "c", "sort_order": 1, "created_at": now}))
        task_repository.save(Task(**{**sample_task_base, "id": "b", "sort_order": 0, "created_at": now}))
        task_repository.save(Task(**{**sample_task_base, "id": "a", "sort_order": 0, "created_at": now - timedelta(minutes=1)}))

        assert [t.id for t in task_repository.load_all()] == ["a", "b", "c"]

    def test_structured_fields_round_trip(self, task_repository, sample_task_base):
        task = Task(**{
            **sample_task_base,
            "recurrence": Recurrence(frequency="weekly", interval=2, days_of_week=[1, 3]),
            "notifications": [TaskNotification(id="n1", offset_minutes=10)],
            "carried_over_from": date(2024, 1, 10),
        })
        task_repository.save(task)

        loaded = task_repository.get(task.id)
        assert loaded.recurrence.frequency == "weekly"
        assert loaded.recurrence.days_of_week == [1, 3]
        assert loaded.notifications[0].offset_minutes == 10
        assert loaded.carried_over_from == date(2024, 1, 10)

    def test_corrupt_json_loads_as_empty(self, db, task_repository, sample_task, caplog):
        task_repository.save(sample_task)
        with db.transaction() as session:
            row = session.get(TaskDB, sample_task.id)
            row.notifications_json = "{not json"
            row.recurrence_json = "[1, 2"

        with caplog.at_level(logging.WARNING):
            loaded = task_repository.get(sample_task.id)

        assert loaded.notifications == []
        assert loaded.recurrence is None
        assert "notifications_json" in caplog.text


class TestTaskDelete:
    """Test deleting a task with subtasks and linked blocks."""

    def test_delete_removes_subtasks_and_unlinks_blocks(
        self, db, task_repository, time_block_repository, sample_task_base, make_block
    ):
        task_id = sample_task_base["id"]
        task_repository.save(Task(**{**sample_task_base, "subtasks": _subtasks(task_id, "one", "two")}))
        block = make_block("09:00", "10:00", "linked", task_id=task_id)
        time_block_repository.upsert(block)

        assert task_repository.delete(task_id) is True

        assert task_repository.get(task_id) is None
        session = db.session()
        try:
            assert session.query(SubtaskDB).filter(SubtaskDB.parent_task_id == task_id).count() == 0
        finally:
            session.close()
        blocks = time_block_repository.load_all()
        assert [b.id for b in blocks] == ["linked"]
        assert blocks[0].task_id is None

    def test_delete_missing_task_returns_false(self, task_repository):
        assert task_repository.delete("nonexistent-id") is False
