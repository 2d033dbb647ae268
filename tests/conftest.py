"""Pytest fixtures and configuration for DayDeck tests."""

import pytest
from datetime import date, datetime
import uuid

from fastapi.testclient import TestClient

from daydeck.api.app import create_app
from daydeck.database.database import Database
from daydeck.database.day_plan_repository import DayPlanRepository
from daydeck.database.migrations import run_migrations
from daydeck.database.settings_repository import SettingsRepository
from daydeck.database.task_repository import TaskRepository
from daydeck.database.template_repository import TemplateRepository
from daydeck.database.time_block_repository import TimeBlockRepository
from daydeck.models.task import Task, TaskStatus, Priority
from daydeck.models.time_block import TimeBlock, TimeBlockType
from daydeck.store import Stores, InlineWriter


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture
def empty_db():
    """An in-memory database with no schema yet."""
    database = Database(TEST_DATABASE_URL)
    try:
        yield database
    finally:
        database.dispose()


@pytest.fixture
def db(empty_db):
    """An in-memory database migrated to the current schema version.

    Uses StaticPool (see get_engine_kwargs), so every session shares the one
    connection and sees the same data.
    """
    run_migrations(empty_db)
    return empty_db


@pytest.fixture
def task_repository(db):
    return TaskRepository(db)


@pytest.fixture
def time_block_repository(db):
    return TimeBlockRepository(db)


@pytest.fixture
def day_plan_repository(db):
    return DayPlanRepository(db)


@pytest.fixture
def template_repository(db):
    return TemplateRepository(db)


@pytest.fixture
def settings_repository(db):
    return SettingsRepository(db)


@pytest.fixture
def writer():
    """Writes run synchronously so tests can read storage right after an edit."""
    return InlineWriter()


@pytest.fixture
def stores(db, writer):
    all_stores = Stores(db, writer)
    all_stores.hydrate()
    return all_stores


@pytest.fixture
def test_day():
    return date(2024, 1, 15)


@pytest.fixture
def sample_task_base(test_day):
    """Base task data for creating test tasks.

    Returns a dict with default task attributes that can be overridden.
    """
    now = datetime.utcnow()
    return {
        "id": str(uuid.uuid4()),
        "title": "Test Task",
        "description": "Test description",
        "status": TaskStatus.TODO,
        "priority": Priority.MEDIUM,
        "scheduled_date": test_day,
        "scheduled_time": None,
        "estimated_minutes": 30,
        "sort_order": 0,
        "recurrence": None,
        "notifications": [],
        "subtasks": [],
        "created_at": now,
        "updated_at": now,
        "completed_at": None,
        "carried_over_from": None,
    }


@pytest.fixture
def sample_task(sample_task_base):
    """Create a sample Task object for testing."""
    return Task(**sample_task_base)


@pytest.fixture
def make_block(test_day):
    """Factory for time blocks on the test day, given HH:MM bounds."""
    def _make(start: str, end: str, block_id=None, **overrides):
        start_h, start_m = (int(p) for p in start.split(":"))
        end_h, end_m = (int(p) for p in end.split(":"))
        data = {
            "id": block_id or str(uuid.uuid4()),
            "task_id": None,
            "title": f"Block {start}",
            "start_time": datetime(test_day.year, test_day.month, test_day.day, start_h, start_m),
            "end_time": datetime(test_day.year, test_day.month, test_day.day, end_h, end_m),
            "color": "#818CF8",
            "type": TimeBlockType.TASK,
        }
        data.update(overrides)
        return TimeBlock(**data)
    return _make


@pytest.fixture
def test_client(db, writer):
    """FastAPI test client over the in-memory database, with inline writes."""
    app = create_app(database=db, writer=writer)
    with TestClient(app) as client:
        yield client
