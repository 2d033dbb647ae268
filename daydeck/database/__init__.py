"""Durable storage for DayDeck (SQLAlchemy over SQLite by default)."""

from daydeck.database.database import Base, Database, build_engine, get_engine_kwargs
from daydeck.database.migrations import CURRENT_VERSION, init_db, run_migrations
from daydeck.database.task_repository import TaskRepository
from daydeck.database.time_block_repository import TimeBlockRepository
from daydeck.database.day_plan_repository import DayPlanRepository
from daydeck.database.template_repository import TemplateRepository
from daydeck.database.settings_repository import SettingsRepository

__all__ = [
    "Base",
    "Database",
    "build_engine",
    "get_engine_kwargs",
    "CURRENT_VERSION",
    "init_db",
    "run_migrations",
    "TaskRepository",
    "TimeBlockRepository",
    "DayPlanRepository",
    "TemplateRepository",
    "SettingsRepository",
]
