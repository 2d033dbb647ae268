"""In-memory stores that apply edits and hand durable writes to a writer."""

from daydeck.database.database import Database
from daydeck.database.day_plan_repository import DayPlanRepository
from daydeck.database.settings_repository import SettingsRepository
from daydeck.database.task_repository import TaskRepository
from daydeck.database.template_repository import TemplateRepository
from daydeck.database.time_block_repository import TimeBlockRepository
from daydeck.store.day_plan_store import DayPlanStore
from daydeck.store.settings_store import SettingsStore
from daydeck.store.task_store import TaskStore
from daydeck.store.template_store import TemplateStore
from daydeck.store.time_block_store import TimeBlockStore
from daydeck.store.writer import BackgroundWriter, InlineWriter, create_writer


class Stores:
    """All stores over one database and one writer."""

    def __init__(self, db: Database, writer):
        self.db = db
        self.writer = writer
        self.time_blocks = TimeBlockStore(TimeBlockRepository(db), writer)
        self.tasks = TaskStore(TaskRepository(db), writer, time_blocks=self.time_blocks)
        self.time_blocks.task_exists = lambda task_id: self.tasks.get(task_id) is not None
        self.day_plans = DayPlanStore(DayPlanRepository(db), writer)
        self.templates = TemplateStore(TemplateRepository(db), writer)
        self.settings = SettingsStore(SettingsRepository(db), writer)

    def hydrate(self) -> None:
        self.time_blocks.hydrate()
        self.tasks.hydrate()
        self.templates.hydrate()
        self.settings.hydrate()


__all__ = [
    "Stores",
    "TimeBlockStore",
    "TaskStore",
    "DayPlanStore",
    "TemplateStore",
    "SettingsStore",
    "BackgroundWriter",
    "InlineWriter",
    "create_writer",
]
