"""SQLAlchemy database models for DayDeck.

Structured sub-data (recurrence, notifications, id lists, template blocks) is
stored as JSON text and converted only here, at the storage boundary. A
column that fails to decode loads as an empty value instead of failing the
whole load.
"""

import json
import logging
from datetime import datetime
from typing import Any, Callable, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError
from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, String, Table, Text

from daydeck.database.database import Base
from daydeck.models.day_plan import DayPlan
from daydeck.models.task import Recurrence, Subtask, Task, TaskNotification, TaskStatus, Priority
from daydeck.models.template import Template, TemplateBlock
from daydeck.models.time_block import TimeBlock, TimeBlockType

logger = logging.getLogger(__name__)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


def enum_to_value(enum_obj: Union[str, T]) -> str:
    """Convert enum to string value (handles both enum and string)."""
    if hasattr(enum_obj, "value"):
        return enum_obj.value
    return str(enum_obj)


def value_to_enum(value: str, enum_class: Type[T], default: T) -> T:
    """Convert string to enum with fallback to default."""
    if not value:
        return default
    try:
        return enum_class(value.lower())
    except (ValueError, AttributeError):
        return default


def encode_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def decode_json(raw: Optional[str], default: Callable[[], Any], column: str) -> Any:
    """Parse a JSON column, falling back to `default()` on missing or corrupt content."""
    if raw is None or raw == "":
        return default()
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as e:
        logger.warning(f"Corrupt JSON in {column}, using empty value: {type(e).__name__}: {str(e)}")
        return default()


def decode_model_list(raw: Optional[str], model: Type[M], column: str) -> List[M]:
    data = decode_json(raw, list, column)
    if not isinstance(data, list):
        logger.warning(f"Expected a JSON array in {column}, got {type(data).__name__}")
        return []
    try:
        return [model.model_validate(item) for item in data]
    except ValidationError as e:
        logger.warning(f"Invalid entries in {column}, using empty list: {e.error_count()} errors")
        return []


def decode_id_list(raw: Optional[str], column: str) -> List[str]:
    data = decode_json(raw, list, column)
    if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
        logger.warning(f"Expected a JSON array of ids in {column}")
        return []
    return data


def decode_recurrence(raw: Optional[str]) -> Optional[Recurrence]:
    data = decode_json(raw, lambda: None, "tasks.recurrence_json")
    if data is None:
        return None
    try:
        return Recurrence.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Invalid recurrence_json, dropping it: {e.error_count()} errors")
        return None


class TaskDB(Base):
    """Database model for Task (subtasks live in `subtasks`)."""

    __tablename__ = "tasks"

    id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    status = Column(String, nullable=False, default=TaskStatus.TODO.value)
    priority = Column(String, nullable=False, default=Priority.MEDIUM.value)
    scheduled_date = Column(Date, nullable=False, index=True)
    scheduled_time = Column(String, nullable=True)
    estimated_minutes = Column(Integer, nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)

    # JSON text columns
    recurrence_json = Column(Text, nullable=True)
    notifications_json = Column(Text, nullable=True, default="[]")

    # Timestamps
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)
    completed_at = Column(DateTime, nullable=True)

    carried_over_from = Column(Date, nullable=True)

    # Columns rewritten on upsert; created_at is deliberately absent.
    MUTABLE_FIELDS = (
        "title", "description", "status", "priority", "scheduled_date", "scheduled_time",
        "estimated_minutes", "sort_order", "recurrence_json", "notifications_json",
        "updated_at", "completed_at", "carried_over_from",
    )

    def to_pydantic(self, subtasks: Optional[List["SubtaskDB"]] = None) -> Task:
        """Convert database model to Pydantic model."""
        return Task(
            id=self.id,
            title=self.title,
            description=self.description or "",
            status=value_to_enum(self.status, TaskStatus, TaskStatus.TODO),
            priority=value_to_enum(self.priority, Priority, Priority.MEDIUM),
            scheduled_date=self.scheduled_date,
            scheduled_time=self.scheduled_time,
            estimated_minutes=self.estimated_minutes,
            sort_order=self.sort_order,
            recurrence=decode_recurrence(self.recurrence_json),
            notifications=decode_model_list(self.notifications_json, TaskNotification, "tasks.notifications_json"),
            subtasks=[row.to_pydantic() for row in (subtasks or [])],
            created_at=self.created_at,
            updated_at=self.updated_at,
            completed_at=self.completed_at,
            carried_over_from=self.carried_over_from,
        )

    @classmethod
    def from_pydantic(cls, task: Task) -> "TaskDB":
        """Create database model from Pydantic model (subtasks are not included)."""
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            status=enum_to_value(task.status),
            priority=enum_to_value(task.priority),
            scheduled_date=task.scheduled_date,
            scheduled_time=task.scheduled_time,
            estimated_minutes=task.estimated_minutes,
            sort_order=task.sort_order,
            recurrence_json=encode_json(task.recurrence.model_dump(mode="json")) if task.recurrence else None,
            notifications_json=encode_json([n.model_dump(mode="json") for n in task.notifications]),
            created_at=task.created_at,
            updated_at=task.updated_at,
            completed_at=task.completed_at,
            carried_over_from=task.carried_over_from,
        )


class SubtaskDB(Base):
    """Database model for Subtask. Rows are replaced wholesale on every task save."""

    __tablename__ = "subtasks"

    id = Column(String, primary_key=True)
    parent_task_id = Column(String, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    completed = Column(Boolean, nullable=False, default=False)
    position = Column(Integer, nullable=False, default=0)

    def to_pydantic(self) -> Subtask:
        return Subtask(
            id=self.id,
            title=self.title,
            completed=bool(self.completed),
            parent_task_id=self.parent_task_id,
        )

    @classmethod
    def from_pydantic(cls, subtask: Subtask, parent_task_id: str, position: int) -> "SubtaskDB":
        return cls(
            id=subtask.id,
            parent_task_id=parent_task_id,
            title=subtask.title,
            completed=subtask.completed,
            position=position,
        )


class TimeBlockDB(Base):
    """Database model for TimeBlock."""

    __tablename__ = "time_blocks"

    id = Column(String, primary_key=True)
    task_id = Column(String, ForeignKey("tasks.id", ondelete="SET NULL"), nullable=True, index=True)
    title = Column(String, nullable=False)
    start_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=False)
    color = Column(String, nullable=False)
    type = Column(String, nullable=False, default=TimeBlockType.TASK.value)

    MUTABLE_FIELDS = ("task_id", "title", "start_time", "end_time", "color", "type")

    def to_pydantic(self) -> TimeBlock:
        return TimeBlock(
            id=self.id,
            task_id=self.task_id,
            title=self.title,
            start_time=self.start_time,
            end_time=self.end_time,
            color=self.color,
            type=value_to_enum(self.type, TimeBlockType, TimeBlockType.TASK),
        )

    @classmethod
    def from_pydantic(cls, block: TimeBlock) -> "TimeBlockDB":
        return cls(
            id=block.id,
            task_id=block.task_id,
            title=block.title,
            start_time=block.start_time,
            end_time=block.end_time,
            color=block.color,
            type=enum_to_value(block.type),
        )


class DayPlanDB(Base):
    """Database model for DayPlan, keyed by calendar date."""

    __tablename__ = "day_plans"

    date = Column(Date, primary_key=True)
    wake_time = Column(String, nullable=False, default="07:00")
    sleep_time = Column(String, nullable=False, default="22:00")
    task_ids_json = Column(Text, nullable=False, default="[]")
    time_block_ids_json = Column(Text, nullable=False, default="[]")

    def to_pydantic(self) -> DayPlan:
        return DayPlan(
            date=self.date,
            wake_time=self.wake_time,
            sleep_time=self.sleep_time,
            task_ids=decode_id_list(self.task_ids_json, "day_plans.task_ids_json"),
            time_block_ids=decode_id_list(self.time_block_ids_json, "day_plans.time_block_ids_json"),
        )

    @classmethod
    def from_pydantic(cls, plan: DayPlan) -> "DayPlanDB":
        return cls(
            date=plan.date,
            wake_time=plan.wake_time,
            sleep_time=plan.sleep_time,
            task_ids_json=encode_json(plan.task_ids),
            time_block_ids_json=encode_json(plan.time_block_ids),
        )


class TemplateDB(Base):
    """Database model for Template."""

    __tablename__ = "templates"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    icon = Column(String, nullable=False, default="")
    blocks_json = Column(Text, nullable=False, default="[]")
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    MUTABLE_FIELDS = ("name", "icon", "blocks_json", "updated_at")

    def to_pydantic(self) -> Template:
        return Template(
            id=self.id,
            name=self.name,
            icon=self.icon or "",
            blocks=decode_model_list(self.blocks_json, TemplateBlock, "templates.blocks_json"),
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    @classmethod
    def from_pydantic(cls, template: Template) -> "TemplateDB":
        return cls(
            id=template.id,
            name=template.name,
            icon=template.icon,
            blocks_json=encode_json([b.model_dump(mode="json") for b in template.blocks]),
            created_at=template.created_at,
            updated_at=template.updated_at,
        )


class SettingDB(Base):
    """Flat key -> string setting row."""

    __tablename__ = "settings"

    key = Column(String, primary_key=True)
    value = Column(String, nullable=False)


# Single-row table holding the applied migration version.
schema_version_table = Table(
    "schema_version",
    Base.metadata,
    Column("version", Integer, nullable=False),
)
