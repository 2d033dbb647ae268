"""Request and response models for the DayDeck HTTP API."""

import uuid
from datetime import date, datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from daydeck.engine.conflicts import Conflict
from daydeck.models.calendar_event import CalendarEvent
from daydeck.models.task import Priority, Recurrence, Task, TaskNotification, TaskStatus
from daydeck.models.template import TemplateBlock
from daydeck.models.time_block import TimeBlock, TimeBlockType


def _new_id() -> str:
    return str(uuid.uuid4())


class BlockCreate(BaseModel):
    id: str = Field(default_factory=_new_id)
    task_id: Optional[str] = None
    title: str
    start_time: datetime
    end_time: datetime
    color: Optional[str] = None
    type: TimeBlockType = TimeBlockType.TASK

    class Config:
        use_enum_values = True


class BlockPatch(BaseModel):
    task_id: Optional[str] = None
    title: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    color: Optional[str] = None
    type: Optional[TimeBlockType] = None

    class Config:
        use_enum_values = True


class MoveRequest(BaseModel):
    """Committed move to an absolute interval."""
    new_start_time: datetime
    new_end_time: datetime


class DropRequest(BaseModel):
    """Committed drag, as the block's final pixel offset on the timeline."""
    new_top: float


class ResizeRequest(BaseModel):
    """Committed resize, as the block's final pixel length."""
    new_length: float


class MutationResponse(BaseModel):
    """Response for a block edit. `dirty` lists every block that was rewritten."""
    status: str
    block: Optional[TimeBlock] = None
    dirty: List[TimeBlock] = Field(default_factory=list)


class SubtaskCreate(BaseModel):
    id: str = Field(default_factory=_new_id)
    title: str
    completed: bool = False


class TaskCreate(BaseModel):
    id: str = Field(default_factory=_new_id)
    title: str
    description: str = ""
    status: TaskStatus = TaskStatus.TODO
    priority: Priority = Priority.MEDIUM
    scheduled_date: date
    scheduled_time: Optional[str] = Field(None, pattern=r"^\d{2}:\d{2}$")
    estimated_minutes: Optional[int] = Field(None, ge=0)
    sort_order: int = 0
    recurrence: Optional[Recurrence] = None
    notifications: List[TaskNotification] = Field(default_factory=list)
    subtasks: List[SubtaskCreate] = Field(default_factory=list)

    class Config:
        use_enum_values = True


class TaskPatch(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[Priority] = None
    scheduled_date: Optional[date] = None
    scheduled_time: Optional[str] = Field(None, pattern=r"^\d{2}:\d{2}$")
    estimated_minutes: Optional[int] = Field(None, ge=0)
    sort_order: Optional[int] = None
    recurrence: Optional[Recurrence] = None
    notifications: Optional[List[TaskNotification]] = None

    class Config:
        use_enum_values = True


class StatusRequest(BaseModel):
    status: TaskStatus


class SubtaskRequest(BaseModel):
    title: str = Field(..., min_length=1)


class CarryOverRequest(BaseModel):
    today: Optional[date] = None
    target_date: Optional[date] = None


class CarryOverResponse(BaseModel):
    count: int
    tasks: List[Task]


class DayPlanUpdate(BaseModel):
    wake_time: Optional[str] = Field(None, pattern=r"^\d{2}:\d{2}$")
    sleep_time: Optional[str] = Field(None, pattern=r"^\d{2}:\d{2}$")
    task_ids: Optional[List[str]] = None
    time_block_ids: Optional[List[str]] = None


class TemplateCreate(BaseModel):
    name: str = Field(..., min_length=1)
    icon: str = ""
    blocks: List[TemplateBlock] = Field(default_factory=list)


class AppliedTemplateResponse(BaseModel):
    template_id: str
    blocks: List[TimeBlock]


class SettingUpdate(BaseModel):
    value: Any


class ConflictRequest(BaseModel):
    """Read-only calendar events for one day, checked against that day's blocks."""
    day: date
    events: List[CalendarEvent] = Field(default_factory=list)


class ConflictResponse(BaseModel):
    conflicts: List[Conflict]
