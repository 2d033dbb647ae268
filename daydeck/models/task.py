"""Task data model for DayDeck."""

from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class TaskStatus(str, Enum):
    """Task status enumeration."""
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"
    CANCELLED = "cancelled"


class Priority(str, Enum):
    """Task priority enumeration."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class RecurrenceFrequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class Recurrence(BaseModel):
    """Recurrence descriptor. Stored as-is; occurrences are never expanded."""

    frequency: RecurrenceFrequency
    interval: int = Field(1, ge=1, description="Every N units (days/weeks/months/years)")
    days_of_week: Optional[List[int]] = Field(
        None, description="For weekly recurrence: 0=Sunday ... 6=Saturday"
    )
    end_date: Optional[date] = None

    class Config:
        use_enum_values = True

    @field_validator("days_of_week")
    @classmethod
    def _validate_days_of_week(cls, v):
        if v is None:
            return None
        for day in v:
            if day < 0 or day > 6:
                raise ValueError("days_of_week entries must be in 0..6")
        return v


class TaskNotification(BaseModel):
    id: str
    offset_minutes: int = Field(15, ge=0, description="Minutes before the scheduled time")
    enabled: bool = True


class Subtask(BaseModel):
    """A checklist item owned by exactly one task."""

    id: str = Field(..., description="Unique subtask identifier")
    title: str = Field(..., description="Subtask title")
    completed: bool = Field(False, description="Whether the subtask is checked off")
    parent_task_id: Optional[str] = Field(None, description="Owning task ID")


class Task(BaseModel):
    """Canonical Task model. Owns its subtasks as a single persisted unit."""

    id: str = Field(..., description="Unique task identifier")
    title: str = Field(..., description="Task title")
    description: str = Field("", description="Free-form description")
    status: TaskStatus = Field(TaskStatus.TODO, description="Task status")
    priority: Priority = Field(Priority.MEDIUM, description="Task priority")
    scheduled_date: date = Field(..., description="Day the task is planned for")
    scheduled_time: Optional[str] = Field(
        None, pattern=r"^\d{2}:\d{2}$", description="Optional time of day (HH:MM)"
    )
    estimated_minutes: Optional[int] = Field(None, ge=0, description="Estimated duration in minutes")
    sort_order: int = Field(0, description="Manual ordering; ties broken by created_at")
    recurrence: Optional[Recurrence] = Field(None, description="Recurrence descriptor")
    notifications: List[TaskNotification] = Field(default_factory=list)
    subtasks: List[Subtask] = Field(default_factory=list)
    created_at: datetime = Field(..., description="Task creation timestamp")
    updated_at: datetime = Field(..., description="Task last update timestamp")
    completed_at: Optional[datetime] = Field(None, description="When the task was marked done")
    carried_over_from: Optional[date] = Field(
        None, description="Original scheduled date if the task was carried over"
    )

    class Config:
        """Pydantic configuration."""
        use_enum_values = True

    @property
    def is_open(self) -> bool:
        return self.status in (TaskStatus.TODO.value, TaskStatus.IN_PROGRESS.value)
