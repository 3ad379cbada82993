"""Task data models.

Only ``title`` and ``description`` hold sensitive content. Every other
attribute stays in the clear so the store can filter, sort and schedule on it.
"""

from datetime import datetime
from typing import ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field

TaskStatus = Literal["pending", "in_progress", "completed"]
TaskPriority = Literal["low", "medium", "high"]


class Task(BaseModel):
    """Task model as held by the record store.

    Attributes:
        id: Unique identifier for the task
        title: Task title (sensitive)
        description: Optional task description (sensitive)
        due_date: Optional due date, kept in the clear for reminders
        due_time: Optional due time (``HH:MM``)
        status: Workflow status
        priority: Priority level
        category: Free-form category (home, work, family, ...)
        created_by: Owner email used for ownership filtering
        is_favorite: Whether the task is pinned
        shared_with_family: Whether family group members can see the task
        family_group_id: Family group the task is shared with, if any
        created_date: Creation timestamp
        updated_date: Last update timestamp
    """

    model_config = ConfigDict(extra="ignore")

    SENSITIVE_FIELDS: ClassVar[tuple[str, ...]] = ("title", "description")

    id: str
    title: str | None = None
    description: str | None = None
    due_date: str | None = None
    due_time: str | None = None
    status: TaskStatus = "pending"
    priority: TaskPriority = "medium"
    category: str | None = None
    created_by: str | None = None
    is_favorite: bool = False
    shared_with_family: bool = False
    family_group_id: str | None = None
    created_date: datetime | None = None
    updated_date: datetime | None = None


class TaskCreate(BaseModel):
    """Model for creating a new task."""

    SENSITIVE_FIELDS: ClassVar[tuple[str, ...]] = Task.SENSITIVE_FIELDS

    title: str
    description: str | None = None
    due_date: str | None = None
    due_time: str | None = None
    status: TaskStatus = "pending"
    priority: TaskPriority = "medium"
    category: str | None = None
    created_by: str | None = None
    is_favorite: bool = False
    shared_with_family: bool = False
    family_group_id: str | None = None


class TaskUpdate(BaseModel):
    """Model for updating an existing task.

    All fields are optional - only fields that were explicitly set are sent
    to the store.
    """

    SENSITIVE_FIELDS: ClassVar[tuple[str, ...]] = Task.SENSITIVE_FIELDS

    title: str | None = None
    description: str | None = None
    due_date: str | None = None
    due_time: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    category: str | None = None
    is_favorite: bool | None = None
    shared_with_family: bool | None = None
    family_group_id: str | None = None

    def to_fields(self) -> dict:
        """Return only the explicitly set fields."""
        return self.model_dump(exclude_unset=True)


class TaskFilters(BaseModel):
    """Filter criteria for listing tasks."""

    created_by: str | None = None
    status: TaskStatus | None = None
    category: str | None = None
    shared_with_family: bool | None = None
    family_group_id: str | None = None
    sort: str = Field(default="-created_date")
    limit: int | None = None
