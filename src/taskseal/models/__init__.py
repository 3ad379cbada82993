"""TaskSeal data models."""

from taskseal.models.migration import MigrationOutcome, MigrationProgress
from taskseal.models.task import Task, TaskCreate, TaskFilters, TaskUpdate

__all__ = [
    "Task",
    "TaskCreate",
    "TaskUpdate",
    "TaskFilters",
    "MigrationOutcome",
    "MigrationProgress",
]
