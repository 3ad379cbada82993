"""Repository abstraction layer for TaskSeal.

The encryption layer never talks to a concrete database. It receives a
``TaskRepository`` (port) and works with whatever adapter implements it:
the bundled SQLite store, a hosted backend client, or a test double.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from taskseal.models import Task, TaskCreate, TaskFilters


class StoreFailure(Exception):
    """Raised when the record store cannot be enumerated."""


class TaskRepository(ABC):
    """Abstract base class for task persistence operations.

    Adapters store and return sensitive fields exactly as given; they never
    encrypt, decrypt or filter on title/description.
    """

    @abstractmethod
    async def list_all(self, filters: TaskFilters) -> list[Task]:
        """List tasks with optional filtering.

        Args:
            filters: TaskFilters object specifying filter criteria

        Returns:
            List of Task objects matching the filters
        """
        raise NotImplementedError(
            "TaskRepository.list_all() must be implemented by adapter"
        )

    @abstractmethod
    async def get(self, task_id: str) -> Task:
        """Get a specific task by ID.

        Raises:
            LookupError: If task does not exist
        """
        raise NotImplementedError("TaskRepository.get() must be implemented by adapter")

    @abstractmethod
    async def add(self, task_data: TaskCreate) -> Task:
        """Create a new task and return it with generated ID and timestamps."""
        raise NotImplementedError("TaskRepository.add() must be implemented by adapter")

    @abstractmethod
    async def update(self, task_id: str, fields: dict[str, Any]) -> Task:
        """Update the given fields of an existing task.

        Args:
            task_id: Unique identifier for the task
            fields: Column values to write; absent keys are left untouched

        Returns:
            Updated Task object

        Raises:
            LookupError: If task does not exist
        """
        raise NotImplementedError(
            "TaskRepository.update() must be implemented by adapter"
        )

    @abstractmethod
    async def delete(self, task_id: str) -> bool:
        """Delete a task, returning True if a row was removed."""
        raise NotImplementedError(
            "TaskRepository.delete() must be implemented by adapter"
        )
