"""Repository interfaces (ports)."""

from taskseal.repositories.repository import StoreFailure, TaskRepository

__all__ = ["StoreFailure", "TaskRepository"]
