"""SQLite adapter module - Local database storage implementation."""

from taskseal.adapters.sqlite.connection import get_connection
from taskseal.adapters.sqlite.task_repository import SqliteTaskRepository

__all__ = [
    "SqliteTaskRepository",
    "get_connection",
]
