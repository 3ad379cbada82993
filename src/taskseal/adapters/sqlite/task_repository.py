"""SQLite implementation of TaskRepository.

The store is encryption-agnostic: it persists ``title``/``description``
exactly as handed over by the record adapter.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Any

from taskseal.adapters.sqlite.connection import get_connection
from taskseal.adapters.sqlite.schema import SORTABLE_COLUMNS, UPDATABLE_COLUMNS
from taskseal.adapters.sqlite.utils import generate_uuid, now_iso, row_to_dict
from taskseal.models import Task, TaskCreate, TaskFilters
from taskseal.repositories import TaskRepository


class SqliteTaskRepository(TaskRepository):
    """SQLite implementation of task repository."""

    def __init__(self, db_path: str | Path | None = None):
        """Initialize SQLite task repository.

        Args:
            db_path: Optional database file path. If None, uses default location.
        """
        self.db_path = db_path
        self._connection: sqlite3.Connection | None = None

    @property
    def connection(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._connection is None:
            self._connection = get_connection(self.db_path)
        return self._connection

    def close(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None

    async def list_all(self, filters: TaskFilters) -> list[Task]:
        """List all tasks with filtering."""
        query = "SELECT * FROM todos WHERE 1 = 1"
        params: list[Any] = []

        if filters.created_by:
            query += " AND created_by = ?"
            params.append(filters.created_by)

        if filters.status:
            query += " AND status = ?"
            params.append(filters.status)

        if filters.category:
            query += " AND category = ?"
            params.append(filters.category)

        if filters.shared_with_family is not None:
            query += " AND shared_with_family = ?"
            params.append(int(filters.shared_with_family))

        if filters.family_group_id:
            query += " AND family_group_id = ?"
            params.append(filters.family_group_id)

        # Sorting: "-created_date" means descending
        sort_field = filters.sort.lstrip("-")
        direction = "DESC" if filters.sort.startswith("-") else "ASC"
        if sort_field in SORTABLE_COLUMNS:
            query += f" ORDER BY {sort_field} {direction}, rowid {direction}"

        if filters.limit is not None:
            query += " LIMIT ?"
            params.append(filters.limit)

        cursor = self.connection.execute(query, params)
        return [Task(**row_to_dict(row)) for row in cursor.fetchall()]

    async def get(self, task_id: str) -> Task:
        """Get a specific task by ID."""
        cursor = self.connection.execute("SELECT * FROM todos WHERE id = ?", (task_id,))
        row = cursor.fetchone()

        if not row:
            raise LookupError(f"Task not found: {task_id}")

        return Task(**row_to_dict(row))

    async def add(self, task_data: TaskCreate) -> Task:
        """Create a new task."""
        task_id = generate_uuid()
        now = now_iso()
        data = task_data.model_dump()
        data.update(id=task_id, created_date=now, updated_date=now)

        columns = ", ".join(data)
        placeholders = ", ".join("?" for _ in data)
        self.connection.execute(
            f"INSERT INTO todos ({columns}) VALUES ({placeholders})",
            list(data.values()),
        )
        self.connection.commit()

        return await self.get(task_id)

    async def update(self, task_id: str, fields: dict[str, Any]) -> Task:
        """Update the given columns of a task."""
        fields = {k: v for k, v in fields.items() if k != "id"}
        unknown = set(fields) - UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"Cannot update columns: {', '.join(sorted(unknown))}")

        if fields:
            assignments = ", ".join(f"{column} = ?" for column in fields)
            params = [*fields.values(), now_iso(), task_id]
            cursor = self.connection.execute(
                f"UPDATE todos SET {assignments}, updated_date = ? WHERE id = ?",
                params,
            )
            self.connection.commit()
            if cursor.rowcount == 0:
                raise LookupError(f"Task not found: {task_id}")

        return await self.get(task_id)

    async def delete(self, task_id: str) -> bool:
        """Delete a task."""
        cursor = self.connection.execute("DELETE FROM todos WHERE id = ?", (task_id,))
        self.connection.commit()
        return cursor.rowcount > 0
