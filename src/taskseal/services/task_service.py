"""Task service - encrypted access to the task store.

This service layer sits between callers and the repository: sensitive fields
are encrypted before every write and decrypted after every read. Identity is
always passed in explicitly; the service keeps no session state.
"""

from __future__ import annotations

from taskseal.adapters.record_adapter import RecordAdapter
from taskseal.models import Task, TaskCreate, TaskFilters, TaskUpdate
from taskseal.repositories import TaskRepository


class EncryptedTaskService:
    """Service for task operations with client-side field encryption."""

    def __init__(
        self, task_repository: TaskRepository, adapter: RecordAdapter | None = None
    ):
        """Initialize the task service.

        Args:
            task_repository: TaskRepository implementation for data access
            adapter: RecordAdapter used to encrypt and decrypt task content
        """
        self.repository = task_repository
        self.adapter = adapter or RecordAdapter()

    async def create(
        self,
        task_data: TaskCreate,
        owner_key_id: str,
        group_key_id: str | None = None,
    ) -> Task:
        """Create a task with encrypted content.

        Returns:
            The created task, decrypted for immediate display
        """
        sealed = self.adapter.to_storage_create(task_data, owner_key_id, group_key_id)
        stored = await self.repository.add(sealed)
        return self.adapter.from_storage(stored, owner_key_id, group_key_id)

    async def update(
        self,
        task_id: str,
        updates: TaskUpdate,
        owner_key_id: str,
        group_key_id: str | None = None,
    ) -> Task:
        """Update a task, re-keying its content if the sharing flag changes.

        Returns:
            The updated task, decrypted
        """
        current = await self.repository.get(task_id)
        fields = self.adapter.to_storage_update(
            updates, current, owner_key_id, group_key_id
        )
        stored = await self.repository.update(task_id, fields)
        return self.adapter.from_storage(stored, owner_key_id, group_key_id)

    async def get(
        self, task_id: str, owner_key_id: str, group_key_id: str | None = None
    ) -> Task:
        """Get a single decrypted task."""
        stored = await self.repository.get(task_id)
        return self.adapter.from_storage(stored, owner_key_id, group_key_id)

    async def filter(
        self,
        filters: TaskFilters,
        owner_key_id: str,
        group_key_id: str | None = None,
    ) -> list[Task]:
        """List tasks matching ``filters`` and decrypt them."""
        stored = await self.repository.list_all(filters)
        return self.adapter.from_storage_many(stored, owner_key_id, group_key_id)

    async def list(self, owner_key_id: str, group_key_id: str | None = None) -> list[Task]:
        """List every task in the store, decrypted.

        Prefer ``filter`` with ``created_by`` for user-specific queries.
        """
        return await self.filter(TaskFilters(), owner_key_id, group_key_id)

    async def delete(self, task_id: str) -> bool:
        return await self.repository.delete(task_id)
