"""Migration service - encrypts legacy plaintext tasks in place.

Migration is best-effort and resumable: a task is only rewritten while one of
its sensitive fields is still plaintext, so running the workflow again simply
retries whatever failed or was left over.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable
from typing import Any

from taskseal.adapters.record_adapter import RecordAdapter
from taskseal.models import MigrationOutcome, MigrationProgress, Task, TaskFilters
from taskseal.models.crypto import MissingKeyIdentifier, is_encrypted
from taskseal.repositories import StoreFailure, TaskRepository
from taskseal.utils.logger import get_logger

ProgressCallback = Callable[[MigrationProgress], Any]


def needs_migration(task: Task) -> bool:
    """Return True if a sensitive field holds text that is not yet encrypted.

    Empty and whitespace-only values are never encrypted, so they do not count.
    """
    for name in Task.SENSITIVE_FIELDS:
        value = getattr(task, name)
        if value and value.strip() and not is_encrypted(value):
            return True
    return False


def can_migrate(task: Task, group_key_id: str | None = None) -> bool:
    """Return True if a migration run with ``group_key_id`` would rewrite ``task``.

    Shared tasks stay plaintext until a family group key is available.
    """
    if task.shared_with_family and not group_key_id:
        return False
    return needs_migration(task)


class MigrationWorkflow:
    """Moves a user's stored tasks from plaintext to encrypted fields.

    Tasks are processed strictly one after another so progress stays ordered
    and the store never sees concurrent writes from a single run.
    """

    def __init__(
        self, task_repository: TaskRepository, adapter: RecordAdapter | None = None
    ):
        """Initialize the migration workflow.

        Args:
            task_repository: Store the migrated fields are written to
            adapter: Record adapter used for key selection and encoding
        """
        self.repository = task_repository
        self.adapter = adapter or RecordAdapter()
        self._log = get_logger().getChild("migration")

    needs_migration = staticmethod(needs_migration)

    def migrate_one(
        self,
        task: Task,
        owner_key_id: str,
        group_key_id: str | None = None,
    ) -> dict[str, Any] | None:
        """Build the minimal update payload for a single task.

        Args:
            task: Task as read from the store
            owner_key_id: Owner identifier the key is derived from
            group_key_id: Family group identifier, used for shared tasks

        Returns:
            ``{"id": ..., <changed fields>}`` or None if nothing changes
        """
        if not can_migrate(task, group_key_id):
            return None

        sealed = self.adapter.to_storage(task, owner_key_id, group_key_id)

        updates = {}
        for name in Task.SENSITIVE_FIELDS:
            original = getattr(task, name)
            if original and not is_encrypted(original):
                new_value = getattr(sealed, name)
                if new_value != original:
                    updates[name] = new_value

        if not updates:
            return None
        return {"id": task.id, **updates}

    async def run(
        self,
        tasks: Iterable[Task],
        owner_key_id: str,
        on_progress: ProgressCallback | None = None,
        *,
        group_key_id: str | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> MigrationOutcome:
        """Migrate a batch of tasks.

        Per-task failures are logged and counted; they never abort the run.
        ``on_progress`` is called after every task and must not raise; the
        workflow does not guard it. ``cancel_event`` is only checked between
        tasks, never while one is being written.

        Returns:
            MigrationOutcome with migrated/skipped/errors/total tallies

        Raises:
            MissingKeyIdentifier: If ``owner_key_id`` is empty
        """
        if not owner_key_id:
            raise MissingKeyIdentifier("An owner identifier is required for migration")

        tasks = list(tasks)
        outcome = MigrationOutcome(total=len(tasks))

        for index, task in enumerate(tasks, start=1):
            if cancel_event is not None and cancel_event.is_set():
                outcome.cancelled = True
                self._log.info(
                    "Migration cancelled after %d of %d tasks",
                    outcome.processed,
                    outcome.total,
                )
                break

            try:
                payload = self.migrate_one(task, owner_key_id, group_key_id)
                if payload is None:
                    outcome.skipped += 1
                else:
                    task_id = payload.pop("id")
                    await self.repository.update(task_id, payload)
                    outcome.migrated += 1
            except Exception as e:
                self._log.error("Failed to migrate task %s: %s", task.id, e)
                outcome.errors += 1

            if on_progress is not None:
                on_progress(
                    MigrationProgress(
                        current=index,
                        total=outcome.total,
                        migrated=outcome.migrated,
                        skipped=outcome.skipped,
                        errors=outcome.errors,
                    )
                )

        self._log.info(
            "Migration finished: %d migrated, %d skipped, %d errors of %d",
            outcome.migrated,
            outcome.skipped,
            outcome.errors,
            outcome.total,
        )
        return outcome

    async def _list_user_tasks(self, created_by: str) -> list[Task]:
        try:
            return await self.repository.list_all(TaskFilters(created_by=created_by))
        except Exception as e:
            raise StoreFailure(f"Could not list tasks: {e}") from e

    async def migrate_user_tasks(
        self,
        created_by: str,
        owner_key_id: str,
        on_progress: ProgressCallback | None = None,
        *,
        group_key_id: str | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> MigrationOutcome:
        """Migrate every task owned by ``created_by``.

        Raises:
            StoreFailure: If the user's tasks cannot be listed at all
        """
        tasks = await self._list_user_tasks(created_by)
        return await self.run(
            tasks,
            owner_key_id,
            on_progress,
            group_key_id=group_key_id,
            cancel_event=cancel_event,
        )

    async def has_pending_migration(
        self, created_by: str, group_key_id: str | None = None
    ) -> bool:
        """Check whether a migration run would still encrypt any of the user's tasks.

        Shared tasks only count when ``group_key_id`` is given, matching what
        ``migrate_user_tasks`` does with the same arguments.
        """
        try:
            tasks = await self._list_user_tasks(created_by)
        except StoreFailure as e:
            self._log.warning("Failed to check migration status: %s", e)
            return False
        return any(can_migrate(task, group_key_id) for task in tasks)
