"""Service layer for TaskSeal."""

from taskseal.services.migration_service import (
    MigrationWorkflow,
    can_migrate,
    needs_migration,
)
from taskseal.services.task_service import EncryptedTaskService

__all__ = ["EncryptedTaskService", "MigrationWorkflow", "can_migrate", "needs_migration"]
