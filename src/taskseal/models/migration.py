"""Migration result models."""

from dataclasses import dataclass


@dataclass
class MigrationOutcome:
    """Running tallies for a single migration run."""

    migrated: int = 0
    skipped: int = 0
    errors: int = 0
    total: int = 0
    cancelled: bool = False

    @property
    def processed(self) -> int:
        return self.migrated + self.skipped + self.errors


@dataclass(frozen=True)
class MigrationProgress:
    """Snapshot handed to progress callbacks after each record."""

    current: int
    total: int
    migrated: int
    skipped: int
    errors: int
