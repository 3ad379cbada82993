"""Database connection setup for the local task store."""

from __future__ import annotations

import os
import sqlite3
from pathlib import Path

from platformdirs import user_data_dir

from taskseal.adapters.sqlite.schema import apply_schema


def get_connection(db_path: str | Path | None = None) -> sqlite3.Connection:
    """Open a configured connection to the task database.

    Args:
        db_path: Path to database file, ``":memory:"`` for a throwaway
            database, or None for the default location

    Returns:
        sqlite3.Connection with the schema applied
    """
    if db_path == ":memory:":
        connection = sqlite3.connect(":memory:", check_same_thread=False)
        connection.row_factory = sqlite3.Row
        apply_schema(connection)
        return connection

    if db_path is None:
        db_path = Path(user_data_dir("taskseal")) / "tasks.db"
    else:
        db_path = Path(db_path)

    db_path.parent.mkdir(parents=True, exist_ok=True)
    is_new_database = not db_path.exists()

    connection = sqlite3.connect(
        str(db_path),
        check_same_thread=False,
        timeout=30.0,  # Wait up to 30s for locks
    )
    connection.row_factory = sqlite3.Row
    connection.execute("PRAGMA journal_mode = WAL")

    # Set file permissions (owner read/write only)
    if is_new_database:
        os.chmod(db_path, 0o600)

    apply_schema(connection)
    return connection
