"""Database schema for the local task store.

Column names follow the hosted backend's ``todos`` table so records can be
moved between the two without renaming.
"""

from __future__ import annotations

CREATE_TODOS_TABLE = """
CREATE TABLE IF NOT EXISTS todos (
    id TEXT PRIMARY KEY,
    title TEXT,
    description TEXT,
    due_date TEXT,
    due_time TEXT,
    status TEXT NOT NULL DEFAULT 'pending',
    priority TEXT NOT NULL DEFAULT 'medium',
    category TEXT,
    created_by TEXT,
    is_favorite BOOLEAN DEFAULT 0,
    shared_with_family BOOLEAN DEFAULT 0,
    family_group_id TEXT,
    created_date DATETIME NOT NULL,
    updated_date DATETIME NOT NULL
)
"""

ALL_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_todos_created_by ON todos(created_by)",
    "CREATE INDEX IF NOT EXISTS idx_todos_shared_with_family ON todos(shared_with_family)",
    "CREATE INDEX IF NOT EXISTS idx_todos_family_group ON todos(family_group_id)",
]

# Columns the repository may write through update()
UPDATABLE_COLUMNS = frozenset(
    {
        "title",
        "description",
        "due_date",
        "due_time",
        "status",
        "priority",
        "category",
        "is_favorite",
        "shared_with_family",
        "family_group_id",
    }
)

# Sortable columns for TaskFilters.sort
SORTABLE_COLUMNS = frozenset(
    {"created_date", "updated_date", "due_date", "priority", "status"}
)


def apply_schema(connection) -> None:
    """Create tables and indexes if they do not exist."""
    connection.execute(CREATE_TODOS_TABLE)
    for idx_sql in ALL_INDEXES:
        connection.execute(idx_sql)
    connection.commit()
