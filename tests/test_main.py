"""Unit tests for the CLI entry point and encryption commands."""

from __future__ import annotations

import asyncio

from typer.testing import CliRunner

from taskseal import __version__
from taskseal.adapters.sqlite import SqliteTaskRepository
from taskseal.config import get_config_manager
from taskseal.main import app
from taskseal.models import TaskCreate
from taskseal.models.crypto import derive_key, encode_field, is_encrypted

runner = CliRunner()

OWNER = "user-123"
EMAIL = "alex@example.com"


def _invoke(*args):
    return runner.invoke(app, list(args))


def _seed(db_path, *tasks: TaskCreate) -> None:
    repo = SqliteTaskRepository(db_path)

    async def _add():
        for task in tasks:
            await repo.add(task)

    asyncio.run(_add())
    repo.close()


def _titles(db_path) -> list[str]:
    repo = SqliteTaskRepository(db_path)
    rows = repo.connection.execute("SELECT title FROM todos").fetchall()
    repo.close()
    return [row["title"] for row in rows]


class TestTopLevel:
    def test_help_lists_encryption(self):
        result = _invoke("--help")
        assert result.exit_code == 0
        assert "encryption" in result.output
        assert "config" in result.output

    def test_version(self):
        result = _invoke("version")
        assert result.exit_code == 0
        assert __version__ in result.output


class TestEncryptionCommands:
    def test_status_reports_pending(self, tmp_path):
        db = tmp_path / "tasks.db"
        _seed(db, TaskCreate(title="plain", created_by=EMAIL))

        result = _invoke("encryption", "status", "--created-by", EMAIL, "--db", str(db))

        assert result.exit_code == 0
        assert "not encrypted" in result.output

    def test_migrate_encrypts_and_prints_summary(self, tmp_path):
        db = tmp_path / "tasks.db"
        _seed(
            db,
            TaskCreate(title="plain", created_by=EMAIL),
            TaskCreate(title=encode_field("done", derive_key(OWNER)), created_by=EMAIL),
        )

        result = _invoke(
            "encryption",
            "migrate",
            "--user-id",
            OWNER,
            "--created-by",
            EMAIL,
            "--db",
            str(db),
        )

        assert result.exit_code == 0
        assert "Migration summary" in result.output
        assert all(is_encrypted(title) for title in _titles(db))

        status = _invoke("encryption", "status", "--created-by", EMAIL, "--db", str(db))
        assert "All tasks are encrypted" in status.output

    def test_show_decrypts_and_marks_unavailable(self, tmp_path):
        db = tmp_path / "tasks.db"
        _seed(
            db,
            TaskCreate(title=encode_field("Buy milk", derive_key(OWNER))),
            TaskCreate(title=encode_field("Not yours", derive_key("stranger"))),
        )

        result = _invoke("encryption", "show", "--user-id", OWNER, "--db", str(db))

        assert result.exit_code == 0
        assert "Buy milk" in result.output
        assert "content unavailable" in result.output
        assert "Not yours" not in result.output

    def test_status_checks_shared_tasks_with_group(self, tmp_path):
        db = tmp_path / "tasks.db"
        _seed(
            db,
            TaskCreate(title="   ", created_by=EMAIL),
            TaskCreate(title="shared", shared_with_family=True, created_by=EMAIL),
        )

        without_group = _invoke(
            "encryption", "status", "--created-by", EMAIL, "--db", str(db)
        )
        with_group = _invoke(
            "encryption",
            "status",
            "--created-by",
            EMAIL,
            "--group-id",
            "family-789",
            "--db",
            str(db),
        )

        assert "All tasks are encrypted" in without_group.output
        assert "--group-id" in without_group.output
        assert "not encrypted" in with_group.output

    def test_migrate_summary_shows_processed(self, tmp_path):
        db = tmp_path / "tasks.db"
        _seed(db, TaskCreate(title="plain", created_by=EMAIL))

        result = _invoke(
            "encryption",
            "migrate",
            "--user-id",
            OWNER,
            "--created-by",
            EMAIL,
            "--db",
            str(db),
        )

        assert result.exit_code == 0
        assert "Processed" in result.output


class TestConfigCommands:
    def test_set_then_get(self, isolated_dirs):
        result = _invoke("config", "set", "encryption.fail_closed", "true")
        assert result.exit_code == 0

        result = _invoke("config", "get", "encryption.fail_closed")
        assert result.exit_code == 0
        assert "True" in result.output

        saved = (isolated_dirs / "default.json").read_text()
        assert '"fail_closed": true' in saved

    def test_get_unknown_key_fails(self):
        result = _invoke("config", "get", "encryption.nope")
        assert result.exit_code == 1
        assert "Unknown configuration key" in result.output

    def test_get_unset_value_fails(self):
        result = _invoke("config", "get", "storage.db_path")
        assert result.exit_code == 1
        assert "not set" in result.output

    def test_set_invalid_value_fails(self):
        result = _invoke("config", "set", "encryption.cache_derived_keys", "maybe")
        assert result.exit_code == 1
        assert "Failed to set config" in result.output

    def test_reset_single_key(self):
        _invoke("config", "set", "logging.level", "DEBUG")

        result = _invoke("config", "reset", "logging.level", "--yes")

        assert result.exit_code == 0
        assert get_config_manager().get("logging.level") == "INFO"

    def test_reset_cancelled(self):
        _invoke("config", "set", "logging.level", "DEBUG")

        result = runner.invoke(app, ["config", "reset"], input="n\n")

        assert result.exit_code == 0
        assert get_config_manager().get("logging.level") == "DEBUG"

    def test_view(self):
        result = _invoke("config", "view")
        assert result.exit_code == 0
        assert "fail_closed" in result.output
