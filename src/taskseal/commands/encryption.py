"""Encryption management commands for TaskSeal."""

import asyncio
from typing import Optional

import typer
from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn
from rich.table import Table

from taskseal.adapters.record_adapter import RecordAdapter
from taskseal.adapters.sqlite import SqliteTaskRepository
from taskseal.config import get_config_manager
from taskseal.models import MigrationProgress, TaskFilters
from taskseal.models.crypto import TaskSealCryptoError, is_encrypted
from taskseal.repositories import StoreFailure
from taskseal.services import EncryptedTaskService, MigrationWorkflow
from taskseal.utils.logger import set_level

app = typer.Typer(help="Manage task content encryption")
console = Console()

UNAVAILABLE = "[dim italic]content unavailable[/dim italic]"


def _setup(db: Optional[str], profile: str):
    """Build repository and adapter from the active config profile."""
    config_manager = get_config_manager(profile)
    set_level(config_manager.config.logging.level)
    repository = SqliteTaskRepository(db or config_manager.db_path)
    adapter = RecordAdapter.from_config(config_manager.config)
    return repository, adapter


@app.command("status")
def status(
    created_by: str = typer.Option(..., "--created-by", help="Owner email"),
    group_id: Optional[str] = typer.Option(
        None, "--group-id", help="Family group identifier for shared tasks"
    ),
    db: Optional[str] = typer.Option(None, "--db", help="SQLite database path"),
    profile: str = typer.Option("default", "--profile", help="Config profile"),
):
    """Check whether any tasks still hold unencrypted content."""
    repository, adapter = _setup(db, profile)
    workflow = MigrationWorkflow(repository, adapter)

    pending = asyncio.run(workflow.has_pending_migration(created_by, group_id))
    repository.close()

    console.print()
    if pending:
        console.print("[bold yellow]⚠️  Some tasks are not encrypted yet[/bold yellow]")
        console.print("   Run: [cyan]taskseal encryption migrate[/cyan]")
    else:
        console.print("[bold green]✅ All tasks are encrypted[/bold green]")
        if not group_id:
            console.print(
                "   [dim]Shared tasks are only checked when --group-id is given[/dim]"
            )
    console.print()


@app.command("migrate")
def migrate(
    user_id: str = typer.Option(..., "--user-id", help="Owner identifier for the key"),
    created_by: str = typer.Option(..., "--created-by", help="Owner email"),
    group_id: Optional[str] = typer.Option(
        None, "--group-id", help="Family group identifier for shared tasks"
    ),
    db: Optional[str] = typer.Option(None, "--db", help="SQLite database path"),
    profile: str = typer.Option("default", "--profile", help="Config profile"),
):
    """Encrypt legacy plaintext tasks in place."""
    repository, adapter = _setup(db, profile)
    workflow = MigrationWorkflow(repository, adapter)

    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        console=console,
        transient=True,
    ) as progress:
        bar = progress.add_task("Encrypting tasks", total=None)

        def on_progress(update: MigrationProgress) -> None:
            progress.update(bar, completed=update.current, total=update.total)

        try:
            outcome = asyncio.run(
                workflow.migrate_user_tasks(
                    created_by, user_id, on_progress, group_key_id=group_id
                )
            )
        except (StoreFailure, TaskSealCryptoError) as e:
            console.print(f"\n[red]❌ Migration failed: {e}[/red]\n")
            raise typer.Exit(code=1)
        finally:
            repository.close()

    table = Table(title="Migration summary")
    table.add_column("Migrated", justify="right", style="green")
    table.add_column("Skipped", justify="right")
    table.add_column("Errors", justify="right", style="red")
    table.add_column("Processed", justify="right")
    table.add_column("Total", justify="right", style="cyan")
    table.add_row(
        str(outcome.migrated),
        str(outcome.skipped),
        str(outcome.errors),
        str(outcome.processed),
        str(outcome.total),
    )
    console.print(table)

    if outcome.errors:
        console.print(
            "[yellow]Some tasks could not be migrated. Run the command again to retry.[/yellow]"
        )
        raise typer.Exit(code=1)


@app.command("show")
def show(
    user_id: str = typer.Option(..., "--user-id", help="Owner identifier for the key"),
    created_by: Optional[str] = typer.Option(
        None, "--created-by", help="Only show tasks owned by this email"
    ),
    group_id: Optional[str] = typer.Option(
        None, "--group-id", help="Family group identifier for shared tasks"
    ),
    db: Optional[str] = typer.Option(None, "--db", help="SQLite database path"),
    profile: str = typer.Option("default", "--profile", help="Config profile"),
):
    """List tasks with their content decrypted."""
    repository, adapter = _setup(db, profile)
    service = EncryptedTaskService(repository, adapter)

    try:
        tasks = asyncio.run(
            service.filter(TaskFilters(created_by=created_by), user_id, group_id)
        )
    except TaskSealCryptoError as e:
        console.print(f"\n[red]❌ Error: {e}[/red]\n")
        raise typer.Exit(code=1)
    finally:
        repository.close()

    table = Table(title="Tasks")
    table.add_column("ID", style="dim")
    table.add_column("Title")
    table.add_column("Status")
    table.add_column("Shared")
    for task in tasks:
        title = UNAVAILABLE if is_encrypted(task.title) else (task.title or "")
        table.add_row(
            task.id[:8],
            title,
            task.status,
            "👨‍👩‍👧‍👦" if task.shared_with_family else "",
        )
    console.print(table)
