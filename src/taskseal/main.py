"""Main entry point for TaskSeal CLI."""

import typer
from rich.console import Console

from taskseal import __version__
from taskseal.commands import config, encryption

app = typer.Typer(
    name="taskseal",
    help="Client-side encryption for task content",
    no_args_is_help=True,
)

console = Console()

app.add_typer(encryption.app, name="encryption", help="Manage task content encryption")
app.add_typer(config.app, name="config", help="Configuration management commands")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]TaskSeal[/bold] version [cyan]{__version__}[/cyan]")


def main() -> None:
    """Entry point for the console script."""
    app()


if __name__ == "__main__":
    main()
