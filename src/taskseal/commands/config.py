"""Configuration management commands."""

from typing import Any, Optional

import typer
from pydantic import ValidationError
from rich.console import Console

from taskseal.config import Config, get_config_manager

app = typer.Typer(help="Configuration management commands")
console = Console()


def _is_known_key(key: str) -> bool:
    """Check a dot-separated key against the default configuration layout."""
    current: Any = Config().model_dump()
    for part in key.split("."):
        if not isinstance(current, dict) or part not in current:
            return False
        current = current[part]
    return not isinstance(current, dict)


def _require_known_key(key: str) -> None:
    if not _is_known_key(key):
        console.print(f"[red]❌ Unknown configuration key '{key}'[/red]")
        raise typer.Exit(1)


@app.command("view")
def view_config(
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """View current configuration."""
    config_manager = get_config_manager(profile)
    console.print_json(data=config_manager.config.model_dump())


@app.command("get")
def get_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., encryption.fail_closed)"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """Get a configuration value."""
    _require_known_key(key)
    config_manager = get_config_manager(profile)
    value = config_manager.get(key)
    if value is None:
        console.print(f"[yellow]'{key}' is not set[/yellow]")
        raise typer.Exit(1)
    console.print(value)


@app.command("set")
def set_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., encryption.fail_closed)"),
    value: str = typer.Argument(..., help="Configuration value"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
) -> None:
    """Set a configuration value."""
    _require_known_key(key)

    parsed_value: str | bool = value
    if value.lower() in ("true", "false"):
        parsed_value = value.lower() == "true"

    config_manager = get_config_manager(profile)
    try:
        config_manager.set(key, parsed_value)
    except (ValidationError, OSError) as e:
        console.print(f"[red]❌ Failed to set config: {e}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]✅ Configuration '{key}' set to '{parsed_value}'[/green]")


@app.command("reset")
def reset_config(
    key: Optional[str] = typer.Argument(None, help="Configuration key to reset"),
    profile: str = typer.Option("default", "--profile", help="Profile name"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Reset configuration to defaults."""
    if key:
        _require_known_key(key)

    if not yes:
        msg = "entire configuration" if not key else f"'{key}'"
        if not typer.confirm(f"Are you sure you want to reset {msg}?"):
            console.print("[yellow]Cancelled[/yellow]")
            raise typer.Exit(0)

    config_manager = get_config_manager(profile)
    config_manager.reset(key)

    if key:
        console.print(f"[green]✅ Configuration '{key}' reset to default[/green]")
    else:
        console.print("[green]✅ Configuration reset to defaults[/green]")
