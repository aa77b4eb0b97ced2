"""Status and patch maintenance commands."""

from pathlib import Path
from typing import Optional

import typer
from prewarm.actions import PrebuildActions
from rich.table import Table

from prewarm_cli.commands.common import console, load_config


def _flag(value: bool) -> str:
    return "✓ Yes" if value else "✗ No"


def status(
    server_data_dir: Path = typer.Argument(..., help="Server data directory to inspect"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Config file"),
):
    """Show the language server status derived from its current log."""
    config = load_config(config_path)
    actions = PrebuildActions(config, server_data_dir=server_data_dir)
    current = actions.status()

    table = Table(title="Language Server Status")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="magenta")

    table.add_row("Started", _flag(current.started))
    table.add_row("Background workers", _flag(current.background_ready))
    table.add_row("Indexing", _flag(current.indexing))
    table.add_row("Index done", _flag(current.index_done))
    table.add_row("Source files", str(current.unit_count))

    console.print(table)


def apply_patch(
    server_data_dir: Path = typer.Argument(..., help="Server data directory holding extensions"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Config file"),
):
    """Patch the extension bundle to allow indexing in web mode."""
    config = load_config(config_path)
    result = PrebuildActions(config, server_data_dir=server_data_dir).patch()

    if result.success:
        console.print(f"[green]✓[/green] {result.message}")
    else:
        console.print(f"[red]✗[/red] {result.message}")
        raise typer.Exit(code=1)


def restore_patch(
    server_data_dir: Path = typer.Argument(..., help="Server data directory holding extensions"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Config file"),
):
    """Restore the original extension bundle from its backup."""
    config = load_config(config_path)
    result = PrebuildActions(config, server_data_dir=server_data_dir).restore()

    if result.success:
        console.print(f"[green]✓[/green] {result.message}")
    else:
        console.print(f"[red]✗[/red] {result.message}")
        raise typer.Exit(code=1)
