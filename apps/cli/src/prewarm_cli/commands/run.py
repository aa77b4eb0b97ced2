"""Prebuild run command."""

from pathlib import Path
from typing import Optional

import typer
from prewarm.actions import PrebuildActions

from prewarm_cli.commands.common import console, load_config


def run(
    workspace: Optional[Path] = typer.Argument(
        None, help="Workspace folder to open (defaults to the configured workspace)"
    ),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Editor server port"),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", "-t", help="Seconds to wait for indexing"
    ),
    server_data_dir: Optional[Path] = typer.Option(
        None, "--server-data-dir", help="Data directory for the throwaway server"
    ),
    keep_server_data: bool = typer.Option(
        False, "--keep-server-data", help="Keep the server data directory afterwards"
    ),
    show_log: bool = typer.Option(
        True, "--show-log/--no-show-log", help="Print the language server log"
    ),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Config file"),
):
    """Start a headless editor, trigger indexing and wait for it to finish."""
    config = load_config(config_path)

    if workspace is not None:
        config.workspace = str(workspace)
    if port is not None:
        config.server.port = port
    if timeout is not None:
        config.polling.timeout = timeout
    if keep_server_data:
        config.keep_server_data = True

    console.print(f"[yellow]Prebuilding language server index for {config.workspace}...[/yellow]")

    try:
        result = PrebuildActions(config, server_data_dir=server_data_dir).run()
    except Exception as e:
        console.print(f"[red]✗[/red] Fatal error: {e}")
        raise typer.Exit(code=1)

    server_log = (result.data or {}).get("server_log")
    if show_log and server_log:
        console.rule("Language server log")
        console.print(server_log, markup=False, highlight=False)
        console.rule()

    if result.success:
        console.print(f"[green]✓[/green] {result.message}")
        raise typer.Exit(code=0)

    console.print(f"[red]✗[/red] {result.message}")
    raise typer.Exit(code=1)
