"""Helpers shared by the CLI commands."""

from pathlib import Path

import typer
import yaml
from prewarm.models.config import PrebuildConfig
from prewarm.services.config_manager import ConfigManager
from prewarm_logging import configure_from_config
from rich.console import Console

console = Console()


def load_config(config_path: Path | None = None) -> PrebuildConfig:
    """Load configuration and point logging at it, or exit with code 1."""
    try:
        config = ConfigManager(config_path).config
    except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
        console.print(f"[red]✗[/red] Failed to load configuration: {e}")
        raise typer.Exit(code=1)

    configure_from_config(config)
    return config
