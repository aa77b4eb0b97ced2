"""Services shared by the CLI and the prebuild actions."""

from prewarm.services.config_manager import ConfigManager

__all__ = ["ConfigManager"]
