"""Prewarm logging: logfmt files, timestamped console lines."""

from prewarm_logging.logger import PrewarmLogger, get_logger, configure_from_config
from prewarm_logging.formatters import ConsoleFormatter, LogfmtFormatter

__all__ = [
    "PrewarmLogger",
    "get_logger",
    "configure_from_config",
    "ConsoleFormatter",
    "LogfmtFormatter",
]
