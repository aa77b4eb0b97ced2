"""Prewarm centralized logger."""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any

from prewarm_logging.formatters import ConsoleFormatter, LogfmtFormatter


class PrewarmLogger:
    """Centralized logger for prewarm components."""

    def __init__(
        self,
        name: str,
        log_dir: Path | None = None,
        level: str = "INFO",
        max_file_size: int = 5 * 1024 * 1024,
        backup_count: int = 3,
        enable_file: bool = True,
        enable_console: bool = True
    ):
        """Initialize prewarm logger.

        Args:
            name: Logger name (will be prefixed with 'prewarm.')
            log_dir: Directory for log files
            level: Log level (DEBUG, INFO, WARNING, ERROR)
            max_file_size: Maximum log file size before rotation
            backup_count: Number of backup files to keep
            enable_file: Whether to write a logfmt file
            enable_console: Whether to print timestamped lines to stdout
        """
        self.name = f'prewarm.{name}'
        self.logger = logging.getLogger(self.name)
        self.logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        self.logger.propagate = False

        self.log_dir = log_dir or _default_log_dir

        self.logger.handlers.clear()

        if enable_file:
            self._setup_file_handler(max_file_size, backup_count)

        if enable_console:
            self._setup_console_handler()

    def _setup_file_handler(self, max_bytes: int, backup_count: int):
        """Setup rotating file handler, one file per component."""
        log_file = self.log_dir / f'{self.name}.log'
        log_file.parent.mkdir(parents=True, exist_ok=True)

        handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )
        handler.setFormatter(LogfmtFormatter())
        self.logger.addHandler(handler)

    def _setup_console_handler(self):
        """Setup console handler.

        Progress lines go to stdout so they interleave with the output of the
        child processes the prebuild spawns.
        """
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(ConsoleFormatter())
        self.logger.addHandler(handler)

    def _log(self, level: int, msg: str, **kwargs):
        """Log a message with extra context.

        Args:
            level: Log level
            msg: Log message
            **kwargs: Extra context to include in log
        """
        self.logger.log(level, msg, extra=kwargs, stacklevel=3)

    def debug(self, msg: str, **kwargs):
        """Log debug message."""
        self._log(logging.DEBUG, msg, **kwargs)

    def info(self, msg: str, **kwargs):
        """Log info message."""
        self._log(logging.INFO, msg, **kwargs)

    def warning(self, msg: str, **kwargs):
        """Log warning message."""
        self._log(logging.WARNING, msg, **kwargs)

    def error(self, msg: str, **kwargs):
        """Log error message."""
        self._log(logging.ERROR, msg, **kwargs)

    def exception(self, msg: str, **kwargs):
        """Log exception with traceback."""
        self.logger.exception(msg, extra=kwargs, stacklevel=2)


_loggers: dict[str, PrewarmLogger] = {}

_default_log_dir = Path.home() / '.cache' / 'prewarm' / 'logs'
_default_level = "INFO"


def get_logger(
    name: str,
    log_dir: Path | None = None,
    level: str | None = None,
    **kwargs
) -> PrewarmLogger:
    """Get or create a prewarm logger.

    Args:
        name: Logger name
        log_dir: Log directory (defaults to the configured directory)
        level: Log level (defaults to the configured level)
        **kwargs: Additional logger arguments

    Returns:
        Prewarm logger instance
    """
    if name not in _loggers:
        _loggers[name] = PrewarmLogger(
            name,
            log_dir=log_dir or _default_log_dir,
            level=level or _default_level,
            **kwargs
        )
    return _loggers[name]


def configure_from_config(config: Any):
    """Configure logging defaults from a config object.

    Loggers created before this call keep their settings; the CLI calls it
    before any component asks for a logger.

    Args:
        config: Config object with a ``logging`` section
    """
    if not hasattr(config, 'logging'):
        return

    log_config = config.logging

    global _default_log_dir, _default_level
    _default_log_dir = Path(log_config.log_dir).expanduser()
    _default_level = log_config.level
