"""Data models shared across prewarm components."""

from prewarm.models.actions import ActionResult
from prewarm.models.config import (
    ArtifactConfig,
    ExtensionConfig,
    LoggingConfig,
    PollingConfig,
    PrebuildConfig,
    ServerConfig,
)
from prewarm.models.process import ProcessResult
from prewarm.models.status import PollOutcome, PollSession, Status

__all__ = [
    "ActionResult",
    "ArtifactConfig",
    "ExtensionConfig",
    "LoggingConfig",
    "PollingConfig",
    "PrebuildConfig",
    "ServerConfig",
    "ProcessResult",
    "PollOutcome",
    "PollSession",
    "Status",
]
