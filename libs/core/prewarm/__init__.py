"""Prewarm: builds the language server index before the first editor session."""

from prewarm.actions import PrebuildActions
from prewarm.readiness import (
    LanguageServerLogSource,
    MarkerTable,
    ReadinessPoller,
)

__version__ = "0.1.0"

__all__ = [
    "PrebuildActions",
    "LanguageServerLogSource",
    "MarkerTable",
    "ReadinessPoller",
]
