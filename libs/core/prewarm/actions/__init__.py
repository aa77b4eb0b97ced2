"""Actions module encapsulating business logic for CLI operations."""

from prewarm.actions.prebuild import PrebuildActions

__all__ = [
    "PrebuildActions",
]
