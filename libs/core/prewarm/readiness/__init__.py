"""Language server readiness detection."""

from prewarm.readiness.log_source import LanguageServerLogSource
from prewarm.readiness.markers import PYLANCE_MARKERS, MarkerTable
from prewarm.readiness.poller import ReadinessPoller, SignalSource, Trigger

__all__ = [
    "LanguageServerLogSource",
    "MarkerTable",
    "PYLANCE_MARKERS",
    "ReadinessPoller",
    "SignalSource",
    "Trigger",
]
