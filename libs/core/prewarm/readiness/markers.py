"""Text markers the language server writes to its log.

The server has no readiness API, so progress is scraped from log phrasing.
The phrasing changes between releases; keep every literal here so the
poller never has to change when it does.
"""

import re
from dataclasses import dataclass, field

from prewarm.models.status import Status


@dataclass(frozen=True)
class MarkerTable:
    """Accepted log markers.

    Attributes:
        banner: Written once when the server process starts
        source_count: Regex whose first group is the discovered file count
        worker_started: Substrings that must all be present once workers run
        indexing: Written by the indexing thread when it starts
        done: Completion phrasings, any one of which means indexing finished
    """

    banner: str = "Pylance language server"
    source_count: str = r"Found (\d+) source files"
    worker_started: tuple[str, ...] = ("background worker", "started")
    indexing: str = "IDX("
    done: tuple[str, ...] = (
        "Indexing finished",
        "indexingdone",
        "Workspace indexing done",
    )
    _count_re: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_count_re", re.compile(self.source_count))

    def count_units(self, signal: str) -> int:
        match = self._count_re.search(signal)
        if not match:
            return 0
        try:
            return int(match.group(1))
        except (IndexError, ValueError):
            return 0

    def derive(self, signal: str) -> Status:
        """Derive a status from a log snapshot.

        Args:
            signal: Full log text, empty when the log does not exist yet

        Returns:
            Status; all fields default when no marker is present
        """
        if not signal:
            return Status()

        unit_count = self.count_units(signal)
        workers = all(marker in signal for marker in self.worker_started)

        return Status(
            started=self.banner in signal,
            background_ready=workers and unit_count > 0,
            indexing=self.indexing in signal,
            index_done=any(marker in signal for marker in self.done),
            unit_count=unit_count,
        )


PYLANCE_MARKERS = MarkerTable()
