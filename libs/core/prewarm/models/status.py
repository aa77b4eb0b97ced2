"""Language server readiness status and poll bookkeeping."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Status:
    """Readiness summary derived from one snapshot of the server log.

    Attributes:
        started: Startup banner observed
        background_ready: Background workers started and source files found
        indexing: Indexing thread marker observed
        index_done: A completion marker observed
        unit_count: Number of source files the server reported
    """

    started: bool = False
    background_ready: bool = False
    indexing: bool = False
    index_done: bool = False
    unit_count: int = 0

    def render(self) -> str:
        """Render as a single comparable line."""
        return (
            f"started={str(self.started).lower()}"
            f" ready={str(self.background_ready).lower()}"
            f" indexing={str(self.indexing).lower()}"
            f" indexDone={str(self.index_done).lower()}"
            f" files={self.unit_count}"
        )


@dataclass
class PollSession:
    """Mutable state owned by a single poll call.

    Attributes:
        start_time: Clock reading when polling began
        timeout: Seconds to poll before escalating
        retried: Whether the trigger has been re-fired
        last_logged_status: Rendered status last written to the log
    """

    start_time: float
    timeout: float
    retried: bool = False
    last_logged_status: str = ""


@dataclass(frozen=True)
class PollOutcome:
    """Final verdict of a poll.

    Attributes:
        ready: Whether the index is considered built
        elapsed: Seconds between the start of polling and the verdict
    """

    ready: bool
    elapsed: float
