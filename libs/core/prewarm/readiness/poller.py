"""Readiness polling for the language server's background index."""

import time
from typing import Callable, Protocol

from prewarm_logging import get_logger

from prewarm.models.status import PollOutcome, PollSession, Status
from prewarm.readiness.markers import PYLANCE_MARKERS, MarkerTable


class SignalSource(Protocol):
    def read(self) -> str:
        """Return the current log text, "" when nothing is available yet."""
        ...


class Trigger(Protocol):
    def fire(self) -> None:
        """Re-attempt the action that makes the server start indexing."""
        ...


class ReadinessPoller:
    """Waits for the language server to report a finished index.

    The poller sleeps a fixed interval, re-derives the status from the
    latest log snapshot and acts on it:

    * a completion marker ends the poll as ready;
    * background workers up without an indexing thread after the grace
      period re-fires the trigger, once per poll;
    * when the timeout expires, one bounded escalation wait runs before the
      final verdict.

    Clock and sleep are injectable so tests can run on a virtual clock.
    """

    def __init__(
        self,
        interval: float = 5.0,
        retry_grace: float = 30.0,
        indexing_extension: float = 60.0,
        background_extension: float = 30.0,
        markers: MarkerTable = PYLANCE_MARKERS,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize the poller.

        Args:
            interval: Seconds between log reads
            retry_grace: Seconds after which a stalled index re-fires the trigger
            indexing_extension: Extra wait when indexing is still running at timeout
            background_extension: Extra wait when workers are up but no
                indexing marker was ever seen
            markers: Log markers used to derive status
            clock: Monotonic clock in seconds
            sleep: Blocking sleep in seconds
        """
        self.interval = interval
        self.retry_grace = retry_grace
        self.indexing_extension = indexing_extension
        self.background_extension = background_extension
        self.markers = markers
        self._clock = clock
        self._sleep = sleep
        self.logger = get_logger('readiness.poller')

    def status(self, source: SignalSource) -> Status:
        return self.markers.derive(source.read())

    def poll(
        self,
        source: SignalSource,
        trigger: Trigger | None,
        timeout: float,
    ) -> PollOutcome:
        """Poll until the index is done or the timeout (plus escalation) runs out.

        Args:
            source: Log snapshot provider
            trigger: Action to re-fire on a stalled index, None to never retry
            timeout: Seconds to poll before escalating

        Returns:
            PollOutcome with the verdict and total elapsed seconds
        """
        session = PollSession(start_time=self._clock(), timeout=timeout)

        while self._elapsed(session) < session.timeout:
            self._sleep(self.interval)

            status = self.status(source)
            self._log_transition(session, status)

            if status.index_done:
                elapsed = self._elapsed(session)
                self.logger.info("Indexing completed", elapsed=f"{elapsed:.0f}s")
                return PollOutcome(ready=True, elapsed=elapsed)

            if (
                status.background_ready
                and not status.indexing
                and not session.retried
                and trigger is not None
                and self._elapsed(session) > self.retry_grace
            ):
                self.logger.info("Indexing thread not started, re-firing trigger")
                trigger.fire()
                session.retried = True

            if status.background_ready and status.indexing:
                self.logger.debug("Indexing thread running, waiting for completion")

        ready = self._escalate(source)
        elapsed = self._elapsed(session)

        if ready:
            self.logger.info("Indexing completed", elapsed=f"{elapsed:.0f}s")
        else:
            self.logger.warning(
                "Timed out before indexing finished",
                timeout=f"{timeout:.0f}s",
            )
        return PollOutcome(ready=ready, elapsed=elapsed)

    def _escalate(self, source: SignalSource) -> bool:
        """Run the single post-timeout wait and return the final verdict."""
        status = self.status(source)

        if status.indexing and not status.index_done:
            self.logger.info(
                "Indexing still running, extending wait",
                extension=f"{self.indexing_extension:.0f}s",
            )
            self._sleep(self.indexing_extension)
            return self.status(source).index_done

        if status.background_ready and not status.indexing:
            # Indexing can run without ever logging its marker; assume it
            # does and give it time to persist.
            self.logger.info(
                "Background workers ready, waiting for index persistence",
                extension=f"{self.background_extension:.0f}s",
            )
            self._sleep(self.background_extension)
            return True

        return False

    def _log_transition(self, session: PollSession, status: Status):
        rendered = status.render()
        if rendered != session.last_logged_status:
            self.logger.info(f"Language server: {rendered}")
            session.last_logged_status = rendered

    def _elapsed(self, session: PollSession) -> float:
        return self._clock() - session.start_time
