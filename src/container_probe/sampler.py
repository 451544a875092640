"""Fixed-interval sampling loop.

The loop takes a baseline snapshot to seed the session, then on every tick:
fetch -> derive -> render -> write, replacing the session with the state
returned by the deriver. Ticks missed because a fetch overran the interval are
skipped rather than queued.
"""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable

from container_probe.core.errors import FetchError
from container_probe.monitoring.base import (
    BaseStatsSource,
    DerivedSample,
    RawSnapshot,
    SessionState,
)
from container_probe.monitoring.deriver import derive
from container_probe.output.renderers import Renderer
from container_probe.output.sink import OutputSink

logger = logging.getLogger(__name__)

# Granularity at which a pending stop request is noticed while waiting
STOP_POLL_SECONDS = 0.1


class Sampler:
    """Drives one stats source at a fixed cadence into an output sink.

    Example:
        ```python
        sampler = Sampler(DockerStatsSource("web"), JsonRenderer(), sink, interval_seconds=10)
        signal.signal(signal.SIGTERM, lambda *_: sampler.stop())
        with sink:
            sampler.run()
        ```
    """

    def __init__(
        self,
        source: BaseStatsSource,
        renderer: Renderer,
        sink: OutputSink,
        interval_seconds: float,
        max_retries: int = 3,
        retry_backoff_seconds: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the sampler.

        Args:
            source: Stats source for the monitored container
            renderer: Renderer selected for the output format
            sink: Destination for rendered lines
            interval_seconds: Tick interval
            max_retries: Retries for a retryable FetchError before it is raised
            retry_backoff_seconds: Initial retry delay, doubled per attempt
            clock: Monotonic clock used for tick scheduling
        """
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")
        self._source = source
        self._renderer = renderer
        self._sink = sink
        self._interval = interval_seconds
        self._max_retries = max_retries
        self._retry_backoff = retry_backoff_seconds
        self._clock = clock
        self._stop_requested = False
        self._session: SessionState | None = None

    @property
    def session(self) -> SessionState | None:
        """Session state after the most recent tick (None before the baseline)."""
        return self._session

    @property
    def stopped(self) -> bool:
        return self._stop_requested

    def stop(self) -> None:
        """Request the loop to end; only sets a flag, so safe in a signal handler."""
        self._stop_requested = True

    def run(self, max_samples: int | None = None) -> int:
        """Sample until stopped or ``max_samples`` records were written.

        Returns:
            Number of records written

        Raises:
            FetchError: On a non-retryable fetch error or exhausted retries
            OutputError: If the sink cannot be written
        """
        raw = self._fetch_with_retry()
        if raw is None:
            return 0
        self._session = SessionState.start(raw)
        logger.info(
            f"Monitoring container {self._source.container_id} every {self._interval}s "
            f"({self._renderer.format.value} -> {self._sink.destination})"
        )

        written = 0
        next_tick = self._clock() + self._interval
        while max_samples is None or written < max_samples:
            delay = next_tick - self._clock()
            if delay > 0 and self._wait(delay):
                break
            if self.stopped:
                break

            raw = self._fetch_with_retry()
            if raw is None:
                break

            sample, self._session = derive(raw, self._session)
            if sample.anomalies:
                self._report_anomalies(sample)
            self._sink.write_record(self._renderer.render(sample))
            written += 1

            next_tick = self._next_tick(next_tick)

        logger.info(f"Stopped after {written} samples")
        return written

    def _next_tick(self, previous_tick: float) -> float:
        """Next scheduled tick, skipping ticks that have already passed."""
        next_tick = previous_tick + self._interval
        now = self._clock()
        if next_tick < now:
            missed = math.ceil((now - next_tick) / self._interval)
            logger.debug(f"Sampling overran the interval, skipping {missed} tick(s)")
            next_tick += missed * self._interval
        return next_tick

    def _wait(self, seconds: float) -> bool:
        """Sleep up to ``seconds`` in short slices. Returns True if a stop was requested."""
        deadline = time.monotonic() + seconds
        while not self._stop_requested:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return False
            time.sleep(min(remaining, STOP_POLL_SECONDS))
        return True

    def _fetch_with_retry(self) -> RawSnapshot | None:
        """Fetch a snapshot, retrying transient errors with exponential backoff.

        Returns None if a stop was requested while backing off.
        """
        attempt = 0
        while True:
            try:
                return self._source.fetch()
            except FetchError as e:
                if not e.retryable or attempt >= self._max_retries:
                    raise
                delay = min(self._retry_backoff * 2**attempt, self._interval)
                attempt += 1
                logger.warning(
                    f"Transient error fetching stats ({e}); "
                    f"retry {attempt}/{self._max_retries} in {delay:.1f}s"
                )
                if self._wait(delay):
                    return None

    def _report_anomalies(self, sample: DerivedSample) -> None:
        flags = ", ".join(a.value for a in sample.anomalies)
        logger.warning(
            f"Data-quality anomaly for {self._source.container_id} at "
            f"{sample.timestamp.isoformat()}: {flags}"
        )
