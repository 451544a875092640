"""Base types for stats collection and sample derivation.

All stats sources implement ``BaseStatsSource`` so the sampling loop can be
driven by Docker in production and by canned snapshots in tests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Anomaly(str, Enum):
    """Data-quality conditions detected while deriving a sample."""

    NON_POSITIVE_ELAPSED = "non_positive_elapsed"  # Zero or negative elapsed time
    NO_MEMORY_LIMIT = "no_memory_limit"  # Limit reported as 0
    CPU_COUNTER_REGRESSION = "cpu_counter_regression"  # Cumulative counter went backwards


@dataclass(frozen=True)
class RawSnapshot:
    """One raw stats reading for a container."""

    observed_at: datetime
    cpu_total_usage_ns: int
    memory_usage_bytes: int
    memory_limit_bytes: int
    # Monotonic timestamp (seconds) for accurate interval calculation.
    # When unavailable (e.g., tests constructing snapshots manually), leave as 0.0
    # and derivation will fall back to `observed_at`.
    monotonic_time: float = 0.0


@dataclass(frozen=True)
class SessionState:
    """Start and previous references threaded through the sampling loop.

    Replaced (never mutated) after every derived sample.
    """

    start_time: datetime
    start_cpu_usage_ns: int
    previous_time: datetime
    previous_cpu_usage_ns: int
    start_monotonic: float = 0.0
    previous_monotonic: float = 0.0
    sample_count: int = 0

    @classmethod
    def start(cls, raw: RawSnapshot) -> SessionState:
        """Create the session from the baseline snapshot."""
        return cls(
            start_time=raw.observed_at,
            start_cpu_usage_ns=raw.cpu_total_usage_ns,
            previous_time=raw.observed_at,
            previous_cpu_usage_ns=raw.cpu_total_usage_ns,
            start_monotonic=raw.monotonic_time,
            previous_monotonic=raw.monotonic_time,
        )


@dataclass(frozen=True)
class DerivedSample:
    """Metrics derived for one tick. None marks a metric undefined for this tick."""

    timestamp: datetime
    elapsed_since_start_seconds: float
    cpu_seconds_since_start: float
    cpu_percent_since_start: float | None
    cpu_percent_this_interval: float | None
    memory_usage_mib: float
    memory_percent: float | None
    anomalies: tuple[Anomaly, ...] = ()


class BaseStatsSource(ABC):
    """Abstract source of raw stats snapshots for one container."""

    @property
    @abstractmethod
    def container_id(self) -> str:
        """Identifier of the monitored container."""
        pass

    @abstractmethod
    def fetch(self) -> RawSnapshot:
        """Fetch one snapshot.

        Raises:
            FetchError: If the stats could not be retrieved
        """
        pass

    def close(self) -> None:
        """Release any resources held by the source."""
