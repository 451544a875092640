"""Derivation of utilization metrics from cumulative counters.

Two time bases are tracked for every sample:
- since start: averaged over the whole session
- this interval: only the time since the previous sample

CPU percentages are relative to one core, so values above 100 indicate
multi-core usage.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from container_probe.core.constants import BYTES_PER_KIB, NANOSECONDS_PER_SECOND
from container_probe.monitoring.base import Anomaly, DerivedSample, RawSnapshot, SessionState


def elapsed_seconds(
    start: datetime, start_monotonic: float, end: datetime, end_monotonic: float
) -> float:
    """Seconds between two observations, preferring the monotonic clock."""
    if start_monotonic > 0 and end_monotonic > 0:
        return end_monotonic - start_monotonic
    return (end - start).total_seconds()


def cpu_percent(cpu_delta_ns: int, elapsed: float) -> float | None:
    """CPU time as a percentage of one core's wall time, None if elapsed <= 0."""
    if elapsed <= 0:
        return None
    return cpu_delta_ns / (elapsed * NANOSECONDS_PER_SECOND) * 100


def bytes_to_mib(byte_count: int | float) -> float:
    """Convert bytes to mebibytes."""
    return byte_count / BYTES_PER_KIB / BYTES_PER_KIB


def memory_percent(usage_bytes: int, limit_bytes: int) -> float | None:
    """Memory usage as a percentage of the limit, None when no limit is set.

    Computed in MiB units rather than bytes.
    """
    if limit_bytes <= 0:
        return None
    return bytes_to_mib(usage_bytes) / bytes_to_mib(limit_bytes) * 100


def derive(raw: RawSnapshot, session: SessionState) -> tuple[DerivedSample, SessionState]:
    """Derive one sample and the session state for the next tick.

    Args:
        raw: Snapshot for the current tick
        session: Start and previous references

    Returns:
        Tuple of (derived sample, next session state)
    """
    anomalies: list[Anomaly] = []

    since_start = elapsed_seconds(
        session.start_time, session.start_monotonic, raw.observed_at, raw.monotonic_time
    )
    interval = elapsed_seconds(
        session.previous_time, session.previous_monotonic, raw.observed_at, raw.monotonic_time
    )
    if since_start <= 0 or interval <= 0:
        anomalies.append(Anomaly.NON_POSITIVE_ELAPSED)

    cpu_since_start_ns = raw.cpu_total_usage_ns - session.start_cpu_usage_ns
    cpu_interval_ns = raw.cpu_total_usage_ns - session.previous_cpu_usage_ns
    if cpu_since_start_ns < 0 or cpu_interval_ns < 0:
        anomalies.append(Anomaly.CPU_COUNTER_REGRESSION)

    mem_percent = memory_percent(raw.memory_usage_bytes, raw.memory_limit_bytes)
    if mem_percent is None:
        anomalies.append(Anomaly.NO_MEMORY_LIMIT)

    sample = DerivedSample(
        timestamp=raw.observed_at,
        elapsed_since_start_seconds=since_start,
        cpu_seconds_since_start=cpu_since_start_ns / NANOSECONDS_PER_SECOND,
        cpu_percent_since_start=cpu_percent(cpu_since_start_ns, since_start),
        cpu_percent_this_interval=cpu_percent(cpu_interval_ns, interval),
        memory_usage_mib=bytes_to_mib(raw.memory_usage_bytes),
        memory_percent=mem_percent,
        anomalies=tuple(anomalies),
    )

    next_session = replace(
        session,
        previous_time=raw.observed_at,
        previous_monotonic=raw.monotonic_time,
        previous_cpu_usage_ns=raw.cpu_total_usage_ns,
        sample_count=session.sample_count + 1,
    )
    return sample, next_session
