"""Monitoring module - stats collection and metric derivation.

Provides:
- DockerStatsSource: raw snapshots from the Docker stats API
- derive: pure derivation of utilization metrics from cumulative counters
"""

from __future__ import annotations

from container_probe.monitoring.base import (
    Anomaly,
    BaseStatsSource,
    DerivedSample,
    RawSnapshot,
    SessionState,
)
from container_probe.monitoring.deriver import bytes_to_mib, cpu_percent, derive, memory_percent
from container_probe.monitoring.stats_source import DockerStatsSource, parse_stats

__all__ = [
    "Anomaly",
    "BaseStatsSource",
    "DerivedSample",
    "DockerStatsSource",
    "RawSnapshot",
    "SessionState",
    "bytes_to_mib",
    "cpu_percent",
    "derive",
    "memory_percent",
    "parse_stats",
]
