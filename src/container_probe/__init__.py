"""Container probe - periodic CPU and memory utilization sampling for a container."""

from __future__ import annotations

from container_probe.core.schemas import OutputFormat, ProbeConfig
from container_probe.monitoring.base import DerivedSample, RawSnapshot, SessionState
from container_probe.monitoring.deriver import derive
from container_probe.sampler import Sampler

__version__ = "0.1.0"

__all__ = [
    "DerivedSample",
    "OutputFormat",
    "ProbeConfig",
    "RawSnapshot",
    "Sampler",
    "SessionState",
    "derive",
    "__version__",
]
