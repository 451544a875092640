"""Core module - configuration, schemas and errors."""

from __future__ import annotations

from container_probe.core.config import build_config, load_config
from container_probe.core.constants import DEFAULT_INTERVAL_SECONDS, DEFAULT_OUTPUT_PATH
from container_probe.core.errors import (
    ConfigurationError,
    ContainerNotFoundError,
    FetchError,
    MalformedStatsError,
    OutputError,
    ProbeError,
)
from container_probe.core.schemas import OutputFormat, ProbeConfig

__all__ = [
    "DEFAULT_INTERVAL_SECONDS",
    "DEFAULT_OUTPUT_PATH",
    "ConfigurationError",
    "ContainerNotFoundError",
    "FetchError",
    "MalformedStatsError",
    "OutputError",
    "OutputFormat",
    "ProbeConfig",
    "ProbeError",
    "build_config",
    "load_config",
]
