"""Line renderers for derived samples.

Every renderer emits the same seven fields in the same order with two-decimal
precision. New formats are added by subclassing ``Renderer`` and registering
the class in ``RENDERERS``.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from datetime import UTC

from container_probe.core.constants import OUTPUT_PRECISION, TIMESTAMP_FORMAT
from container_probe.core.schemas import OutputFormat
from container_probe.monitoring.base import DerivedSample

# Field order shared by every format
FIELD_ORDER = (
    "ts",
    "timeElapsed",
    "cpuTimeElapsed",
    "percentCPUSinceStart",
    "percentCPUThisInterval",
    "memoryUsageMiB",
    "percentMemoryUsage",
)


def format_timestamp(sample: DerivedSample) -> str:
    """RFC 3339 UTC timestamp with second precision."""
    ts = sample.timestamp
    if ts.tzinfo is not None:
        ts = ts.astimezone(UTC)
    return ts.strftime(TIMESTAMP_FORMAT)


def format_number(value: float | None) -> str | None:
    """Fixed two-decimal rendering, None for an undefined metric."""
    if value is None:
        return None
    return f"{value:.{OUTPUT_PRECISION}f}"


def sample_values(sample: DerivedSample) -> tuple[float | None, ...]:
    """Numeric values of a sample in FIELD_ORDER (without the timestamp)."""
    return (
        sample.elapsed_since_start_seconds,
        sample.cpu_seconds_since_start,
        sample.cpu_percent_since_start,
        sample.cpu_percent_this_interval,
        sample.memory_usage_mib,
        sample.memory_percent,
    )


class Renderer(ABC):
    """Renders derived samples into single output lines (without newline)."""

    format: OutputFormat

    def header(self) -> str | None:
        """Line written once before the first record, if any."""
        return None

    @abstractmethod
    def render(self, sample: DerivedSample) -> str:
        """Render one sample."""
        pass


class JsonRenderer(Renderer):
    """One self-describing JSON object per line.

    Numbers are written with fixed precision (``2.00`` rather than ``2.0``),
    undefined metrics as ``null``.
    """

    format = OutputFormat.JSON

    # The memory percentage key differs from the CSV column name
    KEYS = FIELD_ORDER[:-1] + ("memoryUsagePercentage",)

    def render(self, sample: DerivedSample) -> str:
        parts = [f"{json.dumps(self.KEYS[0])}:{json.dumps(format_timestamp(sample))}"]
        for key, value in zip(self.KEYS[1:], sample_values(sample), strict=True):
            rendered = format_number(value)
            parts.append(f"{json.dumps(key)}:{'null' if rendered is None else rendered}")
        return "{" + ",".join(parts) + "}"


class CsvRenderer(Renderer):
    """Comma-separated rows under a single header line; empty cell for undefined."""

    format = OutputFormat.CSV

    def header(self) -> str:
        return ",".join(FIELD_ORDER)

    def render(self, sample: DerivedSample) -> str:
        cells = [format_timestamp(sample)]
        cells.extend(format_number(v) or "" for v in sample_values(sample))
        return ",".join(cells)


RENDERERS: dict[OutputFormat, type[Renderer]] = {
    OutputFormat.JSON: JsonRenderer,
    OutputFormat.CSV: CsvRenderer,
}


def get_renderer(output_format: OutputFormat | str) -> Renderer:
    """Instantiate the renderer for a format.

    Raises:
        ValueError: If the format is unknown
    """
    try:
        return RENDERERS[OutputFormat(output_format)]()
    except (KeyError, ValueError) as e:
        raise ValueError(
            f"Unsupported output format: {output_format}. "
            f"Use one of: {', '.join(f.value for f in RENDERERS)}"
        ) from e
