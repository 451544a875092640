"""Tests for output renderers."""

import json
from datetime import UTC, datetime, timedelta, timezone

import pytest

from container_probe.core.schemas import OutputFormat
from container_probe.monitoring.base import DerivedSample
from container_probe.output.renderers import (
    FIELD_ORDER,
    CsvRenderer,
    JsonRenderer,
    format_timestamp,
    get_renderer,
)


def make_sample(**overrides) -> DerivedSample:
    values = {
        "timestamp": datetime(2024, 1, 1, 12, 0, 10, tzinfo=UTC),
        "elapsed_since_start_seconds": 10.0,
        "cpu_seconds_since_start": 2.0,
        "cpu_percent_since_start": 20.0,
        "cpu_percent_this_interval": 20.0,
        "memory_usage_mib": 120.0,
        "memory_percent": 60.0,
    }
    values.update(overrides)
    return DerivedSample(**values)


class TestJsonRenderer:
    """Tests for the structured (JSON lines) renderer."""

    def test_render_exact_line(self):
        line = JsonRenderer().render(make_sample())
        assert line == (
            '{"ts":"2024-01-01T12:00:10Z","timeElapsed":10.00,"cpuTimeElapsed":2.00,'
            '"percentCPUSinceStart":20.00,"percentCPUThisInterval":20.00,'
            '"memoryUsageMiB":120.00,"memoryUsagePercentage":60.00}'
        )

    def test_no_header(self):
        assert JsonRenderer().header() is None

    def test_round_trip_within_precision(self):
        sample = make_sample(
            elapsed_since_start_seconds=10.004321,
            cpu_seconds_since_start=1.23456,
            cpu_percent_since_start=12.3456,
            cpu_percent_this_interval=99.999,
            memory_usage_mib=511.996,
            memory_percent=33.3333,
        )
        parsed = json.loads(JsonRenderer().render(sample))

        assert list(parsed) == [
            "ts",
            "timeElapsed",
            "cpuTimeElapsed",
            "percentCPUSinceStart",
            "percentCPUThisInterval",
            "memoryUsageMiB",
            "memoryUsagePercentage",
        ]
        assert parsed["ts"] == "2024-01-01T12:00:10Z"
        assert parsed["timeElapsed"] == pytest.approx(sample.elapsed_since_start_seconds, abs=0.01)
        assert parsed["cpuTimeElapsed"] == pytest.approx(sample.cpu_seconds_since_start, abs=0.01)
        assert parsed["percentCPUSinceStart"] == pytest.approx(
            sample.cpu_percent_since_start, abs=0.01
        )
        assert parsed["percentCPUThisInterval"] == pytest.approx(
            sample.cpu_percent_this_interval, abs=0.01
        )
        assert parsed["memoryUsageMiB"] == pytest.approx(sample.memory_usage_mib, abs=0.01)
        assert parsed["memoryUsagePercentage"] == pytest.approx(sample.memory_percent, abs=0.01)

    def test_undefined_metrics_are_null(self):
        sample = make_sample(
            cpu_percent_since_start=None, cpu_percent_this_interval=None, memory_percent=None
        )
        parsed = json.loads(JsonRenderer().render(sample))
        assert parsed["percentCPUSinceStart"] is None
        assert parsed["percentCPUThisInterval"] is None
        assert parsed["memoryUsagePercentage"] is None
        assert parsed["memoryUsageMiB"] == 120.0

    def test_negative_values_rendered(self):
        """Test that counter regressions are surfaced rather than clamped."""
        line = JsonRenderer().render(make_sample(cpu_percent_this_interval=-40.0))
        assert '"percentCPUThisInterval":-40.00' in line


class TestCsvRenderer:
    """Tests for the delimited (CSV) renderer."""

    def test_header(self):
        assert CsvRenderer().header() == (
            "ts,timeElapsed,cpuTimeElapsed,percentCPUSinceStart,"
            "percentCPUThisInterval,memoryUsageMiB,percentMemoryUsage"
        )
        assert CsvRenderer().header() == ",".join(FIELD_ORDER)

    def test_render_row(self):
        row = CsvRenderer().render(make_sample())
        assert row == "2024-01-01T12:00:10Z,10.00,2.00,20.00,20.00,120.00,60.00"

    def test_undefined_metrics_are_empty(self):
        row = CsvRenderer().render(make_sample(memory_percent=None, cpu_percent_since_start=None))
        assert row == "2024-01-01T12:00:10Z,10.00,2.00,,20.00,120.00,"
        assert len(row.split(",")) == len(FIELD_ORDER)

    def test_rounding(self):
        row = CsvRenderer().render(make_sample(memory_usage_mib=1.005 + 1e-9, memory_percent=0.004))
        assert row.split(",")[5:] == ["1.01", "0.00"]


class TestRendererSelection:
    def test_get_renderer(self):
        assert isinstance(get_renderer(OutputFormat.JSON), JsonRenderer)
        assert isinstance(get_renderer("csv"), CsvRenderer)

    def test_unknown_format(self):
        with pytest.raises(ValueError, match="Unsupported output format"):
            get_renderer("xml")

    def test_timestamp_converted_to_utc(self):
        local = datetime(2024, 1, 1, 14, 0, 10, tzinfo=timezone(timedelta(hours=2)))
        assert format_timestamp(make_sample(timestamp=local)) == "2024-01-01T12:00:10Z"

    def test_rendering_does_not_mutate_sample(self):
        sample = make_sample()
        JsonRenderer().render(sample)
        CsvRenderer().render(sample)
        assert sample == make_sample()
