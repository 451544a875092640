"""Shared constants for the container probe.

Centralized constants to avoid duplication and ensure consistency across modules.
"""

from __future__ import annotations

# Default output destination (empty string selects stdout)
DEFAULT_OUTPUT_PATH = "/tmp/containerlog"

# Default sampling interval in whole seconds
DEFAULT_INTERVAL_SECONDS = 10

NANOSECONDS_PER_SECOND = 1_000_000_000

BYTES_PER_KIB = 1024

# RFC 3339 UTC with second precision, e.g. 2024-01-01T12:00:00Z
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Decimal places for every numeric output field
OUTPUT_PRECISION = 2
