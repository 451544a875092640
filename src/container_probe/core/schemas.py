"""Pydantic schemas for the container probe.

Defines the validated run configuration assembled from the CLI and an
optional configuration file.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator

from container_probe.core.constants import DEFAULT_INTERVAL_SECONDS, DEFAULT_OUTPUT_PATH


class OutputFormat(str, Enum):
    """Supported output line formats."""

    JSON = "json"  # Structured: one JSON object per line
    CSV = "csv"  # Delimited: header once, then comma-separated rows


class ProbeConfig(BaseModel):
    """Complete probe configuration.

    Attributes:
        container: Name or ID of the container to monitor
        output_format: Line format of the emitted samples
        interval_seconds: Sampling interval in whole seconds
        output_path: File to write to; empty string selects stdout
        max_retries: Retries for a transient fetch failure before giving up
        retry_backoff_seconds: Initial backoff, doubled on every retry
        max_samples: Stop after this many records (None = run until stopped)
    """

    container: str = Field(..., min_length=1, description="Container name or ID")
    output_format: OutputFormat = Field(default=OutputFormat.JSON)
    interval_seconds: int = Field(
        default=DEFAULT_INTERVAL_SECONDS, ge=1, description="Collection interval (seconds)"
    )
    output_path: str = Field(
        default=DEFAULT_OUTPUT_PATH, description="Output file, empty for stdout"
    )
    max_retries: int = Field(default=3, ge=0, description="Retries for transient fetch errors")
    retry_backoff_seconds: float = Field(default=1.0, gt=0, description="Initial retry backoff")
    max_samples: int | None = Field(default=None, ge=1, description="Stop after N records")

    @field_validator("container")
    @classmethod
    def strip_container(cls, v: str) -> str:
        """Reject whitespace-only container identifiers."""
        v = v.strip()
        if not v:
            raise ValueError("container must not be blank")
        return v

    @property
    def writes_to_stdout(self) -> bool:
        """True when samples go to the console instead of a file."""
        return self.output_path == ""
