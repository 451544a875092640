"""Output module - renderers and the output sink."""

from __future__ import annotations

from container_probe.output.renderers import (
    FIELD_ORDER,
    CsvRenderer,
    JsonRenderer,
    Renderer,
    get_renderer,
)
from container_probe.output.sink import OutputSink

__all__ = ["FIELD_ORDER", "CsvRenderer", "JsonRenderer", "OutputSink", "Renderer", "get_renderer"]
