"""Output stream for rendered samples.

A sink owns the single destination (file or stdout) chosen at startup. The
renderer's header is written once before the first record, and every record
is flushed so a consumer tailing the destination sees it promptly.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from types import TracebackType
from typing import TextIO

from container_probe.core.errors import OutputError

logger = logging.getLogger(__name__)

STDOUT_NAME = "<stdout>"


class OutputSink:
    """Line-oriented, flush-per-record writer.

    Example:
        ```python
        with OutputSink("/tmp/containerlog", header="a,b") as sink:
            sink.write_record("1,2")
        ```
    """

    def __init__(
        self, path: str | Path = "", header: str | None = None, stream: TextIO | None = None
    ) -> None:
        """Initialize the sink.

        Args:
            path: Output file; empty selects stdout (or ``stream`` if given)
            header: Line emitted exactly once before the first record
            stream: Explicit console stream, used instead of sys.stdout
        """
        self._path = Path(path) if str(path) else None
        self._header = header
        self._console = stream
        self._stream: TextIO | None = None
        self._owns_stream = False
        self._header_written = False
        self._records_written = 0
        self._closed = False

    @property
    def destination(self) -> str:
        """Human-readable destination name for messages."""
        return str(self._path) if self._path is not None else STDOUT_NAME

    @property
    def records_written(self) -> int:
        return self._records_written

    def open(self) -> None:
        """Open the destination, truncating an existing file.

        Raises:
            OutputError: If the file cannot be created
        """
        if self._stream is not None:
            return
        if self._closed:
            raise OutputError(self.destination, "sink already closed")

        if self._path is None:
            self._stream = self._console if self._console is not None else sys.stdout
            self._owns_stream = False
        else:
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                self._stream = open(self._path, "w", encoding="utf-8")
            except OSError as e:
                raise OutputError(self.destination, f"cannot open for writing: {e}") from e
            self._owns_stream = True
        logger.debug(f"Writing samples to {self.destination}")

        if self._header is not None and not self._header_written:
            self._write_line(self._header)
            self._header_written = True

    def write_record(self, line: str) -> None:
        """Write one record line and flush, opening the destination if needed.

        Raises:
            OutputError: If the write or flush fails
        """
        self.open()
        self._write_line(line)
        self._records_written += 1

    def _write_line(self, line: str) -> None:
        assert self._stream is not None
        try:
            self._stream.write(line + "\n")
            self._stream.flush()
        except OSError as e:
            raise OutputError(self.destination, f"write failed: {e}") from e

    def close(self) -> None:
        """Flush and close the destination. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        stream, self._stream = self._stream, None
        if stream is None:
            return
        try:
            if self._owns_stream:
                stream.close()
            else:
                stream.flush()
        except OSError as e:
            raise OutputError(self.destination, f"close failed: {e}") from e

    def __enter__(self) -> OutputSink:
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
