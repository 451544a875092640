"""Tests for OutputSink."""

import io
from unittest.mock import MagicMock

import pytest

from container_probe.core.errors import OutputError
from container_probe.output.sink import STDOUT_NAME, OutputSink


class TestOutputSinkFile:
    """Tests for file destinations."""

    def test_header_written_once(self, tmp_path):
        path = tmp_path / "out.csv"
        with OutputSink(path, header="a,b") as sink:
            sink.write_record("1,2")
            sink.write_record("3,4")

        assert path.read_text() == "a,b\n1,2\n3,4\n"
        assert sink.records_written == 2

    def test_header_written_on_open(self, tmp_path):
        """Test that a consumer sees the header before the first sample."""
        path = tmp_path / "out.csv"
        with OutputSink(path, header="a,b"):
            assert path.read_text() == "a,b\n"

    def test_records_flushed_immediately(self, tmp_path):
        path = tmp_path / "out.jsonl"
        with OutputSink(path) as sink:
            sink.write_record('{"x":1.00}')
            assert path.read_text() == '{"x":1.00}\n'

    def test_existing_file_truncated(self, tmp_path):
        path = tmp_path / "out.jsonl"
        path.write_text("stale\n")
        with OutputSink(path) as sink:
            sink.write_record("fresh")
        assert path.read_text() == "fresh\n"

    def test_parent_directories_created(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "out.jsonl"
        with OutputSink(path) as sink:
            sink.write_record("x")
        assert path.read_text() == "x\n"

    def test_unwritable_destination(self, tmp_path):
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("")
        sink = OutputSink(blocker / "out.jsonl")

        with pytest.raises(OutputError) as exc_info:
            sink.open()
        assert exc_info.value.destination == str(blocker / "out.jsonl")

    def test_write_after_close(self, tmp_path):
        sink = OutputSink(tmp_path / "out.jsonl")
        sink.open()
        sink.close()
        sink.close()  # idempotent
        with pytest.raises(OutputError):
            sink.write_record("late")


class TestOutputSinkConsole:
    """Tests for console destinations."""

    def test_empty_path_selects_console(self):
        stream = io.StringIO()
        sink = OutputSink("", header="h", stream=stream)
        assert sink.destination == STDOUT_NAME

        with sink:
            sink.write_record("r")

        # Console stream stays open
        assert stream.getvalue() == "h\nr\n"

    def test_defaults_to_stdout(self, capsys):
        with OutputSink() as sink:
            sink.write_record("line")
        assert capsys.readouterr().out == "line\n"

    def test_write_failure(self):
        stream = MagicMock()
        stream.write.side_effect = OSError(28, "No space left on device")
        sink = OutputSink("", stream=stream)

        with pytest.raises(OutputError, match="No space left"):
            sink.write_record("r")
        assert sink.records_written == 0
