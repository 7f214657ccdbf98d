"""Tests for built-in sinks - MemorySink, ConsoleSink, CallbackSink, FileSink."""

from __future__ import annotations

import csv
import io
import json
import logging
from pathlib import Path

import pytest

from treon_converter.models import Measurement
from treon_converter.sinks.callback import CallbackSink
from treon_converter.sinks.console import ConsoleSink
from treon_converter.sinks.file import FileSink
from treon_converter.sinks.memory import MemorySink

# -----------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------


def _feed(sink: MemorySink | ConsoleSink | CallbackSink | FileSink, n: int = 3) -> None:
    """Push *n* sample measurements into *sink* through the context API."""
    for i in range(n):
        sink.add_measurement(f"S1$sensor_{i}", float(i * 10), 1_700_000_000_000 + i)


# -----------------------------------------------------------------------
# Sink base behaviour (via MemorySink)
# -----------------------------------------------------------------------


class TestMemorySink:
    """MemorySink and the shared Sink base."""

    def test_collects_measurements(self) -> None:
        sink = MemorySink()
        _feed(sink, 2)
        assert sink.measurement_count == 2
        assert sink.measurements[0] == Measurement(
            ingestion_id="S1$sensor_0", value=0.0, timestamp=1_700_000_000_000
        )

    def test_accepts_duplicates(self) -> None:
        sink = MemorySink()
        sink.add_measurement("S1$Temperature", 21.5, 1000)
        sink.add_measurement("S1$Temperature", 21.5, 1000)
        assert len(sink.measurements) == 2

    def test_log_error_recorded_and_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        sink = MemorySink()
        with caplog.at_level(logging.ERROR, logger="treon_converter.sinks"):
            sink.log_error("No valid timestamp: None")
        assert sink.errors == ["No valid timestamp: None"]
        assert "No valid timestamp" in caplog.text

    def test_record_error_not_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        sink = MemorySink()
        with caplog.at_level(logging.DEBUG):
            sink.record_error("No valid timestamp: None")
        assert sink.errors == ["No valid timestamp: None"]
        assert caplog.records == []

    def test_clear(self) -> None:
        sink = MemorySink()
        _feed(sink)
        sink.log_error("boom")
        sink.clear()
        assert sink.measurements == []
        assert sink.errors == []
        assert sink.measurement_count == 0

    def test_context_manager(self) -> None:
        with MemorySink() as sink:
            _feed(sink, 1)
        assert len(sink.measurements) == 1


# -----------------------------------------------------------------------
# ConsoleSink
# -----------------------------------------------------------------------


class TestConsoleSink:
    """ConsoleSink text and JSON output."""

    def test_text_format(self) -> None:
        buf = io.StringIO()
        with ConsoleSink(fmt="text", stream=buf) as sink:
            _feed(sink, 2)
        output = buf.getvalue()
        assert "S1$sensor_0" in output
        assert "S1$sensor_1" in output
        assert "2023-11-14T22:13:20.000+00:00" in output

    def test_json_format(self) -> None:
        buf = io.StringIO()
        with ConsoleSink(fmt="json", stream=buf) as sink:
            _feed(sink, 1)
        parsed = json.loads(buf.getvalue().strip())
        assert parsed["ingestion_id"] == "S1$sensor_0"
        assert parsed["timestamp"] == 1_700_000_000_000


# -----------------------------------------------------------------------
# CallbackSink
# -----------------------------------------------------------------------


class TestCallbackSink:
    """CallbackSink forwards measurements and errors."""

    def test_callback_receives_measurements(self) -> None:
        received: list[Measurement] = []
        sink = CallbackSink(received.append)
        _feed(sink, 3)
        assert [m.ingestion_id for m in received] == ["S1$sensor_0", "S1$sensor_1", "S1$sensor_2"]

    def test_on_error(self) -> None:
        errors: list[str] = []
        sink = CallbackSink(lambda m: None, on_error=errors.append)
        sink.log_error("bad payload")
        assert errors == ["bad payload"]
        assert sink.errors == ["bad payload"]

    def test_on_error_via_record_error(self) -> None:
        errors: list[str] = []
        sink = CallbackSink(lambda m: None, on_error=errors.append)
        sink.record_error("bad payload")
        assert errors == ["bad payload"]
        assert sink.errors == ["bad payload"]


# -----------------------------------------------------------------------
# FileSink
# -----------------------------------------------------------------------


class TestFileSink:
    """FileSink CSV, JSON Lines and Parquet output."""

    def test_csv_output(self, tmp_path: Path) -> None:
        with FileSink(path=str(tmp_path), format="csv") as sink:
            _feed(sink, 5)

        csv_files = list(tmp_path.glob("*.csv"))
        assert len(csv_files) == 1
        with csv_files[0].open(newline="") as fh:
            rows = list(csv.DictReader(fh))
        assert len(rows) == 5
        assert rows[0]["ingestion_id"] == "S1$sensor_0"
        assert float(rows[1]["value"]) == 10.0

    def test_json_output(self, tmp_path: Path) -> None:
        with FileSink(path=str(tmp_path), format="json") as sink:
            _feed(sink, 3)

        jsonl_files = list(tmp_path.glob("*.jsonl"))
        assert len(jsonl_files) == 1
        lines = jsonl_files[0].read_text().strip().splitlines()
        assert len(lines) == 3
        assert json.loads(lines[2])["ingestion_id"] == "S1$sensor_2"

    def test_creates_directory(self, tmp_path: Path) -> None:
        out = tmp_path / "nested" / "dir"
        with FileSink(path=str(out), format="csv") as sink:
            _feed(sink, 1)
        assert sink.filepath is not None
        assert sink.filepath.parent == out

    def test_unknown_format_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="Unknown file format"):
            FileSink(path=str(tmp_path), format="xml")

    def test_write_before_connect_raises(self, tmp_path: Path) -> None:
        sink = FileSink(path=str(tmp_path), format="csv")
        with pytest.raises(RuntimeError):
            sink.add_measurement("S1$Humidity", 1.0, 1000)

    def test_csv_writer_missing_raises(self, tmp_path: Path) -> None:
        sink = FileSink(path=str(tmp_path), format="csv")
        sink.connect()
        try:
            sink._csv_writer = None
            with pytest.raises(RuntimeError, match="CSV writer missing"):
                sink.add_measurement("S1$Humidity", 1.0, 1000)
        finally:
            sink.close()

    def test_parquet_output(self, tmp_path: Path) -> None:
        """Parquet output should buffer and flush via pyarrow."""
        try:
            import pyarrow.parquet as pq
        except ImportError:
            pytest.skip("pyarrow not installed")

        with FileSink(path=str(tmp_path), format="parquet") as sink:
            _feed(sink, 4)

        parquet_files = list(tmp_path.glob("*.parquet"))
        assert len(parquet_files) == 1
        assert pq.read_table(str(parquet_files[0])).num_rows == 4
