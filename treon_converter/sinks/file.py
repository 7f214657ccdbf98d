"""File sink - writes measurements to CSV, JSON Lines, or Parquet files.

Parquet support requires the ``file`` extra::

    pip install treon-payload-converter[file]
"""

from __future__ import annotations

import csv
import io
import logging
import time
from pathlib import Path
from typing import Any, ClassVar

from treon_converter.models import Measurement
from treon_converter.sinks.base import Sink

__all__ = ["FileSink"]

logger = logging.getLogger("treon_converter.sinks.file")


class FileSink(Sink):
    """Write measurements to a local file (CSV, JSON Lines, or Parquet).

    One file per ``connect()``, named ``measurements_<YYYYmmdd_HHMMSS>.<ext>``.

    Parameters:
        path: Output directory (created automatically).
        format: ``"csv"``, ``"json"``, or ``"parquet"``.
    """

    _EXTENSIONS: ClassVar[dict[str, str]] = {"csv": "csv", "json": "jsonl", "parquet": "parquet"}
    _CSV_FIELDS: ClassVar[list[str]] = ["timestamp", "ingestion_id", "value"]

    def __init__(self, *, path: str = "./output", format: str = "csv") -> None:
        super().__init__()
        self._dir = Path(path)
        self._format = format.lower()
        if self._format not in self._EXTENSIONS:
            raise ValueError(f"Unknown file format: {format!r}.  Available: {sorted(self._EXTENSIONS)}")
        self._current_file: io.TextIOWrapper | None = None
        self._csv_writer: csv.DictWriter[str] | None = None
        self._record_buffer: list[dict[str, Any]] = []  # for parquet batching
        self.filepath: Path | None = None

    def connect(self) -> None:
        self._dir.mkdir(parents=True, exist_ok=True)
        suffix = time.strftime("%Y%m%d_%H%M%S", time.localtime())
        self.filepath = self._dir / f"measurements_{suffix}.{self._EXTENSIONS[self._format]}"

        if self._format == "json":
            self._current_file = open(self.filepath, "w", encoding="utf-8")  # noqa: SIM115
        elif self._format == "csv":
            self._current_file = open(self.filepath, "w", newline="", encoding="utf-8")  # noqa: SIM115
            self._csv_writer = csv.DictWriter(
                self._current_file,
                fieldnames=self._CSV_FIELDS,
                extrasaction="ignore",
            )
            self._csv_writer.writeheader()
        # Parquet is binary - we buffer dicts and write on flush via pyarrow

        logger.info("FileSink writing %s to %s", self._format, self.filepath)

    def write(self, measurement: Measurement) -> None:
        if self._format == "parquet":
            self._record_buffer.append(measurement.to_dict())
            return
        if self._current_file is None:
            raise RuntimeError("FileSink.write() called before connect()")
        if self._format == "csv":
            if self._csv_writer is None:
                raise RuntimeError("FileSink CSV writer missing - reconnect the sink")
            self._csv_writer.writerow(measurement.to_dict())
        else:
            self._current_file.write(measurement.to_json() + "\n")

    def flush(self) -> None:
        if self._format == "parquet" and self._record_buffer:
            self._flush_parquet()
        if self._current_file and not self._current_file.closed:
            self._current_file.flush()

    def close(self) -> None:
        self.flush()
        if self._current_file and not self._current_file.closed:
            self._current_file.close()
        self._current_file = None
        self._csv_writer = None

    # --- Parquet ---

    def _flush_parquet(self) -> None:
        try:
            import pyarrow as pa
            import pyarrow.parquet as pq
        except ImportError as err:
            raise ImportError(
                "pyarrow is required for Parquet output.  Install with: pip install treon-payload-converter[file]"
            ) from err

        if self.filepath is None:
            raise RuntimeError("FileSink.flush() called before connect()")

        table = pa.Table.from_pylist(self._record_buffer)
        if self.filepath.exists():
            existing = pq.read_table(str(self.filepath))
            table = pa.concat_tables([existing, table])

        pq.write_table(table, str(self.filepath))
        self._record_buffer.clear()
