"""Console sink - prints measurements to stdout.

Useful for debugging, demos, and verifying a payload maps the way you
expect.
"""

from __future__ import annotations

import sys
from typing import IO

from treon_converter.models import Measurement
from treon_converter.sinks.base import Sink

__all__ = ["ConsoleSink"]


class ConsoleSink(Sink):
    """Writes measurements to the console (stdout by default).

    Parameters:
        fmt: Output format - ``"text"`` (human-readable) or ``"json"``
             (one JSON object per measurement).
        stream: Writable file-like object (defaults to ``sys.stdout``).
    """

    def __init__(self, *, fmt: str = "text", stream: IO[str] | None = None) -> None:
        super().__init__()
        self._fmt = fmt
        self._stream = stream or sys.stdout

    def connect(self) -> None:
        """No-op - stdout is always available."""

    def write(self, measurement: Measurement) -> None:
        if self._fmt == "json":
            self._stream.write(measurement.to_json() + "\n")
        else:
            self._stream.write(
                f"{measurement.as_datetime().isoformat(timespec='milliseconds')} "
                f"{measurement.ingestion_id:<40s} {measurement.value:>14.4f}\n"
            )

    def flush(self) -> None:
        self._stream.flush()

    def close(self) -> None:
        """No-op - we do not own stdout."""
