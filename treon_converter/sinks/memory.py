"""Memory sink - keeps every measurement in a list.

Used by :meth:`PayloadConverter.measurements` and handy in tests.
"""

from __future__ import annotations

from treon_converter.models import Measurement
from treon_converter.sinks.base import Sink

__all__ = ["MemorySink"]


class MemorySink(Sink):
    """Collects measurements in ``self.measurements`` and errors in ``self.errors``."""

    def __init__(self) -> None:
        super().__init__()
        self.measurements: list[Measurement] = []

    def connect(self) -> None:
        """No-op."""

    def write(self, measurement: Measurement) -> None:
        self.measurements.append(measurement)

    def flush(self) -> None:
        """No-op."""

    def close(self) -> None:
        """No-op."""

    def clear(self) -> None:
        """Forget everything collected so far."""
        self.measurements.clear()
        self.errors.clear()
        self.measurement_count = 0
