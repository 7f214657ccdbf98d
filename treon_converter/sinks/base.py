"""Sink abstraction layer.

Provides:
- ``IngestionContext`` - the two-call contract the converter writes to
                         (``add_measurement`` / ``log_error``).
- ``Sink``             - abstract base class that every concrete sink
                         implements; turns ``add_measurement`` calls into
                         :class:`Measurement` objects and keeps the
                         logged errors.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from types import TracebackType

from treon_converter.models import Measurement

__all__ = ["IngestionContext", "Sink"]

logger = logging.getLogger("treon_converter.sinks")


# -----------------------------------------------------------------------
# Converter-facing contract
# -----------------------------------------------------------------------


class IngestionContext(ABC):
    """Receiver of converter output.

    Implementations must accept repeated ``(ingestion_id, timestamp)``
    pairs; a payload carrying ``Temperature`` emits it twice.
    ``log_error`` must never raise.
    """

    @abstractmethod
    def add_measurement(self, ingestion_id: str, value: float, timestamp: float) -> None:
        """Record one time-series point (timestamp in epoch milliseconds)."""

    @abstractmethod
    def log_error(self, message: str) -> None:
        """Record a human-readable diagnostic for a rejected payload or value."""


# -----------------------------------------------------------------------
# Sink ABC
# -----------------------------------------------------------------------


class Sink(IngestionContext):
    """Abstract base class for all sinks.

    Concrete sinks must implement ``connect``, ``write``, ``flush`` and
    ``close``.  Sinks can be used as context managers, which connects on
    entry and flushes / closes on exit.
    """

    def __init__(self) -> None:
        self.errors: list[str] = []
        self.measurement_count = 0

    # -- IngestionContext --

    def add_measurement(self, ingestion_id: str, value: float, timestamp: float) -> None:
        measurement = Measurement(ingestion_id=ingestion_id, value=value, timestamp=timestamp)
        self.measurement_count += 1
        self.write(measurement)

    def log_error(self, message: str) -> None:
        self.record_error(message)
        logger.error("%s: %s", type(self).__name__, message)

    def record_error(self, message: str) -> None:
        """Keep *message* in ``self.errors`` without logging it."""
        self.errors.append(message)

    # -- lifecycle --

    @abstractmethod
    def connect(self) -> None:
        """Establish connection / open resources."""

    @abstractmethod
    def write(self, measurement: Measurement) -> None:
        """Deliver one measurement to the destination."""

    @abstractmethod
    def flush(self) -> None:
        """Flush any internal buffers the sink may hold."""

    @abstractmethod
    def close(self) -> None:
        """Release resources / close connections."""

    def __enter__(self) -> Sink:
        self.connect()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.flush()
        self.close()
