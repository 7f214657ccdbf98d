"""Callback sink – delegates writes to a user-provided Python callable.

This allows users to hook any custom logic into the converter without
having to subclass :class:`Sink`::

    converter.convert(payload, CallbackSink(lambda m: print(m.ingestion_id)))
"""

from __future__ import annotations

from typing import Any, Callable

from treon_converter.models import Measurement
from treon_converter.sinks.base import Sink

__all__ = ["CallbackSink"]


class CallbackSink(Sink):
    """Wraps a user-supplied function as a sink.

    Parameters:
        callback: ``(measurement: Measurement) -> None``, called once per
            measurement.
        on_error: Optional ``(message: str) -> None`` called for every
            logged error, in addition to the default logging.
    """

    def __init__(
        self,
        callback: Callable[[Measurement], Any],
        *,
        on_error: Callable[[str], Any] | None = None,
    ) -> None:
        super().__init__()
        self._callback = callback
        self._on_error = on_error

    def record_error(self, message: str) -> None:
        super().record_error(message)
        if self._on_error is not None:
            self._on_error(message)

    def connect(self) -> None:
        """No-op."""

    def write(self, measurement: Measurement) -> None:
        self._callback(measurement)

    def flush(self) -> None:
        """No-op."""

    def close(self) -> None:
        """No-op."""
