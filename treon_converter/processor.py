"""Processor - reads payload documents and runs them through the converter.

Accepted input, per file:

- a single JSON object (one payload),
- a JSON array of payload objects,
- JSON Lines (one payload object per line).

``"-"`` reads from stdin.
"""

from __future__ import annotations

import contextlib
import json
import logging
import sys
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from treon_converter.converter import PayloadConverter
from treon_converter.models import Measurement
from treon_converter.sinks.base import IngestionContext, Sink
from treon_converter.sinks.callback import CallbackSink

__all__ = ["PayloadProcessor", "PayloadReadError", "ProcessingStats", "iter_payloads", "read_payloads"]

logger = logging.getLogger("treon_converter.processor")


class PayloadReadError(Exception):
    """Raised when an input source cannot be read or decoded."""


class ProcessingStats(BaseModel):
    """Counters for one :meth:`PayloadProcessor.run`.

    Attributes:
        payloads: Payload documents handed to the converter.
        measurements: Measurements written to the sink.
        errors: Errors the converter logged on the sink.
    """

    payloads: int = 0
    measurements: int = 0
    errors: int = 0


def read_payloads(source: str | Path) -> list[Any]:
    """Decode every payload document in *source* (a path or ``"-"``)."""
    if str(source) == "-":
        text = sys.stdin.read()
        name = "<stdin>"
    else:
        path = Path(source)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise PayloadReadError(f"Cannot read {path}: {exc}") from exc
        name = str(path)

    if not text.strip():
        return []

    try:
        document = json.loads(text)
    except json.JSONDecodeError:
        return _read_json_lines(text, name)

    if isinstance(document, list):
        return document
    return [document]


def _read_json_lines(text: str, name: str) -> list[Any]:
    payloads: list[Any] = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            payloads.append(json.loads(line))
        except json.JSONDecodeError as exc:
            raise PayloadReadError(f"{name}:{lineno}: invalid JSON: {exc.msg}") from exc
    return payloads


def iter_payloads(sources: Iterable[str | Path]) -> Iterator[Any]:
    """Yield payload documents from every source in order."""
    for source in sources:
        payloads = read_payloads(source)
        logger.debug("Read %d payloads from %s", len(payloads), source)
        yield from payloads


class _Broadcast(IngestionContext):
    """Forwards converter output to every registered sink and counts it."""

    def __init__(self, sinks: list[Sink], stats: ProcessingStats) -> None:
        self._sinks = sinks
        self._stats = stats

    def add_measurement(self, ingestion_id: str, value: float, timestamp: float) -> None:
        self._stats.measurements += 1
        for sink in self._sinks:
            sink.add_measurement(ingestion_id, value, timestamp)

    def log_error(self, message: str) -> None:
        self._stats.errors += 1
        logger.error("%s", message)
        for sink in self._sinks:
            sink.record_error(message)


class PayloadProcessor:
    """Feeds payload documents through a :class:`PayloadConverter` into sinks.

    Example::

        from treon_converter import PayloadConverter, PayloadProcessor
        from treon_converter.sinks import ConsoleSink

        processor = PayloadProcessor(PayloadConverter())
        processor.add_sink(ConsoleSink(fmt="json"))
        stats = processor.run_files(["payloads.jsonl"])

    Parameters:
        converter: The converter to use; a default one when omitted.
    """

    def __init__(self, converter: PayloadConverter | None = None) -> None:
        self.converter = converter or PayloadConverter()
        self._sinks: list[Sink] = []

    # ------------------------------------------------------------------
    # Sink management
    # ------------------------------------------------------------------

    def add_sink(self, sink: Sink | Callable[[Measurement], Any]) -> None:
        """Register a sink, or any callable accepting a :class:`Measurement`."""
        if not isinstance(sink, Sink):
            sink = CallbackSink(sink)
        self._sinks.append(sink)

    @property
    def sinks(self) -> list[Sink]:
        return list(self._sinks)

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def run(self, payloads: Iterable[Any]) -> ProcessingStats:
        """Convert *payloads* one by one.

        Every sink is connected before the first payload and flushed and
        closed afterwards, also when reading or a sink fails midway.
        """
        if not self._sinks:
            raise RuntimeError("No sinks registered - call add_sink() first")

        stats = ProcessingStats()
        context = _Broadcast(self._sinks, stats)

        with contextlib.ExitStack() as stack:
            for sink in self._sinks:
                stack.enter_context(sink)
            for payload in payloads:
                stats.payloads += 1
                self.converter.convert(payload, context)

        logger.info(
            "Processed %d payloads: %d measurements, %d errors",
            stats.payloads,
            stats.measurements,
            stats.errors,
        )
        return stats

    def run_files(self, sources: Iterable[str | Path]) -> ProcessingStats:
        """Read payloads from *sources* and convert them."""
        return self.run(iter_payloads(sources))
