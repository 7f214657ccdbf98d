"""Treon payload converter - map industrial sensor node JSON payloads to
normalized time-series measurements.

Quick start::

    from treon_converter import PayloadConverter
    from treon_converter.sinks import ConsoleSink

    converter = PayloadConverter()
    converter.convert(
        {"SensorNodeId": "S1", "Type": "scalar", "Timestamp": 1000, "Temperature": 21.5},
        ConsoleSink(),
    )
"""

from __future__ import annotations

from treon_converter.coercion import CoercionError, coerce_number
from treon_converter.converter import PayloadConverter, PayloadRejectedError, build_ingestion_id
from treon_converter.models import DirectionalValue, Measurement, PayloadType, SensorPayload
from treon_converter.processor import PayloadProcessor, PayloadReadError, ProcessingStats

__all__ = [
    "CoercionError",
    "DirectionalValue",
    "Measurement",
    "PayloadConverter",
    "PayloadProcessor",
    "PayloadReadError",
    "PayloadRejectedError",
    "PayloadType",
    "ProcessingStats",
    "SensorPayload",
    "build_ingestion_id",
    "coerce_number",
]

__version__ = "0.1.0"
