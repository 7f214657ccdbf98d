"""Treon sensor payload -> measurement converter.

A payload is validated (subject id, type, timestamp) and then fanned out
into individually named measurements:

1. every optional scalar field in :data:`OPTIONAL_FIELDS`,
2. ``Temperature`` a second time,
3. for ``"scalar"`` payloads, each ``Vibration`` metric per axis.

Sensor JSON reference: https://kb.treon.fi/knowledge_base/sensors/sensorjson/
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any

from pydantic import ValidationError

from treon_converter.coercion import CoercionError, coerce_number
from treon_converter.models import DirectionalValue, Measurement, PayloadType, SensorPayload
from treon_converter.sinks.base import IngestionContext
from treon_converter.sinks.memory import MemorySink

__all__ = [
    "METRIC_NAME_MAPPING",
    "METRIC_SCALARS",
    "OPTIONAL_FIELDS",
    "PayloadConverter",
    "PayloadRejectedError",
    "build_ingestion_id",
]

logger = logging.getLogger("treon_converter.converter")

# -----------------------------------------------------------------------
# Lookup tables
# -----------------------------------------------------------------------

OPTIONAL_FIELDS: tuple[str, ...] = (
    "Acceleration",  # single x,y,z acceleration value
    "AirQuality",  # air quality index, volatile organic compounds
    "AirQualityStatic",  # slowly changing AirQuality (more hysteresis)
    "Ambient_light",  # lux
    "BatteryAlert",  # boolean, only true is sent
    "BatteryLevel",  # %
    "BatteryVoltage",  # mV
    "CO2Index",  # CO2 equivalent index
    "Distance",
    "Hall",  # magnetic hall switch (boolean)
    "Humidity",  # %
    "IAQaccuracy",  # air quality sensor calibration status
    "IAQaccuracyStatic",  # IAQ accuracy for AirQualityStatic
    "Movement",  # boolean, acceleration exceeded a predefined value
    "Pressure",  # hPa
    "Temperature",  # °C
)

VIBRATION_SCALAR = 1 / 100

# Nodes report velocity metrics without their "V-" prefix
METRIC_NAME_MAPPING: Mapping[str, str] = MappingProxyType(
    {
        "RMS": "V-RMS",
        "P2P": "V-P2P",
        "Z2P": "V-Z2P",
    }
)

METRIC_SCALARS: Mapping[str, float] = MappingProxyType(
    {
        "V-P2P": VIBRATION_SCALAR,
        "A-P2P": VIBRATION_SCALAR,
        "V-RMS": VIBRATION_SCALAR,
        "A-RMS": VIBRATION_SCALAR,
        "V-Z2P": VIBRATION_SCALAR,
        "A-Z2P": VIBRATION_SCALAR,
        "Kurtosis": VIBRATION_SCALAR,
        "Crest": VIBRATION_SCALAR,
    }
)


def build_ingestion_id(subject_external_id: str, name: str, direction: str | None = None) -> str:
    """Return ``"{subject}${name}"`` or ``"{subject}${name}-{direction}"``."""
    if direction is None:
        return f"{subject_external_id}${name}"
    return f"{subject_external_id}${name}-{direction}"


class PayloadRejectedError(ValueError):
    """Raised by :meth:`PayloadConverter.measurements` when a payload logs errors."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = errors


# -----------------------------------------------------------------------
# Converter
# -----------------------------------------------------------------------


class PayloadConverter:
    """Maps Treon sensor payloads into measurements on an :class:`IngestionContext`.

    The converter holds no per-payload state; one instance may be reused
    for any number of payloads.

    Parameters:
        vibration_exclude:
            Raw vibration metric names (as sent, before remapping) that are
            skipped.  Empty by default.
    """

    def __init__(self, *, vibration_exclude: Iterable[str] = ()) -> None:
        self.vibration_exclude: frozenset[str] = frozenset(vibration_exclude)

    def convert(self, payload: SensorPayload | Mapping[str, Any], context: IngestionContext) -> None:
        """Convert one payload, reporting every outcome through *context*."""
        if not isinstance(payload, SensorPayload):
            if not isinstance(payload, Mapping):
                context.log_error(f"Payload is not a JSON object: {type(payload).__name__}")
                return
            try:
                payload = SensorPayload.from_raw(payload)
            except ValidationError as exc:
                context.log_error(f"Invalid payload: {exc}")
                return

        subject_external_id = payload.sensor_node_id
        if subject_external_id is None:
            context.log_error(f"No valid subject external id: {subject_external_id}")
            return
        subject_external_id = str(subject_external_id)

        if payload.type == PayloadType.BURST.value:
            logger.debug("Skipping unsupported burst payload from %s", subject_external_id)
            return

        timestamp = self._timestamp_ms(payload.timestamp)
        if timestamp is None:
            context.log_error(f"No valid timestamp: {payload.timestamp!r}")
            return

        self._parse_optional_fields(payload, context, subject_external_id, timestamp)
        self._parse_temperature(payload, context, subject_external_id, timestamp)
        if payload.type == PayloadType.SCALAR.value:
            self._parse_vibration(payload, context, subject_external_id, timestamp)

    def measurements(self, payload: SensorPayload | Mapping[str, Any]) -> list[Measurement]:
        """Convert *payload* and return its measurements.

        Raises:
            PayloadRejectedError: if the conversion logged any error.
        """
        sink = MemorySink()
        self.convert(payload, sink)
        if sink.errors:
            raise PayloadRejectedError(sink.errors)
        return sink.measurements

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    @staticmethod
    def _timestamp_ms(raw: Any) -> float | int | None:
        """Epoch seconds -> epoch milliseconds, ``None`` when missing or not numeric."""
        if raw is None or isinstance(raw, bool):
            return None
        try:
            timestamp = float(coerce_number(raw)) * 1000
        except CoercionError:
            return None
        if not math.isfinite(timestamp):
            return None
        return timestamp

    def _parse_optional_fields(
        self,
        payload: SensorPayload,
        context: IngestionContext,
        subject_external_id: str,
        timestamp: float,
    ) -> None:
        for field in OPTIONAL_FIELDS:
            ingestion_id = build_ingestion_id(subject_external_id, field)
            self._ingest_if_present(context, ingestion_id, payload.get(field), timestamp)

    def _parse_temperature(
        self,
        payload: SensorPayload,
        context: IngestionContext,
        subject_external_id: str,
        timestamp: float,
    ) -> None:
        # Also emitted by _parse_optional_fields; sinks see it twice.
        ingestion_id = build_ingestion_id(subject_external_id, "Temperature")
        self._ingest_if_present(context, ingestion_id, payload.temperature, timestamp)

    def _parse_vibration(
        self,
        payload: SensorPayload,
        context: IngestionContext,
        subject_external_id: str,
        timestamp: float,
    ) -> None:
        vibration = payload.vibration
        if vibration is None:
            return
        if not isinstance(vibration, Mapping):
            context.log_error(
                f"Vibration of {subject_external_id} is not an object: {type(vibration).__name__}"
            )
            return

        for metric_external_id, raw_value in vibration.items():
            if metric_external_id in self.vibration_exclude:
                continue
            metric_external_id = METRIC_NAME_MAPPING.get(metric_external_id, metric_external_id)
            scalar = METRIC_SCALARS.get(metric_external_id, 1)

            for direction, axis_value in DirectionalValue.wrap(raw_value).axes():
                ingestion_id = build_ingestion_id(subject_external_id, metric_external_id, direction)
                try:
                    value = coerce_number(axis_value) * scalar
                except CoercionError as exc:
                    context.log_error(f"{ingestion_id}: {exc}")
                    continue
                context.add_measurement(ingestion_id, value, timestamp)

    @staticmethod
    def _ingest_if_present(
        context: IngestionContext,
        ingestion_id: str,
        value: Any,
        timestamp: float,
    ) -> None:
        if value is None:
            return
        try:
            number = coerce_number(value)
        except CoercionError as exc:
            context.log_error(f"{ingestion_id}: {exc}")
            return
        context.add_measurement(ingestion_id, number, timestamp)
