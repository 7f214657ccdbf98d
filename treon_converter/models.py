"""Data models for the Treon payload converter.

Defines the ``SensorPayload`` (the incoming sensor node document), the
``DirectionalValue`` used by vibration metrics and the ``Measurement``
that every sink receives.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from enum import Enum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

__all__ = ["DirectionalValue", "Measurement", "PayloadType", "SensorPayload"]


class PayloadType(str, Enum):
    """Known values of the ``Type`` key."""

    SCALAR = "scalar"
    BURST = "burst"


class SensorPayload(BaseModel):
    """A single JSON document sent by a Treon industrial sensor node.

    Only recognized keys are kept; everything else is ignored.  Values are
    stored raw so that numeric coercion happens in exactly one place
    (:func:`treon_converter.coercion.coerce_number`).

    Attributes:
        sensor_node_id: ``SensorNodeId`` - the subject external id.
        type: ``Type`` - ``"scalar"``, ``"burst"`` or another variant.
        timestamp: ``Timestamp`` - epoch seconds.
        vibration: ``Vibration`` - metric name -> directional value.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    sensor_node_id: Any = Field(default=None, alias="SensorNodeId")
    type: Any = Field(default=None, alias="Type")
    timestamp: Any = Field(default=None, alias="Timestamp")

    acceleration: Any = Field(default=None, alias="Acceleration")
    air_quality: Any = Field(default=None, alias="AirQuality")
    air_quality_static: Any = Field(default=None, alias="AirQualityStatic")
    ambient_light: Any = Field(default=None, alias="Ambient_light")
    battery_alert: Any = Field(default=None, alias="BatteryAlert")
    battery_level: Any = Field(default=None, alias="BatteryLevel")
    battery_voltage: Any = Field(default=None, alias="BatteryVoltage")
    co2_index: Any = Field(default=None, alias="CO2Index")
    distance: Any = Field(default=None, alias="Distance")
    hall: Any = Field(default=None, alias="Hall")
    humidity: Any = Field(default=None, alias="Humidity")
    iaq_accuracy: Any = Field(default=None, alias="IAQaccuracy")
    iaq_accuracy_static: Any = Field(default=None, alias="IAQaccuracyStatic")
    movement: Any = Field(default=None, alias="Movement")
    pressure: Any = Field(default=None, alias="Pressure")
    temperature: Any = Field(default=None, alias="Temperature")

    vibration: Any = Field(default=None, alias="Vibration")

    @classmethod
    def from_raw(cls, data: Mapping[str, Any]) -> SensorPayload:
        """Build a payload from a decoded JSON object."""
        return cls.model_validate(dict(data))

    def get(self, wire_name: str) -> Any:
        """Return the raw value stored under the wire key *wire_name*.

        Unrecognized names return ``None``, the same as an absent key.
        """
        attr = _WIRE_TO_ATTR.get(wire_name)
        if attr is None:
            return None
        return getattr(self, attr)


# Wire key (e.g. "Ambient_light") -> model attribute (e.g. "ambient_light")
_WIRE_TO_ATTR: dict[str, str] = {
    (info.alias or name): name for name, info in SensorPayload.model_fields.items()
}


class DirectionalValue(BaseModel):
    """A vibration reading split into optional ``X``, ``Y`` and ``Z`` axes."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    AXES: ClassVar[tuple[str, ...]] = ("X", "Y", "Z")

    X: Any = None
    Y: Any = None
    Z: Any = None

    @classmethod
    def wrap(cls, value: Any) -> DirectionalValue:
        """Wrap a raw vibration entry.

        Objects are read for their ``X``/``Y``/``Z`` keys; any other value
        becomes a directional value without axes.
        """
        if isinstance(value, Mapping):
            return cls.model_validate(dict(value))
        return cls()

    def axes(self) -> list[tuple[str, Any]]:
        """Return ``(axis, raw_value)`` pairs for present axes, in X, Y, Z order."""
        return [(axis, getattr(self, axis)) for axis in self.AXES if getattr(self, axis) is not None]


class Measurement(BaseModel):
    """One time-series point handed to a sink.

    Attributes:
        ingestion_id: ``"{subject}${field}"`` or ``"{subject}${metric}-{axis}"``.
        value: Numeric reading after coercion and scaling.
        timestamp: Epoch milliseconds shared by every point of a payload.
    """

    ingestion_id: str
    value: float
    timestamp: float

    def as_datetime(self) -> datetime:
        """The timestamp as an aware UTC ``datetime``."""
        return datetime.fromtimestamp(self.timestamp / 1000, tz=timezone.utc)

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Return a plain ``dict`` representation (JSON-safe types)."""
        return self.model_dump()

    def to_json(self) -> str:
        """Return a compact JSON string."""
        return self.model_dump_json()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Measurement:
        """Construct a ``Measurement`` from a plain dict."""
        return cls.model_validate(data)
