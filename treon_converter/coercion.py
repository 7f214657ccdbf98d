"""Numeric coercion for raw payload values.

Sensor nodes send readings as JSON numbers, booleans (alert / switch style
fields such as ``BatteryAlert``, ``Hall`` and ``Movement``) and now and
then as numeric strings.  :func:`coerce_number` is the one place where a
raw value becomes a number:

=================  ===========================
raw value          result
=================  ===========================
``True``/``False``  ``1`` / ``0``
``int``/``float``   unchanged (must be finite)
numeric ``str``     parsed ``float``
anything else       :class:`CoercionError`
=================  ===========================
"""

from __future__ import annotations

import math
import re
from typing import Any

__all__ = ["CoercionError", "coerce_number"]

# Plain decimal / exponent notation, ASCII digits only
_NUMERIC_STRING = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class CoercionError(ValueError):
    """Raised when a raw payload value has no numeric meaning."""

    def __init__(self, value: Any) -> None:
        super().__init__(f"Cannot convert {value!r} ({type(value).__name__}) to a number")
        self.value = value


def coerce_number(value: Any) -> float | int:
    """Convert a raw payload value to a number.

    Raises:
        CoercionError: for ``None``, empty or non-numeric strings,
            numbers outside the finite float range, objects and arrays.
    """
    # bool is a subclass of int, check it first
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        try:
            number = float(value)
        except OverflowError as err:
            raise CoercionError(value) from err
        if not math.isfinite(number):
            raise CoercionError(value)
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise CoercionError(value)
        return value
    if isinstance(value, str):
        text = value.strip()
        if not _NUMERIC_STRING.fullmatch(text):
            raise CoercionError(value)
        number = float(text)
        if not math.isfinite(number):
            raise CoercionError(value)
        return number
    raise CoercionError(value)
