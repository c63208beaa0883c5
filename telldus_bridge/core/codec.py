"""Translation between telldus state codes and characteristic values.

The hub reports every actuator as a numeric ``state`` plus an optional
``statevalue`` string, and every sensor as a ``data`` list of named readings.
These helpers are pure so the binder can stay focused on call sequencing.
"""

from __future__ import annotations

import math
import re
from typing import Any

from telldus_bridge.core.capabilities import (
    CONTACT_DETECTED,
    CONTACT_NOT_DETECTED,
    SECURITY_ARMED_AWAY,
    SECURITY_DISARMED,
    CharacteristicProps,
)
from telldus_bridge.core.model import RawRecord

STATE_ON = 1
STATE_OFF = 2
STATE_DIM = 16
UNDEFINED_STATEVALUE = "unde"


_LEADING_NUMBER = re.compile(r"\s*([-+]?\d+(?:\.\d+)?)")


def _to_int(value: Any) -> int | None:
    """Read the leading integer of a hub value, so "128.0" and "12abc" still count."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return int(value) if math.isfinite(value) else None
    if not isinstance(value, str):
        return None
    match = _LEADING_NUMBER.match(value)
    if match is None:
        return None
    return int(float(match.group(1)))


def _to_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def state_code(record: RawRecord) -> int | None:
    return _to_int(record.get("state"))


def _dim_level(record: RawRecord) -> int | None:
    """Return the 0-255 dim level when the record reports a defined dim state."""
    if state_code(record) != STATE_DIM:
        return None
    statevalue = record.get("statevalue")
    if statevalue == UNDEFINED_STATEVALUE:
        return None
    return _to_int(statevalue)


def decode_on(record: RawRecord) -> bool:
    return state_code(record) != STATE_OFF


def decode_brightness(record: RawRecord) -> int:
    if state_code(record) == STATE_ON:
        return 100
    level = _dim_level(record)
    if level is None:
        return 0
    return round(level * 100 / 255)


def percentage_to_bits(percentage: float) -> int:
    return round(percentage * 255 / 100)


def sensor_reading(record: RawRecord, name: str) -> float:
    """Return the named sensor value, NaN when absent or not numeric."""
    for entry in record.get("data") or ():
        if entry.get("name") == name:
            value = entry.get("value")
            if value in (None, ""):
                return math.nan
            return _to_float(value)
    return math.nan


def decode_temperature(record: RawRecord) -> float:
    return _or_zero(sensor_reading(record, "temp"))


def decode_humidity(record: RawRecord) -> float:
    return _or_zero(sensor_reading(record, "humidity"))


def _or_zero(value: float) -> float:
    return 0 if math.isnan(value) else value


def clamp(value: float, props: CharacteristicProps) -> float:
    return max(props.min_value, min(props.max_value, value))


def decode_security_state(record: RawRecord) -> int:
    if state_code(record) == STATE_OFF:
        return SECURITY_DISARMED
    level = _dim_level(record)
    if level is None:
        return SECURITY_ARMED_AWAY
    return level


def decode_contact_state(record: RawRecord) -> int:
    return CONTACT_DETECTED if state_code(record) == STATE_ON else CONTACT_NOT_DETECTED


def position_direction(value: float) -> bool:
    """True means up, False means down."""
    return value > 0
