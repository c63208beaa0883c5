"""Static mapping from telldus model identifiers to accessory services."""

from __future__ import annotations

from telldus_bridge.core.capabilities import CharacteristicKind as C
from telldus_bridge.core.capabilities import ServiceKind as S
from telldus_bridge.core.model import CapabilityDefinition, ModelEntry

_SWITCH = CapabilityDefinition(S.SWITCH, (C.ON,))
_TEMPERATURE = CapabilityDefinition(S.TEMPERATURE_SENSOR, (C.CURRENT_TEMPERATURE,))
_HUMIDITY = CapabilityDefinition(S.HUMIDITY_SENSOR, (C.CURRENT_RELATIVE_HUMIDITY,))

MODEL_TABLE: tuple[ModelEntry, ...] = (
    ModelEntry("selflearning-switch", (_SWITCH,)),
    ModelEntry("codeswitch", (CapabilityDefinition(S.LIGHTBULB, (C.ON,)),)),
    ModelEntry("selflearning-dimmer", (CapabilityDefinition(S.LIGHTBULB, (C.ON, C.BRIGHTNESS)),)),
    ModelEntry("temperature", (_TEMPERATURE,)),
    # oregon protocol temperature sensor
    ModelEntry("EA4C", (_TEMPERATURE,)),
    ModelEntry("temperaturehumidity", (_TEMPERATURE, _HUMIDITY)),
    ModelEntry("1A2D", (_TEMPERATURE, _HUMIDITY)),
    ModelEntry(
        "window-covering",
        (CapabilityDefinition(S.WINDOW_COVERING, (C.CURRENT_POSITION, C.TARGET_POSITION, C.POSITION_STATE)),),
    ),
    ModelEntry("switch", (_SWITCH,)),
    ModelEntry("010f-0c02-1003", (_TEMPERATURE,)),
    ModelEntry("019a-0003-000a", (_TEMPERATURE, _HUMIDITY)),
    ModelEntry("0060-0015-0001", (_TEMPERATURE,)),
    ModelEntry("0154-0003-000a", (_SWITCH,)),
)


def find_definitions(model: str) -> tuple[CapabilityDefinition, ...] | None:
    for entry in MODEL_TABLE:
        if entry.model == model:
            return entry.definitions
    return None


def valid_models() -> tuple[str, ...]:
    return tuple(entry.model for entry in MODEL_TABLE)
