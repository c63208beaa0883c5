"""Service and characteristic kinds understood by the accessory layer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ServiceKind(str, Enum):
    ACCESSORY_INFORMATION = "AccessoryInformation"
    SWITCH = "Switch"
    LIGHTBULB = "Lightbulb"
    TEMPERATURE_SENSOR = "TemperatureSensor"
    HUMIDITY_SENSOR = "HumiditySensor"
    WINDOW_COVERING = "WindowCovering"
    SECURITY_SYSTEM = "SecuritySystem"
    CONTACT_SENSOR = "ContactSensor"


class CharacteristicKind(str, Enum):
    MANUFACTURER = "Manufacturer"
    MODEL = "Model"
    SERIAL_NUMBER = "SerialNumber"
    NAME = "Name"
    ON = "On"
    BRIGHTNESS = "Brightness"
    CURRENT_TEMPERATURE = "CurrentTemperature"
    CURRENT_RELATIVE_HUMIDITY = "CurrentRelativeHumidity"
    CURRENT_POSITION = "CurrentPosition"
    TARGET_POSITION = "TargetPosition"
    POSITION_STATE = "PositionState"
    SECURITY_SYSTEM_CURRENT_STATE = "SecuritySystemCurrentState"
    CONTACT_SENSOR_STATE = "ContactSensorState"

    @classmethod
    def parse(cls, text: str) -> CharacteristicKind:
        """Look up a kind by value or member name, case-insensitively."""
        lowered = text.strip().lower().replace("-", "_")
        for kind in cls:
            if kind.value.lower() == lowered.replace("_", "") or kind.name.lower() == lowered:
                return kind
        raise ValueError(f"Unknown characteristic '{text}'")


@dataclass(frozen=True)
class CharacteristicProps:
    min_value: float
    max_value: float


CHARACTERISTIC_PROPS: dict[CharacteristicKind, CharacteristicProps] = {
    CharacteristicKind.BRIGHTNESS: CharacteristicProps(0, 100),
    CharacteristicKind.CURRENT_TEMPERATURE: CharacteristicProps(-40, 999),
    CharacteristicKind.CURRENT_RELATIVE_HUMIDITY: CharacteristicProps(0, 100),
    CharacteristicKind.CURRENT_POSITION: CharacteristicProps(0, 100),
    CharacteristicKind.TARGET_POSITION: CharacteristicProps(0, 100),
}

POSITION_STATE_STOPPED = 2
SECURITY_ARMED_AWAY = 2
SECURITY_DISARMED = 3
CONTACT_NOT_DETECTED = 0
CONTACT_DETECTED = 1
