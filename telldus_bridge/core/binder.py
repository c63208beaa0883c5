"""Attach live read/write behavior to accessory characteristics.

Each characteristic kind maps to one factory that knows which hub call feeds
it, how to decode the hub record, and how to encode a write. Handlers for
different characteristics may run concurrently; the only state they share is
the per-device position cell, which only the TargetPosition writer replaces.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from telldus_bridge.core import codec
from telldus_bridge.core.capabilities import (
    CHARACTERISTIC_PROPS,
    POSITION_STATE_STOPPED,
    SECURITY_DISARMED,
    CharacteristicKind,
    ServiceKind,
)
from telldus_bridge.core.errors import CharacteristicIOError, HubError
from telldus_bridge.core.model import (
    CapabilityDefinition,
    CharacteristicBinding,
    Device,
    ServiceInstance,
    Setter,
)
from telldus_bridge.hub.base import HubClient

LOGGER = logging.getLogger(__name__)

DEFAULT_SETTLE_DELAY_S = 1.0

_Factory = Callable[["CharacteristicBinder", Device, CapabilityDefinition], CharacteristicBinding]


class CharacteristicBinder:
    def __init__(self, hub: HubClient, *, settle_delay_s: float = DEFAULT_SETTLE_DELAY_S) -> None:
        self.hub = hub
        self.settle_delay_s = settle_delay_s

    def bind(self, device: Device, definition: CapabilityDefinition) -> ServiceInstance:
        service = ServiceInstance(kind=definition.service, name=device.name)
        for kind in definition.characteristics:
            factory = _FACTORIES.get(kind)
            if factory is None:
                raise ValueError(f"No binding defined for characteristic '{kind.value}'")
            service.add(factory(self, device, definition))
        return service

    def bind_information(self, device: Device) -> ServiceInstance:
        service = ServiceInstance(kind=ServiceKind.ACCESSORY_INFORMATION, name=device.name)
        service.add(_constant(CharacteristicKind.MANUFACTURER, device.manufacturer))
        service.add(_constant(CharacteristicKind.MODEL, device.model))
        service.add(_constant(CharacteristicKind.SERIAL_NUMBER, str(device.id)))
        service.add(_constant(CharacteristicKind.NAME, device.name))
        return service

    async def _settle(self) -> None:
        # the hub queues or drops commands that arrive back to back
        if self.settle_delay_s > 0:
            await asyncio.sleep(self.settle_delay_s)

    async def _call(self, device: Device, action: str, call: Awaitable[Any]) -> Any:
        try:
            return await call
        except HubError as exc:
            device.log("%s failed: %s", action, exc)
            raise CharacteristicIOError(f"{action} failed for '{device.name}' (id {device.id}): {exc}") from exc

    async def _device_info(self, device: Device) -> Any:
        return await self._call(device, "Reading device state", self.hub.get_device_info(device.id))

    async def _sensor_info(self, device: Device) -> Any:
        return await self._call(device, "Reading sensor", self.hub.get_sensor_info(device.id))

    def _on(self, device: Device, definition: CapabilityDefinition) -> CharacteristicBinding:
        is_dimmer = CharacteristicKind.BRIGHTNESS in definition.characteristics

        async def get() -> bool:
            record = await self._device_info(device)
            value = codec.decode_on(record)
            device.log("Getting state for switch %s [%s]", record.get("name", device.name), "on" if value else "off")
            return value

        async def set_(power_on: Any) -> None:
            power_on = bool(power_on)
            record = await self._device_info(device)
            # HomeKit sends On together with Brightness; turning an already lit
            # dimmer on again would reset its level.
            if power_on and is_dimmer and codec.decode_on(record):
                device.log("Already on, skipping turn on for dimmer")
                return
            device.log("Turning %s", "on" if power_on else "off")
            await self._call(device, "Switching", self.hub.on_off_device(device.id, power_on))

        return CharacteristicBinding(CharacteristicKind.ON, get, set_, value=codec.decode_on(device.raw))

    def _brightness(self, device: Device, definition: CapabilityDefinition) -> CharacteristicBinding:
        async def get() -> int:
            record = await self._device_info(device)
            value = codec.decode_brightness(record)
            device.log("Getting value for dimmer %s [%s]", record.get("name", device.name), value)
            return value

        async def set_(level: Any) -> None:
            bits = codec.percentage_to_bits(float(level))
            device.log("Dimming to %s%% (level %s)", level, bits)
            await self._call(device, "Dimming", self.hub.dim_device(device.id, bits))
            await self._settle()

        return CharacteristicBinding(
            CharacteristicKind.BRIGHTNESS,
            get,
            set_,
            props=CHARACTERISTIC_PROPS[CharacteristicKind.BRIGHTNESS],
            value=codec.decode_brightness(device.raw),
        )

    def _temperature(self, device: Device, definition: CapabilityDefinition) -> CharacteristicBinding:
        props = CHARACTERISTIC_PROPS[CharacteristicKind.CURRENT_TEMPERATURE]

        async def get() -> float:
            record = await self._sensor_info(device)
            value = codec.clamp(codec.decode_temperature(record), props)
            device.log("Getting temp for sensor %s [%s]", record.get("name", device.name), value)
            return value

        return CharacteristicBinding(CharacteristicKind.CURRENT_TEMPERATURE, get, props=props)

    def _humidity(self, device: Device, definition: CapabilityDefinition) -> CharacteristicBinding:
        props = CHARACTERISTIC_PROPS[CharacteristicKind.CURRENT_RELATIVE_HUMIDITY]

        async def get() -> float:
            record = await self._sensor_info(device)
            value = codec.clamp(codec.decode_humidity(record), props)
            device.log("Getting humidity for sensor %s [%s]", record.get("name", device.name), value)
            return value

        return CharacteristicBinding(CharacteristicKind.CURRENT_RELATIVE_HUMIDITY, get, props=props)

    def _cached_position(
        self, kind: CharacteristicKind, device: Device, setter: Setter | None = None
    ) -> CharacteristicBinding:
        async def get() -> int:
            value = device.position.value or 0
            device.log("Get %s %s", kind.value, value)
            return value

        return CharacteristicBinding(kind, get, setter, props=CHARACTERISTIC_PROPS[kind])

    def _current_position(self, device: Device, definition: CapabilityDefinition) -> CharacteristicBinding:
        return self._cached_position(CharacteristicKind.CURRENT_POSITION, device)

    def _target_position(self, device: Device, definition: CapabilityDefinition) -> CharacteristicBinding:
        async def set_(value: Any) -> None:
            value = int(value)
            # cached before the hub acknowledges so reads reflect the request
            device.position.replace(value)
            up = codec.position_direction(value)
            device.log("Door %s", "up" if up else "down")
            await self._call(device, "Moving", self.hub.up_down_device(device.id, up))
            await self._settle()

        return self._cached_position(CharacteristicKind.TARGET_POSITION, device, set_)

    def _position_state(self, device: Device, definition: CapabilityDefinition) -> CharacteristicBinding:
        async def get() -> int:
            device.log("Get PositionState")
            return POSITION_STATE_STOPPED

        return CharacteristicBinding(CharacteristicKind.POSITION_STATE, get)

    def _security_state(self, device: Device, definition: CapabilityDefinition) -> CharacteristicBinding:
        async def get() -> int:
            record = await self._device_info(device)
            value = codec.decode_security_state(record)
            device.log(
                "Getting current state for security %s [%s]",
                record.get("name", device.name),
                "disarmed" if value == SECURITY_DISARMED else "armed",
            )
            await self._settle()
            return value

        async def set_(state: Any) -> None:
            state = int(state)
            device.log("Setting security state to %s", state)
            await self._call(device, "Arming", self.hub.dim_device(device.id, state))

        return CharacteristicBinding(CharacteristicKind.SECURITY_SYSTEM_CURRENT_STATE, get, set_)

    def _contact_state(self, device: Device, definition: CapabilityDefinition) -> CharacteristicBinding:
        async def get() -> int:
            record = await self._device_info(device)
            value = codec.decode_contact_state(record)
            device.log(
                "Getting state for contact %s [%s]",
                record.get("name", device.name),
                "open" if value == 1 else "closed",
            )
            return value

        return CharacteristicBinding(CharacteristicKind.CONTACT_SENSOR_STATE, get)


def _constant(kind: CharacteristicKind, value: Any) -> CharacteristicBinding:
    async def get() -> Any:
        return value

    return CharacteristicBinding(kind, get, value=value)


_FACTORIES: dict[CharacteristicKind, _Factory] = {
    CharacteristicKind.ON: CharacteristicBinder._on,
    CharacteristicKind.BRIGHTNESS: CharacteristicBinder._brightness,
    CharacteristicKind.CURRENT_TEMPERATURE: CharacteristicBinder._temperature,
    CharacteristicKind.CURRENT_RELATIVE_HUMIDITY: CharacteristicBinder._humidity,
    CharacteristicKind.CURRENT_POSITION: CharacteristicBinder._current_position,
    CharacteristicKind.TARGET_POSITION: CharacteristicBinder._target_position,
    CharacteristicKind.POSITION_STATE: CharacteristicBinder._position_state,
    CharacteristicKind.SECURITY_SYSTEM_CURRENT_STATE: CharacteristicBinder._security_state,
    CharacteristicKind.CONTACT_SENSOR_STATE: CharacteristicBinder._contact_state,
}
