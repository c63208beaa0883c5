"""Core data models used across resolver, binder, platform, and CLI."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from telldus_bridge.core.capabilities import CharacteristicKind, CharacteristicProps, ServiceKind
from telldus_bridge.core.errors import ReadOnlyCharacteristicError, ValueOutOfRangeError

LOGGER = logging.getLogger(__name__)

RawRecord = Mapping[str, Any]
Getter = Callable[[], Awaitable[Any]]
Setter = Callable[[Any], Awaitable[None]]

UNKNOWN = "unknown"


class HubMode(str, Enum):
    LOCAL = "local"
    CLOUD = "cloud"


@dataclass(frozen=True)
class DeviceOverride:
    id: str | int | None = None
    local_id: str | int | None = None
    type: str | None = None
    disabled: bool = False
    model: str | None = None
    manufacturer: str | None = None
    name: str | None = None


class PositionCell:
    """Last target position written for one device."""

    __slots__ = ("value",)

    def __init__(self) -> None:
        self.value: int | None = None

    def replace(self, value: int) -> None:
        self.value = value


@dataclass(frozen=True)
class Device:
    id: str | int
    name: str
    model: str
    manufacturer: str
    raw_model: str | None
    raw: RawRecord
    position: PositionCell = field(default_factory=PositionCell, compare=False, repr=False)

    @classmethod
    def from_record(cls, record: RawRecord, override: DeviceOverride | None = None) -> Device:
        device_id = record["id"]
        name = record.get("name") or ""
        raw_model = record.get("model")
        LOGGER.info("Creating accessory with ID %s. Name from telldus: %s", device_id, name)

        parts = (raw_model or "").split(":")
        model = parts[0] or UNKNOWN
        manufacturer = parts[1] if len(parts) > 1 and parts[1] else UNKNOWN

        if override is not None:
            if override.model:
                LOGGER.info("Custom model '%s' overrides '%s' from telldus", override.model, raw_model)
                model = override.model
            if override.manufacturer:
                LOGGER.info(
                    "Custom manufacturer '%s' overrides '%s' from telldus", override.manufacturer, manufacturer
                )
                manufacturer = override.manufacturer
            if override.name:
                LOGGER.info("Custom name '%s' overrides '%s' from telldus", override.name, name)
                name = override.name

        return cls(
            id=device_id,
            name=name,
            model=model,
            manufacturer=manufacturer,
            raw_model=raw_model,
            raw=record,
        )

    def log(self, message: str, *args: Any) -> None:
        LOGGER.info("[%s] " + message, self.name, *args)


@dataclass(frozen=True)
class CapabilityDefinition:
    service: ServiceKind
    characteristics: tuple[CharacteristicKind, ...]


@dataclass(frozen=True)
class ModelEntry:
    model: str
    definitions: tuple[CapabilityDefinition, ...]


class CharacteristicBinding:
    """Live read/write behavior attached to one characteristic of a service."""

    def __init__(
        self,
        kind: CharacteristicKind,
        getter: Getter,
        setter: Setter | None = None,
        *,
        props: CharacteristicProps | None = None,
        value: Any = None,
    ) -> None:
        self.kind = kind
        self.props = props
        self.value = value
        self._getter = getter
        self._setter = setter

    @property
    def writable(self) -> bool:
        return self._setter is not None

    async def get(self) -> Any:
        self.value = await self._getter()
        return self.value

    async def set(self, value: Any) -> None:
        if self._setter is None:
            raise ReadOnlyCharacteristicError(f"Characteristic '{self.kind.value}' is read-only")
        self._check_range(value)
        await self._setter(value)
        self.value = value

    def _check_range(self, value: Any) -> None:
        if self.props is None or isinstance(value, bool):
            return
        try:
            number = float(value)
        except (TypeError, ValueError):
            return
        if not self.props.min_value <= number <= self.props.max_value:
            raise ValueOutOfRangeError(
                f"Value {value} for '{self.kind.value}' is outside "
                f"{self.props.min_value}..{self.props.max_value}"
            )

    def __repr__(self) -> str:
        return f"CharacteristicBinding(kind={self.kind.value!r}, value={self.value!r}, writable={self.writable})"


@dataclass
class ServiceInstance:
    kind: ServiceKind
    name: str
    characteristics: dict[CharacteristicKind, CharacteristicBinding] = field(default_factory=dict)

    def add(self, binding: CharacteristicBinding) -> ServiceInstance:
        self.characteristics[binding.kind] = binding
        return self


@dataclass
class Accessory:
    device: Device
    services: list[ServiceInstance]

    @property
    def id(self) -> str | int:
        return self.device.id

    @property
    def name(self) -> str:
        return self.device.name

    @property
    def model(self) -> str:
        return self.device.model

    @property
    def manufacturer(self) -> str:
        return self.device.manufacturer

    def identify(self) -> None:
        self.device.log("Hi!")

    def find_characteristic(self, kind: CharacteristicKind) -> CharacteristicBinding | None:
        for service in self.services:
            binding = service.characteristics.get(kind)
            if binding is not None:
                return binding
        return None
