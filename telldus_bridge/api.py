"""Stable public API for building tooling on top of telldus-bridge.

This module is the supported integration surface for third-party callers, for
example an accessory server that wants the resolved accessory graph. Avoid
importing from internal modules unless intentionally depending on non-stable
internals.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from telldus_bridge.core.capabilities import CharacteristicKind, ServiceKind
from telldus_bridge.core.config_loader import BridgeConfig, build_config, load_config
from telldus_bridge.core.errors import (
    AccessoryNotFoundError,
    CharacteristicIOError,
    CharacteristicNotFoundError,
    ConfigurationError,
    EnumerationError,
    HubConnectionError,
    HubError,
    HubResponseError,
    ReadOnlyCharacteristicError,
    TelldusBridgeError,
    ValueOutOfRangeError,
)
from telldus_bridge.core.model import (
    Accessory,
    CapabilityDefinition,
    CharacteristicBinding,
    Device,
    DeviceOverride,
    HubMode,
    ModelEntry,
    ServiceInstance,
)
from telldus_bridge.core.platform import TelldusPlatform
from telldus_bridge.hub.base import HubClient

__all__ = [
    "TelldusBridgeError",
    "ConfigurationError",
    "HubError",
    "HubConnectionError",
    "HubResponseError",
    "EnumerationError",
    "CharacteristicIOError",
    "ReadOnlyCharacteristicError",
    "AccessoryNotFoundError",
    "CharacteristicNotFoundError",
    "ValueOutOfRangeError",
    "Accessory",
    "CapabilityDefinition",
    "CharacteristicBinding",
    "CharacteristicKind",
    "Device",
    "DeviceOverride",
    "HubMode",
    "ModelEntry",
    "ServiceInstance",
    "ServiceKind",
    "BridgeConfig",
    "HubClient",
    "Bridge",
    "build_config",
    "load_config",
]


class Bridge:
    """Public async client for the telldus-bridge core.

    A `Bridge` wraps configuration, hub access, device resolution and
    characteristic binding behind one object. Use it as an async context
    manager so the hub connection is released.
    """

    def __init__(
        self,
        config: BridgeConfig,
        *,
        hub: HubClient | None = None,
        settle_delay_s: float | None = None,
    ) -> None:
        self._platform = TelldusPlatform(config, hub=hub, settle_delay_s=settle_delay_s)

    @classmethod
    def from_file(cls, path: Path | None = None, **kwargs: Any) -> Bridge:
        return cls(load_config(path), **kwargs)

    async def __aenter__(self) -> Bridge:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._platform.aclose()

    def list_models(self) -> list[ModelEntry]:
        return self._platform.list_models()

    async def accessories(self) -> list[Accessory]:
        return await self._platform.accessories()

    async def get_value(self, accessory_id: str | int, characteristic: CharacteristicKind | str) -> Any:
        return await self._platform.read(accessory_id, _kind(characteristic))

    async def set_value(
        self,
        accessory_id: str | int,
        characteristic: CharacteristicKind | str,
        value: Any,
    ) -> None:
        await self._platform.write(accessory_id, _kind(characteristic), value)


def _kind(characteristic: CharacteristicKind | str) -> CharacteristicKind:
    if isinstance(characteristic, CharacteristicKind):
        return characteristic
    try:
        return CharacteristicKind.parse(characteristic)
    except ValueError as exc:
        raise CharacteristicNotFoundError(str(exc)) from exc
