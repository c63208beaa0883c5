"""Platform facade used by the CLI and the public API."""

from __future__ import annotations

import json
import logging
from typing import Any

from telldus_bridge.core.binder import CharacteristicBinder
from telldus_bridge.core.capabilities import CharacteristicKind
from telldus_bridge.core.config_loader import BridgeConfig
from telldus_bridge.core.errors import (
    AccessoryNotFoundError,
    CharacteristicNotFoundError,
    EnumerationError,
    HubError,
)
from telldus_bridge.core.model import Accessory, CharacteristicBinding, Device, HubMode, ModelEntry
from telldus_bridge.core.model_table import MODEL_TABLE, find_definitions, valid_models
from telldus_bridge.core.resolver import DeviceResolver, dedupe_by_id, fetch_records
from telldus_bridge.hub.base import HubClient
from telldus_bridge.hub.live import LiveHubClient
from telldus_bridge.hub.local import LocalHubClient

LOGGER = logging.getLogger(__name__)


def _default_hub(config: BridgeConfig) -> HubClient:
    if config.mode is HubMode.LOCAL:
        assert config.local is not None
        return LocalHubClient(
            config.local.ip_address,
            config.local.access_token,
            timeout_s=config.timeout_s,
        )
    assert config.cloud is not None
    return LiveHubClient(
        config.cloud.public_key,
        config.cloud.private_key,
        config.cloud.token,
        config.cloud.token_secret,
        timeout_s=config.timeout_s,
    )


class TelldusPlatform:
    def __init__(
        self,
        config: BridgeConfig,
        *,
        hub: HubClient | None = None,
        settle_delay_s: float | None = None,
    ) -> None:
        self.config = config
        self.hub = hub or _default_hub(config)
        self.resolver = DeviceResolver(config.overrides, config.mode)
        self.binder = CharacteristicBinder(
            self.hub,
            settle_delay_s=config.settle_delay_s if settle_delay_s is None else settle_delay_s,
        )
        self._accessories: list[Accessory] | None = None

    async def __aenter__(self) -> TelldusPlatform:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.hub.aclose()

    def list_models(self) -> list[ModelEntry]:
        return list(MODEL_TABLE)

    async def accessories(self) -> list[Accessory]:
        """Enumerate every accessory the hub exposes.

        Any hub failure aborts the whole pass; a partial list is never returned.
        """
        LOGGER.info("Loading accessories...")
        try:
            sensors, devices = await fetch_records(self.hub)
        except HubError as exc:
            LOGGER.error("Loading accessories failed: %s", exc)
            raise EnumerationError(f"Could not enumerate accessories: {exc}") from exc

        resolved = self.resolver.resolve(sensors, devices)
        accessories = dedupe_by_id(self.build_accessory(device) for device in resolved)
        self._accessories = accessories
        return accessories

    def build_accessory(self, device: Device) -> Accessory:
        services = [self.binder.bind_information(device)]
        definitions = find_definitions(device.model)
        if definitions is None:
            LOGGER.warning(
                "[%s] Your device (model %s, id %s) is not auto detected from telldus. "
                "Please add the following to your config (replace MODEL with a valid type, "
                "and optionally set manufacturer):\n"
                "unknown_accessories: [%s]\n"
                "Valid models are: %s",
                device.name,
                device.raw_model,
                device.id,
                self._override_hint(device),
                ", ".join(valid_models()),
            )
        else:
            services.extend(self.binder.bind(device, definition) for definition in definitions)
        return Accessory(device=device, services=services)

    def _override_hint(self, device: Device) -> str:
        entry: dict[str, Any]
        if self.config.mode is HubMode.LOCAL:
            entry = {"local_id": device.id}
            if device.raw.get("type"):
                entry["type"] = device.raw["type"]
        else:
            entry = {"id": device.id}
        entry.update({"model": "MODEL", "manufacturer": "unknown"})
        return json.dumps(entry)

    async def find_accessory(self, accessory_id: str | int) -> Accessory:
        if self._accessories is None:
            await self.accessories()
        assert self._accessories is not None
        for accessory in self._accessories:
            if str(accessory.id) == str(accessory_id):
                return accessory
        raise AccessoryNotFoundError(f"No accessory with id '{accessory_id}'")

    async def _binding(self, accessory_id: str | int, kind: CharacteristicKind) -> CharacteristicBinding:
        accessory = await self.find_accessory(accessory_id)
        binding = accessory.find_characteristic(kind)
        if binding is None:
            available = ", ".join(
                k.value for service in accessory.services for k in service.characteristics
            )
            raise CharacteristicNotFoundError(
                f"Accessory '{accessory_id}' has no characteristic '{kind.value}'. Available: {available}"
            )
        return binding

    async def read(self, accessory_id: str | int, kind: CharacteristicKind) -> Any:
        binding = await self._binding(accessory_id, kind)
        return await binding.get()

    async def write(self, accessory_id: str | int, kind: CharacteristicKind, value: Any) -> None:
        binding = await self._binding(accessory_id, kind)
        await binding.set(value)
