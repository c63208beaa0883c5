from __future__ import annotations

import asyncio
import logging

import pytest

from telldus_bridge.core.capabilities import CharacteristicKind as C
from telldus_bridge.core.capabilities import ServiceKind as S
from telldus_bridge.core.config_loader import BridgeConfig, CloudCredentials, LocalCredentials
from telldus_bridge.core.errors import (
    AccessoryNotFoundError,
    CharacteristicNotFoundError,
    EnumerationError,
)
from telldus_bridge.core.model import DeviceOverride, HubMode
from telldus_bridge.core.model_table import valid_models
from telldus_bridge.core.platform import TelldusPlatform

LAMP = {"id": 5, "model": "selflearning-dimmer:Foo", "name": "Lamp", "state": 16, "statevalue": "128"}


def _cloud(*overrides: DeviceOverride) -> BridgeConfig:
    return BridgeConfig(
        mode=HubMode.CLOUD,
        cloud=CloudCredentials("pub", "priv", "tok", "secret"),
        overrides=overrides,
    )


def _local(*overrides: DeviceOverride) -> BridgeConfig:
    return BridgeConfig(
        mode=HubMode.LOCAL,
        local=LocalCredentials("192.168.1.2", "token"),
        overrides=overrides,
    )


def _platform(config, hub) -> TelldusPlatform:
    return TelldusPlatform(config, hub=hub, settle_delay_s=0)


def test_dimmer_becomes_lightbulb_accessory(fake_hub) -> None:
    hub = fake_hub(devices=[{"id": 5, "type": "device"}], device_info={5: LAMP})
    platform = _platform(_cloud(), hub)

    (accessory,) = asyncio.run(platform.accessories())

    assert accessory.id == 5
    assert (accessory.model, accessory.manufacturer) == ("selflearning-dimmer", "Foo")
    info, lightbulb = accessory.services
    assert info.kind is S.ACCESSORY_INFORMATION
    assert lightbulb.kind is S.LIGHTBULB
    assert asyncio.run(platform.read(5, C.ON)) is True
    assert asyncio.run(platform.read("5", C.BRIGHTNESS)) == 50


def test_disabled_local_override_produces_no_accessory(fake_hub) -> None:
    hub = fake_hub(devices=[{"id": 5, "type": "device"}], device_info={5: LAMP})
    platform = _platform(_local(DeviceOverride(local_id=5, disabled=True)), hub)

    assert asyncio.run(platform.accessories()) == []


def test_sensors_and_devices_are_merged_without_duplicates(fake_hub) -> None:
    hub = fake_hub(
        sensors=[{"id": 5, "name": "Outdoor", "model": "temperature"}],
        devices=[{"id": 5, "type": "device"}, {"id": 6, "type": "device"}],
        device_info={5: LAMP, 6: {"id": 6, "name": "Fan", "model": "switch"}},
    )

    accessories = asyncio.run(_platform(_cloud(), hub).accessories())

    assert [(a.id, a.name) for a in accessories] == [(5, "Outdoor"), (6, "Fan")]
    assert accessories[0].services[1].kind is S.TEMPERATURE_SENSOR


def test_records_without_id_do_not_break_enumeration(fake_hub) -> None:
    hub = fake_hub(
        sensors=[{"name": "Orphan", "model": "temperature"}],
        devices=[{"name": "Listed ghost", "type": "device"}, {"id": 6, "type": "device"}, {"id": 7, "type": "device"}],
        device_info={6: {"id": 6, "name": "Fan", "model": "switch"}, 7: {"name": "Ghost", "model": "switch"}},
    )

    accessories = asyncio.run(_platform(_cloud(), hub).accessories())

    assert [(a.id, a.name) for a in accessories] == [(6, "Fan")]
    assert hub.calls == [
        ("list_sensors",),
        ("list_devices",),
        ("get_device_info", 6),
        ("get_device_info", 7),
    ]


def test_unknown_model_yields_information_only_accessory(fake_hub, caplog) -> None:
    caplog.set_level(logging.INFO)
    hub = fake_hub(devices=[{"id": 42, "type": "device"}], device_info={42: {"id": 42, "name": "Odd", "model": "foo-bar"}})

    (accessory,) = asyncio.run(_platform(_cloud(), hub).accessories())

    assert [s.kind for s in accessory.services] == [S.ACCESSORY_INFORMATION]
    warnings = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "foo-bar" in warnings[0]
    assert '{"id": 42, "model": "MODEL", "manufacturer": "unknown"}' in warnings[0]
    assert ", ".join(valid_models()) in warnings[0]


def test_unknown_model_hint_uses_local_keys(fake_hub, caplog) -> None:
    hub = fake_hub(
        devices=[{"id": 42, "type": "device"}],
        device_info={42: {"id": 42, "name": "Odd", "model": "foo-bar", "type": "device"}},
    )

    asyncio.run(_platform(_local(), hub).accessories())

    assert '{"local_id": 42, "type": "device", "model": "MODEL"' in caplog.text


def test_override_model_rescues_unknown_device(fake_hub) -> None:
    hub = fake_hub(devices=[{"id": 42, "type": "device"}], device_info={42: {"id": 42, "name": "Odd", "model": "foo-bar"}})
    platform = _platform(_cloud(DeviceOverride(id=42, model="switch")), hub)

    (accessory,) = asyncio.run(platform.accessories())
    assert accessory.services[1].kind is S.SWITCH


def test_enumeration_failure_returns_nothing(fake_hub, caplog) -> None:
    hub = fake_hub(
        sensors=[{"id": 1, "name": "Temp", "model": "temperature"}],
        devices=[{"id": 5, "type": "device"}],
        failing=("get_device_info",),
    )
    platform = _platform(_cloud(), hub)

    with pytest.raises(EnumerationError):
        asyncio.run(platform.accessories())
    assert "Loading accessories failed" in caplog.text


def test_write_and_lookup_errors(fake_hub) -> None:
    hub = fake_hub(devices=[{"id": 5, "type": "device"}], device_info={5: LAMP})
    platform = _platform(_cloud(), hub)

    asyncio.run(platform.write(5, C.BRIGHTNESS, 100))
    assert hub.calls[-1] == ("dim_device", 5, 255)

    with pytest.raises(AccessoryNotFoundError):
        asyncio.run(platform.read(99, C.ON))
    with pytest.raises(CharacteristicNotFoundError) as exc:
        asyncio.run(platform.read(5, C.CURRENT_TEMPERATURE))
    assert "Brightness" in str(exc.value)


def test_context_manager_closes_hub(fake_hub) -> None:
    hub = fake_hub()

    async def scenario():
        async with _platform(_cloud(), hub) as platform:
            return await platform.accessories()

    assert asyncio.run(scenario()) == []
    assert hub.closed


def test_identify_logs_greeting(fake_hub, caplog) -> None:
    caplog.set_level(logging.INFO)
    hub = fake_hub(devices=[{"id": 5, "type": "device"}], device_info={5: LAMP})
    platform = _platform(_cloud(), hub)

    accessory = asyncio.run(platform.find_accessory(5))
    accessory.identify()
    assert "[Lamp] Hi!" in caplog.text
