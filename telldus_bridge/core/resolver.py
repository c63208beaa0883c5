"""Turn raw hub sensor and device listings into named, typed devices."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Protocol, TypeVar

from telldus_bridge.core.model import Device, DeviceOverride, HubMode, RawRecord
from telldus_bridge.hub.base import HubClient

LOGGER = logging.getLogger(__name__)

SUPPORTED_DEVICE_TYPE = "device"


class _HasId(Protocol):
    @property
    def id(self) -> str | int: ...


T = TypeVar("T", bound=_HasId)


def _same_id(left: object, right: object) -> bool:
    return left is not None and right is not None and str(left) == str(right)


class DeviceResolver:
    def __init__(self, overrides: Sequence[DeviceOverride], mode: HubMode) -> None:
        self.overrides = tuple(overrides)
        self.mode = mode

    def find_override(self, record: RawRecord) -> DeviceOverride | None:
        record_id = record.get("id")
        for override in self.overrides:
            if self.mode is HubMode.LOCAL:
                # local ids are only unique per type
                record_type = record.get("type")
                same_type = (not override.type and not record_type) or override.type == record_type
                if _same_id(override.local_id, record_id) and same_type:
                    return override
            elif _same_id(override.id, record_id):
                return override
        return None

    def resolve(self, sensors: Iterable[RawRecord], devices: Iterable[RawRecord]) -> list[Device]:
        processed: set[str] = set()
        resolved: list[Device] = []

        for record in [*sensors, *devices]:
            record_id = record.get("id")
            if record_id is None:
                LOGGER.info("Device %s has no id from telldus, ignoring", record.get("name"))
                continue
            key = str(record_id)
            if key in processed:
                LOGGER.info("Device %s has already been processed, skipping", record_id)
                continue
            processed.add(key)

            override = self.find_override(record)
            if override is not None and override.disabled:
                LOGGER.info("Device %s is disabled, ignoring", record_id)
                continue

            if not record.get("name"):
                LOGGER.info("Device %s has no name from telldus, ignoring", record_id)
                continue

            if override is not None:
                LOGGER.info("Custom config found for ID %s", record_id)
            resolved.append(Device.from_record(record, override))

        return resolved


def resolve(
    sensors: Iterable[RawRecord],
    devices: Iterable[RawRecord],
    overrides: Sequence[DeviceOverride],
    mode: HubMode,
) -> list[Device]:
    return DeviceResolver(overrides, mode).resolve(sensors, devices)


async def fetch_records(hub: HubClient) -> tuple[list[RawRecord], list[RawRecord]]:
    """List sensors and devices, then fetch device details one at a time.

    Details are requested sequentially in list order so the hub never sees more
    than one in-flight request from an enumeration pass.
    """
    sensors = list(await hub.list_sensors())
    LOGGER.info("Found %d sensors in telldus.", len(sensors))

    listed = list(await hub.list_devices())
    LOGGER.info("Found %d devices in telldus.", len(listed))

    devices: list[RawRecord] = []
    for record in listed:
        if record.get("type") != SUPPORTED_DEVICE_TYPE:
            continue
        if record.get("id") is None:
            LOGGER.info("Listed device %s has no id, skipping details", record.get("name"))
            continue
        devices.append(await hub.get_device_info(record["id"]))
    LOGGER.debug("getDeviceInfo responses: %s", devices)

    return sensors, devices


def dedupe_by_id(items: Iterable[T]) -> list[T]:
    seen: set[str] = set()
    unique: list[T] = []
    for item in items:
        key = str(item.id)
        if key in seen:
            continue
        seen.add(key)
        unique.append(item)
    return unique
