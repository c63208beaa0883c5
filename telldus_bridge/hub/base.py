"""Hub client interface."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol

DeviceId = str | int


class HubClient(Protocol):
    async def list_sensors(self) -> Sequence[Mapping[str, Any]]:
        """Return every sensor the hub knows about, with current values."""

    async def list_devices(self) -> Sequence[Mapping[str, Any]]:
        """Return every device and group the hub knows about."""

    async def get_device_info(self, device_id: DeviceId) -> Mapping[str, Any]:
        """Return the current state record of one device."""

    async def get_sensor_info(self, sensor_id: DeviceId) -> Mapping[str, Any]:
        """Return the current readings of one sensor."""

    async def on_off_device(self, device_id: DeviceId, on: bool) -> None:
        """Turn a device on or off."""

    async def dim_device(self, device_id: DeviceId, level: int) -> None:
        """Dim a device to ``level`` in the 0-255 range."""

    async def up_down_device(self, device_id: DeviceId, up: bool) -> None:
        """Move a device up or down."""

    async def aclose(self) -> None:
        """Release any connection resources."""
