from __future__ import annotations

from typing import Any

import pytest

from telldus_bridge.core.errors import HubConnectionError


class FakeHub:
    """In-memory hub that records every call in order."""

    def __init__(
        self,
        *,
        sensors: list[dict[str, Any]] | None = None,
        devices: list[dict[str, Any]] | None = None,
        device_info: dict[Any, dict[str, Any]] | None = None,
        sensor_info: dict[Any, dict[str, Any]] | None = None,
        failing: tuple[str, ...] = (),
    ) -> None:
        self.sensors = sensors or []
        self.devices = devices or []
        self.device_info = device_info or {}
        self.sensor_info = sensor_info or {}
        self.failing = set(failing)
        self.calls: list[tuple[Any, ...]] = []
        self.closed = False

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, *args))
        if name in self.failing:
            raise HubConnectionError(f"{name} failed")

    async def list_sensors(self) -> list[dict[str, Any]]:
        self._record("list_sensors")
        return self.sensors

    async def list_devices(self) -> list[dict[str, Any]]:
        self._record("list_devices")
        return self.devices

    async def get_device_info(self, device_id: Any) -> dict[str, Any]:
        self._record("get_device_info", device_id)
        return self.device_info[device_id]

    async def get_sensor_info(self, sensor_id: Any) -> dict[str, Any]:
        self._record("get_sensor_info", sensor_id)
        return self.sensor_info[sensor_id]

    async def on_off_device(self, device_id: Any, on: bool) -> None:
        self._record("on_off_device", device_id, on)

    async def dim_device(self, device_id: Any, level: int) -> None:
        self._record("dim_device", device_id, level)

    async def up_down_device(self, device_id: Any, up: bool) -> None:
        self._record("up_down_device", device_id, up)

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def fake_hub() -> type[FakeHub]:
    return FakeHub
