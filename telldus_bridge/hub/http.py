"""Telldus HTTP API client shared by the local and live endpoints."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

import httpx

from telldus_bridge.core.errors import HubConnectionError, HubResponseError
from telldus_bridge.hub.base import DeviceId

LOGGER = logging.getLogger(__name__)

# TURNON | TURNOFF | BELL | TOGGLE | DIM | LEARN | EXECUTE | UP | DOWN | STOP
SUPPORTED_METHODS = 1023


class TelldusHttpClient:
    """Async client for the endpoints shared by Telldus local and live APIs."""

    def __init__(
        self,
        base_url: str,
        *,
        auth: httpx.Auth | None = None,
        headers: Mapping[str, str] | None = None,
        timeout_s: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            auth=auth,
            headers=dict(headers or {}),
            timeout=timeout_s,
            transport=transport,
        )

    async def __aenter__(self) -> TelldusHttpClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, path: str, params: Mapping[str, Any] | None = None) -> dict[str, Any]:
        try:
            response = await self._client.get(path, params=dict(params or {}))
        except httpx.TimeoutException as exc:
            raise HubConnectionError(f"Telldus request {path} timed out") from exc
        except httpx.HTTPError as exc:
            raise HubConnectionError(f"Telldus request {path} failed: {exc}") from exc

        if response.is_error:
            raise HubResponseError(f"Telldus request {path} returned HTTP {response.status_code}")

        try:
            body = response.json()
        except ValueError as exc:
            raise HubResponseError(f"Telldus request {path} returned invalid JSON") from exc

        if not isinstance(body, dict):
            raise HubResponseError(f"Telldus request {path} returned unexpected payload")
        if body.get("error"):
            raise HubResponseError(f"Telldus request {path} failed: {body['error']}")
        if body.get("status") == "error":
            raise HubResponseError(f"Telldus request {path} failed")

        LOGGER.debug("%s response: %s", path, body)
        return body

    async def _command(self, path: str, params: Mapping[str, Any]) -> None:
        await self._request(path, params)

    async def list_sensors(self) -> Sequence[Mapping[str, Any]]:
        body = await self._request(
            "sensors/list",
            {"includeIgnored": 1, "includeValues": 1, "includeScale": 1},
        )
        return body.get("sensor") or []

    async def list_devices(self) -> Sequence[Mapping[str, Any]]:
        body = await self._request("devices/list", {"supportedMethods": SUPPORTED_METHODS})
        return body.get("device") or []

    async def get_device_info(self, device_id: DeviceId) -> Mapping[str, Any]:
        return await self._request("device/info", {"id": device_id, "supportedMethods": SUPPORTED_METHODS})

    async def get_sensor_info(self, sensor_id: DeviceId) -> Mapping[str, Any]:
        return await self._request("sensor/info", {"id": sensor_id})

    async def on_off_device(self, device_id: DeviceId, on: bool) -> None:
        await self._command("device/turnOn" if on else "device/turnOff", {"id": device_id})

    async def dim_device(self, device_id: DeviceId, level: int) -> None:
        await self._command("device/dim", {"id": device_id, "level": level})

    async def up_down_device(self, device_id: DeviceId, up: bool) -> None:
        await self._command("device/up" if up else "device/down", {"id": device_id})
