from __future__ import annotations

import asyncio

import httpx
import pytest

from telldus_bridge.core.errors import HubConnectionError, HubResponseError
from telldus_bridge.hub.live import LiveHubClient
from telldus_bridge.hub.local import LocalHubClient


def _run(client, method, *args):
    async def scenario():
        async with client:
            return await getattr(client, method)(*args)

    return asyncio.run(scenario())


def test_local_client_lists_devices_with_bearer_token() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"device": [{"id": 1, "name": "Lamp", "type": "device"}]})

    client = LocalHubClient("10.0.0.2", "abc", transport=httpx.MockTransport(handler))
    devices = _run(client, "list_devices")

    assert devices == [{"id": 1, "name": "Lamp", "type": "device"}]
    (request,) = seen
    assert request.url.host == "10.0.0.2"
    assert request.url.path == "/api/devices/list"
    assert request.url.params["supportedMethods"] == "1023"
    assert request.headers["Authorization"] == "Bearer abc"


def test_sensor_list_requests_values() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"sensor": [{"id": 9, "name": "Temp"}]})

    client = LocalHubClient("10.0.0.2", "abc", transport=httpx.MockTransport(handler))
    assert _run(client, "list_sensors") == [{"id": 9, "name": "Temp"}]
    assert seen[0].url.params["includeValues"] == "1"


@pytest.mark.parametrize(
    ("method", "args", "path", "params"),
    [
        ("on_off_device", (3, True), "/api/device/turnOn", {"id": "3"}),
        ("on_off_device", (3, False), "/api/device/turnOff", {"id": "3"}),
        ("dim_device", (3, 128), "/api/device/dim", {"id": "3", "level": "128"}),
        ("up_down_device", (3, True), "/api/device/up", {"id": "3"}),
        ("up_down_device", (3, False), "/api/device/down", {"id": "3"}),
        ("get_sensor_info", (9,), "/api/sensor/info", {"id": "9"}),
    ],
)
def test_command_endpoints(method, args, path, params) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"status": "success"})

    client = LocalHubClient("10.0.0.2", "abc", transport=httpx.MockTransport(handler))
    _run(client, method, *args)

    assert seen[0].url.path == path
    assert dict(seen[0].url.params) == params


def test_error_body_raises_response_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"error": "Device not found"})

    client = LocalHubClient("10.0.0.2", "abc", transport=httpx.MockTransport(handler))
    with pytest.raises(HubResponseError, match="Device not found"):
        _run(client, "get_device_info", 77)


def test_http_error_status_raises_response_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={})

    client = LocalHubClient("10.0.0.2", "abc", transport=httpx.MockTransport(handler))
    with pytest.raises(HubResponseError, match="401"):
        _run(client, "list_devices")


def test_transport_failure_raises_connection_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = LocalHubClient("10.0.0.2", "abc", transport=httpx.MockTransport(handler))
    with pytest.raises(HubConnectionError):
        _run(client, "list_sensors")


def test_live_client_signs_requests() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"id": 4, "name": "Lamp", "state": 1})

    client = LiveHubClient("pub", "priv", "tok", "sec", transport=httpx.MockTransport(handler))
    record = _run(client, "get_device_info", 4)

    assert record["state"] == 1
    (request,) = seen
    assert request.url.host == "pa-api.telldus.com"
    assert request.url.path == "/json/device/info"
    authorization = request.headers["Authorization"]
    assert authorization.startswith("OAuth ")
    assert 'oauth_consumer_key="pub"' in authorization
    assert 'oauth_token="tok"' in authorization
