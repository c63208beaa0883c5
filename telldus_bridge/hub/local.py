"""Client for the Telldus local API exposed by TellStick Znet/Net v2."""

from __future__ import annotations

import httpx

from telldus_bridge.hub.http import TelldusHttpClient


class LocalHubClient(TelldusHttpClient):
    def __init__(
        self,
        host: str,
        access_token: str,
        *,
        timeout_s: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(
            f"http://{host}/api/",
            headers={"Authorization": f"Bearer {access_token}"},
            timeout_s=timeout_s,
            transport=transport,
        )
