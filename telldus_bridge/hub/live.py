"""Client for the Telldus Live cloud API (OAuth 1.0a signed)."""

from __future__ import annotations

import httpx
from authlib.integrations.httpx_client import OAuth1Auth

from telldus_bridge.hub.http import TelldusHttpClient

LIVE_API_URL = "https://pa-api.telldus.com/json/"


class LiveHubClient(TelldusHttpClient):
    def __init__(
        self,
        public_key: str,
        private_key: str,
        token: str,
        token_secret: str,
        *,
        timeout_s: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        auth = OAuth1Auth(
            client_id=public_key,
            client_secret=private_key,
            token=token,
            token_secret=token_secret,
        )
        super().__init__(LIVE_API_URL, auth=auth, timeout_s=timeout_s, transport=transport)
