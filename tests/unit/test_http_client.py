import asyncio
import json
from typing import Any

import httpx
import pytest

from disint.client import AsyncDiscordClient, DiscordClient
from disint.config import InteractionConfig
from disint.exceptions import ConfigurationError, HTTPRequestError
from disint.http_client import AsyncJsonHttpClient, JsonHttpClient


def _recording_transport(seen: list[httpx.Request], response: httpx.Response) -> httpx.MockTransport:
    def _handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return response

    return httpx.MockTransport(_handler)


def test_discord_client_sends_bot_authorization_and_json_body():
    seen: list[httpx.Request] = []
    transport = _recording_transport(seen, httpx.Response(200, json={"id": "1"}))
    http = JsonHttpClient(session=httpx.Client(transport=transport))
    client = DiscordClient(
        InteractionConfig(bot_token="bot-token", base_url="https://discord.test/api/"),
        http_client=http,
    )

    data = client.request_json("post", "/applications/1/commands", payload={"name": "a"})

    assert data == {"id": "1"}
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == "https://discord.test/api/applications/1/commands"
    assert request.headers["Authorization"] == "Bot bot-token"
    assert request.headers["Content-Type"] == "application/json"
    assert json.loads(request.content) == {"name": "a"}


def test_get_requests_do_not_send_a_body():
    seen: list[httpx.Request] = []
    transport = _recording_transport(seen, httpx.Response(200, json=[]))
    http = JsonHttpClient(session=httpx.Client(transport=transport))

    assert http.request_json("GET", "https://discord.test/x", payload={"ignored": True}) == []
    assert seen[0].content == b""


def test_no_content_response_decodes_to_none():
    transport = _recording_transport([], httpx.Response(204))
    http = JsonHttpClient(session=httpx.Client(transport=transport))
    assert http.request_json("DELETE", "https://discord.test/x") is None


def test_error_status_raises_http_request_error():
    transport = _recording_transport([], httpx.Response(401, text='{"message":"401: Unauthorized"}'))
    http = JsonHttpClient(session=httpx.Client(transport=transport))

    with pytest.raises(HTTPRequestError) as exc_info:
        http.request_json("GET", "https://discord.test/x")
    assert exc_info.value.status_code == 401
    assert "Unauthorized" in (exc_info.value.response_text or "")


def test_non_json_body_raises_http_request_error():
    transport = _recording_transport([], httpx.Response(200, text="<html>"))
    http = JsonHttpClient(session=httpx.Client(transport=transport))
    with pytest.raises(HTTPRequestError):
        http.request_json("GET", "https://discord.test/x")


def test_client_requires_bot_token():
    client = DiscordClient(InteractionConfig(), http_client=JsonHttpClient())
    with pytest.raises(ConfigurationError):
        client.request_json("GET", "/applications/1/commands")


def test_async_client_round_trip():
    seen: list[httpx.Request] = []
    transport = _recording_transport(seen, httpx.Response(200, json={"ok": True}))

    async def _run() -> Any:
        http = AsyncJsonHttpClient(client=httpx.AsyncClient(transport=transport))
        client = AsyncDiscordClient(InteractionConfig(bot_token="t"), http_client=http)
        try:
            return await client.request_json("PATCH", "/x", payload={"a": 1})
        finally:
            await client.aclose()

    assert asyncio.run(_run()) == {"ok": True}
    assert str(seen[0].url) == "https://discord.com/api/v8/x"
    assert seen[0].method == "PATCH"
