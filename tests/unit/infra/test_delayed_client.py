"""Tests for DelayedClient: fixed pause before every POST."""

import httpx
import pytest

from splledger.infra.http import delayed_client
from splledger.infra.http.delayed_client import DelayedClient


@pytest.fixture()
def sleeps(monkeypatch):
    recorded: list[float] = []

    async def fake_sleep(seconds):
        recorded.append(seconds)

    monkeypatch.setattr(delayed_client.asyncio, "sleep", fake_sleep)
    return recorded


def _transport(seen: list[dict]):
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append({"url": str(request.url), "body": request.content})
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": "ok"})

    return httpx.MockTransport(handler)


class TestDelayedClient:
    async def test_sleeps_before_each_post(self, sleeps):
        seen: list[dict] = []
        async with DelayedClient(delay_ms=300, transport=_transport(seen)) as client:
            first = await client.post("https://rpc.test", json={"method": "getSlot"})
            await client.post("https://rpc.test", json={"method": "getSlot"})

        assert first.json()["result"] == "ok"
        assert sleeps == [0.3, 0.3]
        assert len(seen) == 2
        assert seen[0]["url"] == "https://rpc.test"

    async def test_zero_delay_does_not_sleep(self, sleeps):
        seen: list[dict] = []
        async with DelayedClient(delay_ms=0, transport=_transport(seen)) as client:
            await client.post("https://rpc.test", json={})

        assert sleeps == []
        assert len(seen) == 1

    async def test_negative_delay_treated_as_zero(self, sleeps):
        seen: list[dict] = []
        async with DelayedClient(delay_ms=-5, transport=_transport(seen)) as client:
            await client.post("https://rpc.test", json={})

        assert sleeps == []
