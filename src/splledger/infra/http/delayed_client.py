"""Async HTTP client that waits a fixed delay before every request."""

import asyncio

import httpx


class DelayedClient:
    """Serializes POSTs and sleeps `delay_ms` before each one.

    Public Solana RPC endpoints throttle bursts; a flat pause per call keeps a
    sequential fetch loop under their limits.
    """

    def __init__(
        self,
        delay_ms: int = 300,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._delay = max(delay_ms, 0) / 1000
        self._lock = asyncio.Lock()
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def post(self, url: str, json: dict | list | None = None) -> httpx.Response:
        async with self._lock:
            if self._delay:
                await asyncio.sleep(self._delay)
            return await self._client.post(url, json=json)

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "DelayedClient":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
