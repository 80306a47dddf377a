"""Solana JSON-RPC client: signatures, parsed transactions and token accounts."""

import logging

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from splledger.exceptions import ExternalServiceError
from splledger.infra.http.delayed_client import DelayedClient

logger = logging.getLogger(__name__)


class SolanaRPCClient:
    """Minimal Solana JSON-RPC client for transfer loading."""

    def __init__(self, rpc_url: str, http_client: DelayedClient) -> None:
        self._rpc_url = rpc_url
        self._http = http_client

    @retry(
        retry=retry_if_exception_type(ExternalServiceError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=2, min=3, max=30),
    )
    async def _call(self, method: str, params: list) -> dict | list | int | str | None:
        """Execute a JSON-RPC call and return the result field."""
        payload = {
            "jsonrpc": "2.0",
            "id": 1,
            "method": method,
            "params": params,
        }
        resp = await self._http.post(self._rpc_url, json=payload)
        data = resp.json()

        if "error" in data:
            error = data["error"]
            msg = error.get("message", str(error))
            logger.debug("RPC %s failed: %s", method, msg)
            raise ExternalServiceError(f"Solana RPC error ({method}): {msg}")

        return data.get("result")

    async def get_signatures(
        self,
        address: str,
        limit: int = 200,
    ) -> list[dict]:
        """Fetch transaction signatures for an address.

        Returns list of {signature, slot, blockTime, err, ...} ordered newest-first.
        """
        result = await self._call("getSignaturesForAddress", [address, {"limit": limit}])
        if result is None:
            return []
        return result  # type: ignore[return-value]

    async def get_transaction(self, signature: str) -> dict | None:
        """Fetch a parsed transaction by signature (None if not found)."""
        opts = {
            "encoding": "jsonParsed",
            "maxSupportedTransactionVersion": 0,
            "commitment": "confirmed",
        }
        result = await self._call("getTransaction", [signature, opts])
        return result  # type: ignore[return-value]

    async def get_token_accounts_by_owner(self, owner: str, mint: str) -> list[dict]:
        """Fetch the owner's token accounts for one mint.

        Returns the raw `value` list: [{pubkey, account: {data: {parsed: ...}}}, ...].
        """
        opts = {"encoding": "jsonParsed", "commitment": "confirmed"}
        result = await self._call("getTokenAccountsByOwner", [owner, {"mint": mint}, opts])
        if not result:
            return []
        return result.get("value", [])  # type: ignore[union-attr]
