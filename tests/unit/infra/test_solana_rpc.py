"""Tests for SolanaRPCClient: JSON-RPC communication."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from tenacity import RetryError, wait_none

from splledger.exceptions import ExternalServiceError
from splledger.infra.blockchain.solana.rpc_client import SolanaRPCClient

USDC = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"


@pytest.fixture()
def mock_http():
    return AsyncMock()


@pytest.fixture()
def rpc(mock_http):
    return SolanaRPCClient(rpc_url="https://api.mainnet-beta.solana.com", http_client=mock_http)


def _mock_response(data: dict):
    resp = MagicMock()
    resp.json.return_value = data
    return resp


def _payload(mock_http) -> dict:
    call_args = mock_http.post.call_args
    return call_args[1]["json"] if "json" in call_args[1] else call_args[0][1]


class TestGetSignatures:
    async def test_returns_signatures(self, rpc, mock_http):
        sigs = [
            {"signature": "sig1", "slot": 100, "blockTime": 1700000000, "err": None},
            {"signature": "sig2", "slot": 101, "blockTime": 1700000001, "err": None},
        ]
        mock_http.post.return_value = _mock_response({"jsonrpc": "2.0", "id": 1, "result": sigs})

        result = await rpc.get_signatures("SomeAddress123")
        assert len(result) == 2
        assert result[0]["signature"] == "sig1"
        assert result[1]["slot"] == 101

    async def test_none_result(self, rpc, mock_http):
        mock_http.post.return_value = _mock_response({"jsonrpc": "2.0", "id": 1, "result": None})

        result = await rpc.get_signatures("SomeAddress123")
        assert result == []

    async def test_default_limit(self, rpc, mock_http):
        mock_http.post.return_value = _mock_response({"jsonrpc": "2.0", "id": 1, "result": []})

        await rpc.get_signatures("Addr")
        payload = _payload(mock_http)
        assert payload["method"] == "getSignaturesForAddress"
        assert payload["params"] == ["Addr", {"limit": 200}]

    async def test_custom_limit(self, rpc, mock_http):
        mock_http.post.return_value = _mock_response({"jsonrpc": "2.0", "id": 1, "result": []})

        await rpc.get_signatures("Addr", limit=500)
        assert _payload(mock_http)["params"] == ["Addr", {"limit": 500}]


class TestGetTransaction:
    async def test_returns_parsed_tx(self, rpc, mock_http):
        tx_data = {
            "transaction": {"signatures": ["someSig123"], "message": {"accountKeys": []}},
            "meta": {"fee": 5000, "preTokenBalances": [], "postTokenBalances": []},
            "blockTime": 1700000000,
        }
        mock_http.post.return_value = _mock_response({"jsonrpc": "2.0", "id": 1, "result": tx_data})

        result = await rpc.get_transaction("someSig123")
        assert result["meta"]["fee"] == 5000

        params = _payload(mock_http)["params"]
        assert params[0] == "someSig123"
        assert params[1]["encoding"] == "jsonParsed"
        assert params[1]["maxSupportedTransactionVersion"] == 0

    async def test_not_found_returns_none(self, rpc, mock_http):
        mock_http.post.return_value = _mock_response({"jsonrpc": "2.0", "id": 1, "result": None})

        result = await rpc.get_transaction("missingTx")
        assert result is None


class TestGetTokenAccountsByOwner:
    async def test_returns_value_list(self, rpc, mock_http):
        value = [{"pubkey": "TokAcc1", "account": {"data": {"parsed": {"info": {}}}}}]
        mock_http.post.return_value = _mock_response({
            "jsonrpc": "2.0", "id": 1,
            "result": {"context": {"slot": 1}, "value": value},
        })

        result = await rpc.get_token_accounts_by_owner("Owner1", USDC)
        assert result == value

        payload = _payload(mock_http)
        assert payload["method"] == "getTokenAccountsByOwner"
        assert payload["params"][0] == "Owner1"
        assert payload["params"][1] == {"mint": USDC}
        assert payload["params"][2]["encoding"] == "jsonParsed"

    async def test_none_result(self, rpc, mock_http):
        mock_http.post.return_value = _mock_response({"jsonrpc": "2.0", "id": 1, "result": None})

        assert await rpc.get_token_accounts_by_owner("Owner1", USDC) == []


class TestRPCErrors:
    async def test_rpc_error_is_retried_then_raises(self, rpc, mock_http):
        """RPC errors are retried 3 times, then wrapped in tenacity.RetryError."""
        mock_http.post.return_value = _mock_response({
            "jsonrpc": "2.0", "id": 1,
            "error": {"code": 429, "message": "Too many requests"},
        })
        call = SolanaRPCClient._call.retry_with(wait=wait_none())

        with pytest.raises(RetryError) as exc_info:
            await call(rpc, "getTransaction", ["sig"])

        assert mock_http.post.call_count == 3
        assert isinstance(exc_info.value.last_attempt.exception(), ExternalServiceError)

    async def test_recovers_after_transient_error(self, rpc, mock_http):
        mock_http.post.side_effect = [
            _mock_response({"jsonrpc": "2.0", "id": 1, "error": {"message": "busy"}}),
            _mock_response({"jsonrpc": "2.0", "id": 1, "result": [{"signature": "s"}]}),
        ]
        call = SolanaRPCClient._call.retry_with(wait=wait_none())

        result = await call(rpc, "getSignaturesForAddress", ["Addr", {"limit": 1}])
        assert result == [{"signature": "s"}]
        assert mock_http.post.call_count == 2
