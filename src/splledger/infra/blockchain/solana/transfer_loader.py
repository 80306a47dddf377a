"""Solana Transfer Loader: fetches a wallet's recent TXs via RPC and reconciles them into a ledger."""

import logging
import time
from decimal import Decimal

import httpx
from tenacity import RetryError

from splledger.config import Settings
from splledger.domain.models.ledger import TokenAccount, TransactionRecord, Transfer, WalletTransfers
from splledger.exceptions import DataFormatError, ExternalServiceError, TransferFetchError
from splledger.infra.blockchain.solana.rpc_client import SolanaRPCClient
from splledger.parser.reconciler import merge, reconcile_batch
from splledger.parser.utils.solana_tx import transaction_record_from_rpc

logger = logging.getLogger(__name__)

_FETCH_ERRORS = (ExternalServiceError, RetryError, httpx.HTTPError, ValueError)


class SolanaTransferLoader:
    """Loads the tracked token's transfers for a wallet over a lookback window.

    Transfers are looked up twice: through the wallet's own signature history
    (TXs it signed, mostly outgoing) and through each of its token accounts
    (catches incoming transfers the wallet never signed). The two histories
    overlap and are merged by signature.
    """

    def __init__(self, rpc: SolanaRPCClient, settings: Settings) -> None:
        self._rpc = rpc
        self._settings = settings

    async def get_token_accounts(self, wallet: str) -> list[TokenAccount]:
        try:
            accounts = await self._rpc.get_token_accounts_by_owner(wallet, self._settings.token_mint)
        except _FETCH_ERRORS as e:
            logger.exception("Failed to fetch token accounts for %s", wallet)
            raise TransferFetchError(f"Failed to fetch {self._settings.token_symbol} token accounts: {e}") from e

        return [_token_account_from_rpc(acc) for acc in accounts]

    async def get_transfers(
        self,
        wallet: str,
        lookback_hours: int | None = None,
        token_accounts: list[TokenAccount] | None = None,
    ) -> list[Transfer]:
        """Return the deduplicated, newest-first ledger for the wallet.

        token_accounts skips the getTokenAccountsByOwner lookup when already known.
        """
        hours = lookback_hours if lookback_hours is not None else self._settings.lookback_hours
        cutoff_ms = int(time.time() * 1000) - hours * 60 * 60 * 1000
        logger.info("Fetching %s transfers for %s (lookback %dh)", self._settings.token_symbol, wallet, hours)

        try:
            batches: list[list[Transfer]] = []

            # TXs signed by the wallet
            batches.append(await self._load_address(
                wallet, wallet, cutoff_ms, self._settings.max_wallet_transactions,
            ))

            # TXs touching the wallet's token accounts
            if token_accounts is None:
                token_accounts = await self.get_token_accounts(wallet)
            for account in token_accounts:
                batches.append(await self._load_address(
                    account.address, wallet, cutoff_ms, self._settings.max_token_account_transactions,
                ))
        except TransferFetchError:
            raise
        except _FETCH_ERRORS as e:
            logger.exception("Failed to fetch transfers for %s", wallet)
            raise TransferFetchError(f"Failed to fetch {self._settings.token_symbol} transfers: {e}") from e

        transfers = merge(batches)
        logger.info("Found %d %s transfers for %s", len(transfers), self._settings.token_symbol, wallet)
        return transfers

    async def get_wallet_transfers(self, wallet: str, lookback_hours: int | None = None) -> WalletTransfers:
        token_accounts = await self.get_token_accounts(wallet)
        transfers = await self.get_transfers(wallet, lookback_hours, token_accounts)
        return WalletTransfers(address=wallet, token_accounts=token_accounts, transfers=transfers)

    async def _load_address(
        self,
        address: str,
        wallet: str,
        cutoff_ms: int,
        max_count: int,
    ) -> list[Transfer]:
        """Fetch recent TXs for one address and reconcile them against the wallet."""
        signatures = await self._rpc.get_signatures(address, limit=self._settings.signature_limit)
        recent = [
            sig for sig in signatures
            if sig.get("blockTime") and sig["blockTime"] * 1000 > cutoff_ms
        ]

        records: list[TransactionRecord] = []
        for sig_info in recent[:max_count]:
            signature = sig_info["signature"]
            try:
                tx_data = await self._rpc.get_transaction(signature)
            except _FETCH_ERRORS as e:
                logger.warning("Failed to fetch transaction %s: %s", signature, e)
                continue

            if tx_data is None:
                continue

            try:
                record = transaction_record_from_rpc(tx_data)
            except DataFormatError as e:
                logger.warning("Skipping TX %s: %s", signature, e)
                continue

            if record is not None:
                records.append(record)

        logger.debug("Fetched %d/%d TXs for %s", len(records), len(recent), address)
        return reconcile_batch(records, wallet, self._settings.token_mint, self._settings.token_decimals)


def _token_account_from_rpc(account: dict) -> TokenAccount:
    info = account.get("account", {}).get("data", {}).get("parsed", {}).get("info", {})
    token_amount = info.get("tokenAmount", {})
    ui_amount = token_amount.get("uiAmountString") or token_amount.get("uiAmount") or 0
    return TokenAccount(address=str(account.get("pubkey", "")), balance=Decimal(str(ui_amount)))
