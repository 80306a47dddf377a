"""Adapt Solana jsonParsed getTransaction payloads into TransactionRecords."""

from splledger.domain.models.ledger import TokenBalanceSnapshot, TransactionRecord
from splledger.exceptions import DataFormatError


def snapshot_from_rpc(token_balance: dict) -> TokenBalanceSnapshot:
    """Convert one preTokenBalances/postTokenBalances entry.

    The raw amount is kept as a string; it is validated when deltas are computed.
    Raises DataFormatError when accountIndex is missing or not an integer.
    """
    account_index = token_balance.get("accountIndex")
    if not isinstance(account_index, int) or isinstance(account_index, bool):
        raise DataFormatError(account_index, field="accountIndex")

    ui_amount = token_balance.get("uiTokenAmount", {}) or {}
    amount = ui_amount.get("amount", "")
    return TokenBalanceSnapshot(
        account_index=account_index,
        mint=token_balance.get("mint", ""),
        owner=token_balance.get("owner") or None,
        amount=amount if isinstance(amount, str) else str(amount),
    )


def transaction_record_from_rpc(tx_data: dict, signature: str | None = None) -> TransactionRecord | None:
    """Build a TransactionRecord from a getTransaction result.

    Returns None when the TX has no meta or no blockTime (cannot be placed in time).
    Signature defaults to the TX's first signature (the fee payer's).
    Raises DataFormatError for token balance entries without an accountIndex.
    """
    meta = tx_data.get("meta")
    block_time = tx_data.get("blockTime")
    if not meta or not block_time:
        return None

    if signature is None:
        transaction = tx_data.get("transaction", {}) or {}
        signatures = transaction.get("signatures", [])
        if not signatures:
            return None
        signature = signatures[0]

    return TransactionRecord(
        signature=signature,
        block_time=block_time,
        slot=tx_data.get("slot", 0),
        pre_token_balances=[snapshot_from_rpc(tb) for tb in meta.get("preTokenBalances") or []],
        post_token_balances=[snapshot_from_rpc(tb) for tb in meta.get("postTokenBalances") or []],
    )
