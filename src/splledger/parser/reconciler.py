"""Turn balance deltas into ledger transfers and merge them into one ordered ledger.

Pure functions, no I/O. The loader hands in fully fetched TransactionRecords.
"""

import logging
from collections.abc import Iterable
from decimal import Decimal

from splledger.domain.enums.direction import TransferDirection
from splledger.domain.models.ledger import (
    UNKNOWN_COUNTERPARTY,
    BalanceDelta,
    TransactionRecord,
    Transfer,
)
from splledger.exceptions import DataFormatError
from splledger.parser.balance_deltas import extract_deltas

logger = logging.getLogger(__name__)


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def attribute(deltas: Iterable[BalanceDelta], tracked_address: str) -> BalanceDelta | None:
    """Return the tracked wallet's delta, or None if the TX did not move its tokens."""
    for delta in deltas:
        if delta.owner == tracked_address:
            return delta
    return None


def resolve_counterparty(deltas: list[BalanceDelta], tracked_address: str) -> str:
    """Owner of the first delta whose sign is opposite to the tracked wallet's.

    Multi-party movements (fan-in/fan-out, swaps) report only that first match.
    """
    tracked = attribute(deltas, tracked_address)
    if tracked is None:
        return UNKNOWN_COUNTERPARTY

    tracked_sign = _sign(tracked.change)
    for delta in deltas:
        if delta.owner != tracked_address and _sign(delta.change) == -tracked_sign:
            return delta.owner
    return UNKNOWN_COUNTERPARTY


def build_transfer(
    signature: str,
    block_time: int,
    slot: int,
    tracked_delta: BalanceDelta | None,
    counterparty: str,
    decimals: int,
) -> Transfer | None:
    """Build the ledger entry for the tracked delta. None when there is nothing to record."""
    if tracked_delta is None or tracked_delta.change == 0:
        return None

    direction = TransferDirection.RECEIVED if tracked_delta.change > 0 else TransferDirection.SENT
    return Transfer(
        signature=signature,
        timestamp=block_time * 1000,
        direction=direction,
        amount=Decimal(f"{abs(tracked_delta.change)}E-{decimals}"),
        counterparty=counterparty or UNKNOWN_COUNTERPARTY,
        slot=slot,
    )


def merge(batches: Iterable[Iterable[Transfer]]) -> list[Transfer]:
    """Concatenate batches, keep the first transfer per signature, newest first.

    The same TX shows up in both the wallet's and its token account's signature
    history; later copies are dropped. sorted() is stable so equal timestamps
    keep input order.
    """
    seen: set[str] = set()
    unique: list[Transfer] = []
    for batch in batches:
        for transfer in batch:
            if transfer.signature in seen:
                continue
            seen.add(transfer.signature)
            unique.append(transfer)

    return sorted(unique, key=lambda t: t.timestamp, reverse=True)


def reconcile_transaction(
    record: TransactionRecord,
    tracked_address: str,
    mint: str,
    decimals: int,
) -> Transfer | None:
    """Extract -> attribute -> counterparty -> build for one transaction.

    Raises DataFormatError if a raw amount of the tracked mint is malformed.
    """
    deltas = extract_deltas(record.pre_token_balances, record.post_token_balances, mint)
    tracked = attribute(deltas, tracked_address)
    if tracked is None:
        return None

    counterparty = resolve_counterparty(deltas, tracked_address)
    return build_transfer(record.signature, record.block_time, record.slot, tracked, counterparty, decimals)


def reconcile_batch(
    transactions: Iterable[TransactionRecord],
    tracked_address: str,
    mint: str,
    decimals: int,
) -> list[Transfer]:
    """Reconcile transactions in input order; malformed ones are logged and skipped."""
    transfers: list[Transfer] = []
    for record in transactions:
        try:
            transfer = reconcile_transaction(record, tracked_address, mint, decimals)
        except DataFormatError as e:
            logger.warning("Skipping TX %s: %s", record.signature, e)
            continue
        if transfer is not None:
            transfers.append(transfer)
    return transfers


def reconcile(
    transactions: Iterable[TransactionRecord],
    tracked_address: str,
    mint: str,
    decimals: int,
) -> list[Transfer]:
    """End-to-end: reconcile every transaction, then dedup and sort into the ledger."""
    return merge([reconcile_batch(transactions, tracked_address, mint, decimals)])
