"""Derive per-owner token balance deltas from pre/post token balance snapshots."""

from collections.abc import Iterable

from splledger.domain.models.ledger import BalanceDelta, TokenBalanceSnapshot
from splledger.exceptions import DataFormatError


def parse_raw_amount(raw: str) -> int:
    """Parse a smallest-unit amount string. Raises DataFormatError instead of coercing."""
    if not isinstance(raw, str) or not (raw.isascii() and raw.isdecimal()):
        raise DataFormatError(raw)
    return int(raw)


def extract_deltas(
    pre_snapshots: Iterable[TokenBalanceSnapshot],
    post_snapshots: Iterable[TokenBalanceSnapshot],
    mint: str,
) -> list[BalanceDelta]:
    """Compute the signed change of `mint` per owned account across one transaction.

    Only post snapshots are walked: an account missing from the pre set started at 0,
    an account missing from the post set (closed during the TX) yields nothing.
    Unchanged accounts and accounts without an owner are dropped.
    """
    # accountIndex -> (amount, owner); last write wins on duplicate indexes
    pre_map: dict[int, tuple[str, str | None]] = {}
    for snapshot in pre_snapshots:
        if snapshot.mint == mint:
            pre_map[snapshot.account_index] = (snapshot.amount, snapshot.owner)

    deltas: list[BalanceDelta] = []
    for snapshot in post_snapshots:
        if snapshot.mint != mint:
            continue

        pre = pre_map.get(snapshot.account_index)
        pre_amount = parse_raw_amount(pre[0]) if pre is not None else 0
        post_amount = parse_raw_amount(snapshot.amount)
        change = post_amount - pre_amount

        if change != 0 and snapshot.owner:
            deltas.append(BalanceDelta(
                owner=snapshot.owner,
                change=change,
                account_index=snapshot.account_index,
            ))

    return deltas
