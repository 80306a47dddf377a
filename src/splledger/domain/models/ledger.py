"""Domain types for token balance reconciliation and the transfer ledger."""

from decimal import Decimal

from pydantic import BaseModel, field_validator

from splledger.domain.enums.direction import TransferDirection

UNKNOWN_COUNTERPARTY = "Unknown"


class TokenBalanceSnapshot(BaseModel):
    """One pre- or post-transaction token balance entry for an account index."""

    account_index: int  # position in the TX account list, not a global id
    mint: str  # token identity
    owner: str | None = None
    amount: str  # raw integer string, smallest unit


class BalanceDelta(BaseModel):
    """Signed change of the tracked token for one owned account. Never zero."""

    owner: str
    change: int  # post - pre
    account_index: int

    @field_validator("change")
    @classmethod
    def non_zero(cls, v: int) -> int:
        if v == 0:
            raise ValueError("balance delta cannot be zero")
        return v


class TransactionRecord(BaseModel):
    """A fully fetched transaction, reduced to what reconciliation needs."""

    signature: str
    block_time: int  # unix seconds
    slot: int
    pre_token_balances: list[TokenBalanceSnapshot] = []
    post_token_balances: list[TokenBalanceSnapshot] = []


class Transfer(BaseModel):
    """A ledger entry: one token movement in or out of the tracked wallet."""

    signature: str
    timestamp: int  # unix milliseconds
    direction: TransferDirection
    amount: Decimal  # always > 0
    counterparty: str = UNKNOWN_COUNTERPARTY
    slot: int


class TokenAccount(BaseModel):
    """A token account owned by the tracked wallet."""

    address: str
    balance: Decimal  # ui amount


class WalletTransfers(BaseModel):
    address: str
    token_accounts: list[TokenAccount] = []
    transfers: list[Transfer] = []
