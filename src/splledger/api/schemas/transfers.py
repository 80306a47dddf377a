from decimal import Decimal

from pydantic import BaseModel

from splledger.domain.enums import TransferDirection


class TransferResponse(BaseModel):
    signature: str
    timestamp: int  # unix ms
    direction: TransferDirection
    amount: Decimal
    counterparty: str
    slot: int


class TokenAccountResponse(BaseModel):
    address: str
    balance: Decimal


class WalletTransfersResponse(BaseModel):
    address: str
    mint: str
    symbol: str
    lookback_hours: int
    token_accounts: list[TokenAccountResponse]
    transfers: list[TransferResponse]
    total: int
    total_sent: Decimal
    total_received: Decimal
    sent_count: int
    received_count: int
