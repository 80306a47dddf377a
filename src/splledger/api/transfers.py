from decimal import Decimal
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from splledger.api.deps import get_settings, get_transfer_loader
from splledger.api.schemas.transfers import TokenAccountResponse, TransferResponse, WalletTransfersResponse
from splledger.config import Settings
from splledger.domain.enums import TransferDirection
from splledger.exceptions import TransferFetchError
from splledger.infra.blockchain.solana.transfer_loader import SolanaTransferLoader

router = APIRouter(prefix="/api/wallets", tags=["transfers"])

LoaderDep = Annotated[SolanaTransferLoader, Depends(get_transfer_loader)]
SettingsDep = Annotated[Settings, Depends(get_settings)]


@router.get("/{address}/transfers", response_model=WalletTransfersResponse)
async def get_wallet_transfers(
    address: str,
    loader: LoaderDep,
    settings: SettingsDep,
    lookback_hours: Optional[int] = Query(None, ge=1, le=24 * 30, description="Defaults to configured lookback"),
) -> WalletTransfersResponse:
    """Token transfers in/out of a wallet over the lookback window, newest first."""
    hours = lookback_hours or settings.lookback_hours
    try:
        data = await loader.get_wallet_transfers(address.strip(), hours)
    except TransferFetchError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    sent = [t for t in data.transfers if t.direction == TransferDirection.SENT]
    received = [t for t in data.transfers if t.direction == TransferDirection.RECEIVED]

    return WalletTransfersResponse(
        address=data.address,
        mint=settings.token_mint,
        symbol=settings.token_symbol,
        lookback_hours=hours,
        token_accounts=[TokenAccountResponse.model_validate(a.model_dump()) for a in data.token_accounts],
        transfers=[TransferResponse.model_validate(t.model_dump()) for t in data.transfers],
        total=len(data.transfers),
        total_sent=sum((t.amount for t in sent), Decimal(0)),
        total_received=sum((t.amount for t in received), Decimal(0)),
        sent_count=len(sent),
        received_count=len(received),
    )
