from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from splledger.config import Settings
from splledger.container import Container
from splledger.infra.blockchain.solana.transfer_loader import SolanaTransferLoader


@inject
async def get_transfer_loader(
    loader: SolanaTransferLoader = Depends(Provide[Container.transfer_loader]),
) -> SolanaTransferLoader:
    return loader


@inject
async def get_settings(
    settings: Settings = Depends(Provide[Container.settings]),
) -> Settings:
    return settings
