from dependency_injector import containers, providers

from splledger.config import Settings
from splledger.infra.blockchain.solana.rpc_client import SolanaRPCClient
from splledger.infra.blockchain.solana.transfer_loader import SolanaTransferLoader
from splledger.infra.http.delayed_client import DelayedClient


class Container(containers.DeclarativeContainer):
    wiring_config = containers.WiringConfiguration(modules=["splledger.api.deps"])

    settings = providers.Singleton(Settings)

    http_client = providers.Singleton(
        DelayedClient,
        delay_ms=settings.provided.delay_ms_between_requests,
        timeout=settings.provided.rpc_timeout,
    )

    rpc_client = providers.Singleton(
        SolanaRPCClient,
        rpc_url=settings.provided.rpc_url,
        http_client=http_client,
    )

    transfer_loader = providers.Factory(
        SolanaTransferLoader,
        rpc=rpc_client,
        settings=settings,
    )
