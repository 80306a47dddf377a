"""Print the USDC transfer ledger for a Solana wallet.

Usage:
    PYTHONPATH=src python scripts/fetch_transfers.py <wallet> [lookback_hours]
"""

import asyncio
import logging
import sys
import time
from datetime import datetime, timezone

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)-5s %(name)s - %(message)s")
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


async def main(wallet: str, lookback_hours: int | None) -> int:
    from splledger.config import settings
    from splledger.exceptions import TransferFetchError
    from splledger.infra.blockchain.solana.rpc_client import SolanaRPCClient
    from splledger.infra.blockchain.solana.transfer_loader import SolanaTransferLoader
    from splledger.infra.http.delayed_client import DelayedClient

    print(f"RPC:    {'Helius' if settings.helius_api_key else settings.solana_rpc_url}")
    print(f"Token:  {settings.token_symbol} ({settings.token_mint})")
    print(f"Wallet: {wallet}\n")

    async with DelayedClient(delay_ms=settings.delay_ms_between_requests, timeout=settings.rpc_timeout) as http:
        loader = SolanaTransferLoader(SolanaRPCClient(settings.rpc_url, http), settings)
        t0 = time.time()
        try:
            data = await loader.get_wallet_transfers(wallet, lookback_hours)
        except TransferFetchError as e:
            print(f"ERROR: {e}")
            return 1

    for account in data.token_accounts:
        print(f"  token account {account.address}  balance {account.balance}")

    print(f"\n{len(data.transfers)} transfers ({time.time() - t0:.1f}s)\n")
    for t in data.transfers:
        ts = datetime.fromtimestamp(t.timestamp / 1000, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        sign = "+" if t.direction.value == "received" else "-"
        print(f"  {ts}  {sign}{t.amount:>16}  {t.direction.value:<8}  {t.counterparty}  {t.signature[:16]}..")
    return 0


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(2)
    hours = int(sys.argv[2]) if len(sys.argv) > 2 else None
    sys.exit(asyncio.run(main(sys.argv[1], hours)))
