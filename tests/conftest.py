import pytest

from splledger.config import Settings

USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        _env_file=None,
        helius_api_key="",
        token_mint=USDC_MINT,
        token_decimals=6,
        token_symbol="USDC",
        signature_limit=200,
        max_wallet_transactions=50,
        max_token_account_transactions=100,
        lookback_hours=24,
        delay_ms_between_requests=0,
    )
