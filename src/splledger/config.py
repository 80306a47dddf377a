from pydantic_settings import BaseSettings

USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
USDC_DECIMALS = 6


class Settings(BaseSettings):
    solana_rpc_url: str = "https://api.mainnet-beta.solana.com"
    helius_api_key: str = ""
    token_mint: str = USDC_MINT
    token_decimals: int = USDC_DECIMALS
    token_symbol: str = "USDC"
    lookback_hours: int = 24
    delay_ms_between_requests: int = 300
    rpc_timeout: float = 30.0  # seconds
    signature_limit: int = 200
    max_wallet_transactions: int = 50
    max_token_account_transactions: int = 100

    @property
    def rpc_url(self) -> str:
        if self.helius_api_key:
            return f"https://mainnet.helius-rpc.com/?api-key={self.helius_api_key}"
        return self.solana_rpc_url

    class Config:
        env_file = ".env"


settings = Settings()
