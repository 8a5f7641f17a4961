# config.py
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    target_account: str = "7cMEhpt9y3inBNVv8fNnuaEbx7hKHZnLvR1KWKKxuDDU"
    target_asset: str = "Es9vMFrzaCERH16Cdv83hA5KaM6rDx8JEX5Rk3z3aZ9o"
    asset_symbol: str = "USDC"
    asset_decimals: int = Field(default=6, ge=0)
    window_hours: int = Field(default=24, gt=0)
    page_size: int = Field(default=1000, ge=1, le=1000)
    token_program: str = "spl-token"

    solana_cluster_url: str = "https://api.mainnet-beta.solana.com"
    rpc_timeout: int = 30
    rpc_retry_attempts: int = 3
    http_pool_size: int = 10

    http_host: str = "0.0.0.0"
    http_port: int = 8080

    log_file: str = "backfill.log"
    log_level: str = "INFO"

    @property
    def window_seconds(self) -> int:
        return self.window_hours * 3600

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True
    )

settings = Settings()
