"""
Application Configuration

All settings loaded from environment variables.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Application
    app_name: str = "CryptoChart Backend"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS
    allowed_origins: list[str] = ["http://localhost:5173"]

    # Binance market data
    binance_rest_url: str = "https://api.binance.com/api/v3"
    binance_ws_url: str = "wss://stream.binance.com:9443/ws"
    symbols: list[str] = ["BTCUSDT", "ETHUSDT"]
    default_timeframe: str = "1d"
    history_start: str = "2017-01-01"  # First candle requested (UTC date)
    kline_page_limit: int = 1000  # Binance cap per request
    kline_page_delay: float = 0.1  # Seconds between pages
    request_timeout: float = 10.0

    # Live price feed
    enable_live_data: bool = True
    reconnect_delay: float = 1.0
    max_reconnect_delay: float = 60.0
    sse_queue_size: int = 100

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
