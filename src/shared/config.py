"""Configuration loader for the signal engine.

Loads configuration from environment variables with sensible defaults.
"""

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Config:
    """Application configuration loaded from environment variables.

    Attributes:
        environment: Current environment (dev/prod).
        log_level: Logging level name (DEBUG, INFO, ...).
        binance_spot_url: Base URL for Binance spot market data.
        binance_futures_url: Base URL for Binance USD-M futures data.
        coingecko_url: Base URL for the CoinGecko public API.
        http_timeout: Timeout in seconds for candle requests.
        funding_rate_timeout: Timeout in seconds for the funding rate read.
        default_exchange: Exchange used when a request names none.
        default_timeframe: Candle interval used when a request names none.
        default_limit: Number of candles fetched when a request names none.
    """

    environment: str
    log_level: str
    binance_spot_url: str
    binance_futures_url: str
    coingecko_url: str
    http_timeout: float
    funding_rate_timeout: float
    default_exchange: str
    default_timeframe: str
    default_limit: int


def load_config() -> Config:
    """Load configuration from environment variables.

    Returns:
        Config object with all settings.

    Raises:
        ValueError: If a numeric environment variable cannot be parsed.
    """
    return Config(
        environment=os.getenv("ENVIRONMENT", "dev"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        binance_spot_url=os.getenv("BINANCE_SPOT_URL", "https://api.binance.com/api/v3"),
        binance_futures_url=os.getenv(
            "BINANCE_FUTURES_URL", "https://fapi.binance.com/fapi/v1"
        ),
        coingecko_url=os.getenv("COINGECKO_URL", "https://api.coingecko.com/api/v3"),
        http_timeout=float(os.getenv("HTTP_TIMEOUT", "30.0")),
        funding_rate_timeout=float(os.getenv("FUNDING_RATE_TIMEOUT", "10.0")),
        default_exchange=os.getenv("DEFAULT_EXCHANGE", "binance").lower(),
        default_timeframe=os.getenv("DEFAULT_TIMEFRAME", "1h"),
        default_limit=int(os.getenv("DEFAULT_LIMIT", "100")),
    )
