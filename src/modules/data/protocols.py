"""Data Provider Protocols.

Defines the interfaces for candle providers and funding rate providers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from src.modules.indicators.types import Candle

# Candle interval -> minutes
TIMEFRAME_MINUTES: dict[str, int] = {
    "1m": 1,
    "5m": 5,
    "15m": 15,
    "30m": 30,
    "1h": 60,
    "4h": 240,
    "1d": 1440,
    "1w": 10080,
}


def validate_timeframe(timeframe: str) -> str:
    """Return the timeframe if supported.

    Raises:
        ValueError: If the timeframe is not one of TIMEFRAME_MINUTES.
    """
    if timeframe not in TIMEFRAME_MINUTES:
        raise ValueError(
            f"Unsupported timeframe '{timeframe}'. Supported: {list(TIMEFRAME_MINUTES)}"
        )
    return timeframe


class CandleProvider(Protocol):
    """Protocol for OHLCV candle providers.

    All providers (Binance, CoinGecko, etc.) must implement this interface
    so the price data manager can route requests by exchange name.
    """

    @property
    def name(self) -> str:
        """Provider name for logging and error messages."""
        ...

    def get_candles(
        self,
        symbol: str,
        timeframe: str,
        limit: int = 100,
        start_time: int | None = None,
        end_time: int | None = None,
    ) -> list[Candle]:
        """Fetch OHLCV candles for a trading pair.

        Args:
            symbol: Trading pair (e.g., 'BTCUSDT').
            timeframe: Candle interval (one of TIMEFRAME_MINUTES).
            limit: Maximum number of candles.
            start_time: Optional start, epoch milliseconds (inclusive).
            end_time: Optional end, epoch milliseconds (inclusive).

        Returns:
            Candles ordered oldest first.

        Raises:
            ProviderError: If the provider fails to fetch data.
        """
        ...


@dataclass(frozen=True)
class FundingRateSnapshot:
    """Point-in-time funding rate of a perpetual contract.

    Attributes:
        symbol: Contract symbol (e.g., 'BTCUSDT').
        rate: Last funding rate as a fraction (0.0001 = 0.01%).
        timestamp: Time of the read in epoch milliseconds.
    """

    symbol: str
    rate: float
    timestamp: int


class FundingRateProvider(Protocol):
    """Protocol for live funding rate sources."""

    @property
    def name(self) -> str:
        """Provider name for logging and error messages."""
        ...

    async def get_funding_rate(self, symbol: str) -> FundingRateSnapshot:
        """Read the current funding rate for a perpetual contract.

        Args:
            symbol: Contract symbol (e.g., 'BTCUSDT').

        Returns:
            The latest funding rate snapshot.

        Raises:
            ProviderError: If the rate cannot be fetched or parsed.
        """
        ...


class ProviderError(Exception):
    """Exception raised when a provider fails to fetch data."""

    def __init__(self, provider: str, ticker: str, message: str) -> None:
        """Initialize ProviderError.

        Args:
            provider: Name of the failing provider.
            ticker: Symbol that was being fetched.
            message: Error description.
        """
        self.provider = provider
        self.ticker = ticker
        super().__init__(f"[{provider}] Failed to fetch {ticker}: {message}")
