"""Binance Market Data Providers.

Spot klines for candle history and USD-M futures premium index for the
live funding rate.
"""

import time

import httpx

from src.modules.data.protocols import FundingRateSnapshot, ProviderError, validate_timeframe
from src.modules.indicators.types import Candle
from src.shared.logger import get_logger

logger = get_logger(__name__)


class BinanceProvider:
    """Binance spot candle provider (Primary).

    Uses the public klines endpoint; no API key required.
    """

    def __init__(
        self,
        base_url: str = "https://api.binance.com/api/v3",
        timeout: float = 30.0,
    ) -> None:
        """Initialize BinanceProvider.

        Args:
            base_url: Spot REST base URL.
            timeout: Request timeout in seconds.
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    @property
    def name(self) -> str:
        """Provider name."""
        return "Binance"

    def get_candles(
        self,
        symbol: str,
        timeframe: str,
        limit: int = 100,
        start_time: int | None = None,
        end_time: int | None = None,
    ) -> list[Candle]:
        """Fetch klines from Binance.

        Args:
            symbol: Trading pair (e.g., 'BTCUSDT').
            timeframe: Kline interval (e.g., '1h').
            limit: Maximum number of klines.
            start_time: Optional start, epoch milliseconds.
            end_time: Optional end, epoch milliseconds.

        Returns:
            Candles ordered oldest first.

        Raises:
            ProviderError: If the Binance API fails or returns malformed rows.
            ValueError: If the timeframe is unsupported.
        """
        validate_timeframe(timeframe)
        logger.info(
            "Fetching klines from Binance",
            extra={"symbol": symbol, "timeframe": timeframe, "limit": limit},
        )

        params: dict[str, str | int] = {
            "symbol": symbol.upper(),
            "interval": timeframe,
            "limit": limit,
        }
        if start_time is not None:
            params["startTime"] = start_time
        if end_time is not None:
            params["endTime"] = end_time

        try:
            with httpx.Client(timeout=self._timeout) as client:
                response = client.get(f"{self._base_url}/klines", params=params)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            raise ProviderError(
                self.name,
                symbol,
                f"HTTP {e.response.status_code}: {e.response.text}",
            ) from e
        except httpx.RequestError as e:
            raise ProviderError(self.name, symbol, str(e)) from e
        except ValueError as e:
            raise ProviderError(self.name, symbol, f"Invalid JSON response: {e}") from e

        return self._normalize(symbol, data)

    def _normalize(self, symbol: str, data: list[list[object]]) -> list[Candle]:
        """Convert raw klines to candles.

        Binance returns rows as
            [open_time, "open", "high", "low", "close", "volume", close_time, ...]
        with prices and volume as strings.

        Args:
            symbol: Symbol being fetched (for error messages).
            data: Raw klines response.

        Returns:
            Candles ordered oldest first.

        Raises:
            ProviderError: If a row cannot be parsed.
        """
        try:
            candles = [
                Candle(
                    timestamp=int(row[0]),  # type: ignore[call-overload]
                    open=float(row[1]),  # type: ignore[arg-type]
                    high=float(row[2]),  # type: ignore[arg-type]
                    low=float(row[3]),  # type: ignore[arg-type]
                    close=float(row[4]),  # type: ignore[arg-type]
                    volume=float(row[5]),  # type: ignore[arg-type]
                )
                for row in data
            ]
        except (IndexError, TypeError, ValueError) as e:
            raise ProviderError(self.name, symbol, f"Malformed kline: {e}") from e

        return sorted(candles, key=lambda c: c.timestamp)


class BinanceFuturesProvider:
    """Binance USD-M futures funding rate source."""

    def __init__(
        self,
        base_url: str = "https://fapi.binance.com/fapi/v1",
        timeout: float = 10.0,
    ) -> None:
        """Initialize BinanceFuturesProvider.

        Args:
            base_url: Futures REST base URL.
            timeout: Request timeout in seconds.
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    @property
    def name(self) -> str:
        """Provider name."""
        return "Binance Futures"

    async def get_funding_rate(self, symbol: str) -> FundingRateSnapshot:
        """Read the last funding rate from the premium index.

        Args:
            symbol: Perpetual contract symbol (e.g., 'BTCUSDT').

        Returns:
            FundingRateSnapshot with the rate and the exchange timestamp.

        Raises:
            ProviderError: If the request fails or the payload is malformed.
        """
        logger.info("Fetching funding rate from Binance Futures", extra={"symbol": symbol})

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(
                    f"{self._base_url}/premiumIndex",
                    params={"symbol": symbol.upper()},
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            raise ProviderError(
                self.name,
                symbol,
                f"HTTP {e.response.status_code}: {e.response.text}",
            ) from e
        except httpx.RequestError as e:
            raise ProviderError(self.name, symbol, str(e)) from e
        except ValueError as e:
            raise ProviderError(self.name, symbol, f"Invalid JSON response: {e}") from e

        try:
            rate = float(data["lastFundingRate"])
            timestamp = int(data.get("time") or time.time() * 1000)
        except (KeyError, TypeError, ValueError) as e:
            raise ProviderError(self.name, symbol, f"Malformed premium index: {e}") from e

        return FundingRateSnapshot(symbol=symbol.upper(), rate=rate, timestamp=timestamp)
