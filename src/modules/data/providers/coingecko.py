"""CoinGecko Market Data Provider.

Fallback candle source. The OHLC endpoint carries no volume, so every
candle has volume 0 and volume-based indicators stay flat.
"""

import math

import httpx

from src.modules.data.protocols import TIMEFRAME_MINUTES, ProviderError, validate_timeframe
from src.modules.indicators.types import Candle
from src.shared.logger import get_logger

logger = get_logger(__name__)

# CoinGecko serves at most a year of OHLC history per request
MAX_DAYS = 365

# Base asset -> CoinGecko coin id
COIN_IDS: dict[str, str] = {
    "btc": "bitcoin",
    "eth": "ethereum",
    "bnb": "binancecoin",
    "ada": "cardano",
    "dot": "polkadot",
    "link": "chainlink",
    "ltc": "litecoin",
    "bch": "bitcoin-cash",
    "xlm": "stellar",
    "vet": "vechain",
    "trx": "tron",
    "eos": "eos",
    "xmr": "monero",
    "xtz": "tezos",
    "atom": "cosmos",
    "neo": "neo",
    "mkr": "maker",
    "dash": "dash",
    "etc": "ethereum-classic",
    "zec": "zcash",
}


def to_coin_id(symbol: str) -> str:
    """Map a pair like 'BTCUSDT' to a CoinGecko coin id.

    Unknown bases fall back to the lower-cased base symbol.
    """
    base = symbol.lower()
    if base.endswith("usdt"):
        base = base[: -len("usdt")]
    return COIN_IDS.get(base, base)


def days_for(timeframe: str, limit: int) -> int:
    """Number of days of history needed to cover `limit` candles."""
    total_minutes = TIMEFRAME_MINUTES[validate_timeframe(timeframe)] * limit
    return max(1, min(math.ceil(total_minutes / 1440), MAX_DAYS))


class CoinGeckoProvider:
    """CoinGecko OHLC provider (Fallback).

    Granularity is chosen by CoinGecko from the requested day span, so the
    timeframe only controls how much history is requested.
    """

    def __init__(
        self,
        base_url: str = "https://api.coingecko.com/api/v3",
        timeout: float = 30.0,
    ) -> None:
        """Initialize CoinGeckoProvider.

        Args:
            base_url: CoinGecko REST base URL.
            timeout: Request timeout in seconds.
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    @property
    def name(self) -> str:
        """Provider name."""
        return "CoinGecko"

    def get_candles(
        self,
        symbol: str,
        timeframe: str,
        limit: int = 100,
        start_time: int | None = None,
        end_time: int | None = None,
    ) -> list[Candle]:
        """Fetch OHLC candles from CoinGecko.

        Args:
            symbol: Trading pair (e.g., 'BTCUSDT').
            timeframe: Candle interval, used to size the day span.
            limit: Number of most recent candles to keep.
            start_time: Not supported by the OHLC endpoint; ignored.
            end_time: Not supported by the OHLC endpoint; ignored.

        Returns:
            The last `limit` candles, oldest first, with zero volume.

        Raises:
            ProviderError: If the CoinGecko API fails.
            ValueError: If the timeframe is unsupported.
        """
        coin_id = to_coin_id(symbol)
        days = days_for(timeframe, limit)
        logger.info(
            "Fetching OHLC from CoinGecko",
            extra={"symbol": symbol, "coin_id": coin_id, "days": days},
        )

        try:
            with httpx.Client(timeout=self._timeout) as client:
                response = client.get(
                    f"{self._base_url}/coins/{coin_id}/ohlc",
                    params={"vs_currency": "usd", "days": days},
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
            candles = [
                Candle(
                    timestamp=int(row[0]),
                    open=float(row[1]),
                    high=float(row[2]),
                    low=float(row[3]),
                    close=float(row[4]),
                    volume=0.0,
                )
                for row in data
            ]
        except (IndexError, TypeError, ValueError) as e:
            raise ProviderError(self.name, symbol, f"Malformed OHLC row: {e}") from e

        candles.sort(key=lambda c: c.timestamp)
        return candles[-limit:] if limit > 0 else []
