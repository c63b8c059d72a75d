"""Price Data Manager - candle source routing.

Resolves an exchange name to its candle provider and returns the candles
the indicator engine consumes. No caching, no persistence.
"""

from collections.abc import Mapping

from src.modules.data.protocols import CandleProvider
from src.modules.data.providers.binance import BinanceProvider
from src.modules.data.providers.coingecko import CoinGeckoProvider
from src.modules.indicators.types import Candle
from src.shared.config import Config
from src.shared.logger import get_logger

logger = get_logger(__name__)


class PriceDataManager:
    """Routes candle requests to the provider registered for an exchange.

    Usage:
        manager = PriceDataManager.from_config(load_config())
        candles = manager.get_price_data("binance", "BTCUSDT", "1h", limit=100)
    """

    def __init__(self, providers: Mapping[str, CandleProvider]) -> None:
        """Initialize PriceDataManager.

        Args:
            providers: Exchange name (case-insensitive) -> provider.
        """
        self._providers = {name.lower(): provider for name, provider in providers.items()}

    @classmethod
    def from_config(cls, config: Config) -> "PriceDataManager":
        """Build a manager with the Binance and CoinGecko providers.

        Args:
            config: Application configuration.

        Returns:
            Configured PriceDataManager.
        """
        return cls(
            {
                "binance": BinanceProvider(config.binance_spot_url, config.http_timeout),
                "coingecko": CoinGeckoProvider(config.coingecko_url, config.http_timeout),
            }
        )

    @property
    def exchanges(self) -> list[str]:
        """Supported exchange names."""
        return list(self._providers)

    def get_price_data(
        self,
        exchange: str,
        symbol: str,
        timeframe: str,
        limit: int = 100,
        start_time: int | None = None,
        end_time: int | None = None,
    ) -> list[Candle]:
        """Fetch candles from the provider for `exchange`.

        Args:
            exchange: Exchange name (e.g., 'binance', 'coingecko').
            symbol: Trading pair (e.g., 'BTCUSDT').
            timeframe: Candle interval (e.g., '1h').
            limit: Maximum number of candles.
            start_time: Optional start, epoch milliseconds.
            end_time: Optional end, epoch milliseconds.

        Returns:
            Candles ordered oldest first.

        Raises:
            ValueError: If the exchange or timeframe is unsupported.
            ProviderError: If the provider fails.
        """
        provider = self._providers.get(exchange.lower())
        if provider is None:
            raise ValueError(
                f"Unsupported exchange '{exchange}'. Supported: {self.exchanges}"
            )

        candles = provider.get_candles(
            symbol, timeframe, limit=limit, start_time=start_time, end_time=end_time
        )
        logger.info(
            f"Fetched {len(candles)} candles for {symbol}",
            extra={"exchange": provider.name, "timeframe": timeframe},
        )
        return candles
