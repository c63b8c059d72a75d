"""Funding rate of a perpetual contract.

Unlike the price indicators this one reads a live external value, so it
exposes only the asynchronous `detect_signal_async`. A failed read raises
ExternalFetchFailure instead of returning a NEUTRAL signal.
"""

import asyncio
from collections.abc import Mapping
from typing import Any

from src.modules.data.protocols import FundingRateProvider, ProviderError
from src.modules.indicators.errors import ExternalFetchFailure
from src.modules.indicators.params import FundingRateParams
from src.modules.indicators.types import SignalResult, SignalStrength, SignalType
from src.shared.logger import get_logger

logger = get_logger(__name__)

# Multiples of the threshold that raise the signal strength
MEDIUM_MULTIPLE = 1.5
STRONG_MULTIPLE = 2.0


class FundingRate:
    """Funding rate contrarian signal.

    A high positive rate means longs pay shorts (crowded longs): SELL.
    A low negative rate means shorts pay longs (crowded shorts): BUY.
    """

    name = "FundingRate"

    def __init__(
        self,
        provider: FundingRateProvider,
        params: FundingRateParams | Mapping[str, Any] | None = None,
    ) -> None:
        """Initialize FundingRate.

        Args:
            provider: Source of the live funding rate.
            params: A params record or sparse mapping over the defaults.

        Raises:
            ValueError: If a parameter is invalid.
        """
        self._provider = provider
        if isinstance(params, FundingRateParams):
            self.params = params
        else:
            self.params = FundingRateParams.from_mapping(params)

    async def detect_signal_async(
        self, symbol: str, timeout: float | None = None
    ) -> SignalResult:
        """Read the current funding rate and classify it.

        Args:
            symbol: Perpetual contract symbol (e.g., 'BTCUSDT').
            timeout: Optional limit in seconds for the read.

        Returns:
            SignalResult timestamped with the time of the read.

        Raises:
            ExternalFetchFailure: If the read fails or times out.
        """
        try:
            snapshot = await asyncio.wait_for(
                self._provider.get_funding_rate(symbol), timeout=timeout
            )
        except ProviderError as e:
            raise ExternalFetchFailure(self._provider.name, symbol, str(e)) from e
        except TimeoutError as e:
            raise ExternalFetchFailure(
                self._provider.name, symbol, f"timed out after {timeout}s"
            ) from e

        signal_type, strength = self.classify(snapshot.rate)
        logger.info(
            "Funding rate classified",
            extra={"symbol": symbol, "rate": snapshot.rate, "signal": signal_type.value},
        )

        return SignalResult(
            type=signal_type,
            strength=strength,
            indicator=self.name,
            timestamp=snapshot.timestamp,
            values={"fundingRate": snapshot.rate},
            message=_describe(signal_type, snapshot.rate),
        )

    def classify(self, rate: float) -> tuple[SignalType, SignalStrength]:
        """Classify a funding rate against the configured thresholds.

        Args:
            rate: Funding rate as a fraction.

        Returns:
            (type, strength) pair.
        """
        high = self.params.high_threshold
        low = self.params.low_threshold

        if rate > high:
            if rate > high * STRONG_MULTIPLE:
                return SignalType.SELL, SignalStrength.STRONG
            if rate > high * MEDIUM_MULTIPLE:
                return SignalType.SELL, SignalStrength.MEDIUM
            return SignalType.SELL, SignalStrength.WEAK

        if rate < low:
            if rate < low * STRONG_MULTIPLE:
                return SignalType.BUY, SignalStrength.STRONG
            if rate < low * MEDIUM_MULTIPLE:
                return SignalType.BUY, SignalStrength.MEDIUM
            return SignalType.BUY, SignalStrength.WEAK

        return SignalType.NEUTRAL, SignalStrength.WEAK


def _describe(signal_type: SignalType, rate: float) -> str:
    pct = f"{rate * 100:.4f}%"
    if signal_type is SignalType.SELL:
        return f"Funding rate is high ({pct}), longs are paying up, sell signal"
    if signal_type is SignalType.BUY:
        return f"Funding rate is low ({pct}), shorts are paying up, buy signal"
    return f"Funding rate is in the normal range ({pct}), no clear signal"
