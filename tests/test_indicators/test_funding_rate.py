"""Tests for the funding rate indicator."""

import asyncio

import pytest

from src.modules.data.protocols import FundingRateSnapshot, ProviderError
from src.modules.indicators.errors import ExternalFetchFailure
from src.modules.indicators.funding_rate import FundingRate
from src.modules.indicators.types import (
    ExternalIndicator,
    PriceIndicator,
    SignalStrength,
    SignalType,
)


class StaticFundingProvider:
    """Funding rate source returning a fixed rate, or failing."""

    def __init__(
        self, rate: float = 0.0, error: Exception | None = None, delay: float = 0.0
    ) -> None:
        self.rate = rate
        self.error = error
        self.delay = delay
        self.calls: list[str] = []

    @property
    def name(self) -> str:
        return "Static"

    async def get_funding_rate(self, symbol: str) -> FundingRateSnapshot:
        self.calls.append(symbol)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return FundingRateSnapshot(symbol=symbol, rate=self.rate, timestamp=1_700_000_000_000)


class TestFundingRateClassify:
    """Tests for FundingRate.classify."""

    @pytest.mark.parametrize(
        ("rate", "signal_type", "strength"),
        [
            (0.0011, SignalType.SELL, SignalStrength.STRONG),
            (0.0008, SignalType.SELL, SignalStrength.MEDIUM),
            (0.0006, SignalType.SELL, SignalStrength.WEAK),
            (0.0005, SignalType.NEUTRAL, SignalStrength.WEAK),
            (0.0, SignalType.NEUTRAL, SignalStrength.WEAK),
            (-0.0005, SignalType.NEUTRAL, SignalStrength.WEAK),
            (-0.0006, SignalType.BUY, SignalStrength.WEAK),
            (-0.0008, SignalType.BUY, SignalStrength.MEDIUM),
            (-0.0011, SignalType.BUY, SignalStrength.STRONG),
        ],
    )
    def test_tiers(
        self, rate: float, signal_type: SignalType, strength: SignalStrength
    ) -> None:
        """Test thresholds and the 1.5x / 2x strength tiers."""
        indicator = FundingRate(StaticFundingProvider())

        assert indicator.classify(rate) == (signal_type, strength)

    def test_custom_thresholds(self) -> None:
        """Test threshold overrides by camelCase alias."""
        indicator = FundingRate(
            StaticFundingProvider(), {"highThreshold": 0.001, "lowThreshold": -0.001}
        )

        assert indicator.classify(0.0008) == (SignalType.NEUTRAL, SignalStrength.WEAK)

    def test_equal_thresholds_rejected(self) -> None:
        """Test equal thresholds raise ValueError."""
        with pytest.raises(ValueError, match="low_threshold"):
            FundingRate(StaticFundingProvider(), {"highThreshold": 0, "lowThreshold": 0})

    @pytest.mark.parametrize(
        "overrides",
        [
            {"highThreshold": 0.0005, "lowThreshold": 0.0001},
            {"highThreshold": -0.0001, "lowThreshold": -0.0005},
        ],
    )
    def test_thresholds_must_straddle_zero(self, overrides: dict[str, float]) -> None:
        """Test thresholds on the same side of zero raise ValueError."""
        with pytest.raises(ValueError, match="low_threshold <= 0 <= high_threshold"):
            FundingRate(StaticFundingProvider(), overrides)


class TestFundingRateDetect:
    """Tests for FundingRate.detect_signal_async."""

    def test_is_external_capability(self) -> None:
        """Test FundingRate is an external, not a price, indicator."""
        indicator = FundingRate(StaticFundingProvider())

        assert isinstance(indicator, ExternalIndicator)
        assert not isinstance(indicator, PriceIndicator)

    def test_high_rate_is_sell(self) -> None:
        """Test a high funding rate produces a sell signal."""
        provider = StaticFundingProvider(rate=0.0012)
        indicator = FundingRate(provider)

        signal = asyncio.run(indicator.detect_signal_async("BTCUSDT"))

        assert provider.calls == ["BTCUSDT"]
        assert signal.type == SignalType.SELL
        assert signal.strength == SignalStrength.STRONG
        assert signal.indicator == "FundingRate"
        assert signal.values == {"fundingRate": 0.0012}
        assert signal.timestamp == 1_700_000_000_000
        assert "0.1200%" in signal.message

    def test_normal_rate_is_neutral(self) -> None:
        """Test a rate inside the thresholds is neutral."""
        indicator = FundingRate(StaticFundingProvider(rate=0.0001))

        signal = asyncio.run(indicator.detect_signal_async("ETHUSDT", timeout=1.0))

        assert signal.type == SignalType.NEUTRAL
        assert "normal range" in signal.message

    def test_provider_error_is_external_failure(self) -> None:
        """Test a failed read raises instead of returning NEUTRAL."""
        error = ProviderError("Static", "BTCUSDT", "HTTP 503")
        indicator = FundingRate(StaticFundingProvider(error=error))

        with pytest.raises(ExternalFetchFailure) as exc_info:
            asyncio.run(indicator.detect_signal_async("BTCUSDT"))

        assert exc_info.value.source == "Static"
        assert exc_info.value.symbol == "BTCUSDT"
        assert "HTTP 503" in str(exc_info.value)

    def test_timeout_is_external_failure(self) -> None:
        """Test a read slower than the timeout raises ExternalFetchFailure."""
        indicator = FundingRate(StaticFundingProvider(delay=1.0))

        with pytest.raises(ExternalFetchFailure, match="timed out"):
            asyncio.run(indicator.detect_signal_async("BTCUSDT", timeout=0.01))

    def test_cancellation_propagates(self) -> None:
        """Test cancelling the read surfaces CancelledError."""
        indicator = FundingRate(StaticFundingProvider(delay=1.0))

        async def cancel_read() -> None:
            task = asyncio.create_task(indicator.detect_signal_async("BTCUSDT"))
            await asyncio.sleep(0.01)
            task.cancel()
            await task

        with pytest.raises(asyncio.CancelledError):
            asyncio.run(cancel_read())
