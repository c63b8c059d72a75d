"""Shared fixtures for signal service tests.

All data is static and deterministic. No network calls, no randomness.
"""

import asyncio

import pytest

from src.modules.data.protocols import FundingRateSnapshot, ProviderError
from src.modules.indicators.types import Candle


class FakeFundingProvider:
    """In-memory funding rate source."""

    def __init__(self, rate: float = 0.0012, fail: bool = False, delay: float = 0.0) -> None:
        self.rate = rate
        self.fail = fail
        self.delay = delay

    @property
    def name(self) -> str:
        return "Fake Futures"

    async def get_funding_rate(self, symbol: str) -> FundingRateSnapshot:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise ProviderError(self.name, symbol, "HTTP 503: unavailable")
        return FundingRateSnapshot(symbol=symbol, rate=self.rate, timestamp=1_700_000_000_000)


@pytest.fixture
def candles() -> list[Candle]:
    """60 hourly candles of a noisy uptrend."""
    closes = [100.0]
    move = [0.5, 0.8, -0.3, 1.0, 0.0, 0.6, -0.7, 0.4, 1.2, -0.5]
    for i in range(1, 60):
        closes.append(closes[-1] + move[i % len(move)])

    return [
        Candle(
            timestamp=1_700_000_000_000 + i * 3_600_000,
            open=close - 0.2,
            high=close + 0.5,
            low=close - 0.5,
            close=close,
            volume=1_000_000.0 + i * 10_000,
        )
        for i, close in enumerate(closes)
    ]


@pytest.fixture
def funding_provider() -> FakeFundingProvider:
    """Funding source reporting a high (0.12%) rate."""
    return FakeFundingProvider()


@pytest.fixture
def failing_funding_provider() -> FakeFundingProvider:
    """Funding source that always fails."""
    return FakeFundingProvider(fail=True)


@pytest.fixture
def slow_funding_provider() -> FakeFundingProvider:
    """Funding source that takes a second to answer."""
    return FakeFundingProvider(delay=1.0)
