"""Shared fixtures for indicator tests.

All data is static and deterministic. No network calls, no randomness.
"""

from collections.abc import Callable, Sequence

import pytest

from src.modules.indicators.types import Candle

START_MS = 1_700_000_000_000
HOUR_MS = 3_600_000

CandleFactory = Callable[..., list[Candle]]


def _build(
    closes: Sequence[float],
    highs: Sequence[float] | None = None,
    lows: Sequence[float] | None = None,
    volumes: Sequence[float] | None = None,
) -> list[Candle]:
    """Build hourly candles around the given closes."""
    candles = []
    for i, close in enumerate(closes):
        candles.append(
            Candle(
                timestamp=START_MS + i * HOUR_MS,
                open=close - 0.2,
                high=highs[i] if highs is not None else close + 0.5,
                low=lows[i] if lows is not None else close - 0.5,
                close=close,
                volume=volumes[i] if volumes is not None else 1000.0,
            )
        )
    return candles


@pytest.fixture
def make_candles() -> CandleFactory:
    """Factory building candles from close prices (and optional H/L/V)."""
    return _build


@pytest.fixture
def sample_candles() -> list[Candle]:
    """60 hourly candles of a gradual uptrend with noise.

    Same repeating move pattern every run, so values are reproducible.
    """
    n = 60
    closes = [100.0]
    move = [0.5, 0.8, -0.3, 1.0, 0.0, 0.6, -0.7, 0.4, 1.2, -0.5]
    for i in range(1, n):
        closes.append(closes[-1] + move[i % len(move)])
    volumes = [1_000_000.0 + i * 10_000 for i in range(n)]
    return _build(closes, volumes=volumes)


@pytest.fixture
def rising_candles() -> list[Candle]:
    """20 candles with close 100, 101, ..., 119 and constant volume 1000."""
    return _build([100.0 + i for i in range(20)])


@pytest.fixture
def long_rising_candles() -> list[Candle]:
    """80 candles with strictly increasing closes, highs and lows."""
    return _build([100.0 + i * 0.5 for i in range(80)])


@pytest.fixture
def flat_candles() -> list[Candle]:
    """40 candles where open == high == low == close == 100."""
    return [
        Candle(
            timestamp=START_MS + i * HOUR_MS,
            open=100.0,
            high=100.0,
            low=100.0,
            close=100.0,
            volume=1000.0,
        )
        for i in range(40)
    ]
