"""Core types shared by every indicator.

Candles come in, aligned indicator series and signal results go out.
Absent (not yet computable) values are ``None``, never ``0.0``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Protocol, runtime_checkable

import pandas as pd

# Ordered mapping of series name -> values aligned with the input candles.
IndicatorSeries = dict[str, list[float | None]]

CANDLE_COLUMNS = ["timestamp", "open", "high", "low", "close", "volume"]


@dataclass(frozen=True)
class Candle:
    """One OHLCV observation.

    Attributes:
        timestamp: Bucket open time in epoch milliseconds.
        open: Opening price.
        high: High price.
        low: Low price.
        close: Closing price.
        volume: Traded volume (>= 0).
    """

    timestamp: int
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0


# Index 0 is the oldest candle.
PriceSeries = Sequence[Candle]


class SignalType(StrEnum):
    """Direction of a detected signal."""

    BUY = "BUY"
    SELL = "SELL"
    NEUTRAL = "NEUTRAL"


class SignalStrength(StrEnum):
    """Confidence grade of a detected signal."""

    WEAK = "WEAK"
    MEDIUM = "MEDIUM"
    STRONG = "STRONG"


@dataclass(frozen=True)
class SignalResult:
    """Classification of the current state of one indicator.

    Attributes:
        type: BUY, SELL or NEUTRAL.
        strength: WEAK, MEDIUM or STRONG.
        indicator: Display name of the indicator.
        timestamp: Timestamp (ms) of the last candle used.
        values: Latest value of each series used in the decision.
        message: Human-readable explanation.
    """

    type: SignalType
    strength: SignalStrength
    indicator: str
    timestamp: int
    values: dict[str, float] = field(default_factory=dict)
    message: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-ready dict."""
        return {
            "type": self.type.value,
            "strength": self.strength.value,
            "indicator": self.indicator,
            "timestamp": self.timestamp,
            "values": dict(self.values),
            "message": self.message,
        }


@runtime_checkable
class PriceIndicator(Protocol):
    """An indicator computed purely from price history."""

    name: str

    def calculate(self, series: PriceSeries) -> IndicatorSeries:
        """Compute aligned output series for the candles."""
        ...

    def detect_signal(self, series: PriceSeries) -> SignalResult:
        """Classify the latest state of the candles."""
        ...


@runtime_checkable
class ExternalIndicator(Protocol):
    """An indicator whose input is a live external read, not price history."""

    name: str

    async def detect_signal_async(
        self, symbol: str, timeout: float | None = None
    ) -> SignalResult:
        """Read the external input and classify it.

        Raises:
            ExternalFetchFailure: If the input could not be read.
        """
        ...


def to_frame(series: PriceSeries) -> pd.DataFrame:
    """Convert candles to a DataFrame with a positional index.

    Args:
        series: Candles, oldest first.

    Returns:
        DataFrame with timestamp/open/high/low/close/volume columns and a
        RangeIndex, so duplicate timestamps are preserved.
    """
    if not series:
        return pd.DataFrame(columns=CANDLE_COLUMNS, dtype=float)

    return pd.DataFrame(
        {
            "timestamp": [c.timestamp for c in series],
            "open": [float(c.open) for c in series],
            "high": [float(c.high) for c in series],
            "low": [float(c.low) for c in series],
            "close": [float(c.close) for c in series],
            "volume": [float(c.volume) for c in series],
        }
    )
