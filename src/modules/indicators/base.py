"""Shared machinery for price-history indicators.

A concrete indicator supplies two things: `_compute` (candles DataFrame in,
named pandas Series out) and `_classify` (the previous and current decision
values in, a signal out). Alignment, absent-value conversion, tail selection
and the insufficient-data result live here.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, ClassVar

import pandas as pd

from src.modules.indicators.params import IndicatorParams
from src.modules.indicators.smoothing import to_optional
from src.modules.indicators.types import (
    Candle,
    IndicatorSeries,
    PriceSeries,
    SignalResult,
    SignalStrength,
    SignalType,
    to_frame,
)

INSUFFICIENT_DATA_MESSAGE = "insufficient data"

# (type, strength, message) produced by a classifier.
Classification = tuple[SignalType, SignalStrength, str]


def crossed_above(
    prev_a: float, prev_b: float, curr_a: float, curr_b: float
) -> bool:
    """True when series a moves from below b to above b."""
    return prev_a < prev_b and curr_a > curr_b


def crossed_below(
    prev_a: float, prev_b: float, curr_a: float, curr_b: float
) -> bool:
    """True when series a moves from above b to below b."""
    return prev_a > prev_b and curr_a < curr_b


def grade(magnitude: float, strong_above: float, medium_above: float) -> SignalStrength:
    """Grade a magnitude against two strictly-greater-than tiers."""
    if magnitude > strong_above:
        return SignalStrength.STRONG
    if magnitude > medium_above:
        return SignalStrength.MEDIUM
    return SignalStrength.WEAK


class BaseIndicator(ABC):
    """Base class for indicators computed from price history.

    Subclasses set `name`, `params_class` and `decision_series` (the output
    series that must be present at both compared points and that are
    reported in `SignalResult.values`).
    """

    name: ClassVar[str] = ""
    params_class: ClassVar[type[IndicatorParams]] = IndicatorParams
    decision_series: ClassVar[tuple[str, ...]] = ()

    def __init__(self, params: IndicatorParams | Mapping[str, Any] | None = None) -> None:
        """Initialize the indicator.

        Args:
            params: A params record, or a sparse mapping merged over the
                defaults of `params_class`.

        Raises:
            ValueError: If a parameter is invalid.
        """
        if isinstance(params, IndicatorParams):
            self.params = params
        else:
            self.params = self.params_class.from_mapping(params)

    def calculate(self, series: PriceSeries) -> IndicatorSeries:
        """Compute all output series.

        Args:
            series: Candles, oldest first.

        Returns:
            Mapping of series name to values, each exactly `len(series)`
            long, with None at warm-up positions.
        """
        computed = self._compute(to_frame(series))
        return {key: to_optional(values) for key, values in computed.items()}

    def detect_signal(self, series: PriceSeries) -> SignalResult:
        """Classify the last two points where every decision series is present.

        Args:
            series: Candles, oldest first.

        Returns:
            SignalResult for the latest candle. NEUTRAL/WEAK with an
            "insufficient data" message if fewer than two such points exist.
        """
        result = self.calculate(series)
        rows = [
            i
            for i in range(len(series))
            if all(result[key][i] is not None for key in self.decision_series)
        ]

        if len(rows) < 2:
            return SignalResult(
                type=SignalType.NEUTRAL,
                strength=SignalStrength.WEAK,
                indicator=self.name,
                timestamp=series[-1].timestamp if series else 0,
                values={},
                message=f"{self.name}: {INSUFFICIENT_DATA_MESSAGE} to generate a signal",
            )

        prev_i, curr_i = rows[-2], rows[-1]
        prev = {key: float(result[key][prev_i]) for key in self.decision_series}  # type: ignore[arg-type]
        curr = {key: float(result[key][curr_i]) for key in self.decision_series}  # type: ignore[arg-type]

        signal_type, strength, message = self._classify(
            prev, curr, series[prev_i], series[curr_i]
        )

        return SignalResult(
            type=signal_type,
            strength=strength,
            indicator=self.name,
            timestamp=series[curr_i].timestamp,
            values=curr,
            message=message,
        )

    @abstractmethod
    def _compute(self, frame: pd.DataFrame) -> dict[str, pd.Series]:
        """Compute output series from the candle DataFrame."""

    @abstractmethod
    def _classify(
        self,
        prev: dict[str, float],
        curr: dict[str, float],
        prev_candle: Candle,
        curr_candle: Candle,
    ) -> Classification:
        """Classify the transition between two consecutive decision points."""


class ThresholdOscillator(BaseIndicator):
    """Bounded 0-100 oscillator with overbought/oversold thresholds.

    Subclasses produce a single series named by `decision_series[0]` and a
    params record with `overbought_threshold` / `oversold_threshold`.
    """

    def _classify(
        self,
        prev: dict[str, float],
        curr: dict[str, float],
        prev_candle: Candle,
        curr_candle: Candle,
    ) -> Classification:
        key = self.decision_series[0]
        current = curr[key]
        previous = prev[key]
        overbought: float = self.params.overbought_threshold  # type: ignore[attr-defined]
        oversold: float = self.params.oversold_threshold  # type: ignore[attr-defined]

        if current < oversold:
            margin = oversold - current
            return (
                SignalType.BUY,
                _margin_strength(margin),
                f"{self.name} is oversold ({current:.2f}), buy signal",
            )
        if current > overbought:
            margin = current - overbought
            return (
                SignalType.SELL,
                _margin_strength(margin),
                f"{self.name} is overbought ({current:.2f}), sell signal",
            )
        if previous < oversold <= current:
            return (
                SignalType.BUY,
                SignalStrength.MEDIUM,
                f"{self.name} recovered from oversold ({current:.2f}), buy signal",
            )
        if previous > overbought >= current:
            return (
                SignalType.SELL,
                SignalStrength.MEDIUM,
                f"{self.name} fell back from overbought ({current:.2f}), sell signal",
            )
        return (
            SignalType.NEUTRAL,
            SignalStrength.WEAK,
            f"{self.name} at {current:.2f}, no clear signal",
        )


def _margin_strength(margin: float) -> SignalStrength:
    """Grade distance past a threshold: >= 10 STRONG, >= 5 MEDIUM."""
    if margin >= 10:
        return SignalStrength.STRONG
    if margin >= 5:
        return SignalStrength.MEDIUM
    return SignalStrength.WEAK
