"""MACD and Zero-Lag MACD.

Both produce MACD, signal and histogram lines from closing prices and share
the same crossover / histogram-flip signal rule.
"""

import pandas as pd

from src.modules.indicators.base import (
    BaseIndicator,
    Classification,
    crossed_above,
    crossed_below,
    grade,
)
from src.modules.indicators.params import MACDParams, ZeroLagMACDParams
from src.modules.indicators.smoothing import ema, sma, zero_lag_ema
from src.modules.indicators.types import Candle, SignalStrength, SignalType

# |MACD - signal| tiers for crossover strength
CROSSOVER_STRONG = 0.5
CROSSOVER_MEDIUM = 0.2


class MACD(BaseIndicator):
    """Moving Average Convergence Divergence.

    MACD line = fast average - slow average of close; signal line = average
    of the MACD line; histogram = MACD - signal. The MACD line is present
    from index `slow - 1`, signal and histogram from `slow + signal - 2`.
    """

    name = "MACD"
    params_class = MACDParams
    decision_series = ("MACD", "signal", "histogram")

    def _compute(self, frame: pd.DataFrame) -> dict[str, pd.Series]:
        p: MACDParams = self.params  # type: ignore[assignment]
        close = frame["close"]

        oscillator = sma if p.simple_ma_oscillator else ema
        macd_line = oscillator(close, p.fast_period) - oscillator(close, p.slow_period)

        smoother = sma if p.simple_ma_signal else ema
        signal_line = smoother(macd_line, p.signal_period)

        return {
            "MACD": macd_line,
            "signal": signal_line,
            "histogram": macd_line - signal_line,
        }

    def _classify(
        self,
        prev: dict[str, float],
        curr: dict[str, float],
        prev_candle: Candle,
        curr_candle: Candle,
    ) -> Classification:
        gap = abs(curr["MACD"] - curr["signal"])

        if crossed_above(prev["MACD"], prev["signal"], curr["MACD"], curr["signal"]):
            return (
                SignalType.BUY,
                grade(gap, CROSSOVER_STRONG, CROSSOVER_MEDIUM),
                f"{self.name} crossed above the signal line, buy signal",
            )
        if crossed_below(prev["MACD"], prev["signal"], curr["MACD"], curr["signal"]):
            return (
                SignalType.SELL,
                grade(gap, CROSSOVER_STRONG, CROSSOVER_MEDIUM),
                f"{self.name} crossed below the signal line, sell signal",
            )
        if prev["histogram"] < 0 < curr["histogram"]:
            return (
                SignalType.BUY,
                SignalStrength.MEDIUM,
                f"{self.name} histogram turned positive, buy signal",
            )
        if prev["histogram"] > 0 > curr["histogram"]:
            return (
                SignalType.SELL,
                SignalStrength.MEDIUM,
                f"{self.name} histogram turned negative, sell signal",
            )
        return (SignalType.NEUTRAL, SignalStrength.WEAK, f"{self.name} shows no clear signal")


class ZeroLagMACD(MACD):
    """MACD built from zero-lag EMAs.

    Every EMA (fast, slow and signal) is replaced by
    EMA + alpha * (EMA - EMA(EMA)), falling back to the plain EMA until
    EMA(EMA) is available.
    """

    name = "Zero-Lag MACD"
    params_class = ZeroLagMACDParams

    def _compute(self, frame: pd.DataFrame) -> dict[str, pd.Series]:
        p: ZeroLagMACDParams = self.params  # type: ignore[assignment]
        close = frame["close"]

        fast = zero_lag_ema(close, p.fast_period, p.ema_alpha)
        slow = zero_lag_ema(close, p.slow_period, p.ema_alpha)
        macd_line = fast - slow
        signal_line = zero_lag_ema(macd_line, p.signal_period, p.ema_alpha)

        return {
            "MACD": macd_line,
            "signal": signal_line,
            "histogram": macd_line - signal_line,
        }
