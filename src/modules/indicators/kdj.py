"""KDJ stochastic oscillator.

RSV locates the close inside the rolling high/low range; K and D are
recursive smoothings of RSV and K; J = 3K - 2D amplifies their divergence.
"""

import pandas as pd

from src.modules.indicators.base import (
    BaseIndicator,
    Classification,
    crossed_above,
    crossed_below,
    grade,
)
from src.modules.indicators.params import KDJParams
from src.modules.indicators.types import Candle, SignalStrength, SignalType

# RSV when the window has no range (high == low)
DEGENERATE_RSV = 50.0

OVERSOLD_LEVEL = 20.0
OVERBOUGHT_LEVEL = 80.0
EXTREME_OVERSOLD_J = 10.0
EXTREME_OVERBOUGHT_J = 90.0

# |K - D| tiers for crossover strength
CROSSOVER_STRONG = 5.0
CROSSOVER_MEDIUM = 2.0


class KDJ(BaseIndicator):
    """KDJ indicator.

    Formula:
        RSV = (close - lowest_low(period)) / (highest_high(period) - lowest_low(period)) * 100
        K[0] = RSV[0];  K[i] = (s-1)/s * K[i-1] + 1/s * RSV[i]
        D[0] = K[0];    D[i] = (s-1)/s * D[i-1] + 1/s * K[i]
        J = 3K - 2D
    with s = signal_period (3 by default, i.e. 2/3 and 1/3 weights).
    All four series are present from index `period - 1`.
    """

    name = "KDJ"
    params_class = KDJParams
    decision_series = ("K", "D", "J")

    def _compute(self, frame: pd.DataFrame) -> dict[str, pd.Series]:
        p: KDJParams = self.params  # type: ignore[assignment]

        period_high = frame["high"].rolling(window=p.period, min_periods=p.period).max()
        period_low = frame["low"].rolling(window=p.period, min_periods=p.period).min()
        channel_range = period_high - period_low

        # Flat window (high == low): RSV is pinned to the midpoint, warm-up stays NaN.
        rsv = (frame["close"] - period_low) / channel_range * 100.0
        is_warmup = channel_range.isna()
        rsv = rsv.where(is_warmup | (channel_range != 0), DEGENERATE_RSV)

        # ewm(adjust=False) seeds with the first valid value: K[0] = RSV[0].
        weight = 1.0 / p.signal_period
        k = rsv.ewm(alpha=weight, adjust=False).mean()
        d = k.ewm(alpha=weight, adjust=False).mean()
        j = 3.0 * k - 2.0 * d

        return {"K": k, "D": d, "J": j, "RSV": rsv}

    def _classify(
        self,
        prev: dict[str, float],
        curr: dict[str, float],
        prev_candle: Candle,
        curr_candle: Candle,
    ) -> Classification:
        k, d, j = curr["K"], curr["D"], curr["J"]

        if k < OVERSOLD_LEVEL and d < OVERSOLD_LEVEL:
            if j < EXTREME_OVERSOLD_J:
                return (
                    SignalType.BUY,
                    SignalStrength.STRONG,
                    "KDJ is deeply oversold, strong buy signal",
                )
            return (SignalType.BUY, SignalStrength.MEDIUM, "KDJ is oversold, buy signal")

        if k > OVERBOUGHT_LEVEL and d > OVERBOUGHT_LEVEL:
            if j > EXTREME_OVERBOUGHT_J:
                return (
                    SignalType.SELL,
                    SignalStrength.STRONG,
                    "KDJ is deeply overbought, strong sell signal",
                )
            return (SignalType.SELL, SignalStrength.MEDIUM, "KDJ is overbought, sell signal")

        gap = abs(k - d)
        if crossed_above(prev["K"], prev["D"], k, d):
            return (
                SignalType.BUY,
                grade(gap, CROSSOVER_STRONG, CROSSOVER_MEDIUM),
                "KDJ golden cross, K crossed above D, buy signal",
            )
        if crossed_below(prev["K"], prev["D"], k, d):
            return (
                SignalType.SELL,
                grade(gap, CROSSOVER_STRONG, CROSSOVER_MEDIUM),
                "KDJ death cross, K crossed below D, sell signal",
            )
        return (SignalType.NEUTRAL, SignalStrength.WEAK, "KDJ shows no clear signal")
