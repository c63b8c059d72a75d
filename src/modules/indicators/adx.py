"""Average Directional Index with +DI / -DI."""

import pandas as pd

from src.modules.indicators.base import (
    BaseIndicator,
    Classification,
    crossed_above,
    crossed_below,
)
from src.modules.indicators.params import ADXParams
from src.modules.indicators.smoothing import wilder
from src.modules.indicators.types import Candle, SignalStrength, SignalType

# ADX points above the trend threshold that make a signal STRONG
STRONG_TREND_MARGIN = 10.0


class ADX(BaseIndicator):
    """Wilder's directional movement system.

    +DI and -DI are present from index `period`; ADX from `2 * period - 1`.
    Trend is strong when ADX > trend_strength_threshold.
    """

    name = "ADX"
    params_class = ADXParams
    decision_series = ("adx", "pdi", "mdi")

    def _compute(self, frame: pd.DataFrame) -> dict[str, pd.Series]:
        p: ADXParams = self.params  # type: ignore[assignment]
        high, low, close = frame["high"], frame["low"], frame["close"]

        # True Range (undefined on the first bar, which has no previous close)
        prev_close = close.shift(1)
        tr = pd.concat(
            [high - low, (high - prev_close).abs(), (low - prev_close).abs()], axis=1
        ).max(axis=1)
        tr = tr.where(prev_close.notna())

        # Directional Movement
        up_move = high - high.shift(1)
        down_move = low.shift(1) - low
        plus_dm = up_move.where((up_move > down_move) & (up_move > 0), 0.0)
        minus_dm = down_move.where((down_move > up_move) & (down_move > 0), 0.0)
        plus_dm = plus_dm.where(up_move.notna())
        minus_dm = minus_dm.where(down_move.notna())

        atr_smooth = wilder(tr, p.period)
        plus_smooth = wilder(plus_dm, p.period)
        minus_smooth = wilder(minus_dm, p.period)

        # Directional Indicators (0 where there was no range at all)
        plus_di = (100.0 * plus_smooth / atr_smooth).where(atr_smooth != 0, 0.0)
        minus_di = (100.0 * minus_smooth / atr_smooth).where(atr_smooth != 0, 0.0)
        plus_di = plus_di.where(atr_smooth.notna())
        minus_di = minus_di.where(atr_smooth.notna())

        di_sum = plus_di + minus_di
        dx = (100.0 * (plus_di - minus_di).abs() / di_sum).where(di_sum != 0, 0.0)
        dx = dx.where(di_sum.notna())

        return {"adx": wilder(dx, p.period), "pdi": plus_di, "mdi": minus_di}

    def _classify(
        self,
        prev: dict[str, float],
        curr: dict[str, float],
        prev_candle: Candle,
        curr_candle: Candle,
    ) -> Classification:
        p: ADXParams = self.params  # type: ignore[assignment]
        adx, pdi, mdi = curr["adx"], curr["pdi"], curr["mdi"]
        threshold = p.trend_strength_threshold
        is_trend_strong = adx > threshold
        is_very_strong = adx > threshold + STRONG_TREND_MARGIN

        if crossed_above(prev["pdi"], prev["mdi"], pdi, mdi):
            strength, label = _cross_strength(is_trend_strong, is_very_strong)
            return (SignalType.BUY, strength, f"+DI crossed above -DI, buy signal, {label} trend")
        if crossed_below(prev["pdi"], prev["mdi"], pdi, mdi):
            strength, label = _cross_strength(is_trend_strong, is_very_strong)
            return (SignalType.SELL, strength, f"+DI crossed below -DI, sell signal, {label} trend")

        if is_trend_strong and adx > prev["adx"]:
            strength = SignalStrength.STRONG if is_very_strong else SignalStrength.MEDIUM
            if pdi > mdi:
                return (SignalType.BUY, strength, "ADX rising with +DI > -DI, uptrend strengthening")
            if pdi < mdi:
                return (SignalType.SELL, strength, "ADX rising with +DI < -DI, downtrend strengthening")

        return (
            SignalType.NEUTRAL,
            SignalStrength.WEAK,
            f"ADX: {adx:.2f}, +DI: {pdi:.2f}, -DI: {mdi:.2f}, no clear signal",
        )


def _cross_strength(is_trend_strong: bool, is_very_strong: bool) -> tuple[SignalStrength, str]:
    """Grade a DI crossover by the trend strength behind it."""
    if is_very_strong:
        return SignalStrength.STRONG, "strong"
    if is_trend_strong:
        return SignalStrength.MEDIUM, "moderate"
    return SignalStrength.WEAK, "weak"
