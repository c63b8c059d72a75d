"""On-Balance Volume with an EMA trend reference."""

import numpy as np
import pandas as pd

from src.modules.indicators.base import (
    BaseIndicator,
    Classification,
    crossed_above,
    crossed_below,
    grade,
)
from src.modules.indicators.params import OBVParams
from src.modules.indicators.types import Candle, SignalStrength, SignalType

# Relative gap |OBV - EMA| / |EMA| in percent
CROSSOVER_STRONG_PCT = 5.0
CROSSOVER_MEDIUM_PCT = 2.0


class OBV(BaseIndicator):
    """On-Balance Volume.

    Running total of volume: added when close rises, subtracted when close
    falls, unchanged otherwise. The first bar has no previous close, so OBV
    is present from index 1 (starting at +/- that bar's volume). The EMA
    reference is seeded with the first OBV value.
    """

    name = "OBV"
    params_class = OBVParams
    decision_series = ("obv", "obvEma")

    def _compute(self, frame: pd.DataFrame) -> dict[str, pd.Series]:
        p: OBVParams = self.params  # type: ignore[assignment]

        change = frame["close"].diff()
        direction = pd.Series(np.sign(change), index=frame.index)
        obv = (direction * frame["volume"]).cumsum()
        obv = obv.where(change.notna())

        obv_ema = obv.ewm(span=p.ema_period, adjust=False).mean()

        return {"obv": obv, "obvEma": obv_ema}

    def _classify(
        self,
        prev: dict[str, float],
        curr: dict[str, float],
        prev_candle: Candle,
        curr_candle: Candle,
    ) -> Classification:
        obv, obv_ema = curr["obv"], curr["obvEma"]
        obv_rising = obv > prev["obv"]
        obv_falling = obv < prev["obv"]
        price_rising = curr_candle.close > prev_candle.close
        price_falling = curr_candle.close < prev_candle.close

        if crossed_above(prev["obv"], prev["obvEma"], obv, obv_ema):
            return (
                SignalType.BUY,
                grade(_relative_gap_pct(obv, obv_ema), CROSSOVER_STRONG_PCT, CROSSOVER_MEDIUM_PCT),
                "OBV crossed above its EMA, volume building, buy signal",
            )
        if crossed_below(prev["obv"], prev["obvEma"], obv, obv_ema):
            return (
                SignalType.SELL,
                grade(_relative_gap_pct(obv, obv_ema), CROSSOVER_STRONG_PCT, CROSSOVER_MEDIUM_PCT),
                "OBV crossed below its EMA, volume fading, sell signal",
            )
        if obv_rising and price_rising:
            return (SignalType.BUY, SignalStrength.MEDIUM, "OBV and price rising, uptrend confirmed")
        if obv_falling and price_falling:
            return (SignalType.SELL, SignalStrength.MEDIUM, "OBV and price falling, downtrend confirmed")
        if obv_rising and price_falling:
            return (SignalType.BUY, SignalStrength.WEAK, "OBV rising while price falls, possible bottom")
        if obv_falling and price_rising:
            return (SignalType.SELL, SignalStrength.WEAK, "OBV falling while price rises, possible top")
        return (SignalType.NEUTRAL, SignalStrength.WEAK, "OBV shows no clear signal")


def _relative_gap_pct(obv: float, obv_ema: float) -> float:
    """Percentage gap between OBV and its EMA; a zero EMA counts as unbounded."""
    if obv_ema == 0:
        return float("inf")
    return abs(obv - obv_ema) / abs(obv_ema) * 100.0
