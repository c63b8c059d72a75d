"""Relative Strength Index (Wilder)."""

import pandas as pd

from src.modules.indicators.base import ThresholdOscillator
from src.modules.indicators.params import RSIParams
from src.modules.indicators.smoothing import wilder

# RSI when there was no movement at all over the window
FLAT_RSI = 50.0


class RSI(ThresholdOscillator):
    """Relative Strength Index with Wilder's smoothing.

    Average gain and loss are seeded with the simple mean of the first
    `period` close-to-close changes, then smoothed with alpha = 1/period.
    RSI = 100 - 100 / (1 + avg_gain / avg_loss), present from index `period`.
    """

    name = "RSI"
    params_class = RSIParams
    decision_series = ("rsi",)

    def _compute(self, frame: pd.DataFrame) -> dict[str, pd.Series]:
        p: RSIParams = self.params  # type: ignore[assignment]

        delta = frame["close"].diff()
        gains = delta.where(delta > 0, 0.0).where(delta.notna())
        losses = (-delta).where(delta < 0, 0.0).where(delta.notna())

        avg_gain = wilder(gains, p.period)
        avg_loss = wilder(losses, p.period)

        rs = avg_gain / avg_loss
        result = 100.0 - (100.0 / (1.0 + rs))

        # Where avg_loss is 0, RSI = 100 (all gains); both 0 is a flat market.
        result = result.where(avg_loss != 0, 100.0)
        result = result.where((avg_gain != 0) | (avg_loss != 0), FLAT_RSI)
        # Ensure warm-up period is NaN
        result = result.where(avg_gain.notna())

        return {"rsi": result}
