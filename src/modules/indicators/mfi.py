"""Money Flow Index: a volume-weighted RSI."""

import pandas as pd

from src.modules.indicators.base import ThresholdOscillator
from src.modules.indicators.params import MFIParams

# MFI when no money flowed in either direction over the window
FLAT_MFI = 50.0


class MFI(ThresholdOscillator):
    """Money Flow Index.

    Formula:
        typical = (high + low + close) / 3
        flow = typical * volume, positive when typical rose, negative when it fell
        MFI = 100 - 100 / (1 + sum(positive, period) / sum(negative, period))

    Present from index `period` (the window needs `period` changes).
    """

    name = "MFI"
    params_class = MFIParams
    decision_series = ("mfi",)

    def _compute(self, frame: pd.DataFrame) -> dict[str, pd.Series]:
        p: MFIParams = self.params  # type: ignore[assignment]

        typical = (frame["high"] + frame["low"] + frame["close"]) / 3.0
        raw_flow = typical * frame["volume"]
        change = typical.diff()

        positive = raw_flow.where(change > 0, 0.0).where(change.notna())
        negative = raw_flow.where(change < 0, 0.0).where(change.notna())

        positive_sum = positive.rolling(window=p.period, min_periods=p.period).sum()
        negative_sum = negative.rolling(window=p.period, min_periods=p.period).sum()
        total = positive_sum + negative_sum

        # Equivalent to 100 - 100 / (1 + ratio) without dividing by a zero negative flow.
        result = 100.0 * positive_sum / total
        result = result.where(total.isna() | (total != 0), FLAT_MFI)

        return {"mfi": result}
