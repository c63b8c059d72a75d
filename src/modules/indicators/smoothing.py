"""Moving averages shared by the indicators.

Pure functions operating on pandas Series. Leading NaNs mark warm-up and are
carried through: every function returns a Series aligned with its input.
"""

import numpy as np
import pandas as pd


def _seeded_ewm(series: pd.Series, period: int, alpha: float) -> pd.Series:
    """Recursive average seeded with the SMA of the first `period` values.

    Formula: y[seed] = mean(x[0:period]); y[t] = (1 - alpha) * y[t-1] + alpha * x[t].

    Args:
        series: Input values. Leading NaNs are skipped.
        period: Seed window length.
        alpha: Smoothing factor in (0, 1].

    Returns:
        Smoothed series. NaN until `period` valid inputs have been seen.
    """
    result = pd.Series(np.nan, index=series.index, dtype=float)
    valid = series.dropna()
    if len(valid) < period:
        return result

    seeded = valid.iloc[period - 1 :].copy()
    seeded.iloc[0] = valid.iloc[:period].mean()
    result.loc[seeded.index] = seeded.ewm(alpha=alpha, adjust=False).mean()
    return result


def sma(series: pd.Series, period: int) -> pd.Series:
    """Calculate Simple Moving Average.

    Args:
        series: Input values.
        period: Window length.

    Returns:
        SMA series. NaN until the window is full of valid values.

    Raises:
        ValueError: If period < 1.
    """
    if period < 1:
        raise ValueError(f"Period must be >= 1, got {period}")

    return series.rolling(window=period, min_periods=period).mean()


def ema(series: pd.Series, period: int) -> pd.Series:
    """Calculate Exponential Moving Average (SMA-seeded).

    Args:
        series: Input values.
        period: EMA period; alpha = 2 / (period + 1).

    Returns:
        EMA series. First `period - 1` valid positions are NaN.

    Raises:
        ValueError: If period < 1.
    """
    if period < 1:
        raise ValueError(f"Period must be >= 1, got {period}")

    return _seeded_ewm(series, period, 2.0 / (period + 1))


def wilder(series: pd.Series, period: int) -> pd.Series:
    """Calculate Wilder's running average (SMA-seeded, alpha = 1/period).

    Args:
        series: Input values.
        period: Smoothing period.

    Returns:
        Smoothed series. First `period - 1` valid positions are NaN.

    Raises:
        ValueError: If period < 1.
    """
    if period < 1:
        raise ValueError(f"Period must be >= 1, got {period}")

    return _seeded_ewm(series, period, 1.0 / period)


def zero_lag_ema(series: pd.Series, period: int, alpha: float) -> pd.Series:
    """Calculate Zero-Lag EMA.

    Formula: EMA + alpha * (EMA - EMA(EMA)). Where EMA(EMA) is not yet
    defined (the first 2 * period - 2 valid positions) the plain EMA is used.

    EMA(EMA) is one running EMA over the EMA series. Its value at each
    position equals recomputing EMA over the EMA prefix ending there.

    Args:
        series: Input values.
        period: EMA period.
        alpha: Weight of the lag correction term.

    Returns:
        Zero-lag EMA series, NaN where the plain EMA is NaN.
    """
    base = ema(series, period)
    ema_of_ema = ema(base, period)
    corrected = base + alpha * (base - ema_of_ema)
    return corrected.where(ema_of_ema.notna(), base)


def to_optional(series: pd.Series) -> list[float | None]:
    """Convert a Series to a list with None for NaN (absent) positions."""
    return [None if pd.isna(value) else float(value) for value in series]
