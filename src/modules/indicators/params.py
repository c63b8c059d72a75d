"""Per-indicator configuration records.

Each record is a frozen dataclass with documented defaults. Callers pass a
sparse mapping; recognised keys (snake_case field name or the camelCase wire
alias) override the defaults, everything else is ignored.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from typing import Any, Self


def _alias(default: Any, alias: str) -> Any:
    """Declare a field with a default and a camelCase alias."""
    return field(default=default, metadata={"alias": alias})


def _coerce(name: str, value: Any, default: Any) -> Any:
    """Cast a raw override to the type of the field default.

    Raises:
        ValueError: If the value cannot be represented as that type.
    """
    if isinstance(default, bool):
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.lower() in ("true", "false"):
            return value.lower() == "true"
        raise ValueError(f"{name} must be a boolean, got {value!r}")

    if isinstance(default, int):
        try:
            number = float(value)
        except (TypeError, ValueError) as e:
            raise ValueError(f"{name} must be an integer, got {value!r}") from e
        if not number.is_integer():
            raise ValueError(f"{name} must be an integer, got {value!r}")
        return int(number)

    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{name} must be a number, got {value!r}") from e
    if not math.isfinite(number):
        raise ValueError(f"{name} must be finite, got {value!r}")
    return number


def _check_period(name: str, value: int) -> None:
    if value < 1:
        raise ValueError(f"Period must be >= 1, got {name}={value}")


def _check_thresholds(oversold: float, overbought: float) -> None:
    if not 0.0 <= oversold < overbought <= 100.0:
        raise ValueError(
            "Thresholds must satisfy 0 <= oversold < overbought <= 100, "
            f"got oversold={oversold}, overbought={overbought}"
        )


@dataclass(frozen=True)
class IndicatorParams:
    """Base for indicator configuration records."""

    @classmethod
    def from_mapping(cls, overrides: Mapping[str, Any] | None = None) -> Self:
        """Build a record from a sparse mapping merged over the defaults.

        Args:
            overrides: Raw parameters. Keys may be field names or their
                camelCase aliases. ``None`` values and unknown keys are
                ignored.

        Returns:
            Configured, validated record.

        Raises:
            ValueError: If overrides is not a mapping, or a recognised value
                has the wrong type or range.
        """
        if overrides is not None and not isinstance(overrides, Mapping):
            raise ValueError(
                f"Parameters must be an object, got {type(overrides).__name__}"
            )
        if not overrides:
            return cls()

        kwargs: dict[str, Any] = {}
        for f in fields(cls):
            alias = f.metadata.get("alias")
            if f.name in overrides:
                raw = overrides[f.name]
            elif alias is not None and alias in overrides:
                raw = overrides[alias]
            else:
                continue
            if raw is None:
                continue
            kwargs[f.name] = _coerce(f.name, raw, f.default)

        return cls(**kwargs)


@dataclass(frozen=True)
class MACDParams(IndicatorParams):
    """MACD configuration.

    Attributes:
        fast_period: Fast moving average period (default 12).
        slow_period: Slow moving average period (default 26).
        signal_period: Signal line period (default 9).
        simple_ma_oscillator: Use simple instead of exponential averages
            for the fast/slow lines (default False).
        simple_ma_signal: Use a simple average for the signal line
            (default False).
    """

    fast_period: int = _alias(12, "fastPeriod")
    slow_period: int = _alias(26, "slowPeriod")
    signal_period: int = _alias(9, "signalPeriod")
    simple_ma_oscillator: bool = _alias(False, "SimpleMAOscillator")
    simple_ma_signal: bool = _alias(False, "SimpleMASignal")

    def __post_init__(self) -> None:
        _check_period("fast_period", self.fast_period)
        _check_period("slow_period", self.slow_period)
        _check_period("signal_period", self.signal_period)
        if self.fast_period >= self.slow_period:
            raise ValueError(
                "Fast period must be < slow period, "
                f"got fast={self.fast_period}, slow={self.slow_period}"
            )


@dataclass(frozen=True)
class ZeroLagMACDParams(IndicatorParams):
    """Zero-Lag MACD configuration.

    Attributes:
        fast_period: Fast zero-lag EMA period (default 12).
        slow_period: Slow zero-lag EMA period (default 26).
        signal_period: Signal line zero-lag EMA period (default 9).
        ema_alpha: Weight of the lag correction term (default 0.7).
    """

    fast_period: int = _alias(12, "fastPeriod")
    slow_period: int = _alias(26, "slowPeriod")
    signal_period: int = _alias(9, "signalPeriod")
    ema_alpha: float = _alias(0.7, "emaAlpha")

    def __post_init__(self) -> None:
        _check_period("fast_period", self.fast_period)
        _check_period("slow_period", self.slow_period)
        _check_period("signal_period", self.signal_period)
        if self.fast_period >= self.slow_period:
            raise ValueError(
                "Fast period must be < slow period, "
                f"got fast={self.fast_period}, slow={self.slow_period}"
            )
        if self.ema_alpha < 0:
            raise ValueError(f"ema_alpha must be >= 0, got {self.ema_alpha}")


@dataclass(frozen=True)
class KDJParams(IndicatorParams):
    """KDJ configuration.

    Attributes:
        period: RSV high/low window (default 14).
        signal_period: Smoothing divisor for K and D (default 3, which gives
            ``K = 2/3 * K_prev + 1/3 * RSV``).
    """

    period: int = 14
    signal_period: int = _alias(3, "signalPeriod")

    def __post_init__(self) -> None:
        _check_period("period", self.period)
        _check_period("signal_period", self.signal_period)


@dataclass(frozen=True)
class RSIParams(IndicatorParams):
    """RSI configuration.

    Attributes:
        period: Wilder smoothing period (default 14).
        overbought_threshold: SELL above this level (default 70).
        oversold_threshold: BUY below this level (default 30).
    """

    period: int = 14
    overbought_threshold: float = _alias(70.0, "overboughtThreshold")
    oversold_threshold: float = _alias(30.0, "oversoldThreshold")

    def __post_init__(self) -> None:
        _check_period("period", self.period)
        _check_thresholds(self.oversold_threshold, self.overbought_threshold)


@dataclass(frozen=True)
class MFIParams(IndicatorParams):
    """MFI configuration.

    Attributes:
        period: Money flow window (default 14).
        overbought_threshold: SELL above this level (default 80).
        oversold_threshold: BUY below this level (default 20).
    """

    period: int = 14
    overbought_threshold: float = _alias(80.0, "overboughtThreshold")
    oversold_threshold: float = _alias(20.0, "oversoldThreshold")

    def __post_init__(self) -> None:
        _check_period("period", self.period)
        _check_thresholds(self.oversold_threshold, self.overbought_threshold)


@dataclass(frozen=True)
class ADXParams(IndicatorParams):
    """ADX configuration.

    Attributes:
        period: Wilder smoothing period (default 14).
        trend_strength_threshold: ADX level above which the trend counts as
            strong (default 25).
    """

    period: int = 14
    trend_strength_threshold: float = _alias(25.0, "trendStrengthThreshold")

    def __post_init__(self) -> None:
        _check_period("period", self.period)


@dataclass(frozen=True)
class OBVParams(IndicatorParams):
    """OBV configuration.

    Attributes:
        ema_period: Period of the OBV trend-reference EMA (default 20).
    """

    ema_period: int = _alias(20, "emaPeriod")

    def __post_init__(self) -> None:
        _check_period("ema_period", self.ema_period)


@dataclass(frozen=True)
class FundingRateParams(IndicatorParams):
    """Funding rate configuration.

    Attributes:
        high_threshold: SELL above this rate (default 0.0005, i.e. 0.05%).
        low_threshold: BUY below this rate (default -0.0005).

    Thresholds must straddle zero: low_threshold <= 0 <= high_threshold.
    """

    high_threshold: float = _alias(0.0005, "highThreshold")
    low_threshold: float = _alias(-0.0005, "lowThreshold")

    def __post_init__(self) -> None:
        if self.low_threshold > 0 or self.high_threshold < 0:
            raise ValueError(
                "Thresholds must satisfy low_threshold <= 0 <= high_threshold, "
                f"got low={self.low_threshold}, high={self.high_threshold}"
            )
        if self.low_threshold >= self.high_threshold:
            raise ValueError(
                "low_threshold must be < high_threshold, "
                f"got low={self.low_threshold}, high={self.high_threshold}"
            )
