"""Technical indicator engine.

Price indicators are pure: candles in, aligned series and a signal out.
No state, no side effects. FundingRate is the one indicator that reads a
live external value and is therefore asynchronous.
"""

from src.modules.indicators.adx import ADX
from src.modules.indicators.errors import ExternalFetchFailure, UnknownIndicator
from src.modules.indicators.funding_rate import FundingRate
from src.modules.indicators.kdj import KDJ
from src.modules.indicators.macd import MACD, ZeroLagMACD
from src.modules.indicators.mfi import MFI
from src.modules.indicators.obv import OBV
from src.modules.indicators.registry import IndicatorRegistry, build_default_registry
from src.modules.indicators.rsi import RSI
from src.modules.indicators.types import (
    Candle,
    ExternalIndicator,
    IndicatorSeries,
    PriceIndicator,
    SignalResult,
    SignalStrength,
    SignalType,
)

__all__ = [
    "ADX",
    "KDJ",
    "MACD",
    "MFI",
    "OBV",
    "RSI",
    "ZeroLagMACD",
    "FundingRate",
    "IndicatorRegistry",
    "build_default_registry",
    "UnknownIndicator",
    "ExternalFetchFailure",
    "Candle",
    "IndicatorSeries",
    "PriceIndicator",
    "ExternalIndicator",
    "SignalResult",
    "SignalStrength",
    "SignalType",
]
