"""Signal Service - batch signal detection.

Resolves indicator names through the registry, evaluates every indicator
against the same candles and collects one SignalResult per name. Lenient:
a failing indicator is logged and recorded, its siblings still report.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from src.modules.indicators.errors import ExternalFetchFailure, UnknownIndicator
from src.modules.indicators.registry import IndicatorRegistry
from src.modules.indicators.types import (
    ExternalIndicator,
    PriceIndicator,
    PriceSeries,
    SignalResult,
)
from src.shared.logger import get_logger

logger = get_logger(__name__)


class FailureKind(StrEnum):
    """Why an indicator produced no signal."""

    UNKNOWN_INDICATOR = "UNKNOWN_INDICATOR"
    INVALID_PARAMS = "INVALID_PARAMS"
    MISSING_SYMBOL = "MISSING_SYMBOL"
    DATA_UNAVAILABLE = "DATA_UNAVAILABLE"
    COMPUTATION_ERROR = "COMPUTATION_ERROR"


@dataclass(frozen=True)
class IndicatorFailure:
    """An indicator that could not form an opinion.

    Attributes:
        indicator: Requested indicator name.
        kind: Failure category.
        error: Human-readable error text.
    """

    indicator: str
    kind: FailureKind
    error: str

    def to_dict(self) -> dict[str, str]:
        """Convert to a JSON-ready dict."""
        return {"indicator": self.indicator, "kind": self.kind.value, "error": self.error}


@dataclass(frozen=True)
class BatchResult:
    """Outcome of a batch detection.

    Attributes:
        signals: One result per successful indicator, in request order.
        failures: One entry per failed indicator, in request order.
    """

    signals: list[SignalResult] = field(default_factory=list)
    failures: list[IndicatorFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when no indicator failed."""
        return not self.failures


class SignalService:
    """Evaluates many indicators against one candle series.

    Usage:
        registry = build_default_registry(BinanceFuturesProvider())
        service = SignalService(registry)
        result = service.detect_sync(candles, ["rsi", "macd"], symbol="BTCUSDT")
    """

    def __init__(
        self,
        registry: IndicatorRegistry,
        funding_timeout: float | None = None,
    ) -> None:
        """Initialize SignalService.

        Args:
            registry: Registry used to resolve indicator names.
            funding_timeout: Timeout in seconds for external indicator reads.
        """
        self._registry = registry
        self._funding_timeout = funding_timeout

    async def detect(
        self,
        series: PriceSeries,
        names: Sequence[str] | None = None,
        symbol: str | None = None,
        params: Mapping[str, Mapping[str, Any]] | None = None,
    ) -> BatchResult:
        """Detect signals for every requested indicator.

        Indicators are evaluated concurrently; results keep request order.

        Args:
            series: Candles, oldest first.
            names: Indicator names; None means every registered indicator.
            symbol: Instrument symbol, required by external indicators.
            params: Optional per-indicator sparse params keyed by name
                (case-insensitive).

        Returns:
            BatchResult with signals and failures.
        """
        if names is None:
            requested = self._registry.get_supported_indicators()
        else:
            requested = [str(name) for name in names]
        overrides = {str(key).lower(): value for key, value in (params or {}).items()}

        outcomes = await asyncio.gather(
            *(
                self._detect_one(series, name, symbol, overrides.get(name.lower()))
                for name in requested
            )
        )

        result = BatchResult()
        for outcome in outcomes:
            if isinstance(outcome, SignalResult):
                result.signals.append(outcome)
            else:
                result.failures.append(outcome)

        logger.info(
            f"Detected {len(result.signals)} signals, {len(result.failures)} failures",
            extra={"indicators": requested, "symbol": symbol},
        )
        return result

    def detect_sync(
        self,
        series: PriceSeries,
        names: Sequence[str] | None = None,
        symbol: str | None = None,
        params: Mapping[str, Mapping[str, Any]] | None = None,
    ) -> BatchResult:
        """Blocking wrapper around `detect` for callers without an event loop."""
        return asyncio.run(self.detect(series, names, symbol, params))

    async def _detect_one(
        self,
        series: PriceSeries,
        name: str,
        symbol: str | None,
        params: Mapping[str, Any] | None,
    ) -> SignalResult | IndicatorFailure:
        """Evaluate a single indicator, converting failures to records."""
        try:
            indicator = self._registry.create_indicator(name, params)
        except UnknownIndicator as e:
            return self._fail(name, FailureKind.UNKNOWN_INDICATOR, e)
        except ValueError as e:
            return self._fail(name, FailureKind.INVALID_PARAMS, e)
        except Exception as e:
            logger.exception(f"Indicator {name} could not be built")
            return IndicatorFailure(name, FailureKind.COMPUTATION_ERROR, str(e))

        if isinstance(indicator, PriceIndicator):
            try:
                return indicator.detect_signal(series)
            except Exception as e:
                logger.exception(f"Indicator {name} failed")
                return IndicatorFailure(name, FailureKind.COMPUTATION_ERROR, str(e))

        if isinstance(indicator, ExternalIndicator):
            if not symbol:
                return self._fail(
                    name, FailureKind.MISSING_SYMBOL, "a symbol is required for this indicator"
                )
            try:
                return await indicator.detect_signal_async(symbol, timeout=self._funding_timeout)
            except ExternalFetchFailure as e:
                return self._fail(name, FailureKind.DATA_UNAVAILABLE, e)
            except Exception as e:
                logger.exception(f"Indicator {name} failed")
                return IndicatorFailure(name, FailureKind.COMPUTATION_ERROR, str(e))

        return self._fail(name, FailureKind.COMPUTATION_ERROR, "unsupported indicator type")

    @staticmethod
    def _fail(name: str, kind: FailureKind, error: Exception | str) -> IndicatorFailure:
        logger.error(
            f"Indicator {name} produced no signal: {error}",
            extra={"indicator": name, "kind": kind.value},
        )
        return IndicatorFailure(indicator=name, kind=kind, error=str(error))
