"""Indicator Registry.

Maps case-insensitive indicator names to factories. The registry is an
explicit value: build it once at startup with `build_default_registry` and
hand it to whatever needs indicator lookup.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Mapping
from typing import Any

from src.modules.data.protocols import FundingRateProvider
from src.modules.indicators.adx import ADX
from src.modules.indicators.errors import UnknownIndicator
from src.modules.indicators.funding_rate import FundingRate
from src.modules.indicators.kdj import KDJ
from src.modules.indicators.macd import MACD, ZeroLagMACD
from src.modules.indicators.mfi import MFI
from src.modules.indicators.obv import OBV
from src.modules.indicators.rsi import RSI
from src.modules.indicators.types import ExternalIndicator, PriceIndicator

Indicator = PriceIndicator | ExternalIndicator

# Builds an indicator from a sparse params mapping (or None for defaults).
IndicatorFactory = Callable[[Mapping[str, Any] | None], Indicator]


class IndicatorRegistry:
    """Registry of indicator factories keyed by lower-cased name.

    Reads take no lock. Writes are serialised so registration after startup
    cannot interleave with another writer; dict assignment keeps readers
    from ever seeing a half-written entry.
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._factories: dict[str, IndicatorFactory] = {}
        self._lock = threading.Lock()

    def register(self, name: str, factory: IndicatorFactory) -> None:
        """Insert or overwrite the factory for a name.

        Args:
            name: Indicator name; matched case-insensitively.
            factory: Callable building an indicator from sparse params.
        """
        with self._lock:
            self._factories[name.lower()] = factory

    def create_indicator(
        self, name: str, params: Mapping[str, Any] | None = None
    ) -> Indicator:
        """Build a configured indicator instance.

        Args:
            name: Indicator name (case-insensitive).
            params: Sparse parameters merged over the indicator defaults.

        Returns:
            New indicator instance.

        Raises:
            UnknownIndicator: If no factory is registered for the name.
            ValueError: If a parameter is invalid.
        """
        factory = self._factories.get(name.lower())
        if factory is None:
            raise UnknownIndicator(name, self.get_supported_indicators())
        return factory(params)

    def get_supported_indicators(self) -> list[str]:
        """Return registered names in registration order."""
        return list(self._factories)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._factories


def build_default_registry(
    funding_rate_provider: FundingRateProvider | None = None,
) -> IndicatorRegistry:
    """Build a registry with every built-in indicator.

    Args:
        funding_rate_provider: Source for the funding rate indicator. When
            None, 'fundingrate' is not registered.

    Returns:
        Populated registry.
    """
    registry = IndicatorRegistry()
    registry.register("macd", MACD)
    registry.register("kdj", KDJ)
    registry.register("zerolagmacd", ZeroLagMACD)
    registry.register("rsi", RSI)
    registry.register("adx", ADX)
    registry.register("obv", OBV)
    registry.register("mfi", MFI)

    if funding_rate_provider is not None:
        provider = funding_rate_provider
        registry.register("fundingrate", lambda params: FundingRate(provider, params))

    return registry
