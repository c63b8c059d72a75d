"""Indicator engine exceptions."""


class UnknownIndicator(LookupError):
    """Raised when a requested indicator name has no registered factory."""

    def __init__(self, name: str, available: list[str]) -> None:
        """Initialize UnknownIndicator.

        Args:
            name: The indicator name that was requested.
            available: Names currently registered.
        """
        self.name = name
        self.available = available
        super().__init__(f"Indicator '{name}' not found. Available: {available}")


class ExternalFetchFailure(Exception):
    """Raised when an indicator cannot read its external input.

    Distinct from a NEUTRAL signal: the caller learns that no opinion could
    be formed, not that the market is neutral.
    """

    def __init__(self, source: str, symbol: str, message: str) -> None:
        """Initialize ExternalFetchFailure.

        Args:
            source: Name of the external source (e.g. 'Binance Futures').
            symbol: Instrument whose data was being read.
            message: Error description.
        """
        self.source = source
        self.symbol = symbol
        super().__init__(f"[{source}] Failed to read {symbol}: {message}")
