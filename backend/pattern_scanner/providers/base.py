"""Base provider interface for market data providers.

This module defines the contract that all candle providers must implement.
Providers return bars already converted to the detection core's ``Bar``
record, in ascending timestamp order.
"""
from abc import ABC, abstractmethod

from pattern_scanner.patterns.types import Bar


class MarketDataProviderInterface(ABC):
    """
    Abstract interface for market data providers.

    This interface defines the contract that all market data providers
    (Bitget, Mock) must implement.
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the name of this provider (e.g., 'bitget')."""
        pass

    @property
    @abstractmethod
    def supported_granularities(self) -> list[str]:
        """Return list of supported granularity values."""
        pass

    def _validate_bar(self, bar: Bar) -> None:
        """Validate OHLCV price constraints.

        Raises:
            DataValidationError: If price data violates constraints

        Args:
            bar: Bar to validate
        """
        from pattern_scanner.core.exceptions import DataValidationError

        if bar.high < bar.low:
            raise DataValidationError(f"High price ({bar.high}) < Low price ({bar.low})")

        if bar.open < 0 or bar.close < 0:
            raise DataValidationError("Prices cannot be negative")

        if bar.volume < 0:
            raise DataValidationError("Volume cannot be negative")

    @abstractmethod
    async def fetch_candles(self, symbol: str, granularity: str, limit: int) -> list[Bar]:
        """
        Fetch the most recent OHLCV candles for a trading pair.

        Args:
            symbol: Trading pair (e.g., 'BTCUSDT')
            granularity: Candle interval (e.g., '1h')
            limit: Maximum number of candles

        Returns:
            List of Bar objects sorted by timestamp (oldest first)

        Raises:
            SymbolNotFoundError: If symbol doesn't exist
            DataValidationError: If returned data is invalid
            APIError: If provider API fails after retries
        """
        pass

    @abstractmethod
    async def list_symbols(self) -> list[str]:
        """
        List tradable symbols.

        Raises:
            APIError: If provider API fails
        """
        pass
