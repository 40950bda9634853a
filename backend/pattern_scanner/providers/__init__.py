"""Market data provider abstractions and implementations.

This package provides a provider-agnostic interface for fetching candles.

Available providers:
- BitgetProvider: Spot candles from the public Bitget REST API
- MockMarketDataProvider: Deterministic data for testing
"""

from pattern_scanner.providers.base import MarketDataProviderInterface
from pattern_scanner.providers.bitget import BitgetProvider
from pattern_scanner.providers.mock import MockMarketDataProvider

__all__ = [
    "MarketDataProviderInterface",
    "BitgetProvider",
    "MockMarketDataProvider",
]
