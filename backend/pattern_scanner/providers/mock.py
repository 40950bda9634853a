"""Mock market data provider for testing.

Generates deterministic candles without hitting external APIs.
Useful for unit tests, integration tests, and development environments.
"""
import logging
import math
from collections.abc import Sequence

from pattern_scanner.core.exceptions import SymbolNotFoundError
from pattern_scanner.patterns.types import Bar
from pattern_scanner.providers.base import MarketDataProviderInterface

logger = logging.getLogger(__name__)

GRANULARITY_MS = {
    "1m": 60_000,
    "5m": 300_000,
    "15m": 900_000,
    "30m": 1_800_000,
    "1h": 3_600_000,
    "4h": 14_400_000,
    "1d": 86_400_000,
    "1w": 604_800_000,
}

BASE_TIMESTAMP_MS = 1_700_000_000_000


class MockMarketDataProvider(MarketDataProviderInterface):
    """
    Mock market data provider for testing.

    Without presets every symbol gets a gently oscillating synthetic series.
    Tests can pin exact bars per symbol through ``preset_bars`` and mark
    symbols as unknown through ``unknown_symbols``.
    """

    def __init__(
        self,
        preset_bars: dict[str, Sequence[Bar]] | None = None,
        unknown_symbols: set[str] | None = None,
    ):
        self.preset_bars = {k.upper(): list(v) for k, v in (preset_bars or {}).items()}
        self.unknown_symbols = {s.upper() for s in (unknown_symbols or set())}
        self.fetch_count = 0

    @property
    def provider_name(self) -> str:
        return "mock"

    @property
    def supported_granularities(self) -> list[str]:
        return list(GRANULARITY_MS)

    async def fetch_candles(self, symbol: str, granularity: str, limit: int) -> list[Bar]:
        """Return preset bars or generate a synthetic series."""
        self.fetch_count += 1
        symbol = symbol.upper()
        if symbol in self.unknown_symbols:
            raise SymbolNotFoundError(f"Symbol '{symbol}' not found")

        if symbol in self.preset_bars:
            return self.preset_bars[symbol][-limit:]

        step = GRANULARITY_MS.get(granularity, GRANULARITY_MS["1h"])
        bars = []
        for i in range(limit):
            mid = 100.0 + 5.0 * math.sin(i / 8.0)
            close = mid + 0.5 * math.cos(i / 3.0)
            bars.append(
                Bar(
                    timestamp=BASE_TIMESTAMP_MS + i * step,
                    open=mid,
                    high=max(mid, close) + 0.5,
                    low=min(mid, close) - 0.5,
                    close=close,
                    volume=1000.0 + 100.0 * (i % 7),
                )
            )

        logger.info(f"Generated {len(bars)} mock candles for {symbol}")
        return bars

    async def list_symbols(self) -> list[str]:
        """Return mock symbol list."""
        return sorted({"BTCUSDT", "ETHUSDT", "SOLUSDT", *self.preset_bars})
