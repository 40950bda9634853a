"""Candle service with cache-first retrieval.

This service sits between the API and the market data provider. It handles:
- Symbol / granularity / limit validation
- In-memory TTL caching of fetched candle sets
- Per-key fetch locks so concurrent requests share one upstream call
- Normalization (duplicate timestamps dropped, ascending order)
"""
import asyncio
import logging

from cachetools import TTLCache

from pattern_scanner.core.config import Settings, get_settings
from pattern_scanner.core.exceptions import InvalidRequestError
from pattern_scanner.patterns.types import Bar
from pattern_scanner.providers.base import MarketDataProviderInterface
from pattern_scanner.services.cache_service import CacheTTLConfig, CandleCache
from pattern_scanner.utils.validation import is_valid_limit, is_valid_symbol, normalize_symbol

logger = logging.getLogger(__name__)


def normalize_bars(bars: list[Bar]) -> list[Bar]:
    """Sort bars by timestamp and keep the first bar seen for each timestamp."""
    seen: set[int] = set()
    unique = []
    for bar in bars:
        if bar.timestamp in seen:
            continue
        seen.add(bar.timestamp)
        unique.append(bar)
    return sorted(unique, key=lambda b: b.timestamp)


class CandleService:
    """
    Candle retrieval with cache-first architecture.

    Flow:
    1. Validate and normalize the request
    2. Serve from the TTL cache when possible
    3. On miss: acquire the key's lock, double-check, fetch, normalize, store
    """

    def __init__(
        self,
        provider: MarketDataProviderInterface,
        settings: Settings | None = None,
        cache: CandleCache | None = None,
    ):
        self.provider = provider
        self.settings = settings or get_settings()
        self.cache = cache or CandleCache(
            CacheTTLConfig(
                ttl=self.settings.candle_cache_ttl,
                max_size=self.settings.candle_cache_size,
            )
        )
        # Same bounds as the candle cache
        self._fetch_locks: TTLCache = TTLCache(
            maxsize=self.settings.candle_cache_size, ttl=self.settings.candle_cache_ttl
        )

    def _get_fetch_lock(self, cache_key: str) -> asyncio.Lock:
        lock = self._fetch_locks.get(cache_key)
        if lock is None:
            lock = asyncio.Lock()
            self._fetch_locks[cache_key] = lock
        return lock

    def validate_request(
        self, symbol: str, granularity: str | None, limit: int | None
    ) -> tuple[str, str, int]:
        """
        Normalize and validate request parameters.

        Returns:
            (symbol, granularity, limit) with defaults applied

        Raises:
            InvalidRequestError: If any parameter is invalid
        """
        symbol = normalize_symbol(symbol)
        if not is_valid_symbol(symbol):
            raise InvalidRequestError(f"Invalid symbol format: '{symbol}'")

        granularity = granularity or self.settings.default_granularity
        if granularity not in self.provider.supported_granularities:
            raise InvalidRequestError(
                f"Invalid granularity '{granularity}'. "
                f"Valid values: {', '.join(self.provider.supported_granularities)}"
            )

        limit = limit if limit is not None else self.settings.default_candles_limit
        if not is_valid_limit(limit, self.settings.max_candles_limit):
            raise InvalidRequestError(
                f"Invalid limit {limit}. Must be between 1 and {self.settings.max_candles_limit}"
            )

        return symbol, granularity, limit

    async def get_bars(
        self,
        symbol: str,
        granularity: str | None = None,
        limit: int | None = None,
        force_refresh: bool = False,
    ) -> list[Bar]:
        """
        Get normalized bars for a symbol.

        Args:
            symbol: Trading pair (e.g., 'BTCUSDT')
            granularity: Candle interval (defaults to settings.default_granularity)
            limit: Number of candles (defaults to settings.default_candles_limit)
            force_refresh: Skip the cache

        Returns:
            Bars sorted by timestamp, unique timestamps

        Raises:
            InvalidRequestError: If request parameters are invalid
            SymbolNotFoundError: If the symbol is unknown upstream
            DataValidationError: If upstream data is malformed
            APIError: If the provider fails after retries
        """
        symbol, granularity, limit = self.validate_request(symbol, granularity, limit)

        if not force_refresh:
            cached, _ = self.cache.get(symbol, granularity, limit)
            if cached is not None:
                return cached

        cache_key = CandleCache.make_key(symbol, granularity, limit)
        async with self._get_fetch_lock(cache_key):
            # Double-check after lock
            if not force_refresh:
                cached, _ = self.cache.get(symbol, granularity, limit)
                if cached is not None:
                    return cached

            raw = await self.provider.fetch_candles(symbol, granularity, limit)
            bars = normalize_bars(raw)
            if len(bars) != len(raw):
                logger.warning(
                    f"Dropped {len(raw) - len(bars)} duplicate candles for {symbol} {granularity}"
                )
            self.cache.set(symbol, granularity, limit, bars)

        logger.info(f"Fetched {len(bars)} {granularity} bars for {symbol} via {self.provider.provider_name}")
        return bars

    async def list_symbols(self) -> list[str]:
        """List symbols available from the provider."""
        return await self.provider.list_symbols()
