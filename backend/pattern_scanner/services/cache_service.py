"""In-memory cache for fetched candle sets.

Keeps recently fetched bars per (symbol, granularity, limit) so that an
aggregate scan and the single-formation endpoints hitting the same symbol
within a few seconds share one upstream request.
"""
import logging
from dataclasses import dataclass
from enum import Enum

from cachetools import TTLCache

from pattern_scanner.patterns.types import Bar

logger = logging.getLogger(__name__)


class CacheHitType(str, Enum):
    """Type of cache hit (for metrics and logging)."""
    HIT = "hit"    # Served from memory
    MISS = "miss"  # Cache miss, need to fetch


@dataclass
class CacheTTLConfig:
    """TTL configuration for the candle cache."""
    ttl: int = 30         # seconds
    max_size: int = 200   # cached candle sets


class CandleCache:
    """
    TTL-bounded in-memory candle cache.

    Flow:
    1. Check cache → ~1ms
    2. On miss: caller fetches from the provider and stores the result
    """

    def __init__(self, ttl_config: CacheTTLConfig):
        self.ttl_config = ttl_config
        self._cache: TTLCache = TTLCache(maxsize=ttl_config.max_size, ttl=ttl_config.ttl)

        logger.info(
            f"CandleCache initialized: size={ttl_config.max_size}, TTL={ttl_config.ttl}s"
        )

    @staticmethod
    def make_key(symbol: str, granularity: str, limit: int) -> str:
        """Generate cache key."""
        return f"{symbol}:{granularity}:{limit}"

    def get(self, symbol: str, granularity: str, limit: int) -> tuple[list[Bar] | None, CacheHitType]:
        """
        Attempt to get bars from cache.

        Returns:
            (data, hit_type) where data is None on a miss
        """
        cache_key = self.make_key(symbol, granularity, limit)
        data = self._cache.get(cache_key)
        if data is not None:
            logger.debug(f"Cache hit: {cache_key}")
            return (data, CacheHitType.HIT)

        logger.debug(f"Cache miss: {cache_key}")
        return (None, CacheHitType.MISS)

    def set(self, symbol: str, granularity: str, limit: int, data: list[Bar]) -> None:
        """Store bars under their cache key."""
        cache_key = self.make_key(symbol, granularity, limit)
        self._cache[cache_key] = data
        logger.debug(f"Cached {len(data)} bars: {cache_key}")

    def invalidate(self, symbol: str) -> None:
        """Drop every cached entry for a symbol."""
        keys_to_remove = [key for key in list(self._cache.keys()) if key.startswith(f"{symbol}:")]

        for key in keys_to_remove:
            del self._cache[key]

        logger.debug(f"Invalidated {len(keys_to_remove)} cache entries for {symbol}")

    def clear(self) -> None:
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)
