"""Dependency injection for FastAPI endpoints.

This module provides dependency functions for shared components: settings,
the market data provider, the candle and pattern services, and the scan
secret check.
"""
import logging
import secrets
from typing import Annotated

from fastapi import Depends
from fastapi import Header
from fastapi import HTTPException
from fastapi import status

from pattern_scanner.core.config import Settings, get_settings
from pattern_scanner.providers.base import MarketDataProviderInterface
from pattern_scanner.providers.bitget import BitgetProvider
from pattern_scanner.providers.mock import MockMarketDataProvider
from pattern_scanner.services.candle_service import CandleService
from pattern_scanner.services.pattern_service import PatternService
from pattern_scanner.utils.validation import is_valid_symbol, normalize_symbol

logger = logging.getLogger(__name__)

# Type aliases for cleaner dependency injection
AppSettings = Annotated[Settings, Depends(get_settings)]

# Process-wide instances so the candle cache survives across requests
_provider: MarketDataProviderInterface | None = None
_candle_service: CandleService | None = None


async def get_validated_symbol(symbol: str) -> str:
    """Validate and normalize a trading pair symbol.

    FastAPI dependency that validates symbol format and normalizes it.

    Args:
        symbol: Raw symbol from URL path

    Returns:
        Normalized symbol (uppercase, trimmed, separators removed)

    Raises:
        HTTPException: 400 if symbol format is invalid

    Example:
        ```python
        @router.get("/candles/{symbol}")
        async def get_candles(
            symbol: str = Depends(get_validated_symbol),
        ):
            # symbol is already validated and normalized
            pass
        ```
    """
    symbol = normalize_symbol(symbol)
    if not is_valid_symbol(symbol):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid symbol format: {symbol}",
        )
    return symbol


def create_market_data_provider(settings: Settings) -> MarketDataProviderInterface:
    """Build the provider named by MARKET_DATA_PROVIDER.

    - "bitget": BitgetProvider (public spot market data)
    - "mock": MockMarketDataProvider (testing, synthetic data)

    Raises:
        ValueError: If provider type is unknown
    """
    if settings.market_data_provider == "bitget":
        logger.info("Using BitgetProvider for market data")
        return BitgetProvider()

    elif settings.market_data_provider == "mock":
        logger.info("Using MockMarketDataProvider for market data")
        return MockMarketDataProvider()

    else:
        raise ValueError(
            f"Unknown market data provider: {settings.market_data_provider}. "
            "Valid options: 'bitget', 'mock'"
        )


async def get_market_data_provider() -> MarketDataProviderInterface:
    """Get the configured market data provider (singleton)."""
    global _provider
    if _provider is None:
        _provider = create_market_data_provider(get_settings())
    return _provider


async def get_candle_service(
    provider: MarketDataProviderInterface = Depends(get_market_data_provider),
) -> CandleService:
    """Get the CandleService singleton bound to the configured provider."""
    global _candle_service
    if _candle_service is None or _candle_service.provider is not provider:
        _candle_service = CandleService(provider=provider, settings=get_settings())
    return _candle_service


async def get_pattern_service(
    candle_service: CandleService = Depends(get_candle_service),
) -> PatternService:
    """Get PatternService with injected dependencies."""
    return PatternService(candle_service=candle_service, settings=get_settings())


def reset_dependencies() -> None:
    """Drop cached provider and service instances (used on shutdown and in tests)."""
    global _provider, _candle_service
    _provider = None
    _candle_service = None


async def verify_scan_secret(
    settings: AppSettings,
    authorization: Annotated[str | None, Header()] = None,
) -> None:
    """Require ``Authorization: Bearer <SCAN_SECRET>`` when a secret is configured.

    Raises:
        HTTPException: 401 if the header is missing or does not match
    """
    if not settings.scan_secret:
        return

    expected = f"Bearer {settings.scan_secret}"
    if authorization is None or not secrets.compare_digest(authorization, expected):
        logger.warning("Rejected aggregate scan request with missing or invalid secret")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
