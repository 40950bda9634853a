"""Market data endpoints: normalized candles and symbol list."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from pattern_scanner.api.v1.errors import to_http_exception
from pattern_scanner.core.deps import get_candle_service
from pattern_scanner.core.exceptions import DataServiceError
from pattern_scanner.schemas.patterns import CandleData, CandlesResponse, SymbolsResponse
from pattern_scanner.services.candle_service import CandleService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get(
    "/candles/{symbol}",
    response_model=CandlesResponse,
    summary="Get Candles",
    description="Retrieve normalized OHLCV candles for a trading pair, oldest first. "
    "Duplicate timestamps are dropped. Results are cached for a few seconds.",
    operation_id="get_candles",
    responses={
        400: {"description": "Invalid symbol, granularity or limit"},
        404: {"description": "Symbol not found"},
        502: {"description": "Malformed upstream data"},
        503: {"description": "Exchange API unavailable"},
    },
)
async def get_candles(
    symbol: str,
    granularity: str | None = Query(None, description="Candle interval (1m, 5m, 15m, 30m, 1h, 4h, 1d, 1w)"),
    limit: int | None = Query(None, description="Number of candles"),
    force_refresh: bool = Query(False, description="Bypass the candle cache"),
    candle_service: CandleService = Depends(get_candle_service),
) -> CandlesResponse:
    """Get normalized candles for a symbol.

    Raises:
        HTTPException: If parameters are invalid or data retrieval fails
    """
    try:
        symbol, granularity, limit = candle_service.validate_request(symbol, granularity, limit)
        bars = await candle_service.get_bars(symbol, granularity, limit, force_refresh=force_refresh)
    except DataServiceError as e:
        raise to_http_exception(e, symbol)

    return CandlesResponse(
        message=f"Fetched {len(bars)} candles for {symbol} ({granularity})",
        symbol=symbol,
        granularity=granularity,
        data=[CandleData(**bar.to_dict()) for bar in bars],
    )


@router.get(
    "/symbols",
    response_model=SymbolsResponse,
    summary="List Symbols",
    description="List tradable spot symbols from the configured market data provider.",
    operation_id="list_symbols",
    responses={
        502: {"description": "Malformed upstream data"},
        503: {"description": "Exchange API unavailable"},
    },
)
async def list_symbols(
    candle_service: CandleService = Depends(get_candle_service),
) -> SymbolsResponse:
    try:
        symbols = await candle_service.list_symbols()
    except DataServiceError as e:
        raise to_http_exception(e, "*")

    if not symbols:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Market data provider returned no symbols",
        )

    return SymbolsResponse(
        provider=candle_service.provider.provider_name,
        count=len(symbols),
        symbols=symbols,
    )
