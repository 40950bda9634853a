"""Pattern detection endpoints.

The aggregate scan route is registered before the single-formation route so
that ``/patterns/scan/{symbol}`` is never captured as formation "scan".
"""

import logging

from fastapi import APIRouter, Depends, Query, Request

from pattern_scanner.api.v1.errors import to_http_exception
from pattern_scanner.core.config import get_settings
from pattern_scanner.core.deps import get_pattern_service, verify_scan_secret
from pattern_scanner.core.exceptions import DataServiceError
from pattern_scanner.core.rate_limit import limiter
from pattern_scanner.patterns.types import FormationType
from pattern_scanner.schemas.patterns import FormationResponse, ScanResponse
from pattern_scanner.services.pattern_service import PatternService, format_result_message

router = APIRouter()
logger = logging.getLogger(__name__)

PATTERN_RATE_LIMIT = get_settings().pattern_rate_limit


@router.get(
    "/patterns/scan/{symbol}",
    response_model=ScanResponse,
    summary="Scan All Formations",
    description="Run every formation detector over one symbol's candles concurrently. "
    "Detectors that fail or time out are listed in 'errors' and do not affect the others. "
    "Requires 'Authorization: Bearer <SCAN_SECRET>' when SCAN_SECRET is configured.",
    operation_id="scan_patterns",
    dependencies=[Depends(verify_scan_secret)],
    responses={
        400: {"description": "Invalid symbol, granularity or limit"},
        401: {"description": "Missing or invalid scan secret"},
        404: {"description": "Symbol not found"},
        502: {"description": "Malformed upstream data"},
        503: {"description": "Exchange API unavailable"},
        429: {"description": "Rate limit exceeded"},
    },
)
@limiter.limit(PATTERN_RATE_LIMIT)
async def scan_patterns(
    request: Request,
    symbol: str,
    granularity: str | None = Query(None, description="Candle interval"),
    limit: int | None = Query(None, description="Number of candles to analyze"),
    pattern_service: PatternService = Depends(get_pattern_service),
) -> ScanResponse:
    try:
        report = await pattern_service.scan(symbol, granularity, limit)
    except DataServiceError as e:
        raise to_http_exception(e, symbol)

    return ScanResponse(**report.to_dict())


@router.get(
    "/patterns/{formation}/{symbol}",
    response_model=FormationResponse,
    summary="Detect One Formation",
    description="Detect one chart formation and confirm each candidate with a breakout "
    "(or breakdown) within the following candles. Returns confirmed patterns with "
    "volume confirmation and a measured-move price target.",
    operation_id="detect_formation",
    responses={
        400: {"description": "Invalid symbol, granularity or limit"},
        404: {"description": "Symbol not found"},
        422: {"description": "Unknown formation"},
        502: {"description": "Malformed upstream data"},
        503: {"description": "Exchange API unavailable"},
        429: {"description": "Rate limit exceeded"},
    },
)
@limiter.limit(PATTERN_RATE_LIMIT)
async def detect_formation(
    request: Request,
    formation: FormationType,
    symbol: str,
    granularity: str | None = Query(None, description="Candle interval"),
    limit: int | None = Query(None, description="Number of candles to analyze"),
    pattern_service: PatternService = Depends(get_pattern_service),
) -> FormationResponse:
    """Detect a single formation for a symbol.

    Args:
        request: Incoming request, used for rate limiting
        formation: Formation type (e.g., ascending_triangle, double_bottom)
        symbol: Trading pair (e.g., BTCUSDT)
        granularity: Candle interval
        limit: Number of candles
        pattern_service: Pattern service dependency

    Raises:
        HTTPException: If parameters are invalid or data retrieval fails
    """
    try:
        symbol, result = await pattern_service.detect(symbol, formation, granularity, limit)
    except DataServiceError as e:
        raise to_http_exception(e, symbol)

    body = result.to_dict()
    body.pop("formation")
    return FormationResponse(
        symbol=symbol,
        formation=formation.value,
        message=format_result_message(symbol, result),
        **body,
    )
