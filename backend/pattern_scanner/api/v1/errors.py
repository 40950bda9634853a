"""Translation of service exceptions into HTTP errors."""

import logging

from fastapi import HTTPException
from fastapi import status

from pattern_scanner.core.exceptions import (
    APIError,
    DataServiceError,
    DataValidationError,
    InvalidRequestError,
    SymbolNotFoundError,
)

logger = logging.getLogger(__name__)


def to_http_exception(exc: DataServiceError, symbol: str) -> HTTPException:
    """Map a service exception to the matching HTTPException."""
    if isinstance(exc, InvalidRequestError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, SymbolNotFoundError):
        logger.warning(f"Symbol not found: {symbol}")
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Symbol '{symbol}' not found or has no data",
        )
    if isinstance(exc, DataValidationError):
        logger.warning(f"Upstream data validation error for {symbol}: {exc}")
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))
    if isinstance(exc, APIError):
        logger.error(f"Market data API error for {symbol}: {exc}")
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Market data temporarily unavailable: {exc}",
        )
    logger.error(f"Data service error for {symbol}: {exc}")
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
