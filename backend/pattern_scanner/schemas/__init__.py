"""Pydantic schemas for API request/response validation.

This module exports all Pydantic schemas used throughout the application.
"""

from pattern_scanner.schemas.base import StrictBaseModel
from pattern_scanner.schemas.patterns import (
    CandleData,
    CandlesResponse,
    FormationResponse,
    ScanError,
    ScanResponse,
    SymbolsResponse,
)

__all__ = [
    "StrictBaseModel",
    "CandleData",
    "CandlesResponse",
    "FormationResponse",
    "ScanError",
    "ScanResponse",
    "SymbolsResponse",
]
