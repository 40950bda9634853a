"""Schemas for candle and pattern detection responses."""

from typing import Any

from pydantic import Field

from pattern_scanner.schemas.base import StrictBaseModel


class CandleData(StrictBaseModel):
    """Single OHLCV candle."""

    timestamp: int = Field(..., description="Candle open time (epoch milliseconds)")
    open: float = Field(..., description="Open price")
    high: float = Field(..., description="High price")
    low: float = Field(..., description="Low price")
    close: float = Field(..., description="Close price")
    volume: float = Field(..., description="Base asset volume")


class CandlesResponse(StrictBaseModel):
    """Normalized candles for one symbol."""

    message: str = Field(..., description="Summary message")
    symbol: str = Field(..., description="Trading pair")
    granularity: str = Field(..., description="Candle interval")
    data: list[CandleData] = Field(..., description="Candles, oldest first")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "message": "Fetched 2 candles for BTCUSDT (1h)",
                    "symbol": "BTCUSDT",
                    "granularity": "1h",
                    "data": [
                        {
                            "timestamp": 1700000000000,
                            "open": 36500.1,
                            "high": 36620.0,
                            "low": 36450.5,
                            "close": 36600.2,
                            "volume": 152.3,
                        },
                        {
                            "timestamp": 1700003600000,
                            "open": 36600.2,
                            "high": 36700.0,
                            "low": 36580.0,
                            "close": 36690.8,
                            "volume": 98.7,
                        },
                    ],
                }
            ]
        }
    }


class SymbolsResponse(StrictBaseModel):
    """Tradable symbols from the market data provider."""

    provider: str = Field(..., description="Market data provider name")
    count: int = Field(..., description="Number of symbols")
    symbols: list[str] = Field(..., description="Symbols, sorted")


class FormationResponse(StrictBaseModel):
    """Single-formation detection result."""

    symbol: str = Field(..., description="Trading pair")
    formation: str = Field(..., description="Formation type")
    message: str = Field(..., description="Summary message")
    patterns: list[dict[str, Any]] = Field(
        ..., description="Confirmed patterns with breakout confirmation and projection"
    )
    potential_formations_count: int = Field(..., description="Candidates found before confirmation")
    rejected_count: int = Field(..., description="Candidates without a qualifying breakout")
    total_candles_analyzed: int = Field(..., description="Number of candles analyzed")
    local_lows_found: int = Field(..., description="Swing lows in the series")
    local_highs_found: int = Field(..., description="Swing highs in the series")
    insufficient_data: bool = Field(..., description="True when too few candles were available")
    parameters_used: dict[str, Any] = Field(..., description="Detection parameters")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "symbol": "BTCUSDT",
                    "formation": "double_bottom",
                    "message": "Found 1 confirmed Double Bottom pattern(s) for BTCUSDT.",
                    "patterns": [
                        {
                            "formation": "double_bottom",
                            "direction": "bullish",
                            "pattern_start_index": 5,
                            "pattern_end_index": 25,
                            "breakout_confirmation": {
                                "index": 27,
                                "close_price": 117.0,
                                "boundary_value": 115.0,
                                "volume_confirmed": True,
                            },
                            "projection": {"pattern_height": 15.0, "target_price": 130.0},
                            "status": "Double Bottom confirmed with breakout",
                        }
                    ],
                    "potential_formations_count": 1,
                    "rejected_count": 0,
                    "total_candles_analyzed": 40,
                    "local_lows_found": 2,
                    "local_highs_found": 1,
                    "insufficient_data": False,
                    "parameters_used": {"order": 5},
                }
            ]
        }
    }


class ScanError(StrictBaseModel):
    """A detector that failed during an aggregate scan."""

    pattern_type: str = Field(..., description="Formation whose detector failed")
    error: str = Field(..., description="Failure reason")


class ScanResponse(StrictBaseModel):
    """Aggregate scan across all formations."""

    symbol: str = Field(..., description="Trading pair")
    scan_time: str = Field(..., description="Scan time (ISO 8601, UTC)")
    granularity: str = Field(..., description="Candle interval")
    total_candles: int = Field(..., description="Number of candles analyzed")
    detected_patterns: list[dict[str, Any]] = Field(
        ..., description="Confirmed patterns of every formation, tagged with pattern_type"
    )
    parameters_used: dict[str, dict[str, Any]] = Field(
        ..., description="Detection parameters per formation"
    )
    errors: list[ScanError] = Field(default_factory=list, description="Failed detectors")
