"""Pattern detection service.

Fetches bars through the CandleService and runs the detection core on them.
The core is synchronous and CPU bound, so every detector runs in a worker
thread. Aggregate scans fan out all formations concurrently; a detector that
fails or times out is reported in ``errors`` without affecting the others.
"""
import asyncio
import dataclasses
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from pattern_scanner.core.config import Settings, get_settings
from pattern_scanner.patterns.registry import FORMATION_REGISTRY, get_strategy
from pattern_scanner.patterns.scanner import detect_formation
from pattern_scanner.patterns.types import Bar, FormationScanResult, FormationType, PriceSeries
from pattern_scanner.services.candle_service import CandleService
from pattern_scanner.utils.structured_logging import get_logger

logger = get_logger(__name__)


@dataclass
class ScanReport:
    """Aggregate result of running every formation over one symbol."""
    symbol: str
    granularity: str
    total_candles: int
    scan_time: datetime
    results: dict[FormationType, FormationScanResult] = field(default_factory=dict)
    errors: list[dict[str, str]] = field(default_factory=list)

    @property
    def detected_patterns(self) -> list[dict[str, Any]]:
        """Confirmed patterns of every formation, tagged with their type."""
        detected = []
        for formation, result in self.results.items():
            for confirmed in result.confirmed:
                detected.append({"pattern_type": formation.value, **confirmed.to_dict()})
        return detected

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            "scan_time": self.scan_time.isoformat(),
            "granularity": self.granularity,
            "total_candles": self.total_candles,
            "detected_patterns": self.detected_patterns,
            "parameters_used": {
                formation.value: result.parameters for formation, result in self.results.items()
            },
            "errors": self.errors,
        }


def format_result_message(symbol: str, result: FormationScanResult) -> str:
    """Human-readable summary line for a single-formation response."""
    name = result.formation.display_name
    if result.insufficient_data:
        return f"Not enough candles to analyze {name} for {symbol} ({result.total_bars} bars)."
    if result.confirmed:
        return f"Found {len(result.confirmed)} confirmed {name} pattern(s) for {symbol}."
    return (
        f"No confirmed {name} patterns detected for {symbol} "
        f"out of {result.potential_count} potential formation(s)."
    )


class PatternService:
    """
    Runs formation detectors against provider candles.

    Per-formation configs start from each formation's defaults. When
    ``max_candles_ago_for_fresh_breakout`` is configured it is applied to
    every formation's breakout settings.
    """

    def __init__(self, candle_service: CandleService, settings: Settings | None = None):
        self.candle_service = candle_service
        self.settings = settings or get_settings()

    def config_for(self, formation: FormationType) -> Any:
        config = get_strategy(formation).default_config()
        max_age = self.settings.max_candles_ago_for_fresh_breakout
        if max_age is not None:
            breakout = dataclasses.replace(
                config.breakout, max_candles_ago_for_fresh_breakout=max_age
            )
            config = dataclasses.replace(config, breakout=breakout)
        return config

    async def _run_detector(
        self, series: PriceSeries, formation: FormationType
    ) -> FormationScanResult:
        return await asyncio.to_thread(
            detect_formation, series, formation, self.config_for(formation)
        )

    async def detect(
        self,
        symbol: str,
        formation: FormationType,
        granularity: str | None = None,
        limit: int | None = None,
    ) -> tuple[str, FormationScanResult]:
        """
        Detect a single formation for a symbol.

        Returns:
            (normalized symbol, scan result)

        Raises:
            InvalidRequestError, SymbolNotFoundError, DataValidationError, APIError
        """
        symbol, granularity, limit = self.candle_service.validate_request(symbol, granularity, limit)
        bars = await self.candle_service.get_bars(symbol, granularity, limit)

        start = time.perf_counter()
        result = await self._run_detector(PriceSeries.from_bars(bars), formation)
        logger.info(
            "formation_scanned",
            symbol=symbol,
            formation=formation.value,
            granularity=granularity,
            bars=len(bars),
            potential=result.potential_count,
            confirmed=len(result.confirmed),
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        return symbol, result

    async def scan(
        self,
        symbol: str,
        granularity: str | None = None,
        limit: int | None = None,
        formations: list[FormationType] | None = None,
    ) -> ScanReport:
        """
        Run every formation detector over one symbol concurrently.

        Candles are fetched once and shared by all detectors. Each detector
        is bounded by ``scan_detector_timeout``.

        Raises:
            InvalidRequestError, SymbolNotFoundError, DataValidationError, APIError
        """
        symbol, granularity, limit = self.candle_service.validate_request(symbol, granularity, limit)
        bars = await self.candle_service.get_bars(symbol, granularity, limit)
        return await self.scan_bars(symbol, granularity, bars, formations)

    async def scan_bars(
        self,
        symbol: str,
        granularity: str,
        bars: list[Bar],
        formations: list[FormationType] | None = None,
    ) -> ScanReport:
        """Fan all detectors out over already-fetched bars."""
        selected = formations or list(FORMATION_REGISTRY)
        series = PriceSeries.from_bars(bars)
        timeout = self.settings.scan_detector_timeout

        start = time.perf_counter()
        outcomes = await asyncio.gather(
            *[
                asyncio.wait_for(self._run_detector(series, formation), timeout=timeout)
                for formation in selected
            ],
            return_exceptions=True,
        )

        report = ScanReport(
            symbol=symbol,
            granularity=granularity,
            total_candles=len(bars),
            scan_time=datetime.now(timezone.utc),
        )
        for formation, outcome in zip(selected, outcomes):
            if isinstance(outcome, asyncio.TimeoutError):
                logger.warning("detector_timeout", symbol=symbol, formation=formation.value)
                report.errors.append(
                    {"pattern_type": formation.value, "error": f"Detector timed out after {timeout}s"}
                )
            elif isinstance(outcome, asyncio.CancelledError):
                logger.warning("detector_cancelled", symbol=symbol, formation=formation.value)
                report.errors.append({"pattern_type": formation.value, "error": "Detector cancelled"})
            elif isinstance(outcome, BaseException):
                logger.warning(
                    "detector_failed", symbol=symbol, formation=formation.value, error=str(outcome)
                )
                report.errors.append({"pattern_type": formation.value, "error": str(outcome)})
            else:
                report.results[formation] = outcome

        logger.info(
            "symbol_scanned",
            symbol=symbol,
            granularity=granularity,
            bars=len(bars),
            detected=len(report.detected_patterns),
            errors=len(report.errors),
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        return report
