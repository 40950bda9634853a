"""Bitget spot market data provider implementation.

Talks to the public Bitget v2 REST API over httpx, handling granularity
mapping, response validation, error translation and retries.
"""
import asyncio
import logging
from typing import Any

import httpx

from pattern_scanner.core.config import get_settings
from pattern_scanner.core.exceptions import (
    APIError,
    DataValidationError,
    SymbolNotFoundError,
)
from pattern_scanner.patterns.types import Bar
from pattern_scanner.providers.base import MarketDataProviderInterface

logger = logging.getLogger(__name__)

CANDLES_PATH = "/api/v2/spot/market/candles"
SYMBOLS_PATH = "/api/v2/spot/public/symbols"

SUCCESS_CODE = "00000"
# Bitget error codes for unknown / delisted pairs
SYMBOL_NOT_FOUND_CODES = {"40034", "40309"}


class BitgetProvider(MarketDataProviderInterface):
    """
    Bitget spot market data provider implementation.

    Handles:
    - Mapping API granularities ('1h') to Bitget values ('1h', '1day', ...)
    - Translating Bitget error payloads to service exceptions
    - Retries with exponential backoff on transport and server errors
    - Parsing candle rows into Bar records, oldest first
    """

    GRANULARITY_MAP = {
        "1m": "1min",
        "5m": "5min",
        "15m": "15min",
        "30m": "30min",
        "1h": "1h",
        "4h": "4h",
        "1d": "1day",
        "1w": "1week",
    }

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        retry_delay: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.bitget_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.bitget_timeout
        self.max_retries = max_retries if max_retries is not None else settings.bitget_max_retries
        self.retry_delay = retry_delay if retry_delay is not None else settings.bitget_retry_delay
        self._transport = transport

    @property
    def provider_name(self) -> str:
        return "bitget"

    @property
    def supported_granularities(self) -> list[str]:
        return list(self.GRANULARITY_MAP)

    async def fetch_candles(self, symbol: str, granularity: str, limit: int) -> list[Bar]:
        """Fetch spot candles from Bitget."""
        if granularity not in self.GRANULARITY_MAP:
            raise DataValidationError(
                f"Invalid granularity '{granularity}'. "
                f"Valid values: {', '.join(self.GRANULARITY_MAP)}"
            )

        params = {
            "symbol": symbol,
            "granularity": self.GRANULARITY_MAP[granularity],
            "limit": str(limit),
        }
        payload = await self._get_with_retry(CANDLES_PATH, params, symbol)
        bars = self._parse_candles(payload, symbol)

        logger.info(f"Fetched {len(bars)} {granularity} candles for {symbol} from Bitget")
        return bars

    async def list_symbols(self) -> list[str]:
        """List spot symbols currently listed on Bitget."""
        payload = await self._get_with_retry(SYMBOLS_PATH, {}, None)
        rows = payload.get("data")
        if not isinstance(rows, list):
            raise DataValidationError("Bitget symbols response has no data list")
        return sorted(
            row["symbol"] for row in rows
            if isinstance(row, dict) and row.get("symbol") and row.get("status", "online") == "online"
        )

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
            headers={"Accept": "application/json"},
        )

    def _check_error_payload(self, payload: Any, symbol: str | None) -> None:
        """Raise the matching service exception for a non-success payload."""
        if not isinstance(payload, dict):
            raise DataValidationError("Unexpected Bitget response format")

        code = str(payload.get("code", ""))
        if code == SUCCESS_CODE:
            return

        message = payload.get("msg", "unknown error")
        if symbol and code in SYMBOL_NOT_FOUND_CODES:
            raise SymbolNotFoundError(f"Symbol '{symbol}' not found on Bitget: {message}")
        raise APIError(f"Bitget returned error code {code}: {message}")

    async def _get_with_retry(
        self, path: str, params: dict[str, str], symbol: str | None
    ) -> dict[str, Any]:
        """GET a Bitget endpoint with retry logic and exponential backoff.

        Transport failures and 5xx responses are retried. Client errors and
        malformed payloads are raised immediately.
        """
        last_error: Exception | None = None

        for attempt in range(self.max_retries):
            try:
                async with self._client() as client:
                    response = await client.get(path, params=params)
                if response.status_code >= 500:
                    response.raise_for_status()
            except httpx.HTTPError as e:
                last_error = e
                if attempt < self.max_retries - 1:
                    wait_time = self.retry_delay * (2**attempt)
                    logger.warning(
                        f"Attempt {attempt + 1} failed for {path} ({symbol or 'all'}), "
                        f"retrying in {wait_time}s: {e}"
                    )
                    await asyncio.sleep(wait_time)
                else:
                    logger.error(f"All {self.max_retries} attempts failed for {path}: {e}")
                continue

            return self._decode_payload(response, symbol)

        raise APIError(f"Failed to fetch data after {self.max_retries} attempts: {last_error}")

    def _decode_payload(self, response: httpx.Response, symbol: str | None) -> dict[str, Any]:
        try:
            payload = response.json()
        except ValueError as e:
            raise DataValidationError(f"Bitget response is not JSON: {e}") from e

        self._check_error_payload(payload, symbol)
        if response.status_code >= 400:
            raise APIError(f"Bitget request failed with status {response.status_code}")
        return payload

    def _parse_candles(self, payload: dict[str, Any], symbol: str) -> list[Bar]:
        """Transform Bitget candle rows to Bar list, oldest first.

        Rows are ``[ts, open, high, low, close, baseVolume, quoteVolume, ...]``
        with every field encoded as a string.
        """
        rows = payload.get("data")
        if not isinstance(rows, list):
            raise DataValidationError(f"Bitget candles response for {symbol} has no data list")

        bars = []
        for row in rows:
            if not isinstance(row, (list, tuple)) or len(row) < 6:
                raise DataValidationError(f"Malformed candle row for {symbol}: {row!r}")
            try:
                bar = Bar(
                    timestamp=int(row[0]),
                    open=float(row[1]),
                    high=float(row[2]),
                    low=float(row[3]),
                    close=float(row[4]),
                    volume=float(row[5]),
                )
            except (TypeError, ValueError) as e:
                raise DataValidationError(f"Malformed candle row for {symbol}: {row!r}") from e

            self._validate_bar(bar)
            bars.append(bar)

        bars.sort(key=lambda b: b.timestamp)
        return bars
