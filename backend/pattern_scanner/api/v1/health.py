"""Service probes: ping, health, readiness and liveness.

None of these call the exchange; they only report on the process and the
configured market data provider.
"""
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter
from fastapi import Depends

from pattern_scanner.core.config import get_settings
from pattern_scanner.core.deps import get_market_data_provider
from pattern_scanner.core.docs import API_VERSION
from pattern_scanner.providers.base import MarketDataProviderInterface

router = APIRouter()


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get(
    "/ping",
    response_model=dict[str, str],
    summary="Ping",
    description="Returns 'pong' with the server time.",
    operation_id="ping",
)
async def ping() -> dict[str, str]:
    return {"message": "pong", "timestamp": _utc_now()}


@router.get(
    "/health",
    response_model=dict[str, Any],
    summary="Service Health",
    description="Reports the environment, API version and the configured market data "
    "provider with its supported granularities.",
    operation_id="get_health",
)
async def health_check(
    provider: MarketDataProviderInterface = Depends(get_market_data_provider),
) -> dict[str, Any]:
    """Report service status.

    Returns:
        dict[str, Any]: Status, version, environment and per-component checks
    """
    settings = get_settings()
    return {
        "status": "healthy",
        "timestamp": _utc_now(),
        "version": API_VERSION,
        "environment": settings.environment,
        "checks": {
            "application": {"status": "healthy", "message": "Accepting requests"},
            "market_data_provider": {
                "status": "healthy",
                "message": f"Using {provider.provider_name}",
                "granularities": provider.supported_granularities,
            },
        },
    }


@router.get(
    "/health/ready",
    response_model=dict[str, str],
    summary="Readiness",
    description="200 once the market data provider has been constructed.",
    operation_id="get_readiness",
)
async def readiness_check(
    provider: MarketDataProviderInterface = Depends(get_market_data_provider),
) -> dict[str, str]:
    return {"status": "ready", "provider": provider.provider_name, "timestamp": _utc_now()}


@router.get(
    "/health/live",
    response_model=dict[str, str],
    summary="Liveness",
    description="200 while the process is running.",
    operation_id="get_liveness",
)
async def liveness_check() -> dict[str, str]:
    return {"status": "alive", "timestamp": _utc_now()}
