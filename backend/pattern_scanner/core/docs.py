"""OpenAPI metadata: title, description, tags and shared error responses."""
from typing import Any

from fastapi.openapi.utils import get_openapi

# API Metadata
API_TITLE = "Chart Pattern Scanner API"
API_DESCRIPTION = """
## Chart Pattern Scanner API

Detects classical chart formations in exchange candles and confirms them
with a breakout (or breakdown) on the following bars.

### Supported Formations

1. **Ascending Triangle** - flat resistance over rising support, bullish breakout
2. **Descending Triangle** - flat support under falling resistance, bearish breakdown
3. **Falling Wedge** - two falling, converging trendlines, bullish breakout
4. **Double Bottom** - two comparable troughs under a neckline peak
5. **Inverse Head & Shoulders** - three troughs, deepest in the middle, sloped neckline

Every confirmed pattern carries the breakout bar, a volume confirmation flag
against the trailing average, and a measured-move price target.

### Data Sources

- **Primary**: Bitget public spot market API
- **Granularities**: 1m, 5m, 15m, 30m, 1h, 4h, 1d, 1w

### Authentication

The aggregate scan endpoint requires `Authorization: Bearer <SCAN_SECRET>`
when `SCAN_SECRET` is configured. All other endpoints are open.

### API Versioning

Current version: **v1** - All endpoints are prefixed with `/api/v1`

### Error Handling

- **400**: Invalid symbol, granularity or limit
- **401**: Missing or wrong scan secret
- **404**: Symbol not listed on the exchange
- **429**: Too many pattern requests from one client
- **502**: Exchange returned malformed data
- **503**: Exchange unavailable after retries
"""

API_VERSION = "1.0.0"
API_CONTACT = {
    "name": "Chart Pattern Scanner",
}
API_LICENSE = {
    "name": "MIT",
    "url": "https://opensource.org/licenses/MIT",
}

# OpenAPI Tags
OPENAPI_TAGS: list[dict[str, Any]] = [
    {
        "name": "health",
        "description": "**System Health & Monitoring**\n\n"
        "Ping, health, readiness and liveness probes.",
    },
    {
        "name": "candles",
        "description": "**Market Data**\n\n"
        "Normalized OHLCV candles and the list of tradable symbols.",
    },
    {
        "name": "patterns",
        "description": "**Pattern Detection**\n\n"
        "Single-formation detection and the aggregate scan across all formations.",
    },
]

# Response Examples
COMMON_RESPONSES = {
    400: {
        "description": "Bad Request - Invalid input parameters",
        "content": {
            "application/json": {
                "examples": {
                    "invalid_symbol": {
                        "summary": "Invalid Symbol Format",
                        "value": {"detail": "Invalid symbol format: BTC$USDT"},
                    },
                    "invalid_granularity": {
                        "summary": "Invalid Granularity",
                        "value": {
                            "detail": "Invalid granularity '2h'. "
                            "Valid values: 1m, 5m, 15m, 30m, 1h, 4h, 1d, 1w"
                        },
                    },
                }
            }
        },
    },
    404: {
        "description": "Not Found - Symbol not listed",
        "content": {
            "application/json": {
                "example": {"detail": "Symbol 'FOOUSDT' not found on Bitget: Parameter verification failed"}
            }
        },
    },
    502: {
        "description": "Bad Gateway - Malformed upstream data",
        "content": {
            "application/json": {
                "example": {"detail": "Bitget candles response for BTCUSDT has no data list"}
            }
        },
    },
    503: {
        "description": "Service Unavailable - Exchange unavailable",
        "content": {
            "application/json": {
                "example": {"detail": "Market data temporarily unavailable: Failed to fetch data after 3 attempts"}
            }
        },
    },
}


def custom_openapi_schema(app) -> dict[str, Any]:
    """OpenAPI document with the scan secret scheme and shared error responses.

    Built once and cached on ``app.openapi_schema``.
    """
    if app.openapi_schema:
        return app.openapi_schema

    schema = get_openapi(
        title=API_TITLE,
        version=API_VERSION,
        description=API_DESCRIPTION,
        routes=app.routes,
        tags=OPENAPI_TAGS,
        contact=API_CONTACT,
        license_info=API_LICENSE,
    )

    components = schema.setdefault("components", {})
    components["securitySchemes"] = {
        "ScanSecret": {
            "type": "http",
            "scheme": "bearer",
            "description": "Required by the aggregate scan endpoint when SCAN_SECRET is set",
        }
    }
    components["responses"] = COMMON_RESPONSES

    app.openapi_schema = schema
    return app.openapi_schema


# Swagger UI options, only used when docs are enabled
SWAGGER_UI_PARAMETERS: dict[str, Any] = {
    "deepLinking": True,
    "displayRequestDuration": True,
    "docExpansion": "list",
    "tryItOutEnabled": True,
}
