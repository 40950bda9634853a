"""ASGI entry point for the chart pattern scanner.

Run with ``uvicorn pattern_scanner.main:app`` from the backend directory.
"""
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi import Request
from fastapi import status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from pattern_scanner.api.v1 import candles
from pattern_scanner.api.v1 import health
from pattern_scanner.api.v1 import patterns
from pattern_scanner.core.config import get_settings
from pattern_scanner.core.deps import reset_dependencies
from pattern_scanner.core.docs import API_CONTACT
from pattern_scanner.core.docs import API_DESCRIPTION
from pattern_scanner.core.docs import API_TITLE
from pattern_scanner.core.docs import API_VERSION
from pattern_scanner.core.docs import OPENAPI_TAGS
from pattern_scanner.core.docs import SWAGGER_UI_PARAMETERS
from pattern_scanner.core.docs import custom_openapi_schema
from pattern_scanner.core.rate_limit import limiter
from pattern_scanner.utils.structured_logging import configure_structured_logging
from pattern_scanner.utils.structured_logging import get_logger

SUPPORTED_PROVIDERS = ("bitget", "mock")

configure_structured_logging(log_level=get_settings().log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Refuse to start on an unknown provider; release the provider on exit."""
    settings = get_settings()
    logger.info(
        "pattern_scanner_starting",
        environment=settings.environment,
        provider=settings.market_data_provider,
        default_granularity=settings.default_granularity,
        scan_secret_configured=bool(settings.scan_secret),
    )

    if settings.market_data_provider not in SUPPORTED_PROVIDERS:
        message = (
            f"Unknown MARKET_DATA_PROVIDER '{settings.market_data_provider}'. "
            f"Valid options: {', '.join(SUPPORTED_PROVIDERS)}"
        )
        logger.error("pattern_scanner_bad_provider", detail=message)
        raise ValueError(message)

    try:
        yield
    finally:
        reset_dependencies()
        logger.info("pattern_scanner_stopped")


def create_app() -> FastAPI:
    """Build the application: routers, CORS, rate limiter and the 500 handler."""
    settings = get_settings()
    docs_enabled = settings.is_development

    app = FastAPI(
        title=API_TITLE,
        description=API_DESCRIPTION,
        version=API_VERSION,
        contact=API_CONTACT,
        openapi_tags=OPENAPI_TAGS,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
        swagger_ui_parameters=SWAGGER_UI_PARAMETERS if docs_enabled else None,
        debug=settings.debug,
        lifespan=lifespan,
    )

    # Every endpoint is a read
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    @app.exception_handler(Exception)
    async def unhandled_exception(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "unhandled_exception",
            exc_info=exc,
            path=request.url.path,
            method=request.method,
        )
        content = {"error": "Internal Server Error", "detail": "An unexpected error occurred"}
        if settings.is_development:
            content["detail"] = str(exc)
            content["type"] = type(exc).__name__
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)

    for module, tag in ((health, "health"), (candles, "candles"), (patterns, "patterns")):
        app.include_router(module.router, prefix=settings.api_v1_prefix, tags=[tag])

    if docs_enabled:
        app.openapi = lambda: custom_openapi_schema(app)

    return app


app = create_app()


@app.get("/", include_in_schema=False)
async def root() -> dict[str, str]:
    settings = get_settings()
    return {
        "message": API_TITLE,
        "version": API_VERSION,
        "docs": "/docs" if settings.is_development else "disabled",
        "health": f"{settings.api_v1_prefix}/health",
    }


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "pattern_scanner.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
        log_level=settings.log_level.lower(),
    )
