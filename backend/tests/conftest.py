"""Shared pytest fixtures for testing infrastructure.

CRITICAL: Environment variables MUST be set before ANY imports.
"""
import os

# ===============================================================================
# CRITICAL: Set test environment variables FIRST, before ANY other imports!
# This ensures Settings picks up the mock provider and disables rate limiting.
# ===============================================================================
os.environ["ENVIRONMENT"] = "test"
os.environ["MARKET_DATA_PROVIDER"] = "mock"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ.pop("SCAN_SECRET", None)
os.environ.pop("MAX_CANDLES_AGO_FOR_FRESH_BREAKOUT", None)

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport
from httpx import AsyncClient

from pattern_scanner.core.config import Settings
from pattern_scanner.core.config import get_settings
from pattern_scanner.core.deps import get_market_data_provider
from pattern_scanner.core.deps import reset_dependencies
from pattern_scanner.providers.mock import MockMarketDataProvider
from pattern_scanner.utils.structured_logging import configure_structured_logging
from tests.utils.bar_factory import double_bottom_bars

PATTERN_SYMBOL = "PATTERNUSDT"
UNKNOWN_SYMBOL = "NOPEUSDT"

get_settings.cache_clear()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Create test settings.

    Returns:
        Settings: Test configuration
    """
    return Settings(
        environment="test",
        market_data_provider="mock",
        log_level="WARNING",
        debug=True,
    )


@pytest.fixture(scope="session", autouse=True)
def configure_logging(test_settings: Settings):
    """Configure structured logging for tests.

    Args:
        test_settings: Test configuration
    """
    configure_structured_logging(log_level=test_settings.log_level, json_format=False)


@pytest.fixture
def override_get_settings(test_settings: Settings) -> Settings:
    """Settings returned wherever get_settings is injected.

    Tests that need a different configuration (e.g. a scan secret) override
    this fixture.
    """
    return test_settings


@pytest.fixture
def mock_provider() -> MockMarketDataProvider:
    """Mock provider with one symbol pinned to a double bottom series."""
    return MockMarketDataProvider(
        preset_bars={PATTERN_SYMBOL: double_bottom_bars()},
        unknown_symbols={UNKNOWN_SYMBOL},
    )


@pytest.fixture
def app(override_get_settings: Settings, mock_provider: MockMarketDataProvider):
    """Create FastAPI test application with dependency overrides.

    Args:
        override_get_settings: Test settings override
        mock_provider: Market data provider override

    Returns:
        FastAPI: Test application instance
    """
    from pattern_scanner.main import app as main_app

    reset_dependencies()
    main_app.dependency_overrides[get_settings] = lambda: override_get_settings
    main_app.dependency_overrides[get_market_data_provider] = lambda: mock_provider

    yield main_app

    main_app.dependency_overrides.clear()
    reset_dependencies()


@pytest.fixture
def client(app) -> TestClient:
    """Create synchronous test client.

    Args:
        app: Test application instance

    Returns:
        TestClient: Synchronous test client
    """
    return TestClient(app)


@pytest_asyncio.fixture
async def async_client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client.

    Args:
        app: Test application instance

    Yields:
        AsyncClient: Async test client
    """
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        yield client


def pytest_configure(config):
    """Configure pytest with custom markers.

    Args:
        config: Pytest configuration
    """
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")
    config.addinivalue_line("markers", "external: mark test as making external calls")
