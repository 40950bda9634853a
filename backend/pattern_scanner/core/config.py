"""Configuration management using Pydantic v2 settings.
"""
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Application
    app_name: str = Field(default="Chart Pattern Scanner API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")
    environment: str = Field(
        default="development", description="Environment (development, production, test)"
    )

    # API
    api_v1_prefix: str = Field(default="/api/v1", description="API v1 prefix")
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173", "http://localhost:8000"],
        description="Allowed CORS origins",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")

    # Market Data Provider Configuration
    market_data_provider: str = Field(
        default="bitget",
        description="Market data provider: 'bitget', 'mock'"
    )

    # Bitget Configuration
    bitget_base_url: str = Field(
        default="https://api.bitget.com",
        description="Bitget REST API base URL"
    )
    bitget_timeout: float = Field(
        default=10.0,
        description="Timeout in seconds for Bitget HTTP requests"
    )
    bitget_max_retries: int = Field(
        default=3,
        description="Maximum retry attempts for Bitget API calls"
    )
    bitget_retry_delay: float = Field(
        default=1.0,
        description="Initial delay between retries in seconds (uses exponential backoff)"
    )

    # Candle Defaults
    default_granularity: str = Field(
        default="1h",
        description="Candle granularity used when a request does not specify one"
    )
    default_candles_limit: int = Field(
        default=300,
        description="Number of candles fetched per analysis when not specified"
    )
    max_candles_limit: int = Field(
        default=1000,
        description="Upper bound accepted for the candle limit"
    )
    candle_cache_ttl: int = Field(
        default=30,
        description="Seconds a fetched candle set stays cached"
    )
    candle_cache_size: int = Field(
        default=200,
        description="Maximum number of cached candle sets"
    )

    # Pattern Scanning
    scan_detector_timeout: float = Field(
        default=30.0,
        description="Timeout in seconds for each detector in an aggregate scan"
    )
    pattern_rate_limit: str = Field(
        default="30/minute",
        description="Per-client rate limit applied to each pattern endpoint (slowapi syntax)"
    )
    scan_secret: str | None = Field(
        default=None,
        description="Bearer token required by the aggregate scan endpoint (disabled when unset)"
    )
    max_candles_ago_for_fresh_breakout: int | None = Field(
        default=None,
        description="Discard breakouts at least this many candles old (disabled when unset)"
    )

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Application settings
    """
    return Settings()
