"""Core exception classes for the Chart Pattern Scanner application."""


class DataServiceError(Exception):
    """Base exception for market data operations."""

    pass


class APIError(DataServiceError):
    """Raised when the upstream exchange API fails or is unreachable."""

    pass


class DataValidationError(DataServiceError):
    """Raised when upstream candle data is malformed."""

    pass


class SymbolNotFoundError(DataServiceError):
    """Raised when a trading pair is not known to the exchange."""

    pass


class InvalidRequestError(DataServiceError):
    """Raised when a symbol, granularity or limit fails validation."""

    pass
