"""Symbol and request parameter validation utilities."""

MIN_SYMBOL_LENGTH = 2
MAX_SYMBOL_LENGTH = 20


def is_valid_symbol(symbol: str) -> bool:
    """
    Validate trading pair symbol format.

    Allows uppercase letters and digits only (e.g., BTCUSDT, 1INCHUSDT).
    Exchange suffixes such as '_SPBL' are not accepted.

    Args:
        symbol: The symbol to validate (should already be uppercase/stripped)

    Returns:
        True if symbol format is valid, False otherwise
    """
    if not MIN_SYMBOL_LENGTH <= len(symbol) <= MAX_SYMBOL_LENGTH:
        return False
    return symbol.isascii() and symbol.isalnum() and symbol == symbol.upper()


def normalize_symbol(symbol: str) -> str:
    """
    Normalize a symbol to uppercase and stripped.

    Also drops a '/' or '-' separator so 'btc/usdt' and 'BTC-USDT' both
    become 'BTCUSDT'.

    Args:
        symbol: The symbol to normalize

    Returns:
        Uppercase, stripped symbol
    """
    return symbol.upper().strip().replace("/", "").replace("-", "")


def is_valid_limit(limit: int, max_limit: int) -> bool:
    """Check that a candle limit lies in ``1..max_limit``."""
    return 1 <= limit <= max_limit
