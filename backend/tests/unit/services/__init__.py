"""Unit tests for the candle and pattern services."""
