"""Unit tests for market data providers.

This package contains unit tests for all provider implementations (Bitget,
Mock) that supply OHLCV candles to the pattern services.
"""
