"""Unit tests for the Chart Pattern Scanner.

This package contains unit tests for the detection core (extrema, trendlines,
formation matchers, breakout engine, projection), the market data providers,
and the candle and pattern services.
"""
