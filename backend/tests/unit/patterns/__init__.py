"""Unit tests for the pattern detection core."""
