"""Unit tests for swing point detection."""
import numpy as np
import pytest
from hypothesis import given
from hypothesis import settings
from hypothesis import strategies as st

from pattern_scanner.patterns.extrema import ExtremumKind
from pattern_scanner.patterns.extrema import find_extrema
from pattern_scanner.patterns.extrema import find_local_highs
from pattern_scanner.patterns.extrema import find_local_lows
from pattern_scanner.patterns.extrema import to_extremum_points


class TestFindExtrema:
    """Tests for find_extrema and its low/high wrappers."""

    def test_single_valley(self):
        assert find_local_lows([5, 4, 3, 4, 5], order=2) == [2]

    def test_single_peak(self):
        assert find_local_highs([1, 3, 1], order=1) == [1]

    def test_plateau_collapses_to_first_bar(self):
        """Two equal adjacent lows are reported once."""
        assert find_local_lows([3, 2, 1, 1, 2, 3], order=1) == [2]

    def test_series_shorter_than_window_returns_empty(self):
        assert find_local_lows([1, 2, 3, 4], order=2) == []
        assert find_local_highs([], order=1) == []

    def test_edges_never_qualify(self):
        """The first and last ``order`` bars are not candidates."""
        values = [0, 1, 2, 3, 4, 5, 6]
        assert find_local_lows(values, order=2) == []
        assert find_local_highs(values, order=2) == []

    def test_order_below_one_raises(self):
        with pytest.raises(ValueError, match="Order must be at least 1"):
            find_extrema([1, 2, 3], order=0, kind=ExtremumKind.LOW)

    def test_accepts_numpy_arrays(self):
        values = np.array([10.0, 8.0, 6.0, 8.0, 10.0, 8.0, 6.0, 8.0, 10.0])
        assert find_local_lows(values, order=2) == [2, 6]
        assert find_local_highs(values, order=2) == [4]

    @settings(max_examples=200, deadline=None)
    @given(
        values=st.lists(st.integers(min_value=0, max_value=20), min_size=0, max_size=60),
        order=st.integers(min_value=1, max_value=5),
    )
    def test_lows_satisfy_window_condition(self, values: list[int], order: int):
        """Every reported low is <= all neighbours within ``order`` bars."""
        lows = find_local_lows(values, order)

        assert lows == sorted(set(lows))
        for i in lows:
            assert order <= i < len(values) - order
            window = values[i - order:i] + values[i + 1:i + order + 1]
            assert all(values[i] <= v for v in window)

    @settings(max_examples=200, deadline=None)
    @given(
        values=st.lists(st.integers(min_value=0, max_value=20), min_size=0, max_size=60),
        order=st.integers(min_value=1, max_value=5),
    )
    def test_highs_never_repeat_adjacent_equal_bars(self, values: list[int], order: int):
        highs = find_local_highs(values, order)

        for prev, current in zip(highs, highs[1:]):
            assert not (current == prev + 1 and values[current] == values[prev])
            window = values[current - order:current] + values[current + 1:current + order + 1]
            assert all(values[current] >= v for v in window)


class TestToExtremumPoints:
    """Tests for attaching values and timestamps to indices."""

    def test_builds_points(self):
        series = np.array([1.0, 2.0, 3.0])
        timestamps = np.array([100, 200, 300], dtype=np.int64)

        points = to_extremum_points(series, [0, 2], timestamps)

        assert [(p.index, p.value, p.timestamp) for p in points] == [(0, 1.0, 100), (2, 3.0, 300)]
