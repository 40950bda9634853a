"""Unit tests for breakout confirmation and measured-move projection."""
import pytest

from pattern_scanner.patterns.breakout import BreakoutState
from pattern_scanner.patterns.breakout import average_volume_before
from pattern_scanner.patterns.breakout import crosses_boundary
from pattern_scanner.patterns.breakout import evaluate_breakout
from pattern_scanner.patterns.breakout import find_breakout_index
from pattern_scanner.patterns.config import BreakoutConfig
from pattern_scanner.patterns.projection import pattern_height
from pattern_scanner.patterns.projection import project_target
from pattern_scanner.patterns.trendline import fit_trendline
from pattern_scanner.patterns.types import Boundary
from pattern_scanner.patterns.types import BreakoutDirection
from pattern_scanner.patterns.types import BreakoutEvent
from pattern_scanner.patterns.types import ExtremumPoint
from pattern_scanner.patterns.types import FormationType
from pattern_scanner.patterns.types import PotentialPattern
from pattern_scanner.patterns.types import PriceSeries
from tests.utils.bar_factory import build_bars


def _horizontal_pattern(end_index: int, level: float, anchor_value: float) -> PotentialPattern:
    return PotentialPattern(
        formation=FormationType.ASCENDING_TRIANGLE,
        direction=BreakoutDirection.BULLISH,
        start_index=0,
        end_index=end_index,
        upper_boundary=Boundary.horizontal(level),
        lower_boundary=None,
        height_anchor=ExtremumPoint(index=0, value=anchor_value, timestamp=0),
    )


class TestCrossesBoundary:
    """Tests for the buffered crossing rule."""

    def test_bullish_requires_buffer(self):
        assert not crosses_boundary(100.05, 100.0, BreakoutDirection.BULLISH, 0.001)
        assert crosses_boundary(100.2, 100.0, BreakoutDirection.BULLISH, 0.001)

    def test_bearish_requires_buffer(self):
        assert not crosses_boundary(99.95, 100.0, BreakoutDirection.BEARISH, 0.001)
        assert crosses_boundary(99.8, 100.0, BreakoutDirection.BEARISH, 0.001)


class TestFindBreakoutIndex:
    """Tests for scanning bars after the formation end."""

    def test_first_crossing_after_end(self):
        bars = build_bars([(0, 100), (10, 100), (12, 110), (20, 110)])
        series = PriceSeries.from_bars(bars)
        pattern = _horizontal_pattern(end_index=10, level=104.0, anchor_value=95.0)

        assert find_breakout_index(series, pattern, BreakoutConfig()) == 11

    def test_bars_at_or_before_end_are_ignored(self):
        bars = build_bars([(0, 110), (10, 110), (11, 100), (20, 100)])
        series = PriceSeries.from_bars(bars)
        pattern = _horizontal_pattern(end_index=10, level=104.0, anchor_value=95.0)

        assert find_breakout_index(series, pattern, BreakoutConfig()) is None

    def test_window_limited_to_candles_to_check(self):
        bars = build_bars([(0, 100), (20, 100), (22, 110), (30, 110)])
        series = PriceSeries.from_bars(bars)
        pattern = _horizontal_pattern(end_index=10, level=104.0, anchor_value=95.0)

        assert find_breakout_index(series, pattern, BreakoutConfig(candles_to_check=5)) is None
        assert find_breakout_index(series, pattern, BreakoutConfig(candles_to_check=15)) == 21

    def test_sloped_boundary_evaluated_per_bar(self):
        """A falling line is crossed even though the close never clears its start value."""
        bars = build_bars([(0, 100), (10, 100), (20, 100)])
        series = PriceSeries.from_bars(bars)
        line = fit_trendline([0, 10], [120.0, 105.0])
        pattern = PotentialPattern(
            formation=FormationType.FALLING_WEDGE,
            direction=BreakoutDirection.BULLISH,
            start_index=0,
            end_index=10,
            upper_boundary=Boundary.sloped(line),
            lower_boundary=None,
            height_anchor=ExtremumPoint(index=0, value=90.0, timestamp=0),
        )

        # Line value drops below 100 after bar 13
        assert find_breakout_index(series, pattern, BreakoutConfig()) == 14


class TestEvaluateBreakout:
    """Tests for the breakout state machine."""

    def test_confirmed_with_volume(self):
        bars = build_bars([(0, 100), (10, 100), (12, 110), (20, 110)], volume_overrides={11: 5000.0})
        series = PriceSeries.from_bars(bars)
        pattern = _horizontal_pattern(end_index=10, level=104.0, anchor_value=95.0)

        outcome = evaluate_breakout(series, pattern, BreakoutConfig())

        assert outcome.confirmed
        assert outcome.volume_confirmed
        assert outcome.event.index == 11
        assert outcome.event.boundary_value == pytest.approx(104.0)
        assert outcome.event.avg_volume_before == pytest.approx(1000.0)
        assert outcome.candles_ago == 9
        assert outcome.trail == (
            BreakoutState.AWAITING_BREAK,
            BreakoutState.BREAK_FOUND,
            BreakoutState.VOLUME_CONFIRMED,
            BreakoutState.CONFIRMED,
        )

    def test_low_volume_still_confirmed(self):
        bars = build_bars([(0, 100), (10, 100), (12, 110), (20, 110)])
        series = PriceSeries.from_bars(bars)
        pattern = _horizontal_pattern(end_index=10, level=104.0, anchor_value=95.0)

        outcome = evaluate_breakout(series, pattern, BreakoutConfig())

        assert outcome.confirmed
        assert not outcome.volume_confirmed
        assert BreakoutState.VOLUME_UNCONFIRMED in outcome.trail

    def test_no_break_is_discarded(self):
        bars = build_bars([(0, 100), (20, 100)])
        series = PriceSeries.from_bars(bars)
        pattern = _horizontal_pattern(end_index=10, level=104.0, anchor_value=95.0)

        outcome = evaluate_breakout(series, pattern, BreakoutConfig())

        assert not outcome.confirmed
        assert outcome.state == BreakoutState.DISCARDED
        assert outcome.event is None

    def test_stale_break_is_discarded(self):
        bars = build_bars([(0, 100), (10, 100), (12, 110), (20, 110)])
        series = PriceSeries.from_bars(bars)
        pattern = _horizontal_pattern(end_index=10, level=104.0, anchor_value=95.0)
        config = BreakoutConfig(max_candles_ago_for_fresh_breakout=9)

        outcome = evaluate_breakout(series, pattern, config)

        assert outcome.state == BreakoutState.DISCARDED
        assert BreakoutState.STALE in outcome.trail
        assert outcome.candles_ago == 9

    def test_fresh_break_is_kept(self):
        bars = build_bars([(0, 100), (10, 100), (12, 110), (20, 110)])
        series = PriceSeries.from_bars(bars)
        pattern = _horizontal_pattern(end_index=10, level=104.0, anchor_value=95.0)
        config = BreakoutConfig(max_candles_ago_for_fresh_breakout=10)

        outcome = evaluate_breakout(series, pattern, config)

        assert outcome.confirmed
        assert BreakoutState.FRESH in outcome.trail


class TestAverageVolume:
    """Tests for the trailing volume average."""

    def test_uses_bars_strictly_before_index(self):
        bars = build_bars([(0, 100), (5, 100)], volume_overrides={3: 4000.0, 4: 9999.0})
        series = PriceSeries.from_bars(bars)

        assert average_volume_before(series, 4, lookback=2) == pytest.approx(2500.0)

    def test_no_prior_bars(self):
        series = PriceSeries.from_bars(build_bars([(0, 100), (5, 100)]))

        assert average_volume_before(series, 0, lookback=10) == 0.0


class TestProjection:
    """Tests for measured-move targets."""

    def _event(self, boundary_value: float) -> BreakoutEvent:
        return BreakoutEvent(
            index=11,
            timestamp=0,
            close_price=boundary_value + 1,
            boundary_value=boundary_value,
            volume=1000.0,
            avg_volume_before=1000.0,
        )

    def test_bullish_target_adds_height(self):
        pattern = _horizontal_pattern(end_index=10, level=110.5, anchor_value=99.5)

        projection = project_target(pattern, self._event(110.5))

        assert pattern_height(pattern) == pytest.approx(11.0)
        assert projection.target_price == pytest.approx(121.5)

    def test_bearish_target_subtracts_height(self):
        pattern = PotentialPattern(
            formation=FormationType.DESCENDING_TRIANGLE,
            direction=BreakoutDirection.BEARISH,
            start_index=0,
            end_index=10,
            upper_boundary=Boundary.horizontal(120.0),
            lower_boundary=Boundary.horizontal(89.5),
            height_anchor=ExtremumPoint(index=2, value=110.5, timestamp=0),
        )

        projection = project_target(pattern, self._event(89.5))

        assert projection.pattern_height == pytest.approx(21.0)
        assert projection.target_price == pytest.approx(68.5)

    def test_degenerate_height_has_no_target(self):
        pattern = _horizontal_pattern(end_index=10, level=100.0, anchor_value=105.0)

        projection = project_target(pattern, self._event(100.0))

        assert projection.pattern_height == pytest.approx(-5.0)
        assert projection.target_price is None
