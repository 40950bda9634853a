"""Falling wedge matcher.

A fixed-width window slides backwards from the last bar. Inside each window
swing highs and lows are recomputed, a trendline is fitted through each set,
and the window qualifies when both lines fall, resistance falls faster, the
channel narrows, and enough extrema actually sit on each line.
"""

import logging

from pattern_scanner.patterns.config import FallingWedgeConfig
from pattern_scanner.patterns.extrema import find_local_highs, find_local_lows, to_extremum_points
from pattern_scanner.patterns.geometry import relative_difference
from pattern_scanner.patterns.trendline import fit_trendline
from pattern_scanner.patterns.types import (
    Boundary,
    BreakoutDirection,
    FormationType,
    PotentialPattern,
    PriceSeries,
    TrendLine,
)

logger = logging.getLogger(__name__)


def count_touches(values: list[float], indices: list[int], line: TrendLine, tolerance: float) -> int:
    """Count extrema lying within ``tolerance`` (relative) of the line."""
    touches = 0
    for index, value in zip(indices, values):
        line_value = line.value_at(index)
        diff = relative_difference(value, line_value, line_value)
        if diff is not None and diff <= tolerance:
            touches += 1
    return touches


def evaluate_falling_wedge_window(
    series: PriceSeries,
    start_index: int,
    end_index: int,
    config: FallingWedgeConfig,
) -> PotentialPattern | None:
    """Check whether bars ``[start_index, end_index]`` form a falling wedge."""
    window_lows = series.lows[start_index:end_index + 1]
    window_highs = series.highs[start_index:end_index + 1]
    low_indices = [start_index + i for i in find_local_lows(window_lows, config.order)]
    high_indices = [start_index + i for i in find_local_highs(window_highs, config.order)]

    if len(low_indices) < config.min_touches or len(high_indices) < config.min_touches:
        return None

    low_values = [float(series.lows[i]) for i in low_indices]
    high_values = [float(series.highs[i]) for i in high_indices]
    resistance_line = fit_trendline(high_indices, high_values)
    support_line = fit_trendline(low_indices, low_values)
    if resistance_line is None or support_line is None:
        return None

    if not (resistance_line.slope < config.max_slope and support_line.slope < config.max_slope):
        return None
    if abs(resistance_line.slope) <= abs(support_line.slope):
        return None

    upper = Boundary.sloped(resistance_line)
    lower = Boundary.sloped(support_line)
    start_gap = upper.value_at(start_index) - lower.value_at(start_index)
    end_gap = upper.value_at(end_index) - lower.value_at(end_index)
    if not (start_gap > 0 and end_gap > 0 and start_gap > end_gap):
        return None

    resistance_touches = count_touches(high_values, high_indices, resistance_line, config.touch_tolerance)
    support_touches = count_touches(low_values, low_indices, support_line, config.touch_tolerance)
    if resistance_touches < config.min_touches or support_touches < config.min_touches:
        return None

    support_points = to_extremum_points(series.lows, low_indices, series.timestamps)
    logger.debug(
        f"Falling wedge candidate [{start_index}, {end_index}]: "
        f"touches res={resistance_touches} sup={support_touches}, "
        f"slopes res={resistance_line.slope:.6f} sup={support_line.slope:.6f}"
    )
    return PotentialPattern(
        formation=FormationType.FALLING_WEDGE,
        direction=BreakoutDirection.BULLISH,
        start_index=start_index,
        end_index=end_index,
        upper_boundary=upper,
        lower_boundary=lower,
        height_anchor=support_points[0],
        support_points=tuple(support_points),
        resistance_points=tuple(
            to_extremum_points(series.highs, high_indices, series.timestamps)
        ),
        dedup_slope=resistance_line.slope,
    )


def find_falling_wedges(
    series: PriceSeries,
    low_indices: list[int],
    high_indices: list[int],
    config: FallingWedgeConfig,
) -> list[PotentialPattern]:
    """Slide the window from the most recent bar backwards.

    The series-wide extrema are accepted for signature compatibility with
    the other matchers; wedges recompute extrema per window.
    """
    window = config.effective_window
    candidates = []
    for end_index in range(len(series) - 1, window - 2, -1):
        start_index = end_index - window + 1
        candidate = evaluate_falling_wedge_window(series, start_index, end_index, config)
        if candidate is not None:
            candidates.append(candidate)
    return candidates
