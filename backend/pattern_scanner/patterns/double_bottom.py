"""Double bottom matcher.

Every pair of swing lows (E1, E2) within the allowed distance is tried.
The troughs must be of comparable depth and the highest high strictly
between them (the neckline peak P) must rise far enough above E1.
"""

import logging

from pattern_scanner.patterns.config import DoubleBottomConfig
from pattern_scanner.patterns.geometry import highest_between, relative_difference
from pattern_scanner.patterns.types import (
    Boundary,
    BreakoutDirection,
    ExtremumPoint,
    FormationType,
    PotentialPattern,
    PriceSeries,
)

logger = logging.getLogger(__name__)


def evaluate_double_bottom(
    series: PriceSeries,
    first_index: int,
    second_index: int,
    config: DoubleBottomConfig,
) -> PotentialPattern | None:
    """Check one (E1, E2) trough pair."""
    distance = second_index - first_index
    if distance < config.min_trough_distance or distance > config.max_trough_distance:
        return None

    first_low = float(series.lows[first_index])
    second_low = float(series.lows[second_index])

    depth_difference = relative_difference(first_low, second_low, first_low)
    if depth_difference is None or depth_difference > config.trough_equality_threshold:
        return None

    peak_index = highest_between(series.highs, first_index, second_index)
    if peak_index is None:
        return None
    peak_high = float(series.highs[peak_index])

    peak_rise = (peak_high - first_low) / first_low
    if peak_rise < config.min_peak_rise:
        return None

    e1 = ExtremumPoint(first_index, first_low, int(series.timestamps[first_index]))
    peak = ExtremumPoint(peak_index, peak_high, int(series.timestamps[peak_index]))
    e2 = ExtremumPoint(second_index, second_low, int(series.timestamps[second_index]))
    lowest = e1 if e1.value <= e2.value else e2

    logger.debug(
        f"Double bottom candidate: E1({first_index}, {first_low:.4f}) "
        f"P({peak_index}, {peak_high:.4f}) E2({second_index}, {second_low:.4f}), "
        f"depth diff {depth_difference:.4f}, peak rise {peak_rise:.4f}"
    )
    return PotentialPattern(
        formation=FormationType.DOUBLE_BOTTOM,
        direction=BreakoutDirection.BULLISH,
        start_index=first_index,
        end_index=second_index,
        upper_boundary=Boundary.horizontal(peak_high),
        lower_boundary=Boundary.horizontal(lowest.value),
        height_anchor=lowest,
        support_points=(e1, e2),
        resistance_points=(peak,),
        anchors={"E1": e1, "P": peak, "E2": e2},
    )


def find_double_bottoms(
    series: PriceSeries,
    low_indices: list[int],
    high_indices: list[int],
    config: DoubleBottomConfig,
) -> list[PotentialPattern]:
    candidates = []
    for i, first_index in enumerate(low_indices[:-1]):
        for second_index in low_indices[i + 1:]:
            candidate = evaluate_double_bottom(series, first_index, second_index, config)
            if candidate is not None:
                candidates.append(candidate)
    return candidates
