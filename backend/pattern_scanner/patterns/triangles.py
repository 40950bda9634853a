"""Ascending and descending triangle matchers.

Both triangles pair one horizontal boundary (extrema grouped within a
relative tolerance and averaged) with one sloped boundary fitted through the
opposite extrema that fall between the first and last horizontal touch:

    Ascending:  flat resistance, rising support -> bullish breakout
    Descending: flat support, falling resistance -> bearish breakdown
"""

import logging

from pattern_scanner.patterns.config import AscendingTriangleConfig, DescendingTriangleConfig
from pattern_scanner.patterns.extrema import to_extremum_points
from pattern_scanner.patterns.geometry import is_monotonic, relative_difference
from pattern_scanner.patterns.trendline import fit_trendline
from pattern_scanner.patterns.types import (
    Boundary,
    BreakoutDirection,
    FormationType,
    PotentialPattern,
    PriceSeries,
)

logger = logging.getLogger(__name__)


def group_level(
    values: list[float],
    indices: list[int],
    seed_position: int,
    tolerance: float,
) -> list[int]:
    """Collect the seed extremum and every later one within tolerance of it.

    Returns the grouped bar indices (seed first). A zero seed value yields
    just the seed, since no relative distance can be measured from it.
    """
    seed_value = values[seed_position]
    grouped = [indices[seed_position]]
    for position in range(seed_position + 1, len(indices)):
        diff = relative_difference(values[position], seed_value, seed_value)
        if diff is not None and diff <= tolerance:
            grouped.append(indices[position])
    return grouped


def evaluate_ascending_triangle(
    series: PriceSeries,
    low_indices: list[int],
    high_indices: list[int],
    seed_position: int,
    config: AscendingTriangleConfig,
) -> PotentialPattern | None:
    """Try to build an ascending triangle seeded at one swing high."""
    high_values = [float(series.highs[i]) for i in high_indices]
    resistance_indices = group_level(
        high_values, high_indices, seed_position, config.resistance_tolerance
    )
    if len(resistance_indices) < config.min_highs_for_resistance:
        return None

    resistance_level = float(series.highs[resistance_indices].mean())
    first_resistance, last_resistance = resistance_indices[0], resistance_indices[-1]

    support_indices = [
        i for i in low_indices
        if first_resistance <= i <= last_resistance and series.lows[i] < resistance_level
    ]
    if len(support_indices) < config.min_lows_for_support:
        return None

    support_values = [float(series.lows[i]) for i in support_indices]
    if not is_monotonic(support_values, rising=True, tolerance=config.monotonic_tolerance):
        return None

    support_line = fit_trendline(support_indices, support_values)
    if support_line is None or support_line.slope <= config.min_support_slope:
        return None

    if support_line.value_at(first_resistance) >= resistance_level:
        return None

    start_index = min(first_resistance, support_indices[0])
    end_index = max(last_resistance, support_indices[-1])
    upper = Boundary.horizontal(resistance_level)
    lower = Boundary.sloped(support_line)

    start_gap = upper.value_at(start_index) - lower.value_at(start_index)
    end_gap = upper.value_at(end_index) - lower.value_at(end_index)
    if not start_gap > end_gap:
        return None

    support_points = to_extremum_points(series.lows, support_indices, series.timestamps)
    logger.debug(
        f"Ascending triangle candidate: resistance ~{resistance_level:.4f} "
        f"{resistance_indices}, support slope {support_line.slope:.6f} {support_indices}"
    )
    return PotentialPattern(
        formation=FormationType.ASCENDING_TRIANGLE,
        direction=BreakoutDirection.BULLISH,
        start_index=start_index,
        end_index=end_index,
        upper_boundary=upper,
        lower_boundary=lower,
        height_anchor=support_points[0],
        support_points=tuple(support_points),
        resistance_points=tuple(
            to_extremum_points(series.highs, resistance_indices, series.timestamps)
        ),
        dedup_slope=support_line.slope,
    )


def find_ascending_triangles(
    series: PriceSeries,
    low_indices: list[int],
    high_indices: list[int],
    config: AscendingTriangleConfig,
) -> list[PotentialPattern]:
    """Scan every swing high as a resistance seed."""
    candidates = []
    for seed_position in range(len(high_indices) - (config.min_highs_for_resistance - 1)):
        candidate = evaluate_ascending_triangle(
            series, low_indices, high_indices, seed_position, config
        )
        if candidate is not None:
            candidates.append(candidate)
    return candidates


def evaluate_descending_triangle(
    series: PriceSeries,
    low_indices: list[int],
    high_indices: list[int],
    seed_position: int,
    config: DescendingTriangleConfig,
) -> PotentialPattern | None:
    """Try to build a descending triangle seeded at one swing low."""
    low_values = [float(series.lows[i]) for i in low_indices]
    support_indices = group_level(
        low_values, low_indices, seed_position, config.support_tolerance
    )
    if len(support_indices) < config.min_lows_for_support:
        return None

    support_level = float(series.lows[support_indices].mean())
    first_support, last_support = support_indices[0], support_indices[-1]

    resistance_indices = [
        i for i in high_indices
        if first_support <= i <= last_support and series.highs[i] > support_level
    ]
    if len(resistance_indices) < config.min_highs_for_resistance:
        return None

    resistance_values = [float(series.highs[i]) for i in resistance_indices]
    if not is_monotonic(resistance_values, rising=False, tolerance=config.monotonic_tolerance):
        return None

    resistance_line = fit_trendline(resistance_indices, resistance_values)
    if resistance_line is None or resistance_line.slope >= config.max_resistance_slope:
        return None

    if resistance_line.value_at(first_support) <= support_level:
        return None

    start_index = first_support
    end_index = max(last_support, resistance_indices[-1])
    upper = Boundary.sloped(resistance_line)
    lower = Boundary.horizontal(support_level)

    start_gap = upper.value_at(start_index) - lower.value_at(start_index)
    end_gap = upper.value_at(end_index) - lower.value_at(end_index)
    if not start_gap > end_gap:
        return None

    resistance_points = to_extremum_points(series.highs, resistance_indices, series.timestamps)
    logger.debug(
        f"Descending triangle candidate: support ~{support_level:.4f} "
        f"{support_indices}, resistance slope {resistance_line.slope:.6f} {resistance_indices}"
    )
    return PotentialPattern(
        formation=FormationType.DESCENDING_TRIANGLE,
        direction=BreakoutDirection.BEARISH,
        start_index=start_index,
        end_index=end_index,
        upper_boundary=upper,
        lower_boundary=lower,
        height_anchor=resistance_points[0],
        support_points=tuple(
            to_extremum_points(series.lows, support_indices, series.timestamps)
        ),
        resistance_points=tuple(resistance_points),
        dedup_slope=resistance_line.slope,
    )


def find_descending_triangles(
    series: PriceSeries,
    low_indices: list[int],
    high_indices: list[int],
    config: DescendingTriangleConfig,
) -> list[PotentialPattern]:
    """Scan every swing low as a support seed."""
    candidates = []
    for seed_position in range(len(low_indices) - (config.min_lows_for_support - 1)):
        candidate = evaluate_descending_triangle(
            series, low_indices, high_indices, seed_position, config
        )
        if candidate is not None:
            candidates.append(candidate)
    return candidates
