"""Inverse head and shoulders matcher.

Three consecutive swing lows S1, H, S2 where the head H is the deepest.
The highest highs between the troughs (P1 between S1 and H, P2 between H
and S2) define a sloped neckline; the breakout has to clear that line.
"""

import logging

from pattern_scanner.patterns.config import InverseHeadShouldersConfig
from pattern_scanner.patterns.geometry import highest_between
from pattern_scanner.patterns.trendline import fit_trendline
from pattern_scanner.patterns.types import (
    Boundary,
    BreakoutDirection,
    ExtremumPoint,
    FormationType,
    PotentialPattern,
    PriceSeries,
)

logger = logging.getLogger(__name__)


def _is_symmetric(a: float, b: float, tolerance: float) -> bool:
    mean = (a + b) / 2
    if mean == 0:
        return False
    return abs(a - b) < tolerance * abs(mean)


def evaluate_inverse_head_shoulders(
    series: PriceSeries,
    left_index: int,
    head_index: int,
    right_index: int,
    config: InverseHeadShouldersConfig,
) -> PotentialPattern | None:
    """Check one (S1, H, S2) trough triple."""
    if head_index - left_index < config.order or right_index - head_index < config.order:
        return None

    left_peak_index = highest_between(series.highs, left_index, head_index)
    right_peak_index = highest_between(series.highs, head_index, right_index)
    if left_peak_index is None or right_peak_index is None:
        return None

    left_low = float(series.lows[left_index])
    head_low = float(series.lows[head_index])
    right_low = float(series.lows[right_index])
    if not (head_low < left_low and head_low < right_low):
        return None

    left_peak = float(series.highs[left_peak_index])
    right_peak = float(series.highs[right_peak_index])
    if not _is_symmetric(left_peak, right_peak, config.peak_symmetry_tolerance):
        return None
    if not _is_symmetric(left_low, right_low, config.shoulder_symmetry_tolerance):
        return None

    neckline = fit_trendline([left_peak_index, right_peak_index], [left_peak, right_peak])
    if neckline is None:
        return None

    def point(index: int, value: float) -> ExtremumPoint:
        return ExtremumPoint(index, value, int(series.timestamps[index]))

    s1 = point(left_index, left_low)
    p1 = point(left_peak_index, left_peak)
    head = point(head_index, head_low)
    p2 = point(right_peak_index, right_peak)
    s2 = point(right_index, right_low)

    logger.debug(
        f"IH&S candidate: S1({left_index}) P1({left_peak_index}) H({head_index}) "
        f"P2({right_peak_index}) S2({right_index}), neckline slope {neckline.slope:.6f}"
    )
    return PotentialPattern(
        formation=FormationType.INVERSE_HEAD_AND_SHOULDERS,
        direction=BreakoutDirection.BULLISH,
        start_index=left_index,
        end_index=right_index,
        upper_boundary=Boundary.sloped(neckline),
        lower_boundary=None,
        height_anchor=head,
        support_points=(s1, head, s2),
        resistance_points=(p1, p2),
        anchors={"S1": s1, "P1": p1, "H": head, "P2": p2, "S2": s2},
        dedup_slope=neckline.slope,
    )


def find_inverse_head_shoulders(
    series: PriceSeries,
    low_indices: list[int],
    high_indices: list[int],
    config: InverseHeadShouldersConfig,
) -> list[PotentialPattern]:
    candidates = []
    for left_index, head_index, right_index in zip(low_indices, low_indices[1:], low_indices[2:]):
        candidate = evaluate_inverse_head_shoulders(
            series, left_index, head_index, right_index, config
        )
        if candidate is not None:
            candidates.append(candidate)
    return candidates
