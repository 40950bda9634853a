"""Least-squares trendline fitting for support and resistance boundaries."""

from collections.abc import Sequence

import numpy as np
from numpy.typing import NDArray

from pattern_scanner.patterns.types import TrendLine

# Below this the normal-equation denominator is treated as zero; a fit through
# (nearly) identical x positions would produce a near-vertical line.
MIN_DENOMINATOR = 1e-9


def fit_trendline(
    xs: Sequence[float] | NDArray[np.float64],
    ys: Sequence[float] | NDArray[np.float64],
) -> TrendLine | None:
    """Fit an ordinary least-squares line through (x, y) points.

    Uses the closed form:
        slope = (n*Sxy - Sx*Sy) / (n*Sxx - Sx^2)
        intercept = (Sy - slope*Sx) / n

    Args:
        xs: Bar indices
        ys: Prices at those indices

    Returns:
        TrendLine, or None when fewer than two points are given, the
        lengths differ, or the x values are (numerically) all the same.

    Example:
        >>> fit_trendline([0, 1, 2], [3, 5, 7])
        TrendLine(slope=2.0, intercept=3.0)
    """
    n = len(xs)
    if n < 2 or n != len(ys):
        return None

    x = np.asarray(xs, dtype=float)
    y = np.asarray(ys, dtype=float)

    sum_x = float(np.sum(x))
    sum_y = float(np.sum(y))
    sum_xy = float(np.sum(x * y))
    sum_xx = float(np.sum(x * x))

    denominator = n * sum_xx - sum_x * sum_x
    if abs(denominator) < MIN_DENOMINATOR:
        return None

    slope = (n * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n
    return TrendLine(slope=slope, intercept=intercept)
