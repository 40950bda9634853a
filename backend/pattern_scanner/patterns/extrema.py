"""Swing point detection for chart pattern analysis.

A bar is a swing low (high) when its value is less (greater) than or equal
to every neighbour within ``order`` bars on both sides. Flat runs are
collapsed so that a plateau does not show up as several swing points one
bar apart.
"""

from collections.abc import Sequence
from enum import Enum

import numpy as np
from numpy.typing import NDArray

from pattern_scanner.patterns.types import ExtremumPoint


class ExtremumKind(str, Enum):
    """Which side of the series to look for turning points on."""
    LOW = "low"
    HIGH = "high"


def find_extrema(
    series: list[float] | NDArray[np.float64],
    order: int,
    kind: ExtremumKind,
) -> list[int]:
    """Find local minima or maxima using a symmetric comparison window.

    Only indices in ``[order, len - order)`` are candidates, so the first
    and last ``order`` bars never qualify. Ties with neighbours are allowed.
    A qualifying index is skipped when it directly follows the previously
    kept index with exactly the same value (plateau collapse).

    Args:
        series: Price values (e.g. lows or highs)
        order: Number of neighbours compared on each side (must be >= 1)
        kind: ExtremumKind.LOW for minima, ExtremumKind.HIGH for maxima

    Returns:
        Strictly increasing list of qualifying indices. Empty when the
        series is shorter than ``2 * order + 1``.

    Raises:
        ValueError: If order < 1

    Example:
        >>> find_extrema([5, 4, 3, 4, 5], order=2, kind=ExtremumKind.LOW)
        [2]
    """
    if order < 1:
        raise ValueError("Order must be at least 1")

    values = np.asarray(series, dtype=float)
    length = len(values)
    indices: list[int] = []

    if length < 2 * order + 1:
        return indices

    for i in range(order, length - order):
        window = np.concatenate((values[i - order:i], values[i + 1:i + order + 1]))
        if kind == ExtremumKind.LOW:
            qualifies = bool(np.all(values[i] <= window))
        else:
            qualifies = bool(np.all(values[i] >= window))

        if not qualifies:
            continue

        last = indices[-1] if indices else -1
        if last == i - 1 and values[i] == values[last]:
            continue
        indices.append(i)

    return indices


def find_local_lows(series: list[float] | NDArray[np.float64], order: int) -> list[int]:
    """Indices of swing lows. See find_extrema."""
    return find_extrema(series, order, ExtremumKind.LOW)


def find_local_highs(series: list[float] | NDArray[np.float64], order: int) -> list[int]:
    """Indices of swing highs. See find_extrema."""
    return find_extrema(series, order, ExtremumKind.HIGH)


def to_extremum_points(
    series: NDArray[np.float64],
    indices: Sequence[int],
    timestamps: NDArray[np.int64],
) -> list[ExtremumPoint]:
    """Attach values and timestamps to a list of indices."""
    return [
        ExtremumPoint(index=int(i), value=float(series[i]), timestamp=int(timestamps[i]))
        for i in indices
    ]
