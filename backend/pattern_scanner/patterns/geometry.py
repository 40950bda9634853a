"""Small geometric predicates shared by the formation matchers."""

from collections.abc import Sequence

import numpy as np
from numpy.typing import NDArray


def is_monotonic(values: Sequence[float], rising: bool, tolerance: float = 0.0) -> bool:
    """Check that each value moves strictly past the previous one.

    ``tolerance`` is relative to the previous value and loosens the check:
    with rising=True each value must exceed ``prev - prev * tolerance``.
    """
    for prev, current in zip(values, values[1:]):
        slack = abs(prev) * tolerance
        if rising and not current > prev - slack:
            return False
        if not rising and not current < prev + slack:
            return False
    return True


def relative_difference(a: float, b: float, reference: float) -> float | None:
    """|a - b| / reference, or None when the reference is zero."""
    if reference == 0:
        return None
    return abs(a - b) / abs(reference)


def highest_between(series: NDArray[np.float64], start: int, end: int) -> int | None:
    """Index of the maximum strictly between ``start`` and ``end``.

    Ties resolve to the earliest index. None when the interval is empty.
    """
    if end - start < 2:
        return None
    return start + 1 + int(np.argmax(series[start + 1:end]))
