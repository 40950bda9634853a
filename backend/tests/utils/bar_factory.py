"""Synthetic candle series for pattern detection tests.

Series are described by (index, mid price) anchors. Mid prices are linearly
interpolated between anchors; every bar has open == close == mid and a
symmetric high/low spread, so swing points land exactly on the anchors.
"""
from collections.abc import Mapping, Sequence

from pattern_scanner.patterns.types import Bar

BASE_TIMESTAMP_MS = 1_700_000_000_000
HOUR_MS = 3_600_000


def interpolate(anchors: Sequence[tuple[int, float]]) -> list[float]:
    """Piecewise-linear mid prices from index 0 to the last anchor."""
    mids: list[float] = []
    for (start, start_value), (end, end_value) in zip(anchors, anchors[1:]):
        step = (end_value - start_value) / (end - start)
        for offset in range(end - start):
            mids.append(start_value + step * offset)
    mids.append(float(anchors[-1][1]))
    return mids


def build_bars(
    anchors: Sequence[tuple[int, float]],
    spread: float = 0.5,
    volume: float = 1000.0,
    volume_overrides: Mapping[int, float] | None = None,
) -> list[Bar]:
    """Build hourly bars following the anchors."""
    overrides = volume_overrides or {}
    return [
        Bar(
            timestamp=BASE_TIMESTAMP_MS + i * HOUR_MS,
            open=mid,
            high=mid + spread,
            low=mid - spread,
            close=mid,
            volume=overrides.get(i, volume),
        )
        for i, mid in enumerate(interpolate(anchors))
    ]


def flat_bars(count: int, price: float = 100.0) -> list[Bar]:
    """Bars with identical OHLC, which no formation can match."""
    return [
        Bar(
            timestamp=BASE_TIMESTAMP_MS + i * HOUR_MS,
            open=price,
            high=price,
            low=price,
            close=price,
            volume=1000.0,
        )
        for i in range(count)
    ]


# Resistance at 110.5 touched at 5/15/25, support lows 99.5/102.5/105.5,
# breakout close 112 at bar 33 on triple volume.
ASCENDING_TRIANGLE_ANCHORS = [
    (0, 104), (5, 110), (10, 100), (15, 110), (20, 103),
    (25, 110), (30, 106), (33, 112), (38, 116),
]

# Support at 89.5 touched at 5/15/25, resistance highs 110.5/107.5/104.5,
# breakdown close 88 at bar 33.
DESCENDING_TRIANGLE_ANCHORS = [
    (0, 96), (5, 90), (10, 110), (15, 90), (20, 107),
    (25, 90), (30, 104), (33, 88), (38, 84),
]

# Highs fall 0.5 per bar, lows 0.2 per bar; breakout at bar 42.
FALLING_WEDGE_ANCHORS = [
    (0, 110), (5, 117.5), (10, 98), (15, 112.5), (20, 96), (25, 107.5),
    (30, 94), (35, 102.5), (40, 92), (43, 104), (48, 110),
]

# Shoulders at 10/30 (99.5), head at 20 (91.5), neckline peaks 15/25.
INVERSE_HEAD_SHOULDERS_ANCHORS = [
    (0, 108), (5, 112), (10, 100), (15, 110), (20, 92),
    (25, 108), (30, 100), (34, 114), (55, 130),
]

# Troughs at 5/25 (low 100), neckline peak at 15 (high 115), breakout bar 27.
DOUBLE_BOTTOM_ANCHORS = [
    (0, 108), (5, 101), (15, 114), (25, 101), (27, 117), (39, 125),
]


def ascending_triangle_bars() -> list[Bar]:
    return build_bars(ASCENDING_TRIANGLE_ANCHORS, volume_overrides={33: 3000.0})


def descending_triangle_bars() -> list[Bar]:
    return build_bars(DESCENDING_TRIANGLE_ANCHORS, volume_overrides={33: 3000.0})


def falling_wedge_bars() -> list[Bar]:
    return build_bars(FALLING_WEDGE_ANCHORS)


def inverse_head_shoulders_bars() -> list[Bar]:
    return build_bars(INVERSE_HEAD_SHOULDERS_ANCHORS)


def double_bottom_bars() -> list[Bar]:
    return build_bars(DOUBLE_BOTTOM_ANCHORS, spread=1.0, volume=100.0, volume_overrides={27: 300.0})
