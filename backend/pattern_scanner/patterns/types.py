"""Data model for chart pattern detection.

Bars come in, confirmed patterns go out. Every record here is built once
and never mutated afterwards; the detection core creates fresh instances on
each scan and keeps nothing between calls.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import numpy as np
from numpy.typing import NDArray


class FormationType(str, Enum):
    """Chart formations the scanner can detect."""
    ASCENDING_TRIANGLE = "ascending_triangle"
    DESCENDING_TRIANGLE = "descending_triangle"
    FALLING_WEDGE = "falling_wedge"
    DOUBLE_BOTTOM = "double_bottom"
    INVERSE_HEAD_AND_SHOULDERS = "inverse_head_and_shoulders"

    @property
    def display_name(self) -> str:
        """Human-readable formation name."""
        return FORMATION_DISPLAY_NAMES[self]


FORMATION_DISPLAY_NAMES: dict[FormationType, str] = {
    FormationType.ASCENDING_TRIANGLE: "Ascending Triangle",
    FormationType.DESCENDING_TRIANGLE: "Descending Triangle",
    FormationType.FALLING_WEDGE: "Falling Wedge",
    FormationType.DOUBLE_BOTTOM: "Double Bottom",
    FormationType.INVERSE_HEAD_AND_SHOULDERS: "Inverse Head & Shoulders",
}


class BreakoutDirection(str, Enum):
    """Side of the formation the close has to cross."""
    BULLISH = "bullish"  # close above the upper boundary
    BEARISH = "bearish"  # close below the lower boundary


class BoundaryKind(str, Enum):
    """How a support/resistance boundary is represented."""
    HORIZONTAL = "horizontal"
    SLOPED = "sloped"


@dataclass(frozen=True)
class Bar:
    """Single OHLCV observation. Timestamp is epoch milliseconds."""
    timestamp: int
    open: float
    high: float
    low: float
    close: float
    volume: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
            "volume": self.volume,
        }


@dataclass(frozen=True)
class PriceSeries:
    """Column view of a bar sequence, built once per scan."""
    timestamps: NDArray[np.int64]
    opens: NDArray[np.float64]
    highs: NDArray[np.float64]
    lows: NDArray[np.float64]
    closes: NDArray[np.float64]
    volumes: NDArray[np.float64]

    @classmethod
    def from_bars(cls, bars: Sequence[Bar]) -> "PriceSeries":
        return cls(
            timestamps=np.array([b.timestamp for b in bars], dtype=np.int64),
            opens=np.array([b.open for b in bars], dtype=float),
            highs=np.array([b.high for b in bars], dtype=float),
            lows=np.array([b.low for b in bars], dtype=float),
            closes=np.array([b.close for b in bars], dtype=float),
            volumes=np.array([b.volume for b in bars], dtype=float),
        )

    def __len__(self) -> int:
        return len(self.closes)

    @property
    def last_index(self) -> int:
        return len(self.closes) - 1


@dataclass(frozen=True)
class ExtremumPoint:
    """Local minimum or maximum of a price column."""
    index: int
    value: float
    timestamp: int

    def to_dict(self) -> dict[str, Any]:
        return {"index": self.index, "value": self.value, "timestamp": self.timestamp}


@dataclass(frozen=True)
class TrendLine:
    """Straight line price = slope * index + intercept."""
    slope: float
    intercept: float

    def value_at(self, index: float) -> float:
        return self.slope * index + self.intercept

    def to_dict(self) -> dict[str, float]:
        return {"slope": self.slope, "intercept": self.intercept}


@dataclass(frozen=True)
class Boundary:
    """Support or resistance, either a constant level or a fitted line.

    Horizontal boundaries carry ``level`` (the average of the grouped
    extrema); sloped boundaries carry ``line``.
    """
    kind: BoundaryKind
    level: float | None = None
    line: TrendLine | None = None

    @classmethod
    def horizontal(cls, level: float) -> "Boundary":
        return cls(kind=BoundaryKind.HORIZONTAL, level=level)

    @classmethod
    def sloped(cls, line: TrendLine) -> "Boundary":
        return cls(kind=BoundaryKind.SLOPED, line=line)

    @property
    def slope(self) -> float:
        if self.kind == BoundaryKind.SLOPED:
            return self.line.slope
        return 0.0

    def value_at(self, index: float) -> float:
        if self.kind == BoundaryKind.SLOPED:
            return self.line.value_at(index)
        return self.level

    def to_dict(self) -> dict[str, Any]:
        if self.kind == BoundaryKind.SLOPED:
            return {"kind": self.kind.value, **self.line.to_dict()}
        return {"kind": self.kind.value, "level": self.level}


@dataclass(frozen=True)
class PotentialPattern:
    """A formation whose structure is complete but not yet confirmed.

    Attributes:
        formation: Formation type that produced this candidate
        direction: Which boundary a confirming close has to cross
        start_index: First bar index of the formation
        end_index: Bar index where the defining structure completes;
            breakout scanning starts on the next bar
        upper_boundary: Resistance / neckline
        lower_boundary: Support, when the formation defines one
        support_points: Extrema making up the lower boundary
        resistance_points: Extrema making up the upper boundary
        anchors: Named structural points (E1/P/E2, S1/P1/H/P2/S2)
        height_anchor: Point the formation height is measured from
        dedup_slope: Slope of the sloped boundary used to tell overlapping
            candidates apart; None for formations with only flat boundaries
    """
    formation: FormationType
    direction: BreakoutDirection
    start_index: int
    end_index: int
    upper_boundary: Boundary
    lower_boundary: Boundary | None
    height_anchor: ExtremumPoint
    support_points: tuple[ExtremumPoint, ...] = ()
    resistance_points: tuple[ExtremumPoint, ...] = ()
    anchors: dict[str, ExtremumPoint] = field(default_factory=dict)
    dedup_slope: float | None = None

    @property
    def breakout_boundary(self) -> Boundary:
        if self.direction == BreakoutDirection.BULLISH:
            return self.upper_boundary
        return self.lower_boundary

    def gap_at(self, index: float) -> float | None:
        """Vertical distance between the boundaries at ``index``."""
        if self.lower_boundary is None:
            return None
        return self.upper_boundary.value_at(index) - self.lower_boundary.value_at(index)

    def to_dict(self) -> dict[str, Any]:
        return {
            "formation": self.formation.value,
            "direction": self.direction.value,
            "pattern_start_index": self.start_index,
            "pattern_end_index": self.end_index,
            "upper_boundary": self.upper_boundary.to_dict(),
            "lower_boundary": self.lower_boundary.to_dict() if self.lower_boundary else None,
            "support_points": [p.to_dict() for p in self.support_points],
            "resistance_points": [p.to_dict() for p in self.resistance_points],
            "anchors": {name: p.to_dict() for name, p in self.anchors.items()},
        }


@dataclass(frozen=True)
class BreakoutEvent:
    """First bar whose close decisively crossed the breakout boundary."""
    index: int
    timestamp: int
    close_price: float
    boundary_value: float
    volume: float
    avg_volume_before: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "timestamp": self.timestamp,
            "close_price": self.close_price,
            "boundary_value": self.boundary_value,
            "volume": self.volume,
            "avg_volume_before": self.avg_volume_before,
        }


@dataclass(frozen=True)
class Projection:
    """Measured-move projection. target_price is None for degenerate heights."""
    pattern_height: float
    target_price: float | None

    def to_dict(self) -> dict[str, Any]:
        return {"pattern_height": self.pattern_height, "target_price": self.target_price}


@dataclass(frozen=True)
class ConfirmedPattern:
    """Potential pattern plus its breakout confirmation and projection."""
    pattern: PotentialPattern
    breakout: BreakoutEvent
    volume_confirmed: bool
    candles_ago: int
    projection: Projection

    @property
    def formation(self) -> FormationType:
        return self.pattern.formation

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.pattern.to_dict(),
            "breakout_confirmation": {
                **self.breakout.to_dict(),
                "volume_confirmed": self.volume_confirmed,
                "candles_ago": self.candles_ago,
            },
            "projection": self.projection.to_dict(),
            "status": f"{self.formation.display_name} confirmed with "
            f"{'breakout' if self.pattern.direction == BreakoutDirection.BULLISH else 'breakdown'}",
        }


@dataclass
class FormationScanResult:
    """Outcome of running one formation detector over a bar sequence."""
    formation: FormationType
    confirmed: list[ConfirmedPattern]
    potential_count: int
    total_bars: int
    local_lows_found: int = 0
    local_highs_found: int = 0
    insufficient_data: bool = False
    parameters: dict[str, Any] = field(default_factory=dict)

    @property
    def rejected_count(self) -> int:
        """Potential patterns that never reached confirmation."""
        return self.potential_count - len(self.confirmed)

    def to_dict(self) -> dict[str, Any]:
        return {
            "formation": self.formation.value,
            "patterns": [c.to_dict() for c in self.confirmed],
            "potential_formations_count": self.potential_count,
            "rejected_count": self.rejected_count,
            "total_candles_analyzed": self.total_bars,
            "local_lows_found": self.local_lows_found,
            "local_highs_found": self.local_highs_found,
            "insufficient_data": self.insufficient_data,
            "parameters_used": self.parameters,
        }
