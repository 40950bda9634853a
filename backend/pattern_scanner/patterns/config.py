"""Per-formation detection parameters.

Each formation gets its own explicit config record; callers pass one in
(or take the defaults below). Nothing here is read from global state.
"""

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(frozen=True)
class BreakoutConfig:
    """Breakout/breakdown confirmation parameters shared by all formations.

    Attributes:
        candles_to_check: Bars after the formation end scanned for a break
        buffer_percent: Fraction of the boundary value the close must clear
            (0.001 = 0.1%)
        volume_lookback: Bars before the break averaged for volume confirmation
        volume_multiplier: Break volume must exceed average * multiplier
        max_candles_ago_for_fresh_breakout: When set, breaks that happened
            this many bars (or more) before the last bar are discarded
    """
    candles_to_check: int = 15
    buffer_percent: float = 0.001
    volume_lookback: int = 30
    volume_multiplier: float = 1.5
    max_candles_ago_for_fresh_breakout: int | None = None


@dataclass(frozen=True)
class AscendingTriangleConfig:
    """Flat resistance over rising support."""
    order: int = 5
    resistance_tolerance: float = 0.01
    min_highs_for_resistance: int = 2
    min_lows_for_support: int = 2
    min_support_slope: float = 0.00001
    monotonic_tolerance: float = 0.0
    min_pattern_duration: int = 20
    breakout: BreakoutConfig = field(default_factory=lambda: BreakoutConfig(volume_multiplier=1.5))

    @property
    def min_bars(self) -> int:
        return max(self.min_pattern_duration, 2 * self.order + 1)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DescendingTriangleConfig:
    """Flat support under falling resistance."""
    order: int = 5
    support_tolerance: float = 0.01
    min_lows_for_support: int = 2
    min_highs_for_resistance: int = 2
    max_resistance_slope: float = -0.00001
    monotonic_tolerance: float = 0.0
    min_pattern_duration: int = 20
    breakout: BreakoutConfig = field(default_factory=lambda: BreakoutConfig(volume_multiplier=1.3))

    @property
    def min_bars(self) -> int:
        return max(self.min_pattern_duration, 2 * self.order + 1)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class FallingWedgeConfig:
    """Two falling, converging trendlines fitted inside a sliding window."""
    order: int = 5
    window_size: int = 60
    min_touches: int = 2
    max_slope: float = -0.00001
    touch_tolerance: float = 0.005
    min_pattern_duration: int = 30
    max_pattern_duration: int = 150
    breakout: BreakoutConfig = field(default_factory=lambda: BreakoutConfig(volume_multiplier=1.5))

    @property
    def effective_window(self) -> int:
        """Window width clamped to the allowed pattern duration."""
        return min(max(self.min_pattern_duration, self.window_size), self.max_pattern_duration)

    @property
    def min_bars(self) -> int:
        return max(self.effective_window, 2 * self.order + 1)

    def to_dict(self) -> dict[str, Any]:
        return {**asdict(self), "effective_window": self.effective_window}


@dataclass(frozen=True)
class DoubleBottomConfig:
    """Two comparable troughs with a neckline peak between them."""
    order: int = 5
    trough_equality_threshold: float = 0.03
    min_peak_rise: float = 0.05
    min_trough_distance: int = 10
    max_trough_distance: int = 100
    breakout: BreakoutConfig = field(default_factory=lambda: BreakoutConfig(volume_multiplier=1.3))

    @property
    def min_bars(self) -> int:
        return self.min_trough_distance + 2 * self.order

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class InverseHeadShouldersConfig:
    """Three troughs, the middle one deepest, under a neckline."""
    order: int = 5
    peak_symmetry_tolerance: float = 0.05
    shoulder_symmetry_tolerance: float = 0.10
    min_pattern_duration: int = 50
    breakout: BreakoutConfig = field(default_factory=lambda: BreakoutConfig(volume_multiplier=1.5))

    @property
    def min_bars(self) -> int:
        return max(self.min_pattern_duration, 2 * self.order + 1)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


FormationConfig = (
    AscendingTriangleConfig
    | DescendingTriangleConfig
    | FallingWedgeConfig
    | DoubleBottomConfig
    | InverseHeadShouldersConfig
)
