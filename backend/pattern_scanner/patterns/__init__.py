"""Chart pattern detection package.

Pure, synchronous detection of classical chart formations in OHLCV bars,
each paired with a breakout confirmation and a measured-move target.

Available formations:
- Ascending Triangle
- Descending Triangle
- Falling Wedge
- Double Bottom
- Inverse Head & Shoulders
"""

from .types import (
    Bar,
    Boundary,
    BoundaryKind,
    BreakoutDirection,
    BreakoutEvent,
    ConfirmedPattern,
    ExtremumPoint,
    FormationScanResult,
    FormationType,
    PotentialPattern,
    PriceSeries,
    Projection,
    TrendLine,
)
from .extrema import (
    ExtremumKind,
    find_extrema,
    find_local_highs,
    find_local_lows,
)
from .trendline import fit_trendline
from .config import (
    AscendingTriangleConfig,
    BreakoutConfig,
    DescendingTriangleConfig,
    DoubleBottomConfig,
    FallingWedgeConfig,
    FormationConfig,
    InverseHeadShouldersConfig,
)
from .breakout import BreakoutOutcome, BreakoutState, evaluate_breakout
from .projection import pattern_height, project_target
from .registry import FORMATION_REGISTRY, FormationStrategy, get_strategy
from .scanner import deduplicate_patterns, detect_formation, scan_formations

__all__ = [
    "Bar",
    "Boundary",
    "BoundaryKind",
    "BreakoutDirection",
    "BreakoutEvent",
    "ConfirmedPattern",
    "ExtremumPoint",
    "FormationScanResult",
    "FormationType",
    "PotentialPattern",
    "PriceSeries",
    "Projection",
    "TrendLine",
    "ExtremumKind",
    "find_extrema",
    "find_local_highs",
    "find_local_lows",
    "fit_trendline",
    "AscendingTriangleConfig",
    "BreakoutConfig",
    "DescendingTriangleConfig",
    "DoubleBottomConfig",
    "FallingWedgeConfig",
    "FormationConfig",
    "InverseHeadShouldersConfig",
    "BreakoutOutcome",
    "BreakoutState",
    "evaluate_breakout",
    "pattern_height",
    "project_target",
    "FORMATION_REGISTRY",
    "FormationStrategy",
    "get_strategy",
    "deduplicate_patterns",
    "detect_formation",
    "scan_formations",
]
