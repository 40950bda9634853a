"""Formation registry.

Maps each FormationType to the strategy that detects it: the matcher that
turns swing points into potential patterns plus the config type and
defaults it runs with. The scanner dispatches through this table instead of
branching on the formation.
"""

from dataclasses import dataclass
from typing import Any, Callable

from pattern_scanner.patterns.config import (
    AscendingTriangleConfig,
    DescendingTriangleConfig,
    DoubleBottomConfig,
    FallingWedgeConfig,
    InverseHeadShouldersConfig,
)
from pattern_scanner.patterns.double_bottom import find_double_bottoms
from pattern_scanner.patterns.inverse_head_shoulders import find_inverse_head_shoulders
from pattern_scanner.patterns.triangles import find_ascending_triangles, find_descending_triangles
from pattern_scanner.patterns.types import (
    BreakoutDirection,
    FormationType,
    PotentialPattern,
    PriceSeries,
)
from pattern_scanner.patterns.wedge import find_falling_wedges

Matcher = Callable[[PriceSeries, list[int], list[int], Any], list[PotentialPattern]]


@dataclass(frozen=True)
class FormationStrategy:
    """How one formation is detected.

    Attributes:
        formation: Formation this strategy detects
        direction: Breakout side of every candidate it produces
        matcher: Callable(series, low_indices, high_indices, config)
        config_type: Config dataclass accepted by the matcher
    """
    formation: FormationType
    direction: BreakoutDirection
    matcher: Matcher
    config_type: type

    def default_config(self) -> Any:
        return self.config_type()


FORMATION_REGISTRY: dict[FormationType, FormationStrategy] = {
    FormationType.ASCENDING_TRIANGLE: FormationStrategy(
        formation=FormationType.ASCENDING_TRIANGLE,
        direction=BreakoutDirection.BULLISH,
        matcher=find_ascending_triangles,
        config_type=AscendingTriangleConfig,
    ),
    FormationType.DESCENDING_TRIANGLE: FormationStrategy(
        formation=FormationType.DESCENDING_TRIANGLE,
        direction=BreakoutDirection.BEARISH,
        matcher=find_descending_triangles,
        config_type=DescendingTriangleConfig,
    ),
    FormationType.FALLING_WEDGE: FormationStrategy(
        formation=FormationType.FALLING_WEDGE,
        direction=BreakoutDirection.BULLISH,
        matcher=find_falling_wedges,
        config_type=FallingWedgeConfig,
    ),
    FormationType.DOUBLE_BOTTOM: FormationStrategy(
        formation=FormationType.DOUBLE_BOTTOM,
        direction=BreakoutDirection.BULLISH,
        matcher=find_double_bottoms,
        config_type=DoubleBottomConfig,
    ),
    FormationType.INVERSE_HEAD_AND_SHOULDERS: FormationStrategy(
        formation=FormationType.INVERSE_HEAD_AND_SHOULDERS,
        direction=BreakoutDirection.BULLISH,
        matcher=find_inverse_head_shoulders,
        config_type=InverseHeadShouldersConfig,
    ),
}


def get_strategy(formation: FormationType) -> FormationStrategy:
    """Look up the strategy for a formation.

    Raises:
        KeyError: If the formation has no registered strategy
    """
    return FORMATION_REGISTRY[formation]
