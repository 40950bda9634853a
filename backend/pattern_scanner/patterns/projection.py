"""Measured-move price targets."""

from pattern_scanner.patterns.types import (
    BreakoutDirection,
    BreakoutEvent,
    PotentialPattern,
    Projection,
)


def pattern_height(pattern: PotentialPattern) -> float:
    """Distance from the height anchor to the breakout boundary.

    Bullish formations measure from the anchor (first support low, head,
    lowest bottom) up to the upper boundary; bearish ones from the anchor
    (first resistance high) down to the lower boundary. Both are taken at
    the anchor's bar index.
    """
    anchor = pattern.height_anchor
    boundary_value = pattern.breakout_boundary.value_at(anchor.index)
    if pattern.direction == BreakoutDirection.BULLISH:
        return boundary_value - anchor.value
    return anchor.value - boundary_value


def project_target(pattern: PotentialPattern, event: BreakoutEvent) -> Projection:
    """Project the formation height from the boundary value at the break.

    A non-positive height means the fit is degenerate; the target is then
    None rather than a misleading number.
    """
    height = pattern_height(pattern)
    if height <= 0:
        return Projection(pattern_height=height, target_price=None)
    if pattern.direction == BreakoutDirection.BULLISH:
        target = event.boundary_value + height
    else:
        target = event.boundary_value - height
    return Projection(pattern_height=height, target_price=target)
