"""Breakout / breakdown confirmation.

For each potential pattern the bars after its end index are scanned for
the first close that clears the breakout boundary by a percentage buffer.
The boundary is evaluated at every scanned bar, so sloped lines are crossed
against their own projected value.

States a candidate passes through:

    AWAITING_BREAK -> BREAK_FOUND -> FRESH | STALE
                   -> VOLUME_CONFIRMED | VOLUME_UNCONFIRMED
                   -> CONFIRMED | DISCARDED

Volume confirmation is reported, never used to reject a candidate.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from pattern_scanner.patterns.config import BreakoutConfig
from pattern_scanner.patterns.types import (
    BreakoutDirection,
    BreakoutEvent,
    PotentialPattern,
    PriceSeries,
)

logger = logging.getLogger(__name__)


class BreakoutState(str, Enum):
    AWAITING_BREAK = "awaiting_break"
    BREAK_FOUND = "break_found"
    FRESH = "fresh"
    STALE = "stale"
    VOLUME_CONFIRMED = "volume_confirmed"
    VOLUME_UNCONFIRMED = "volume_unconfirmed"
    CONFIRMED = "confirmed"
    DISCARDED = "discarded"


@dataclass(frozen=True)
class BreakoutOutcome:
    """Terminal result of evaluating one candidate.

    ``event`` is only set when ``state`` is CONFIRMED. ``trail`` records the
    intermediate states visited, which makes rejections easy to inspect.
    """
    state: BreakoutState
    event: BreakoutEvent | None = None
    volume_confirmed: bool = False
    candles_ago: int = 0
    trail: tuple[BreakoutState, ...] = ()

    @property
    def confirmed(self) -> bool:
        return self.state == BreakoutState.CONFIRMED


def crosses_boundary(
    close: float,
    boundary_value: float,
    direction: BreakoutDirection,
    buffer_percent: float,
) -> bool:
    """Whether a close clears the boundary by the buffer."""
    buffer = boundary_value * buffer_percent
    if direction == BreakoutDirection.BULLISH:
        return close > boundary_value + buffer
    return close < boundary_value - buffer


def find_breakout_index(
    series: PriceSeries,
    pattern: PotentialPattern,
    config: BreakoutConfig,
) -> int | None:
    """First bar after the pattern end whose close crosses the boundary."""
    boundary = pattern.breakout_boundary
    last_checked = min(series.last_index, pattern.end_index + config.candles_to_check)
    for k in range(pattern.end_index + 1, last_checked + 1):
        if crosses_boundary(
            float(series.closes[k]),
            boundary.value_at(k),
            pattern.direction,
            config.buffer_percent,
        ):
            return k
    return None


def average_volume_before(series: PriceSeries, index: int, lookback: int) -> float:
    """Mean volume of the ``lookback`` bars strictly before ``index`` (0 if none)."""
    window = series.volumes[max(0, index - lookback):index]
    if len(window) == 0:
        return 0.0
    return float(window.mean())


def evaluate_breakout(
    series: PriceSeries,
    pattern: PotentialPattern,
    config: BreakoutConfig,
) -> BreakoutOutcome:
    """Run a potential pattern through the breakout state machine."""
    trail = [BreakoutState.AWAITING_BREAK]

    break_index = find_breakout_index(series, pattern, config)
    if break_index is None:
        logger.debug(
            f"{pattern.formation.value} ending at {pattern.end_index}: "
            f"no break within {config.candles_to_check} candles"
        )
        trail.append(BreakoutState.DISCARDED)
        return BreakoutOutcome(state=BreakoutState.DISCARDED, trail=tuple(trail))
    trail.append(BreakoutState.BREAK_FOUND)

    candles_ago = series.last_index - break_index
    max_age = config.max_candles_ago_for_fresh_breakout
    if max_age is not None:
        if candles_ago < 0 or candles_ago >= max_age:
            logger.debug(
                f"{pattern.formation.value} break at {break_index} is stale "
                f"({candles_ago} candles ago, limit {max_age})"
            )
            trail.extend([BreakoutState.STALE, BreakoutState.DISCARDED])
            return BreakoutOutcome(
                state=BreakoutState.DISCARDED, candles_ago=candles_ago, trail=tuple(trail)
            )
        trail.append(BreakoutState.FRESH)

    avg_volume = average_volume_before(series, break_index, config.volume_lookback)
    volume = float(series.volumes[break_index])
    volume_confirmed = avg_volume > 0 and volume > avg_volume * config.volume_multiplier
    trail.append(
        BreakoutState.VOLUME_CONFIRMED if volume_confirmed else BreakoutState.VOLUME_UNCONFIRMED
    )
    trail.append(BreakoutState.CONFIRMED)

    event = BreakoutEvent(
        index=break_index,
        timestamp=int(series.timestamps[break_index]),
        close_price=float(series.closes[break_index]),
        boundary_value=pattern.breakout_boundary.value_at(break_index),
        volume=volume,
        avg_volume_before=avg_volume,
    )
    logger.debug(
        f"{pattern.formation.value} break at {break_index}: close {event.close_price:.4f} "
        f"vs boundary {event.boundary_value:.4f}, volume {volume:.2f} "
        f"(avg {avg_volume:.2f}, confirmed={volume_confirmed})"
    )
    return BreakoutOutcome(
        state=BreakoutState.CONFIRMED,
        event=event,
        volume_confirmed=volume_confirmed,
        candles_ago=candles_ago,
        trail=tuple(trail),
    )
