"""Formation scanning pipeline.

bars -> swing extrema -> matcher -> dedup -> breakout engine -> projection

Everything here is synchronous and pure: the same bars and config always
produce the same result, and nothing is kept between calls.
"""

import logging
import math
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from pattern_scanner.patterns.breakout import evaluate_breakout
from pattern_scanner.patterns.extrema import find_local_highs, find_local_lows
from pattern_scanner.patterns.projection import project_target
from pattern_scanner.patterns.registry import FORMATION_REGISTRY, get_strategy
from pattern_scanner.patterns.types import (
    Bar,
    ConfirmedPattern,
    FormationScanResult,
    FormationType,
    PotentialPattern,
    PriceSeries,
)

logger = logging.getLogger(__name__)

SLOPE_REL_TOLERANCE = 1e-6
SLOPE_ABS_TOLERANCE = 1e-9


def _is_duplicate(candidate: PotentialPattern, kept: PotentialPattern) -> bool:
    if candidate.end_index != kept.end_index:
        return False
    if candidate.dedup_slope is None or kept.dedup_slope is None:
        return True
    return math.isclose(
        candidate.dedup_slope,
        kept.dedup_slope,
        rel_tol=SLOPE_REL_TOLERANCE,
        abs_tol=SLOPE_ABS_TOLERANCE,
    )


def deduplicate_patterns(candidates: Iterable[PotentialPattern]) -> list[PotentialPattern]:
    """Drop candidates that resolve to an already-kept structure.

    Two candidates are the same when they end on the same bar and, for
    formations with a sloped boundary, that slope matches. The first one
    found wins. Survivors are ordered by end index (stable).
    """
    kept: list[PotentialPattern] = []
    for candidate in candidates:
        if any(_is_duplicate(candidate, existing) for existing in kept):
            continue
        kept.append(candidate)
    return sorted(kept, key=lambda p: p.end_index)


def _as_series(bars: Sequence[Bar] | PriceSeries) -> PriceSeries:
    if isinstance(bars, PriceSeries):
        return bars
    return PriceSeries.from_bars(bars)


def detect_formation(
    bars: Sequence[Bar] | PriceSeries,
    formation: FormationType,
    config: Any | None = None,
) -> FormationScanResult:
    """Detect one formation and confirm its breakouts.

    Args:
        bars: Bars in ascending timestamp order (or a prepared PriceSeries)
        formation: Formation to look for
        config: Formation config; the formation's defaults when None

    Returns:
        FormationScanResult. When there are fewer bars than the formation
        needs, the result is empty and ``insufficient_data`` is True.
    """
    strategy = get_strategy(formation)
    if config is None:
        config = strategy.default_config()
    elif not isinstance(config, strategy.config_type):
        raise TypeError(
            f"{formation.value} expects {strategy.config_type.__name__}, "
            f"got {type(config).__name__}"
        )

    series = _as_series(bars)
    total_bars = len(series)
    parameters = config.to_dict()

    if total_bars < config.min_bars:
        logger.info(
            f"{formation.value}: {total_bars} bars, need at least {config.min_bars}"
        )
        return FormationScanResult(
            formation=formation,
            confirmed=[],
            potential_count=0,
            total_bars=total_bars,
            insufficient_data=True,
            parameters=parameters,
        )

    low_indices = find_local_lows(series.lows, config.order)
    high_indices = find_local_highs(series.highs, config.order)

    potentials = deduplicate_patterns(
        strategy.matcher(series, low_indices, high_indices, config)
    )

    confirmed: list[ConfirmedPattern] = []
    for pattern in potentials:
        outcome = evaluate_breakout(series, pattern, config.breakout)
        if not outcome.confirmed:
            continue
        confirmed.append(
            ConfirmedPattern(
                pattern=pattern,
                breakout=outcome.event,
                volume_confirmed=outcome.volume_confirmed,
                candles_ago=outcome.candles_ago,
                projection=project_target(pattern, outcome.event),
            )
        )

    logger.info(
        f"{formation.value}: {len(potentials)} potential, {len(confirmed)} confirmed "
        f"({len(low_indices)} lows, {len(high_indices)} highs, {total_bars} bars)"
    )
    return FormationScanResult(
        formation=formation,
        confirmed=confirmed,
        potential_count=len(potentials),
        total_bars=total_bars,
        local_lows_found=len(low_indices),
        local_highs_found=len(high_indices),
        parameters=parameters,
    )


def scan_formations(
    bars: Sequence[Bar] | PriceSeries,
    configs: Mapping[FormationType, Any] | None = None,
    formations: Iterable[FormationType] | None = None,
) -> dict[FormationType, FormationScanResult]:
    """Run several formation detectors over the same bars.

    Args:
        bars: Bars in ascending timestamp order
        configs: Per-formation configs; missing entries use defaults
        formations: Formations to run; all registered ones when None
    """
    series = _as_series(bars)
    configs = configs or {}
    selected = list(formations) if formations is not None else list(FORMATION_REGISTRY)
    return {
        formation: detect_formation(series, formation, configs.get(formation))
        for formation in selected
    }
