"""Best-parlay generation pipeline."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from parlayforge.config import get_settings
from parlayforge.data.repository import LegRepository, SqlLegRepository
from parlayforge.parlays.combinations import generate_combinations
from parlayforge.parlays.correlation import filter_correlated_legs, group_by_match
from parlayforge.parlays.metrics import evaluate_combination
from parlayforge.parlays.pool import build_candidate_pool
from parlayforge.parlays.ranking import rank_parlays
from parlayforge.parlays.types import GenerationConfig, Leg, ParlayCombination, ParlayType

logger = logging.getLogger(__name__)
settings = get_settings()


def build_parlays(
    legs: Sequence[Leg],
    parlay_type: ParlayType,
    config: GenerationConfig,
    max_examined: int = settings.max_combinations_total,
) -> list[ParlayCombination]:
    """Enumerate and score combinations of ``legs`` for one parlay type.

    Leg counts run from 2 to ``config.max_leg_count``; at most
    ``max_examined`` candidate tuples are priced across all leg counts.
    """

    is_multi_game = parlay_type is ParlayType.MULTI_GAME
    accepted: list[ParlayCombination] = []
    examined = 0
    for leg_count in range(2, config.max_leg_count + 1):
        for combo in generate_combinations(legs, leg_count, is_multi_game):
            if examined >= max_examined:
                logger.debug("Examination cap %d reached for %s", max_examined, parlay_type.value)
                return accepted
            examined += 1
            parlay = evaluate_combination(combo, parlay_type, config)
            if parlay is not None:
                accepted.append(parlay)
    return accepted


def _multi_game_parlays(pool: Sequence[Leg], config: GenerationConfig) -> list[ParlayCombination]:
    legs = filter_correlated_legs(pool, ParlayType.MULTI_GAME)
    return build_parlays(legs, ParlayType.MULTI_GAME, config)


def _single_game_parlays(
    pool: Sequence[Leg],
    config: GenerationConfig,
    workers: int,
) -> list[ParlayCombination]:
    match_groups = [
        filter_correlated_legs(match_legs, ParlayType.SINGLE_GAME)
        for match_legs in group_by_match(pool).values()
        if len(match_legs) >= 2
    ]

    def run(match_legs: list[Leg]) -> list[ParlayCombination]:
        return build_parlays(match_legs, ParlayType.SINGLE_GAME, config)

    if workers > 1 and len(match_groups) > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            per_match = list(executor.map(run, match_groups))
    else:
        per_match = [run(match_legs) for match_legs in match_groups]
    return [parlay for parlays in per_match for parlay in parlays]


def generate_best_parlays(
    config: GenerationConfig | Mapping[str, Any] | None = None,
    repository: LegRepository | None = None,
    workers: int | None = None,
) -> list[ParlayCombination]:
    """Generate ranked parlays from the current leg pool.

    Raises ``ConfigurationError`` for out-of-range config and propagates
    ``LegRepositoryError`` from the pool read. Every "nothing found" outcome
    is an empty list.
    """

    config = GenerationConfig.coerce(config)
    repository = repository or SqlLegRepository()
    workers = workers or settings.generation_workers

    pool = build_candidate_pool(repository, config)
    if not pool:
        logger.info("No candidate legs qualify; nothing to generate")
        return []

    candidates: list[ParlayCombination] = []
    if ParlayType.MULTI_GAME in config.parlay_types:
        candidates.extend(_multi_game_parlays(pool, config))
    if ParlayType.SINGLE_GAME in config.parlay_types:
        candidates.extend(_single_game_parlays(pool, config, workers))

    results = rank_parlays(candidates, config.max_results_per_bucket)
    logger.info(
        "Generated %d parlays (%d accepted before bucketing) from %d legs",
        len(results),
        len(candidates),
        len(pool),
    )
    return results


def summarize_parlays(parlays: Sequence[ParlayCombination]) -> dict[str, Any]:
    by_leg_count = Counter(parlay.leg_count for parlay in parlays)
    return {
        "multi_game": sum(1 for parlay in parlays if parlay.is_multi_game),
        "single_game": sum(1 for parlay in parlays if not parlay.is_multi_game),
        "by_leg_count": {count: by_leg_count[count] for count in sorted(by_leg_count)},
    }
