"""Candidate leg pool construction."""

from __future__ import annotations

import logging

from parlayforge.config import get_settings
from parlayforge.data.repository import LegQuery, LegRepository
from parlayforge.parlays.types import GenerationConfig, Leg

logger = logging.getLogger(__name__)
settings = get_settings()


def build_leg_query(
    config: GenerationConfig,
    pool_size: int = settings.leg_pool_size,
    min_probability: float = settings.min_leg_probability,
) -> LegQuery:
    return LegQuery(
        min_probability=min_probability,
        min_model_agreement=config.min_model_agreement,
        min_edge=config.min_leg_edge if config.min_leg_edge > 0 else None,
        limit=pool_size,
    )


def _qualifies(leg: Leg, query: LegQuery) -> bool:
    if not 0 < leg.consensus_prob <= 1:
        return False
    if leg.consensus_prob < query.min_probability:
        return False
    if leg.model_agreement < query.min_model_agreement:
        return False
    return query.min_edge is None or leg.edge_consensus >= query.min_edge


def pool_sort_key(leg: Leg) -> tuple[float, float, float]:
    return (-leg.consensus_prob, -leg.model_agreement, -leg.edge_consensus)


def build_candidate_pool(
    repository: LegRepository,
    config: GenerationConfig,
    pool_size: int = settings.leg_pool_size,
    min_probability: float = settings.min_leg_probability,
) -> list[Leg]:
    """Fetch the leg pool once and normalize it.

    Thresholds are re-applied here so adapters that cannot filter server-side
    still yield a conforming pool. An empty list means nothing is generatable
    this run.
    """

    query = build_leg_query(config, pool_size=pool_size, min_probability=min_probability)
    fetched = repository.fetch_candidate_legs(query)

    seen: set[str] = set()
    pool: list[Leg] = []
    for leg in fetched:
        if leg.id in seen or not _qualifies(leg, query):
            continue
        seen.add(leg.id)
        pool.append(leg)
    pool.sort(key=pool_sort_key)
    pool = pool[:pool_size]

    logger.info("Candidate pool: %d of %d fetched legs qualify", len(pool), len(fetched))
    return pool
