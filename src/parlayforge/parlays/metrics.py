"""Probability, edge and quality scoring for leg combinations."""

from __future__ import annotations

from collections.abc import Sequence

from parlayforge.parlays.correlation import has_correlated_pair
from parlayforge.parlays.types import GenerationConfig, Leg, ParlayCombination, ParlayType

MULTI_GAME_PENALTIES = {2: 0.92, 3: 0.90, 4: 0.88, 5: 0.85}
SINGLE_GAME_PENALTIES = {2: 0.85, 3: 0.80, 4: 0.75, 5: 0.70}
MULTI_GAME_CORRELATION_FACTOR = 0.95
SINGLE_GAME_CORRELATION_FACTOR = 0.90

RISK_VALUES = {"low": 1.0, "medium": 0.8, "high": 0.6}
DEFAULT_RISK_VALUE = 0.6


def combined_probability(legs: Sequence[Leg]) -> float:
    prob = 1.0
    for leg in legs:
        prob *= leg.consensus_prob
    return prob


def correlation_penalty(leg_count: int, has_correlation: bool, is_multi_game: bool) -> float:
    """Multiplicative discount in (0, 1]; counts past the table reuse its largest entry."""

    table = MULTI_GAME_PENALTIES if is_multi_game else SINGLE_GAME_PENALTIES
    base = table.get(leg_count, table[max(table)])
    if not has_correlation:
        return base
    factor = MULTI_GAME_CORRELATION_FACTOR if is_multi_game else SINGLE_GAME_CORRELATION_FACTOR
    return base * factor


def average_agreement(legs: Sequence[Leg]) -> float:
    return sum(leg.model_agreement for leg in legs) / len(legs)


def confidence_tier(avg_agreement: float, parlay_edge: float) -> str:
    if avg_agreement >= 0.80 and parlay_edge >= 15:
        return "high"
    if avg_agreement >= 0.70 and parlay_edge >= 10:
        return "medium"
    return "low"


def quality_score(
    legs: Sequence[Leg],
    parlay_edge: float,
    adjusted_prob: float,
    is_multi_game: bool,
) -> float:
    """Weighted 0-100 score: edge 35, probability 25, agreement 20, diversity 10, risk 10."""

    edge_score = max(min(parlay_edge, 50.0), 0.0) / 50 * 35
    prob_score = max(min(adjusted_prob * 100, 100.0), 0.0) * 0.25
    agreement_score = min(average_agreement(legs), 1.0) * 20

    if is_multi_game:
        distinct = len({leg.match_id for leg in legs}) == len(legs)
        diversity_score = 10.0 if distinct else 5.0
    else:
        diversity_score = 5.0

    risk = sum(RISK_VALUES.get(leg.risk_level.lower(), DEFAULT_RISK_VALUE) for leg in legs) / len(legs)
    risk_score = risk * 10

    return edge_score + prob_score + agreement_score + diversity_score + risk_score


def evaluate_combination(
    legs: Sequence[Leg],
    parlay_type: ParlayType,
    config: GenerationConfig,
) -> ParlayCombination | None:
    """Price and score ``legs``; ``None`` when the run thresholds reject it."""

    is_multi_game = parlay_type is ParlayType.MULTI_GAME
    combined = combined_probability(legs)
    if combined <= 0:
        return None
    correlated = has_correlated_pair(legs)
    penalty = correlation_penalty(len(legs), correlated, is_multi_game)
    adjusted = combined * penalty

    implied_odds = 1 / adjusted
    fair_odds = 1 / combined
    parlay_edge = (implied_odds - fair_odds) / fair_odds * 100

    if parlay_edge < config.min_parlay_edge or adjusted < config.min_combined_prob:
        return None

    return ParlayCombination(
        legs=tuple(legs),
        parlay_type=parlay_type,
        combined_prob=combined,
        correlation_penalty=penalty,
        adjusted_prob=adjusted,
        implied_odds=implied_odds,
        fair_odds=fair_odds,
        parlay_edge=parlay_edge,
        quality_score=quality_score(legs, parlay_edge, adjusted, is_multi_game),
        confidence_tier=confidence_tier(average_agreement(legs), parlay_edge),
        has_correlation=correlated,
    )
