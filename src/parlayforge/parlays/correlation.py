"""Correlation rules between legs."""

from __future__ import annotations

import itertools
from collections.abc import Iterable, Sequence

from parlayforge.config import get_settings
from parlayforge.parlays.types import Leg, ParlayType

settings = get_settings()

OVER_LINE_THRESHOLD = 2.5


def is_home_win(leg: Leg) -> bool:
    return leg.market_type == "1X2" and leg.market_subtype == "HOME"


def is_high_over(leg: Leg) -> bool:
    return (
        leg.market_type == "TOTALS"
        and leg.market_subtype == "OVER"
        and leg.line is not None
        and leg.line >= OVER_LINE_THRESHOLD
    )


def is_btts_yes(leg: Leg) -> bool:
    return leg.market_type == "BTTS" and leg.market_subtype == "YES"


CORRELATED_PAIRS = (
    (is_home_win, is_high_over),
    (is_home_win, is_btts_yes),
    (is_high_over, is_btts_yes),
)


def are_legs_correlated(a: Leg, b: Leg) -> bool:
    """Whitelisted structural correlations; legs on different matches never correlate."""

    if a.match_id != b.match_id:
        return False
    for first, second in CORRELATED_PAIRS:
        if (first(a) and second(b)) or (first(b) and second(a)):
            return True
    return False


def has_correlated_pair(legs: Sequence[Leg]) -> bool:
    return any(are_legs_correlated(a, b) for a, b in itertools.combinations(legs, 2))


def group_by_match(legs: Iterable[Leg]) -> dict[str, list[Leg]]:
    """Group legs by match, preserving first-seen match order and leg order."""

    grouped: dict[str, list[Leg]] = {}
    for leg in legs:
        grouped.setdefault(leg.match_id, []).append(leg)
    return grouped


def by_edge(legs: Iterable[Leg]) -> list[Leg]:
    return sorted(legs, key=lambda leg: leg.edge_consensus, reverse=True)


def filter_correlated_legs(
    legs: Sequence[Leg],
    parlay_type: ParlayType,
    per_match: int = settings.max_legs_per_match,
) -> list[Leg]:
    """Reduce the pool for the requested parlay type.

    Multi-game keeps the ``per_match`` highest-edge legs of each match so no
    single fixture dominates. Single-game keeps everything; correlation is
    priced per combination instead.
    """

    if parlay_type is ParlayType.SINGLE_GAME:
        return list(legs)
    filtered: list[Leg] = []
    for match_legs in group_by_match(legs).values():
        filtered.extend(by_edge(match_legs)[:per_match])
    return filtered
