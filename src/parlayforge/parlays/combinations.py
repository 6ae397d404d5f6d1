"""Bounded enumeration of leg combinations."""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from parlayforge.config import get_settings
from parlayforge.parlays.correlation import by_edge, group_by_match
from parlayforge.parlays.types import Leg

settings = get_settings()


def bounded_combinations(items: Sequence[Leg], size: int, limit: int) -> Iterator[tuple[Leg, ...]]:
    """Yield up to ``limit`` ``size``-combinations of ``items`` in lexicographic order.

    Uses an explicit stack; depth never exceeds ``size`` and the stack holds at
    most ``size * len(items)`` partial tuples.
    """

    if size <= 0 or len(items) < size or limit <= 0:
        return
    emitted = 0
    stack: list[tuple[tuple[Leg, ...], int]] = [((), 0)]
    while stack and emitted < limit:
        current, start = stack.pop()
        remaining = size - len(current)
        if remaining == 0:
            yield current
            emitted += 1
            continue
        # Pushed in reverse so the lowest index is explored first.
        for idx in range(len(items) - remaining, start - 1, -1):
            stack.append((current + (items[idx],), idx + 1))


def generate_combinations(
    legs: Sequence[Leg],
    leg_count: int,
    is_multi_game: bool,
    max_combinations: int = settings.max_combinations_per_leg_count,
    max_matches: int = settings.max_matches_explored,
    max_sgp_legs: int = settings.max_sgp_legs_per_match,
) -> Iterator[tuple[Leg, ...]]:
    """Lazily produce candidate leg tuples of exactly ``leg_count`` legs.

    Multi-game tuples take the best-edge leg from each of at most
    ``max_matches`` matches, so every leg is on a distinct match. Single-game
    tuples are drawn within each match from its ``max_sgp_legs`` best-edge
    legs. At most ``max_combinations`` tuples are yielded in total.
    """

    if leg_count < 1 or len(legs) < leg_count:
        return
    grouped = group_by_match(legs)

    if is_multi_game:
        match_ids = list(grouped)[:max_matches]
        if len(match_ids) < leg_count:
            return
        best_legs = [by_edge(grouped[mid])[0] for mid in match_ids]
        yield from bounded_combinations(best_legs, leg_count, max_combinations)
        return

    emitted = 0
    for match_legs in grouped.values():
        if emitted >= max_combinations:
            break
        if len(match_legs) < leg_count:
            continue
        limited = by_edge(match_legs)[:max_sgp_legs]
        for combo in bounded_combinations(limited, leg_count, max_combinations - emitted):
            yield combo
            emitted += 1
