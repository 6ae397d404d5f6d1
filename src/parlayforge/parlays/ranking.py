"""Ranking and result shaping."""

from __future__ import annotations

from collections.abc import Iterable
from functools import cmp_to_key

from parlayforge.parlays.types import ParlayCombination

SCORE_TIE_TOLERANCE = 0.1


def _compare(a: ParlayCombination, b: ParlayCombination) -> int:
    if abs(a.quality_score - b.quality_score) > SCORE_TIE_TOLERANCE:
        return -1 if a.quality_score > b.quality_score else 1
    if a.parlay_edge != b.parlay_edge:
        return -1 if a.parlay_edge > b.parlay_edge else 1
    return 0


def rank_parlays(parlays: Iterable[ParlayCombination], max_per_bucket: int) -> list[ParlayCombination]:
    """Keep the best ``max_per_bucket`` parlays per leg count, best first.

    Bucket selection uses the tolerant score/edge ordering; the returned list
    is strictly ordered by score, then edge.
    """

    ordered = sorted(parlays, key=cmp_to_key(_compare))
    buckets: dict[int, list[ParlayCombination]] = {}
    for parlay in ordered:
        bucket = buckets.setdefault(parlay.leg_count, [])
        if len(bucket) < max_per_bucket:
            bucket.append(parlay)

    results = [parlay for bucket in buckets.values() for parlay in bucket]
    results.sort(key=lambda p: (p.quality_score, p.parlay_edge), reverse=True)
    return results
