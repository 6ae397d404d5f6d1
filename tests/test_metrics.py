"""Probability, edge and quality score tests."""

from __future__ import annotations

import pytest

from parlayforge.parlays import metrics
from parlayforge.parlays.types import GenerationConfig, Leg, ParlayType


def _leg(
    leg_id: str,
    match_id: str,
    prob: float,
    agreement: float,
    edge: float,
    market_type: str = "1X2",
    subtype: str | None = "HOME",
    line: float | None = None,
    risk: str = "low",
) -> Leg:
    return Leg(
        id=leg_id,
        match_id=match_id,
        market_type=market_type,
        market_subtype=subtype,
        line=line,
        consensus_prob=prob,
        consensus_confidence=0.7,
        model_agreement=agreement,
        edge_consensus=edge,
        risk_level=risk,
    )


def test_penalty_tables() -> None:
    assert metrics.correlation_penalty(2, False, True) == pytest.approx(0.92)
    assert metrics.correlation_penalty(5, False, True) == pytest.approx(0.85)
    assert metrics.correlation_penalty(2, True, True) == pytest.approx(0.92 * 0.95)
    assert metrics.correlation_penalty(3, False, False) == pytest.approx(0.80)
    assert metrics.correlation_penalty(2, True, False) == pytest.approx(0.765)
    assert metrics.correlation_penalty(8, False, False) == pytest.approx(0.70)


def test_two_match_parlay_values() -> None:
    a = _leg("A", "1", prob=0.70, agreement=0.90, edge=8)
    b = _leg("B", "2", prob=0.65, agreement=0.85, edge=7)
    parlay = metrics.evaluate_combination((a, b), ParlayType.MULTI_GAME, GenerationConfig())

    assert parlay is not None
    assert parlay.combined_prob == pytest.approx(0.455)
    assert parlay.correlation_penalty == pytest.approx(0.92)
    assert parlay.adjusted_prob == pytest.approx(0.4186)
    assert parlay.fair_odds == pytest.approx(1 / 0.455)
    assert parlay.implied_odds == pytest.approx(1 / 0.4186)
    assert parlay.parlay_edge == pytest.approx((1 / 0.92 - 1) * 100)
    assert not parlay.has_correlation
    assert parlay.confidence_tier == "low"
    expected_score = (parlay.parlay_edge / 50 * 35) + 41.86 * 0.25 + 0.875 * 20 + 10 + 10
    assert parlay.quality_score == pytest.approx(expected_score)
    assert parlay.match_ids == ["1", "2"]
    assert parlay.leg_count == 2
    assert parlay.is_multi_game


def test_correlated_same_match_pair_gets_lower_penalty() -> None:
    home = _leg("h", "9", 0.7, 0.8, 5)
    over = _leg("o", "9", 0.7, 0.8, 5, market_type="TOTALS", subtype="OVER", line=2.5)
    under = _leg("u", "9", 0.7, 0.8, 5, market_type="TOTALS", subtype="UNDER", line=3.5)
    config = GenerationConfig()

    correlated = metrics.evaluate_combination((home, over), ParlayType.SINGLE_GAME, config)
    independent = metrics.evaluate_combination((home, under), ParlayType.SINGLE_GAME, config)

    assert correlated is not None and independent is not None
    assert correlated.has_correlation
    assert not independent.has_correlation
    assert correlated.correlation_penalty < independent.correlation_penalty
    assert correlated.adjusted_prob <= correlated.combined_prob


def test_thresholds_reject() -> None:
    legs = (_leg("a", "1", 0.5, 0.8, 0), _leg("b", "2", 0.5, 0.8, 0))
    assert metrics.evaluate_combination(legs, ParlayType.MULTI_GAME, GenerationConfig(min_parlay_edge=10)) is None
    assert metrics.evaluate_combination(legs, ParlayType.MULTI_GAME, GenerationConfig(min_combined_prob=0.3)) is None
    # Unknown edge (0) on every leg is not disqualifying.
    assert metrics.evaluate_combination(legs, ParlayType.MULTI_GAME, GenerationConfig()) is not None


@pytest.mark.parametrize(
    ("agreement", "edge", "tier"),
    [(0.85, 20, "high"), (0.85, 12, "medium"), (0.75, 20, "medium"), (0.69, 30, "low"), (0.9, 9, "low")],
)
def test_confidence_tier(agreement: float, edge: float, tier: str) -> None:
    assert metrics.confidence_tier(agreement, edge) == tier


def test_quality_score_bounds() -> None:
    perfect = [_leg("a", "1", 1.0, 1.0, 0), _leg("b", "2", 1.0, 1.0, 0)]
    assert metrics.quality_score(perfect, parlay_edge=80, adjusted_prob=1.0, is_multi_game=True) == pytest.approx(100)

    weak = [_leg("a", "1", 0.5, 0.0, 0, risk="high"), _leg("b", "1", 0.5, 0.0, 0, risk="unknown")]
    score = metrics.quality_score(weak, parlay_edge=0, adjusted_prob=0.0, is_multi_game=False)
    assert score == pytest.approx(5 + 6)
    assert 0 <= score <= 100


def test_single_game_diversity_is_flat() -> None:
    legs = [_leg("a", "1", 0.7, 0.8, 0), _leg("b", "1", 0.7, 0.8, 0)]
    multi = metrics.quality_score(legs, 10, 0.4, is_multi_game=True)
    single = metrics.quality_score(legs, 10, 0.4, is_multi_game=False)
    assert multi == pytest.approx(single)
