"""Helpers for labelling generated parlays."""

from __future__ import annotations


def quality_tier(score: float) -> str:
    if score >= 70:
        return "excellent"
    if score >= 50:
        return "good"
    if score >= 30:
        return "fair"
    return "poor"


def is_tradable(edge_pct: float, combined_prob: float) -> bool:
    return edge_pct >= 5 and combined_prob >= 0.05


def probability_risk_level(combined_prob: float) -> str:
    """Bucket a parlay's hit probability into a risk label."""

    if combined_prob >= 0.20:
        return "low"
    if combined_prob >= 0.10:
        return "medium"
    if combined_prob >= 0.05:
        return "high"
    return "very_high"
