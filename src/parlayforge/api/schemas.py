"""Pydantic schemas for the ParlayForge API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from parlayforge.parlays.quality import is_tradable, probability_risk_level, quality_tier
from parlayforge.parlays.types import GenerationConfig, ParlayCombination


class LegOut(BaseModel):
    id: str
    match_id: str
    market_type: str
    market_subtype: str | None = None
    line: float | None = None
    consensus_prob: float
    model_agreement: float
    edge_consensus: float
    risk_level: str
    decimal_odds: float | None = None


class ParlayOut(BaseModel):
    parlay_type: str
    is_multi_game: bool
    leg_count: int
    match_ids: list[str]
    legs: list[LegOut]
    combined_prob: float
    correlation_penalty: float
    adjusted_prob: float
    implied_odds: float
    parlay_edge: float
    quality_score: float
    quality_tier: str
    confidence_tier: str
    risk_level: str
    tradable: bool

    @classmethod
    def from_combination(cls, parlay: ParlayCombination) -> ParlayOut:
        return cls(
            parlay_type=parlay.parlay_type.value,
            is_multi_game=parlay.is_multi_game,
            leg_count=parlay.leg_count,
            match_ids=parlay.match_ids,
            legs=[
                LegOut(
                    id=leg.id,
                    match_id=leg.match_id,
                    market_type=leg.market_type,
                    market_subtype=leg.market_subtype,
                    line=leg.line,
                    consensus_prob=leg.consensus_prob,
                    model_agreement=leg.model_agreement,
                    edge_consensus=leg.edge_consensus,
                    risk_level=leg.risk_level,
                    decimal_odds=leg.decimal_odds,
                )
                for leg in parlay.legs
            ],
            combined_prob=parlay.combined_prob,
            correlation_penalty=parlay.correlation_penalty,
            adjusted_prob=parlay.adjusted_prob,
            implied_odds=parlay.implied_odds,
            parlay_edge=parlay.parlay_edge,
            quality_score=parlay.quality_score,
            quality_tier=quality_tier(parlay.quality_score),
            confidence_tier=parlay.confidence_tier,
            risk_level=probability_risk_level(parlay.adjusted_prob),
            tradable=is_tradable(parlay.parlay_edge, parlay.adjusted_prob),
        )


class GenerateBestRequest(BaseModel):
    config: GenerationConfig = Field(default_factory=GenerationConfig)
    persist: bool = True


class GenerationSummary(BaseModel):
    multi_game: int
    single_game: int
    by_leg_count: dict[int, int]


class GenerateBestResponse(BaseModel):
    message: str
    parlays_generated: int
    parlays_created: int = 0
    parlays_skipped: int = 0
    errors: int = 0
    summary: GenerationSummary
    parlays: list[ParlayOut]


class StoredLegOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    match_id: str
    outcome: str
    home_team: str
    away_team: str
    model_prob: float
    decimal_odds: float | None = None
    edge: float


class StoredParlayOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    parlay_id: str
    parlay_type: str
    leg_count: int
    adjusted_prob: float
    edge_pct: float
    quality_score: float
    confidence_tier: str
    league_group: str | None = None
    earliest_kickoff: datetime
    kickoff_window: str
    created_at: datetime
    legs: list[StoredLegOut]
