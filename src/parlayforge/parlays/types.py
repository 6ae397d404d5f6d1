"""Value types for leg and parlay modeling."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal, Mapping

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from parlayforge.errors import ConfigurationError


class ParlayType(str, Enum):
    MULTI_GAME = "multi_game"
    SINGLE_GAME = "single_game"


@dataclass(frozen=True)
class Leg:
    """One market outcome on one match, as read from the leg store."""

    id: str
    match_id: str
    market_type: str
    market_subtype: str | None
    line: float | None
    consensus_prob: float
    consensus_confidence: float
    model_agreement: float
    edge_consensus: float
    risk_level: str
    correlation_tags: tuple[str, ...] = ()
    decimal_odds: float | None = None
    implied_prob: float | None = None


@dataclass(frozen=True)
class ParlayCombination:
    """A scored multi-leg combination that passed the run thresholds."""

    legs: tuple[Leg, ...]
    parlay_type: ParlayType
    combined_prob: float
    correlation_penalty: float
    adjusted_prob: float
    implied_odds: float
    fair_odds: float
    parlay_edge: float
    quality_score: float
    confidence_tier: str
    has_correlation: bool = False

    @property
    def leg_count(self) -> int:
        return len(self.legs)

    @property
    def is_multi_game(self) -> bool:
        return self.parlay_type is ParlayType.MULTI_GAME

    @property
    def match_ids(self) -> list[str]:
        return list(dict.fromkeys(leg.match_id for leg in self.legs))

    @property
    def leg_ids(self) -> list[str]:
        return [leg.id for leg in self.legs]

    @property
    def signature(self) -> str:
        """Order-independent identity of the leg set."""

        return "|".join(sorted(self.leg_ids))


class GenerationConfig(BaseModel):
    """Per-run generation parameters. Percentages are expressed as 0-100."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    min_leg_edge: float = Field(default=0.0, ge=0.0, le=100.0)
    min_parlay_edge: float = Field(default=5.0, ge=0.0)
    min_combined_prob: float = Field(default=0.15, ge=0.0, le=1.0)
    max_leg_count: int = Field(default=5, ge=2, le=10)
    min_model_agreement: float = Field(default=0.65, ge=0.0, le=1.0)
    max_results_per_bucket: int = Field(
        default=20,
        ge=1,
        validation_alias=AliasChoices("maxResultsPerBucket", "maxResults", "max_results_per_bucket"),
    )
    parlay_type: Literal["multi_game", "single_game", "both"] = "both"

    @property
    def parlay_types(self) -> list[ParlayType]:
        if self.parlay_type == "both":
            return [ParlayType.MULTI_GAME, ParlayType.SINGLE_GAME]
        return [ParlayType(self.parlay_type)]

    @classmethod
    def coerce(cls, value: GenerationConfig | Mapping[str, Any] | None) -> GenerationConfig:
        """Validate ``value`` once, turning pydantic failures into ConfigurationError."""

        if isinstance(value, cls):
            return value
        try:
            return cls.model_validate(dict(value or {}))
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid generation config: {exc}") from exc
