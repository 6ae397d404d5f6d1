"""Read-only access to candidate legs and match metadata."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from parlayforge.db.models import MarketLeg, Match, utcnow
from parlayforge.errors import LegRepositoryError
from parlayforge.parlays.types import Leg

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LegQuery:
    """Threshold subset pushed down to the leg store; ``min_edge`` is a percentage."""

    min_probability: float
    min_model_agreement: float
    min_edge: float | None
    limit: int


@dataclass(frozen=True)
class MatchDetails:
    match_id: str
    home_team: str
    away_team: str
    league: str | None
    kickoff_date: datetime


class LegRepository(Protocol):
    def fetch_candidate_legs(self, query: LegQuery) -> list[Leg]:
        ...


class MatchDetailsSource(Protocol):
    def fetch_match_details(self, match_ids: Iterable[str]) -> dict[str, MatchDetails]:
        ...


class LegStore(LegRepository, MatchDetailsSource, Protocol):
    """Leg source that can also describe the matches it covers."""


def market_to_leg(market: MarketLeg) -> Leg:
    return Leg(
        id=market.id,
        match_id=market.match_id,
        market_type=market.market_type,
        market_subtype=market.market_subtype,
        line=float(market.line) if market.line is not None else None,
        consensus_prob=float(market.consensus_prob),
        consensus_confidence=float(market.consensus_confidence or 0.0),
        model_agreement=float(market.model_agreement),
        edge_consensus=float(market.edge_consensus or 0.0) * 100,
        risk_level=(market.risk_level or "medium").lower(),
        correlation_tags=tuple(market.correlation_tags or ()),
        decimal_odds=float(market.decimal_odds) if market.decimal_odds else None,
        implied_prob=float(market.implied_prob) if market.implied_prob else None,
    )


class SqlLegRepository:
    """Leg store backed by the ``market_legs`` and ``matches`` tables."""

    def __init__(
        self,
        session_factory: Callable[[], Session] | None = None,
        now_fn: Callable[[], datetime] = utcnow,
    ) -> None:
        if session_factory is None:
            from parlayforge.db.database import SessionLocal

            session_factory = SessionLocal
        self._session_factory = session_factory
        self._now = now_fn

    def fetch_candidate_legs(self, query: LegQuery) -> list[Leg]:
        stmt = (
            select(MarketLeg)
            .join(MarketLeg.match)
            .where(
                Match.status == "UPCOMING",
                Match.kickoff_date >= self._now(),
                Match.is_active.is_(True),
                MarketLeg.consensus_prob >= query.min_probability,
                MarketLeg.model_agreement >= query.min_model_agreement,
            )
        )
        if query.min_edge is not None:
            stmt = stmt.where(MarketLeg.edge_consensus >= query.min_edge / 100)
        stmt = stmt.order_by(
            MarketLeg.consensus_prob.desc(),
            MarketLeg.model_agreement.desc(),
            MarketLeg.edge_consensus.desc(),
            MarketLeg.id,
        ).limit(query.limit)

        try:
            with self._session_factory() as session:
                legs = [market_to_leg(row) for row in session.scalars(stmt)]
        except SQLAlchemyError as exc:
            raise LegRepositoryError(f"Failed to load candidate legs: {exc}") from exc
        logger.debug("Loaded %d candidate legs", len(legs))
        return legs

    def fetch_match_details(self, match_ids: Iterable[str]) -> dict[str, MatchDetails]:
        ids = sorted(set(match_ids))
        if not ids:
            return {}
        stmt = select(Match).where(Match.id.in_(ids))
        try:
            with self._session_factory() as session:
                return {
                    match.id: MatchDetails(
                        match_id=match.id,
                        home_team=match.home_team,
                        away_team=match.away_team,
                        league=match.league,
                        kickoff_date=match.kickoff_date,
                    )
                    for match in session.scalars(stmt)
                }
        except SQLAlchemyError as exc:
            raise LegRepositoryError(f"Failed to load match details: {exc}") from exc


class InMemoryLegRepository:
    """Fixed snapshot of legs; thresholds are left to the pool builder."""

    def __init__(self, legs: Iterable[Leg], matches: Iterable[MatchDetails] = ()) -> None:
        self._legs = list(legs)
        self._matches = {match.match_id: match for match in matches}

    def fetch_candidate_legs(self, query: LegQuery) -> list[Leg]:
        return list(self._legs)

    def fetch_match_details(self, match_ids: Iterable[str]) -> dict[str, MatchDetails]:
        return {mid: self._matches[mid] for mid in set(match_ids) if mid in self._matches}
