"""SQL leg repository tests."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from parlayforge.data.repository import LegQuery, SqlLegRepository
from parlayforge.db.models import MarketLeg, Match
from parlayforge.errors import LegRepositoryError

NOW = datetime(2030, 3, 1, 12, 0)


def _seed(factory: sessionmaker[Session]) -> None:
    with factory() as session:
        session.add_all(
            [
                Match(id="future", home_team="Ajax", away_team="PSV", league="Eredivisie",
                      kickoff_date=NOW + timedelta(hours=5)),
                Match(id="past", home_team="Lazio", away_team="Roma", league="Serie A",
                      kickoff_date=NOW - timedelta(hours=5)),
                Match(id="inactive", home_team="Lyon", away_team="Nice", league="Ligue 1",
                      kickoff_date=NOW + timedelta(days=1), is_active=False),
                Match(id="finished", home_team="Celtic", away_team="Hearts", league="SPL",
                      kickoff_date=NOW + timedelta(days=1), status="FINISHED"),
            ]
        )
        session.add_all(
            [
                MarketLeg(id="f-home", match_id="future", market_type="1X2", market_subtype="HOME",
                          consensus_prob=0.62, consensus_confidence=0.7, model_agreement=0.8,
                          edge_consensus=0.09, risk_level="LOW", correlation_tags=["home"],
                          decimal_odds=1.9, implied_prob=0.52),
                MarketLeg(id="f-over", match_id="future", market_type="TOTALS", market_subtype="OVER",
                          line=2.5, consensus_prob=0.70, consensus_confidence=0.6, model_agreement=0.75,
                          edge_consensus=None, risk_level="medium"),
                MarketLeg(id="f-btts", match_id="future", market_type="BTTS", market_subtype="YES",
                          consensus_prob=0.62, consensus_confidence=0.6, model_agreement=0.9,
                          edge_consensus=0.03, risk_level="high"),
                MarketLeg(id="f-weak", match_id="future", market_type="BTTS", market_subtype="NO",
                          consensus_prob=0.45, consensus_confidence=0.6, model_agreement=0.9,
                          edge_consensus=0.2, risk_level="low"),
                MarketLeg(id="f-split", match_id="future", market_type="DNB", market_subtype="HOME",
                          consensus_prob=0.8, consensus_confidence=0.6, model_agreement=0.5,
                          edge_consensus=0.2, risk_level="low"),
                MarketLeg(id="p-home", match_id="past", market_type="1X2", market_subtype="HOME",
                          consensus_prob=0.9, consensus_confidence=0.9, model_agreement=0.9,
                          edge_consensus=0.1, risk_level="low"),
                MarketLeg(id="i-home", match_id="inactive", market_type="1X2", market_subtype="HOME",
                          consensus_prob=0.9, consensus_confidence=0.9, model_agreement=0.9,
                          edge_consensus=0.1, risk_level="low"),
                MarketLeg(id="x-home", match_id="finished", market_type="1X2", market_subtype="HOME",
                          consensus_prob=0.9, consensus_confidence=0.9, model_agreement=0.9,
                          edge_consensus=0.1, risk_level="low"),
            ]
        )
        session.commit()


def _query(min_edge: float | None = None, limit: int = 100) -> LegQuery:
    return LegQuery(min_probability=0.5, min_model_agreement=0.65, min_edge=min_edge, limit=limit)


def test_fetch_scopes_to_upcoming_active_matches(session_factory) -> None:
    _seed(session_factory)
    repo = SqlLegRepository(session_factory, now_fn=lambda: NOW)
    legs = repo.fetch_candidate_legs(_query())

    assert [leg.id for leg in legs] == ["f-over", "f-btts", "f-home"]
    home = legs[-1]
    assert home.edge_consensus == pytest.approx(9.0)
    assert home.risk_level == "low"
    assert home.correlation_tags == ("home",)
    assert home.decimal_odds == pytest.approx(1.9)
    over = legs[0]
    assert over.line == pytest.approx(2.5)
    assert over.edge_consensus == 0.0
    assert over.decimal_odds is None


def test_fetch_applies_edge_threshold_as_percentage(session_factory) -> None:
    _seed(session_factory)
    repo = SqlLegRepository(session_factory, now_fn=lambda: NOW)
    assert [leg.id for leg in repo.fetch_candidate_legs(_query(min_edge=5))] == ["f-home"]
    assert len(repo.fetch_candidate_legs(_query(limit=2))) == 2


def test_fetch_match_details(session_factory) -> None:
    _seed(session_factory)
    repo = SqlLegRepository(session_factory)
    details = repo.fetch_match_details(["future", "past", "missing"])
    assert set(details) == {"future", "past"}
    assert details["future"].home_team == "Ajax"
    assert repo.fetch_match_details([]) == {}


def test_database_errors_are_wrapped() -> None:
    engine = create_engine("sqlite://", poolclass=StaticPool)
    repo = SqlLegRepository(sessionmaker(bind=engine), now_fn=lambda: NOW)
    with pytest.raises(LegRepositoryError):
        repo.fetch_candidate_legs(_query())
