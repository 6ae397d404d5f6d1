"""Persistence of generated parlays."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from parlayforge.data.repository import MatchDetails, MatchDetailsSource, SqlLegRepository
from parlayforge.db.database import get_session
from parlayforge.db.models import GeneratedParlay, GeneratedParlayLeg, utcnow
from parlayforge.parlays.types import Leg, ParlayCombination

logger = logging.getLogger(__name__)

DUPLICATE_KICKOFF_WINDOW = timedelta(hours=1)


@dataclass
class StorageResult:
    created: int = 0
    skipped: int = 0
    errors: int = 0


def kickoff_window(earliest: datetime, now: datetime) -> str:
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    tomorrow = today + timedelta(days=1)
    if today <= earliest < tomorrow:
        return "today"
    if tomorrow <= earliest < tomorrow + timedelta(days=1):
        return "tomorrow"
    return "this_week"


def league_group(details: Iterable[MatchDetails]) -> str | None:
    leagues = sorted({d.league for d in details if d.league})
    if not leagues:
        return None
    if len(leagues) == 1:
        return leagues[0]
    return f"{len(leagues)} leagues"


def leg_outcome(leg: Leg) -> str:
    """Short outcome code stored alongside each persisted leg."""

    subtype = (leg.market_subtype or "").upper()
    if leg.market_type == "1X2":
        return {"HOME": "H", "AWAY": "A"}.get(subtype, "D")
    if leg.market_type == "TOTALS":
        return "OVER" if subtype == "OVER" else "UNDER"
    if leg.market_type == "BTTS":
        return "YES" if subtype == "YES" else "NO"
    if leg.market_type == "DNB":
        return "DNB_H" if subtype == "HOME" else "DNB_A"
    return (subtype or leg.market_type)[:16]


def _is_duplicate(session: Session, parlay: ParlayCombination, earliest: datetime) -> bool:
    stmt = (
        select(GeneratedParlay)
        .options(selectinload(GeneratedParlay.legs))
        .where(
            GeneratedParlay.parlay_type == parlay.parlay_type.value,
            GeneratedParlay.leg_count == parlay.leg_count,
            GeneratedParlay.earliest_kickoff >= earliest - DUPLICATE_KICKOFF_WINDOW,
            GeneratedParlay.earliest_kickoff <= earliest + DUPLICATE_KICKOFF_WINDOW,
        )
    )
    leg_ids = set(parlay.leg_ids)
    return any({leg.market_leg_id for leg in existing.legs} == leg_ids for existing in session.scalars(stmt))


def save_parlay(
    session: Session,
    parlay: ParlayCombination,
    details: dict[str, MatchDetails],
    now: datetime,
) -> GeneratedParlay | None:
    """Add ``parlay`` to ``session``; ``None`` if an equivalent parlay exists."""

    kickoffs = sorted(details[mid].kickoff_date for mid in parlay.match_ids)
    earliest, latest = kickoffs[0], kickoffs[-1]
    if _is_duplicate(session, parlay, earliest):
        return None

    record = GeneratedParlay(
        parlay_id=str(uuid.uuid4()),
        parlay_type=parlay.parlay_type.value,
        leg_count=parlay.leg_count,
        combined_prob=parlay.combined_prob,
        correlation_penalty=parlay.correlation_penalty,
        adjusted_prob=parlay.adjusted_prob,
        implied_odds=parlay.implied_odds,
        edge_pct=parlay.parlay_edge,
        quality_score=parlay.quality_score,
        confidence_tier=parlay.confidence_tier,
        league_group=league_group(details[mid] for mid in parlay.match_ids),
        earliest_kickoff=earliest,
        latest_kickoff=latest,
        kickoff_window=kickoff_window(earliest, now),
    )
    for order, leg in enumerate(parlay.legs, start=1):
        match = details[leg.match_id]
        record.legs.append(
            GeneratedParlayLeg(
                market_leg_id=leg.id,
                match_id=leg.match_id,
                outcome=leg_outcome(leg),
                home_team=match.home_team,
                away_team=match.away_team,
                model_prob=leg.consensus_prob,
                decimal_odds=leg.decimal_odds,
                edge=leg.edge_consensus / 100,
                leg_order=order,
            )
        )
    session.add(record)
    return record


def save_parlays(
    parlays: Iterable[ParlayCombination],
    source: MatchDetailsSource | None = None,
    now_fn: Callable[[], datetime] = utcnow,
) -> StorageResult:
    """Persist ranked parlays one transaction at a time.

    Parlays whose matches have no stored details, or that duplicate an
    existing parlay, are skipped. A failed write is logged and counted.
    """

    parlays = list(parlays)
    result = StorageResult()
    if not parlays:
        return result

    source = source or SqlLegRepository()
    details = source.fetch_match_details(mid for parlay in parlays for mid in parlay.match_ids)
    now = now_fn()

    for parlay in parlays:
        missing = [mid for mid in parlay.match_ids if mid not in details]
        if missing:
            logger.warning("Missing match data for parlay legs: %s", missing)
            result.skipped += 1
            continue
        try:
            with get_session() as session:
                record = save_parlay(session, parlay, details, now)
        except SQLAlchemyError:
            logger.exception("Failed to save %d-leg %s parlay", parlay.leg_count, parlay.parlay_type.value)
            result.errors += 1
            continue
        if record is None:
            result.skipped += 1
        else:
            result.created += 1
            logger.debug("Saved parlay %s (edge %.2f%%)", record.parlay_id, parlay.parlay_edge)

    logger.info("Saved parlays: created=%d skipped=%d errors=%d", result.created, result.skipped, result.errors)
    return result


def list_saved_parlays(limit: int = 20, parlay_type: str | None = None) -> list[GeneratedParlay]:
    stmt = (
        select(GeneratedParlay)
        .options(selectinload(GeneratedParlay.legs))
        .order_by(GeneratedParlay.created_at.desc(), GeneratedParlay.quality_score.desc())
        .limit(limit)
    )
    if parlay_type:
        stmt = stmt.where(GeneratedParlay.parlay_type == parlay_type)
    with get_session() as session:
        return list(session.scalars(stmt))
