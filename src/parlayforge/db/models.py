"""ORM models for ParlayForge."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def utcnow() -> datetime:
    """Naive UTC timestamp, matching how kickoff times are stored."""

    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    """Base declarative class."""


class Match(Base):
    """Fixture metadata for markets that can be parlayed."""

    __tablename__ = "matches"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    home_team: Mapped[str] = mapped_column(String(128), nullable=False)
    away_team: Mapped[str] = mapped_column(String(128), nullable=False)
    league: Mapped[str | None] = mapped_column(String(128))
    kickoff_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    status: Mapped[str] = mapped_column(String(32), default="UPCOMING")
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    markets: Mapped[list[MarketLeg]] = relationship(back_populates="match", cascade="all, delete-orphan")


class MarketLeg(Base):
    """A scored single-market outcome; edge is stored as a fraction."""

    __tablename__ = "market_legs"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    match_id: Mapped[str] = mapped_column(ForeignKey("matches.id"), nullable=False, index=True)
    market_type: Mapped[str] = mapped_column(String(32), nullable=False)
    market_subtype: Mapped[str | None] = mapped_column(String(32))
    line: Mapped[float | None] = mapped_column(Float)
    consensus_prob: Mapped[float] = mapped_column(Float, nullable=False)
    consensus_confidence: Mapped[float] = mapped_column(Float, default=0.0)
    model_agreement: Mapped[float] = mapped_column(Float, nullable=False)
    edge_consensus: Mapped[float | None] = mapped_column(Float)
    risk_level: Mapped[str] = mapped_column(String(16), default="medium")
    correlation_tags: Mapped[list[str]] = mapped_column(JSON, default=list)
    decimal_odds: Mapped[float | None] = mapped_column(Float)
    implied_prob: Mapped[float | None] = mapped_column(Float)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    match: Mapped[Match] = relationship(back_populates="markets")


class GeneratedParlay(Base):
    """Parlay accepted from a generation run, with aggregated stats."""

    __tablename__ = "generated_parlays"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    parlay_id: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    parlay_type: Mapped[str] = mapped_column(String(32), nullable=False)
    leg_count: Mapped[int] = mapped_column(Integer, nullable=False)
    combined_prob: Mapped[float] = mapped_column(Float, nullable=False)
    correlation_penalty: Mapped[float] = mapped_column(Float, nullable=False)
    adjusted_prob: Mapped[float] = mapped_column(Float, nullable=False)
    implied_odds: Mapped[float] = mapped_column(Float, nullable=False)
    edge_pct: Mapped[float] = mapped_column(Float, nullable=False)
    quality_score: Mapped[float] = mapped_column(Float, nullable=False)
    confidence_tier: Mapped[str] = mapped_column(String(16), nullable=False)
    league_group: Mapped[str | None] = mapped_column(String(128))
    earliest_kickoff: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    latest_kickoff: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    kickoff_window: Mapped[str] = mapped_column(String(16), nullable=False)
    status: Mapped[str] = mapped_column(String(16), default="active")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    legs: Mapped[list[GeneratedParlayLeg]] = relationship(
        back_populates="parlay",
        cascade="all, delete-orphan",
        order_by="GeneratedParlayLeg.leg_order",
    )


class GeneratedParlayLeg(Base):
    """One leg of a stored parlay."""

    __tablename__ = "generated_parlay_legs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    parlay_id: Mapped[int] = mapped_column(ForeignKey("generated_parlays.id"), nullable=False)
    market_leg_id: Mapped[str] = mapped_column(String(64), nullable=False)
    match_id: Mapped[str] = mapped_column(String(64), nullable=False)
    outcome: Mapped[str] = mapped_column(String(16), nullable=False)
    home_team: Mapped[str] = mapped_column(String(128), nullable=False)
    away_team: Mapped[str] = mapped_column(String(128), nullable=False)
    model_prob: Mapped[float] = mapped_column(Float, nullable=False)
    decimal_odds: Mapped[float | None] = mapped_column(Float)
    edge: Mapped[float] = mapped_column(Float, nullable=False)
    leg_order: Mapped[int] = mapped_column(Integer, default=0)

    parlay: Mapped[GeneratedParlay] = relationship(back_populates="legs")
