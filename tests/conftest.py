"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from parlayforge.db import database
from parlayforge.db.models import Base


@pytest.fixture()
def session_factory(monkeypatch) -> Iterator[sessionmaker[Session]]:
    """In-memory SQLite database wired in place of the configured one."""

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    factory = sessionmaker(bind=engine, class_=Session, expire_on_commit=False, autoflush=False)
    monkeypatch.setattr(database, "SessionLocal", factory)
    database.init_db()
    yield factory
    engine.dispose()
