"""FastAPI backend for ParlayForge."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Depends, FastAPI, HTTPException, Query, status

from parlayforge import __version__
from parlayforge.api.schemas import (
    GenerateBestRequest,
    GenerateBestResponse,
    GenerationSummary,
    ParlayOut,
    StoredParlayOut,
)
from parlayforge.data.repository import SqlLegRepository
from parlayforge.errors import LegRepositoryError
from parlayforge.parlays.engine import generate_best_parlays, summarize_parlays
from parlayforge.parlays.storage import list_saved_parlays, save_parlays

logger = logging.getLogger(__name__)

app = FastAPI(
    title="ParlayForge API",
    version=__version__,
    description="Generates ranked multi-game and single-game parlays from scored legs.",
)


def get_repository() -> SqlLegRepository:
    return SqlLegRepository()


RepositoryDep = Annotated[SqlLegRepository, Depends(get_repository)]
LimitQuery = Annotated[int, Query(ge=1, le=100)]
ParlayTypeQuery = Annotated[str | None, Query(pattern="^(multi_game|single_game)$")]


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/parlays/generate-best", response_model=GenerateBestResponse)
def generate_best(payload: GenerateBestRequest, repository: RepositoryDep) -> GenerateBestResponse:
    try:
        parlays = generate_best_parlays(payload.config, repository=repository)
    except LegRepositoryError as exc:
        logger.error("Parlay generation failed: %s", exc)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc

    response = GenerateBestResponse(
        message=f"Generated {len(parlays)} parlays",
        parlays_generated=len(parlays),
        summary=GenerationSummary(**summarize_parlays(parlays)),
        parlays=[ParlayOut.from_combination(parlay) for parlay in parlays],
    )
    if not parlays:
        response.message = "No parlays generated (no eligible markets found)"
        return response

    if payload.persist:
        try:
            stored = save_parlays(parlays, source=repository)
        except LegRepositoryError as exc:
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
        response.parlays_created = stored.created
        response.parlays_skipped = stored.skipped
        response.errors = stored.errors
        response.message = (
            f"Generated {len(parlays)} parlays, created {stored.created}, skipped {stored.skipped}"
        )
    return response


@app.get("/parlays", response_model=list[StoredParlayOut])
def list_parlays(
    limit: LimitQuery = 20,
    parlay_type: ParlayTypeQuery = None,
) -> list[StoredParlayOut]:
    rows = list_saved_parlays(limit=limit, parlay_type=parlay_type)
    return [StoredParlayOut.model_validate(row) for row in rows]
