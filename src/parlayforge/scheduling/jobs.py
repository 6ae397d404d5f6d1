"""Scheduling entry points."""

from __future__ import annotations

import argparse
import json
import logging
from collections.abc import Mapping
from typing import Any

from parlayforge.config import configure_logging
from parlayforge.data.repository import LegStore, SqlLegRepository
from parlayforge.parlays.engine import generate_best_parlays, summarize_parlays
from parlayforge.parlays.storage import save_parlays
from parlayforge.parlays.types import GenerationConfig

logger = logging.getLogger(__name__)

# Defaults for unattended runs; caller overrides win.
SCHEDULED_DEFAULTS: dict[str, Any] = {
    "min_leg_edge": 8.0,
    "min_parlay_edge": 10.0,
    "min_combined_prob": 0.15,
    "max_leg_count": 4,
    "max_results_per_bucket": 20,
    "parlay_type": "both",
}


def scheduled_config(overrides: Mapping[str, Any] | None = None) -> GenerationConfig:
    base = GenerationConfig.coerce(SCHEDULED_DEFAULTS)
    if not overrides:
        return base
    merged = base.model_dump()
    merged.update(GenerationConfig.coerce(overrides).model_dump(exclude_unset=True))
    return GenerationConfig.coerce(merged)


def run_generation_job(
    overrides: Mapping[str, Any] | None = None,
    persist: bool = True,
    repository: LegStore | None = None,
) -> dict[str, Any]:
    """Run one generation pass: pool -> parlays -> storage."""

    config = scheduled_config(overrides)
    repository = repository or SqlLegRepository()
    logger.info("Scheduled parlay generation started: %s", config.model_dump())

    parlays = generate_best_parlays(config, repository=repository)
    summary: dict[str, Any] = {
        "parlays_generated": len(parlays),
        "parlays_created": 0,
        "parlays_skipped": 0,
        "errors": 0,
        "summary": summarize_parlays(parlays),
    }
    if persist and parlays:
        stored = save_parlays(parlays, source=repository)
        summary.update(
            parlays_created=stored.created,
            parlays_skipped=stored.skipped,
            errors=stored.errors,
        )
    logger.info("Scheduled parlay generation complete: %s", summary)
    return summary


def main(argv: list[str] | None = None) -> None:  # pragma: no cover - CLI convenience
    parser = argparse.ArgumentParser(description="Generate and store the best parlays.")
    parser.add_argument("--config", help="JSON object of generation overrides", default=None)
    parser.add_argument("--dry-run", action="store_true", help="Generate without saving.")
    args = parser.parse_args(argv)

    configure_logging()
    overrides = json.loads(args.config) if args.config else None
    summary = run_generation_job(overrides, persist=not args.dry_run)
    print(json.dumps(summary, indent=2, default=str))


if __name__ == "__main__":  # pragma: no cover
    main()
