"""Scoring run: weights + entities -> per-settlement scores -> ranking.

Recomputed from scratch on every call; nothing is persisted.

Reference: readiness/scoring/calculator.py for the formulas.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from readiness.errors import PartialDataWarning
from readiness.policy.ranking import RankedScores, rank_scores
from readiness.policy.settlements import all_settlements, load_regions
from readiness.scoring.calculator import score_settlements
from readiness.scoring.types import Weights
from server.config import settings
from server.models.db import async_session
from server.services.aggregator import fetch_all
from server.services.weights_store import get_weights

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoringRun:
    computed_at: datetime
    weights: Weights
    ranked: RankedScores
    warnings: tuple[PartialDataWarning, ...]


async def run_scoring(now: Optional[datetime] = None) -> ScoringRun:
    """Score every settlement in the master list.

    Raises:
        ConfigurationError: the weight configuration cannot be loaded.
    """
    now = now or datetime.now(timezone.utc)

    async with async_session() as db:
        weights = await get_weights(db)

    entities = await fetch_all(now, settings.tz)
    settlements = all_settlements(load_regions(settings.settlements_path))

    scores = score_settlements(
        settlements,
        entities,
        weights,
        now,
        tz=settings.tz,
        clamp=settings.clamp_scores,
    )
    ranked = rank_scores(scores)

    if entities.warnings:
        logger.warning(
            "Scored %d settlements on partial data (missing: %s)",
            len(ranked),
            ", ".join(entities.degraded_categories),
        )
    else:
        logger.info("Scored %d settlements", len(ranked))

    return ScoringRun(
        computed_at=now,
        weights=weights,
        ranked=ranked,
        warnings=entities.warnings,
    )
