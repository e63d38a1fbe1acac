"""Weight configuration store: one active weight row, read fresh per run."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from readiness.errors import ConfigurationError, WeightValidationError
from readiness.scoring.constants import WEIGHT_NAMES
from readiness.scoring.types import Weights
from server.models.db import ReadinessWeights

logger = logging.getLogger(__name__)


def _column(name: str) -> str:
    return f"{name}_weight"


def _to_weights(row: ReadinessWeights) -> Weights:
    return Weights(**{name: float(getattr(row, _column(name))) for name in WEIGHT_NAMES})


async def _active_row(db: AsyncSession) -> Optional[ReadinessWeights]:
    result = await db.execute(select(ReadinessWeights).limit(1))
    return result.scalar_one_or_none()


async def get_weights(db: AsyncSession) -> Weights:
    """Active weights, or the defaults when none were ever saved.

    Raises:
        ConfigurationError: the weight table cannot be read.
    """
    try:
        row = await _active_row(db)
    except SQLAlchemyError as e:
        raise ConfigurationError(f"Cannot load readiness weights: {e}") from e
    if row is None:
        return Weights()
    return _to_weights(row)


async def save_weights(
    db: AsyncSession, values: Mapping[str, Any], operator_id: Optional[str]
) -> Weights:
    """Replace the active weights (last write wins).

    Missing names keep their default value. No normalization is applied.

    Raises:
        WeightValidationError: a non-numeric value or no operator identity.
            Nothing is written.
    """
    if not operator_id:
        raise WeightValidationError("An operator identity is required to save weights")
    weights = Weights.from_dict(values)

    row = await _active_row(db)
    if row is None:
        row = ReadinessWeights()
        db.add(row)
    for name, value in weights.to_dict().items():
        setattr(row, _column(name), value)
    row.updated_by = operator_id
    row.updated_at = datetime.now(timezone.utc)
    await db.commit()

    logger.info("Readiness weights updated by %s: %s", operator_id, weights.to_dict())
    return weights


async def reset_weights(db: AsyncSession, operator_id: Optional[str]) -> Weights:
    """Restore the documented defaults."""
    return await save_weights(db, Weights().to_dict(), operator_id)
