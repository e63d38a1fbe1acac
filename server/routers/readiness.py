"""Readiness endpoints: ranked scores, summary, settlements, weights."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Header, HTTPException

from readiness.policy.ranking import METRICS, severity_band, summarize
from readiness.policy.settlements import all_settlements, company_of, load_regions, region_of
from readiness.scoring.types import SettlementScore, Weights
from server.config import settings
from server.models.db import async_session
from server.schemas import (
    CompanyItem,
    RegionItem,
    SaveWeightsRequest,
    ScoresResponse,
    SettlementScoreResponse,
    SettlementsResponse,
    SummaryResponse,
    WeightsResponse,
)
from server.services import scoring, weights_store

router = APIRouter(prefix="/readiness", tags=["readiness"])


def _weights_response(w: Weights) -> WeightsResponse:
    return WeightsResponse(**w.to_dict(), group_sums=w.group_sums(), normalized=w.is_normalized())


def _score_response(s: SettlementScore) -> SettlementScoreResponse:
    regions = load_regions(settings.settlements_path)
    return SettlementScoreResponse(
        **s.to_dict(),
        company=company_of(s.settlement, regions),
        region=region_of(s.settlement, regions),
        bands={m: severity_band(getattr(s, m), m) for m in METRICS},
    )


def _require_operator(operator_id: Optional[str]) -> str:
    # Authentication happens upstream; the header carries the verified identity.
    if not operator_id:
        raise HTTPException(401, "Operator identity required")
    return operator_id


# ---------------------------------------------------------------------------
# Scores
# ---------------------------------------------------------------------------

@router.get("/scores", response_model=ScoresResponse)
async def get_scores():
    """All settlements, most urgent first."""
    run = await scoring.run_scoring()
    return ScoresResponse(
        computed_at=run.computed_at,
        weights=_weights_response(run.weights),
        degraded_sources=[w.category for w in run.warnings],
        scores=[_score_response(s) for s in run.ranked],
    )


@router.get("/scores/{settlement}", response_model=SettlementScoreResponse)
async def get_settlement_score(settlement: str):
    """Score of a single settlement."""
    run = await scoring.run_scoring()
    score = run.ranked.find(settlement)
    if score is None:
        raise HTTPException(404, "Settlement not found")
    return _score_response(score)


@router.get("/summary", response_model=SummaryResponse)
async def get_summary(settlement: Optional[str] = None):
    """Dashboard totals, optionally for one settlement."""
    run = await scoring.run_scoring()
    if settlement is not None and run.ranked.find(settlement) is None:
        raise HTTPException(404, "Settlement not found")

    summary = summarize(run.ranked, settlement)
    return SummaryResponse(
        computed_at=run.computed_at,
        settlements=summary.settlements,
        active_soldiers=summary.active_soldiers,
        expired_shooting=summary.expired_shooting,
        open_incidents=summary.open_incidents,
        armed_soldiers=summary.armed_soldiers,
        avg_readiness=summary.avg_readiness,
        critical_settlements=summary.critical_settlements,
        needs_attention=list(summary.needs_attention),
        degraded_sources=[w.category for w in run.warnings],
    )


@router.get("/settlements", response_model=SettlementsResponse)
async def get_settlements():
    """Region -> company -> settlement hierarchy."""
    regions = load_regions(settings.settlements_path)
    return SettlementsResponse(
        regions=[
            RegionItem(
                name=r.name,
                companies=[
                    CompanyItem(name=c.name, settlements=list(c.settlements))
                    for c in r.companies
                ],
            )
            for r in regions
        ],
        settlements=all_settlements(regions),
    )


# ---------------------------------------------------------------------------
# Weights
# ---------------------------------------------------------------------------

@router.get("/weights", response_model=WeightsResponse)
async def get_weights():
    async with async_session() as db:
        weights = await weights_store.get_weights(db)
    return _weights_response(weights)


@router.put("/weights", response_model=WeightsResponse)
async def save_weights(
    req: SaveWeightsRequest,
    x_operator_id: Optional[str] = Header(default=None),
):
    """Replace the active weights. Groups are not required to sum to 1."""
    operator_id = _require_operator(x_operator_id)
    async with async_session() as db:
        weights = await weights_store.save_weights(db, req.model_dump(), operator_id)
    return _weights_response(weights)


@router.post("/weights/reset", response_model=WeightsResponse)
async def reset_weights(x_operator_id: Optional[str] = Header(default=None)):
    """Restore the default weights."""
    operator_id = _require_operator(x_operator_id)
    async with async_session() as db:
        weights = await weights_store.reset_weights(db, operator_id)
    return _weights_response(weights)
