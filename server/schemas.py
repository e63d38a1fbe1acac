"""Pydantic request/response schemas for the API."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, StrictFloat, StrictInt

from readiness.policy.ranking import ScoreBand


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

Number = Union[StrictInt, StrictFloat]


class SaveWeightsRequest(BaseModel):
    """All nine weights. Any finite number is accepted; groups need not sum to 1."""

    model_config = ConfigDict(extra="forbid")

    personnel: Number
    components: Number
    training: Number
    risk_threat: Number
    risk_infra: Number
    risk_response: Number
    risk_incidents: Number
    priority_risk: Number
    priority_readiness: Number


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class WeightsResponse(BaseModel):
    personnel: float
    components: float
    training: float
    risk_threat: float
    risk_infra: float
    risk_response: float
    risk_incidents: float
    priority_risk: float
    priority_readiness: float
    group_sums: Dict[str, float]
    normalized: Dict[str, bool]


class SettlementScoreResponse(BaseModel):
    settlement: str
    company: Optional[str] = None
    region: Optional[str] = None

    readiness: int
    risk: int
    priority: int

    personnel_fitness: int
    component_health: int
    training_score: int
    threat_rating: int
    infra_vulnerability: int
    response_capability: int
    open_incidents: int

    reasons: List[str]

    total_soldiers: int
    active_soldiers: int
    expired_shooting: int
    armed_count: int

    bands: Dict[str, ScoreBand]


class ScoresResponse(BaseModel):
    computed_at: datetime
    weights: WeightsResponse
    degraded_sources: List[str]
    scores: List[SettlementScoreResponse]


class SummaryResponse(BaseModel):
    computed_at: datetime
    settlements: int
    active_soldiers: int
    expired_shooting: int
    open_incidents: int
    armed_soldiers: int
    avg_readiness: int
    critical_settlements: int
    needs_attention: List[str]
    degraded_sources: List[str]


class CompanyItem(BaseModel):
    name: str
    settlements: List[str]


class RegionItem(BaseModel):
    name: str
    companies: List[CompanyItem]


class SettlementsResponse(BaseModel):
    regions: List[RegionItem]
    settlements: List[str]


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
