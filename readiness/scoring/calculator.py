"""Per-settlement readiness, risk and priority scoring.

readiness = pf·w_personnel + ch·w_components + ts·w_training
risk      = threat·w_threat + (100 - ch)·w_infra + response·w_response + incidents·w_incidents
priority  = risk·w_priority_risk + (100 - readiness)·w_priority_readiness

Every function here is pure: the result depends only on the arguments,
including the evaluation instant `now`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from typing import Iterable, Optional

from readiness.scoring import reasons as msg
from readiness.scoring.constants import (
    CERT_SHARE,
    COMPONENT_CHECKS,
    DRILL_POINTS,
    EVENT_POINTS,
    INCIDENT_OPEN_STATUS,
    INCIDENT_POINTS,
    RESPONSE_ARMED_POINTS,
    RESPONSE_QUALIFIED_POINTS,
    RESPONSE_WEEKEND_POINTS,
    SCORE_MAX,
    SCORE_MIN,
    SHOOTING_SHARE,
    TARGET_RECENT_DRILLS,
    TARGET_RECENT_EVENTS,
    THREAT_SCALE_MAX,
    VILLAGE_PROXIMITY_ALERT,
)
from readiness.scoring.reasons import ReasonBuilder
from readiness.scoring.types import (
    AggregatedEntities,
    SettlementScore,
    Weights,
)
from readiness.scoring.windows import (
    ValidityWindows,
    is_expired,
    local_date,
    recent_cutoff,
)

DEFAULT_WINDOWS = ValidityWindows()


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward +inf."""
    return int(math.floor(value + 0.5))


def _finish(value: float, clamp: bool) -> int:
    rounded = round_half_up(value)
    if clamp:
        return max(SCORE_MIN, min(SCORE_MAX, rounded))
    return rounded


# ---------------------------------------------------------------------------
# Sub-score results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PersonnelResult:
    fitness: float
    total_soldiers: int
    active_soldiers: int
    expired_shooting: int
    expired_certs: int
    armed_count: int
    reasons: tuple[str, ...]

    @property
    def qualified_ratio(self) -> float:
        """Share of active soldiers with a valid range qualification (0 when none)."""
        if self.active_soldiers == 0:
            return 0.0
        return (self.active_soldiers - self.expired_shooting) / self.active_soldiers


@dataclass(frozen=True)
class SubScore:
    value: float
    reasons: tuple[str, ...]


# ---------------------------------------------------------------------------
# Readiness components
# ---------------------------------------------------------------------------

def personnel_fitness(
    settlement: str,
    entities: AggregatedEntities,
    today: date,
    windows: ValidityWindows = DEFAULT_WINDOWS,
) -> PersonnelResult:
    """Range qualification (70%) and certification validity (30%) of active soldiers."""
    soldiers = [s for s in entities.soldiers if s.settlement == settlement]
    active = [s for s in soldiers if s.is_active]
    active_count = len(active)

    expired_shooting = sum(
        1 for s in active if is_expired(today, s.last_range_date, windows.shooting_days)
    )
    shooting_rate = (
        (active_count - expired_shooting) / active_count * 100 if active_count > 0 else 0.0
    )

    active_ids = {s.id for s in active}
    certs = [c for c in entities.certifications if c.soldier_id in active_ids]
    expired_certs = sum(
        1 for c in certs if is_expired(today, c.last_refresh_date, windows.cert_days)
    )
    # No certifications on file is not itself a penalty
    cert_rate = (len(certs) - expired_certs) / len(certs) * 100 if certs else 100.0

    fitness = shooting_rate * SHOOTING_SHARE + cert_rate * CERT_SHARE if active_count > 0 else 0.0

    rb = ReasonBuilder()
    if expired_shooting > 0:
        rb.add(msg.expired_shooting(expired_shooting))
    if expired_certs > 0:
        rb.add(msg.expired_certs(expired_certs))
    rb.add_if(active_count == 0, msg.NO_ACTIVE_FIGHTERS)

    return PersonnelResult(
        fitness=fitness,
        total_soldiers=len(soldiers),
        active_soldiers=active_count,
        expired_shooting=expired_shooting,
        expired_certs=expired_certs,
        armed_count=sum(1 for s in active if s.weapon_serial),
        reasons=rb.build(),
    )


def component_health(settlement: str, entities: AggregatedEntities) -> SubScore:
    """Share of the six infrastructure checks that pass, 0 when nothing was entered."""
    record = next((c for c in entities.components if c.settlement == settlement), None)
    rb = ReasonBuilder()
    if record is None:
        rb.add(msg.COMPONENTS_NOT_ENTERED)
        return SubScore(0.0, rb.build())

    operational = sum(1 for name in COMPONENT_CHECKS if getattr(record, name))
    health = operational / len(COMPONENT_CHECKS) * 100

    rb.add_if(not record.armory, msg.ARMORY_MISSING)
    rb.add_if(not record.fence_type, msg.FENCE_NOT_DEFINED)
    rb.add_if(not record.command_center_type, msg.COMMAND_CENTER_NOT_DEFINED)
    return SubScore(health, rb.build())


def training_score(
    settlement: str,
    entities: AggregatedEntities,
    today: date,
    windows: ValidityWindows = DEFAULT_WINDOWS,
) -> SubScore:
    """Half the score for two recent training events, half for one recent drill."""
    cutoff = recent_cutoff(today, windows.recent_months)
    recent_events = sum(
        1 for e in entities.training_events
        if e.settlement == settlement and e.event_date >= cutoff
    )
    recent_drills = sum(
        1 for d in entities.drills
        if d.settlement == settlement and d.drill_date >= cutoff
    )

    event_score = min(recent_events / TARGET_RECENT_EVENTS, 1) * EVENT_POINTS
    drill_score = min(recent_drills / TARGET_RECENT_DRILLS, 1) * DRILL_POINTS

    rb = ReasonBuilder()
    rb.add_if(recent_drills == 0, msg.no_recent_drill(windows.recent_months))
    rb.add_if(recent_events == 0, msg.no_recent_events(windows.recent_months))
    return SubScore(event_score + drill_score, rb.build())


# ---------------------------------------------------------------------------
# Risk components
# ---------------------------------------------------------------------------

def threat_rating(settlement: str, entities: AggregatedEntities) -> SubScore:
    """Mean of the four ordinal ratings scaled to 0-100, 0 when unrated."""
    rating = next((t for t in entities.threats if t.settlement == settlement), None)
    rb = ReasonBuilder()
    if rating is None:
        return SubScore(0.0, rb.build())

    avg = (
        rating.village_proximity
        + rating.road_proximity
        + rating.topographic_vulnerability
        + rating.regional_alert_level
    ) / 4
    if rating.village_proximity >= VILLAGE_PROXIMITY_ALERT:
        rb.add(msg.village_proximity(rating.village_proximity))
    return SubScore(avg / THREAT_SCALE_MAX * 100, rb.build())


def response_capability(
    settlement: str,
    entities: AggregatedEntities,
    personnel: PersonnelResult,
) -> SubScore:
    """Inverse of the response score (qualified share, armed soldiers, weekend holders)."""
    weekend_approved = sum(
        1 for h in entities.weekend_holders
        if h.settlement == settlement and h.is_holding_weapon
    )

    response = 0.0
    if personnel.active_soldiers > 0:
        response = (
            personnel.qualified_ratio * RESPONSE_QUALIFIED_POINTS
            + (RESPONSE_ARMED_POINTS if personnel.armed_count > 0 else 0.0)
            + (RESPONSE_WEEKEND_POINTS if weekend_approved > 0 else 0.0)
        )

    rb = ReasonBuilder()
    rb.add_if(weekend_approved == 0, msg.NO_WEEKEND_HOLDERS)
    return SubScore(100 - response, rb.build())


def open_incident_count(settlement: str, entities: AggregatedEntities) -> int:
    return sum(
        1 for i in entities.incidents
        if i.settlement == settlement and i.status == INCIDENT_OPEN_STATUS
    )


# ---------------------------------------------------------------------------
# Composite
# ---------------------------------------------------------------------------

def compute_settlement_score(
    settlement: str,
    entities: AggregatedEntities,
    weights: Weights,
    now: datetime,
    *,
    tz: Optional[tzinfo] = None,
    windows: ValidityWindows = DEFAULT_WINDOWS,
    clamp: bool = True,
) -> SettlementScore:
    """Compute readiness, risk and priority for one settlement.

    Args:
        settlement: Settlement name as used on the records.
        entities: Batch fetched for this run.
        weights: Active weight vector. Not required to be normalized.
        now: Evaluation instant; reduced to a local date in `tz`.
        tz: Organization timezone. None keeps `now` as given.
        windows: Validity and recency windows.
        clamp: Clamp every score into [0, 100] after rounding. Only matters
            for negative or unnormalized weights.

    Returns:
        A fresh SettlementScore. Reasons follow evaluation order.
    """
    today = local_date(now, tz)

    personnel = personnel_fitness(settlement, entities, today, windows)
    components = component_health(settlement, entities)
    training = training_score(settlement, entities, today, windows)

    readiness = _finish(
        personnel.fitness * weights.personnel
        + components.value * weights.components
        + training.value * weights.training,
        clamp,
    )

    threat = threat_rating(settlement, entities)
    # Weak infrastructure lowers readiness and raises risk
    infra_vulnerability = 100 - components.value
    response = response_capability(settlement, entities, personnel)

    incidents = open_incident_count(settlement, entities)
    incident_score = min(incidents * INCIDENT_POINTS, 100)
    incident_reasons = (msg.open_incidents(incidents),) if incidents > 0 else ()

    risk = _finish(
        threat.value * weights.risk_threat
        + infra_vulnerability * weights.risk_infra
        + response.value * weights.risk_response
        + incident_score * weights.risk_incidents,
        clamp,
    )

    priority = _finish(
        risk * weights.priority_risk + (100 - readiness) * weights.priority_readiness,
        clamp,
    )

    return SettlementScore(
        settlement=settlement,
        readiness=readiness,
        risk=risk,
        priority=priority,
        personnel_fitness=_finish(personnel.fitness, clamp),
        component_health=_finish(components.value, clamp),
        training_score=_finish(training.value, clamp),
        threat_rating=_finish(threat.value, clamp),
        infra_vulnerability=_finish(infra_vulnerability, clamp),
        response_capability=_finish(response.value, clamp),
        open_incidents=incidents,
        reasons=(
            personnel.reasons
            + components.reasons
            + training.reasons
            + threat.reasons
            + response.reasons
            + incident_reasons
        ),
        total_soldiers=personnel.total_soldiers,
        active_soldiers=personnel.active_soldiers,
        expired_shooting=personnel.expired_shooting,
        armed_count=personnel.armed_count,
    )


def score_settlements(
    settlements: Iterable[str],
    entities: AggregatedEntities,
    weights: Weights,
    now: datetime,
    *,
    tz: Optional[tzinfo] = None,
    windows: ValidityWindows = DEFAULT_WINDOWS,
    clamp: bool = True,
) -> list[SettlementScore]:
    """Score every settlement, in master-list order."""
    return [
        compute_settlement_score(
            name, entities, weights, now, tz=tz, windows=windows, clamp=clamp
        )
        for name in settlements
    ]
