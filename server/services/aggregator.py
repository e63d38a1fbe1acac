"""Batch fetch of every record a scoring run needs.

The nine category reads are independent and read-only, so they run
concurrently, each in its own session. A category whose read fails degrades
to an empty collection plus a PartialDataWarning; the run continues.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime, tzinfo
from typing import Any, Callable, Optional

from sqlalchemy import Select, select
from sqlalchemy.exc import SQLAlchemyError

from readiness.errors import PartialDataWarning
from readiness.scoring import types as t
from readiness.scoring.constants import INCIDENT_OPEN_STATUS
from readiness.scoring.windows import local_date, week_bounds
from server.config import settings
from server.models.db import (
    Certification,
    Equipment,
    SecurityComponent,
    SecurityIncident,
    SettlementDrill,
    Soldier,
    ThreatRating,
    TrainingEvent,
    WeekendWeaponHolder,
    async_session,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Row -> record conversion
# ---------------------------------------------------------------------------

def _soldier(row: Soldier) -> t.Soldier:
    return t.Soldier(
        id=row.id,
        settlement=row.settlement,
        is_active=row.is_active,
        weapon_serial=row.weapon_serial,
        last_range_date=row.last_shooting_range_date,
        full_name=row.full_name,
    )


def _certification(row: Certification) -> t.Certification:
    return t.Certification(
        id=row.id,
        soldier_id=row.soldier_id,
        cert_type=row.cert_type,
        last_refresh_date=row.last_refresh_date,
    )


def _component(row: SecurityComponent) -> t.SecurityComponent:
    return t.SecurityComponent(
        settlement=row.settlement,
        armory=row.armory,
        armored_vehicle=row.armored_vehicle,
        shelter=row.shelter,
        fence_type=row.fence_type,
        command_center_type=row.command_center_type,
        defensive_security_type=row.defensive_security_type,
    )


def _equipment(row: Equipment) -> t.EquipmentAggregate:
    return t.EquipmentAggregate(
        settlement=row.settlement,
        expected_quantity=row.expected_quantity,
        actual_quantity=row.actual_quantity,
    )


def _threat(row: ThreatRating) -> t.ThreatRating:
    return t.ThreatRating(
        settlement=row.settlement,
        village_proximity=row.village_proximity,
        road_proximity=row.road_proximity,
        topographic_vulnerability=row.topographic_vulnerability,
        regional_alert_level=row.regional_alert_level,
    )


def _incident(row: SecurityIncident) -> t.Incident:
    return t.Incident(id=row.id, settlement=row.settlement, status=row.status)


def _training_event(row: TrainingEvent) -> t.TrainingEvent:
    return t.TrainingEvent(id=row.id, settlement=row.settlement, event_date=row.event_date)


def _drill(row: SettlementDrill) -> t.Drill:
    return t.Drill(id=row.id, settlement=row.settlement, drill_date=row.drill_date)


def _weekend_holder(row: WeekendWeaponHolder) -> t.WeekendWeaponHolder:
    return t.WeekendWeaponHolder(
        id=row.id,
        settlement=row.settlement,
        weekend_date=row.weekend_date,
        is_holding_weapon=row.is_holding_weapon,
    )


# ---------------------------------------------------------------------------
# Fetch
# ---------------------------------------------------------------------------

def _queries(week_start: date, week_end: date) -> dict[str, tuple[Select, Callable[[Any], Any]]]:
    """Category name -> (query, row converter). Names match AggregatedEntities fields."""
    return {
        "soldiers": (select(Soldier), _soldier),
        "certifications": (select(Certification), _certification),
        "components": (select(SecurityComponent), _component),
        "equipment": (select(Equipment), _equipment),
        "threats": (select(ThreatRating), _threat),
        "incidents": (
            select(SecurityIncident).where(SecurityIncident.status == INCIDENT_OPEN_STATUS),
            _incident,
        ),
        "training_events": (select(TrainingEvent), _training_event),
        "drills": (select(SettlementDrill), _drill),
        "weekend_holders": (
            select(WeekendWeaponHolder).where(
                WeekendWeaponHolder.weekend_date >= week_start,
                WeekendWeaponHolder.weekend_date <= week_end,
            ),
            _weekend_holder,
        ),
    }


async def _fetch_category(
    category: str, query: Select, convert: Callable[[Any], Any]
) -> tuple[tuple, Optional[PartialDataWarning]]:
    # Bad stored values surface as ValueError/TypeError from result processing
    try:
        async with async_session() as db:
            result = await db.execute(query)
            records = tuple(convert(r) for r in result.scalars().all())
    except (SQLAlchemyError, ValueError, TypeError) as e:
        logger.warning("Fetching %s failed, scoring without it: %s", category, e)
        return (), PartialDataWarning(category=category, detail=f"{category}: {e}")
    return records, None


async def fetch_all(now: datetime, tz: Optional[tzinfo] = None) -> t.AggregatedEntities:
    """Fetch every category for a run evaluated at `now`.

    Args:
        now: Evaluation instant. Sets the current Sunday-Saturday week.
        tz: Organization timezone. Defaults to settings.timezone.

    Returns:
        AggregatedEntities; failed categories are empty and listed in warnings.
    """
    today = local_date(now, tz or settings.tz)
    week_start, week_end = week_bounds(today)

    queries = _queries(week_start, week_end)
    results = await asyncio.gather(
        *(_fetch_category(name, query, convert) for name, (query, convert) in queries.items())
    )

    collections = {}
    warnings = []
    for name, (records, warning) in zip(queries, results):
        collections[name] = records
        if warning is not None:
            warnings.append(warning)

    logger.debug(
        "Fetched %s for week %s..%s",
        ", ".join(f"{len(v)} {k}" for k, v in collections.items()),
        week_start,
        week_end,
    )

    return t.AggregatedEntities(
        **collections,
        week_start=week_start,
        week_end=week_end,
        warnings=tuple(warnings),
    )
