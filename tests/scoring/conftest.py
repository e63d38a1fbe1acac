"""Shared test fixtures for scoring engine tests.

The reference instant is Wednesday 2026-03-18 (UTC); its Sunday-Saturday
week is 2026-03-15 .. 2026-03-21.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta, timezone

import pytest

from readiness.scoring.types import (
    AggregatedEntities,
    Certification,
    Drill,
    Incident,
    SecurityComponent,
    Soldier,
    ThreatRating,
    TrainingEvent,
    WeekendWeaponHolder,
)

SETTLEMENT = "Ofra"
OTHER = "Beit El"
NOW = datetime(2026, 3, 18, 9, 0, tzinfo=timezone.utc)
TODAY = NOW.date()


def days_ago(n: int) -> date:
    return TODAY - timedelta(days=n)


def _example_entities() -> AggregatedEntities:
    """The worked example: readiness 94, risk 17, priority 13.

    - 10 active soldiers, 2 without a valid range qualification, 3 armed
    - 1 inactive soldier (ignored everywhere except total_soldiers)
    - 5 valid certifications
    - complete security components (6/6)
    - 2 training events + 1 drill in the last 6 months
    - threat ratings averaging 2.5
    - no open incidents, 2 weekend holders this week
    """
    soldiers = [
        Soldier(
            id=f"s{i}",
            settlement=SETTLEMENT,
            is_active=True,
            weapon_serial=f"W-{100 + i}" if i < 3 else None,
            last_range_date=days_ago(30),
        )
        for i in range(10)
    ]
    soldiers[8] = replace(soldiers[8], last_range_date=None)
    soldiers[9] = replace(soldiers[9], last_range_date=days_ago(200))
    soldiers.append(Soldier(id="s-inactive", settlement=SETTLEMENT, is_active=False))

    certs = [
        Certification(id=f"c{i}", soldier_id=f"s{i}", cert_type="mag", last_refresh_date=days_ago(100))
        for i in range(5)
    ]

    return AggregatedEntities(
        soldiers=tuple(soldiers),
        certifications=tuple(certs),
        components=(
            SecurityComponent(
                settlement=SETTLEMENT,
                armory=True,
                armored_vehicle=True,
                shelter=True,
                fence_type="smart",
                command_center_type="full",
                defensive_security_type="patrol",
            ),
        ),
        threats=(
            ThreatRating(
                settlement=SETTLEMENT,
                village_proximity=3,
                road_proximity=2,
                topographic_vulnerability=3,
                regional_alert_level=2,
            ),
        ),
        training_events=(
            TrainingEvent(id="e1", settlement=SETTLEMENT, event_date=days_ago(30)),
            TrainingEvent(id="e2", settlement=SETTLEMENT, event_date=days_ago(60)),
        ),
        drills=(Drill(id="d1", settlement=SETTLEMENT, drill_date=days_ago(45)),),
        weekend_holders=(
            WeekendWeaponHolder(
                id="w1", settlement=SETTLEMENT, weekend_date=date(2026, 3, 20), is_holding_weapon=True
            ),
            WeekendWeaponHolder(
                id="w2", settlement=SETTLEMENT, weekend_date=date(2026, 3, 21), is_holding_weapon=True
            ),
        ),
        week_start=date(2026, 3, 15),
        week_end=date(2026, 3, 21),
    )


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def settlement() -> str:
    return SETTLEMENT


@pytest.fixture
def example_entities() -> AggregatedEntities:
    return _example_entities()


@pytest.fixture
def empty_entities() -> AggregatedEntities:
    """Nothing entered for any settlement."""
    return AggregatedEntities()


@pytest.fixture
def two_settlement_entities() -> AggregatedEntities:
    """The worked example plus a second settlement with nothing but one open incident."""
    base = _example_entities()
    return replace(
        base,
        incidents=(Incident(id="i1", settlement=OTHER, status="open"),),
    )


@pytest.fixture
def ago():
    """Date `n` days before the reference instant."""
    return days_ago
