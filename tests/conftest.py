"""Shared database fixtures for service and API tests.

Uses a temporary SQLite file so the aggregator's concurrent reads each get
their own connection. Patches every module that imported async_session.
"""

from __future__ import annotations

from datetime import date, timedelta

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from readiness.scoring.windows import week_bounds
from server.models.db import (
    Base,
    Certification,
    Equipment,
    SecurityComponent,
    SecurityIncident,
    SettlementDrill,
    Soldier,
    ThreatRating,
    TrainingEvent,
    WeekendWeaponHolder,
)

EXAMPLE_SETTLEMENT = "Ofra"


# ---------------------------------------------------------------------------
# Test DB engine (temporary SQLite file)
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture
async def test_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'readiness_test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def patched_db(test_engine, test_session_factory, monkeypatch):
    """Point every async_session import at the test DB."""
    import server.models.db as db_mod
    import server.routers.readiness as readiness_mod
    import server.services.aggregator as aggregator_mod
    import server.services.scoring as scoring_mod

    for mod in (db_mod, readiness_mod, aggregator_mod, scoring_mod):
        monkeypatch.setattr(mod, "async_session", test_session_factory)
    monkeypatch.setattr(db_mod, "engine", test_engine)
    return test_session_factory


# ---------------------------------------------------------------------------
# Seed data
# ---------------------------------------------------------------------------

async def seed_example(session_factory, today: date) -> None:
    """Insert the worked example for Ofra (readiness 94, risk 17, priority 13).

    Also inserts records that must be filtered out: an inactive soldier, a
    closed incident and a weekend holder from the previous week.
    """
    week_start, _ = week_bounds(today)

    def ago(n: int) -> date:
        return today - timedelta(days=n)

    async with session_factory() as db:
        for i in range(10):
            range_date = ago(30)
            if i == 8:
                range_date = None
            elif i == 9:
                range_date = ago(200)
            db.add(
                Soldier(
                    id=f"s{i}",
                    full_name=f"Fighter {i}",
                    settlement=EXAMPLE_SETTLEMENT,
                    is_active=True,
                    weapon_serial=f"W-{100 + i}" if i < 3 else None,
                    last_shooting_range_date=range_date,
                )
            )
        db.add(Soldier(id="s-inactive", full_name="Retired", settlement=EXAMPLE_SETTLEMENT, is_active=False))
        await db.flush()

        for i in range(5):
            db.add(Certification(soldier_id=f"s{i}", cert_type="mag", last_refresh_date=ago(100)))

        db.add(
            SecurityComponent(
                settlement=EXAMPLE_SETTLEMENT,
                armory=True,
                armored_vehicle=True,
                shelter=True,
                fence_type="smart",
                command_center_type="full",
                defensive_security_type="patrol",
            )
        )
        db.add(Equipment(settlement=EXAMPLE_SETTLEMENT, expected_quantity=20, actual_quantity=18))
        db.add(
            ThreatRating(
                settlement=EXAMPLE_SETTLEMENT,
                village_proximity=3,
                road_proximity=2,
                topographic_vulnerability=3,
                regional_alert_level=2,
            )
        )
        db.add(SecurityIncident(settlement=EXAMPLE_SETTLEMENT, status="closed"))
        db.add(TrainingEvent(settlement=EXAMPLE_SETTLEMENT, event_type="shooting_range", event_date=ago(30)))
        db.add(TrainingEvent(settlement=EXAMPLE_SETTLEMENT, event_type="briefing", event_date=ago(60)))
        db.add(SettlementDrill(settlement=EXAMPLE_SETTLEMENT, drill_date=ago(45)))

        db.add(WeekendWeaponHolder(
            settlement=EXAMPLE_SETTLEMENT, weekend_date=week_start + timedelta(days=5), is_holding_weapon=True
        ))
        db.add(WeekendWeaponHolder(
            settlement=EXAMPLE_SETTLEMENT, weekend_date=week_start + timedelta(days=6), is_holding_weapon=True
        ))
        db.add(WeekendWeaponHolder(
            settlement=EXAMPLE_SETTLEMENT, weekend_date=week_start - timedelta(days=1), is_holding_weapon=True
        ))
        await db.commit()


@pytest_asyncio.fixture
async def seed(patched_db):
    """Async callable: `await seed(today)` inserts the worked example."""

    async def _seed(today: date) -> None:
        await seed_example(patched_db, today)

    return _seed
