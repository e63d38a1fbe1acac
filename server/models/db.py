"""SQLAlchemy async models for the readiness engine.

Tables mirror the record-keeping side:
  - readiness_weights: the single active weight row
  - soldiers, certifications: personnel
  - security_components, equipment: infrastructure
  - threat_ratings, security_incidents: threat picture
  - training_events, settlement_drills: training history
  - weekend_weapon_holders: weekend duty

Uses SQLite for local dev (aiosqlite), PostgreSQL for production (asyncpg).
Switch by setting READINESS_DATABASE_URL env var.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, Date, Float, ForeignKey, Index, Integer, String
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from readiness.scoring.constants import DEFAULT_WEIGHTS
from server.config import settings

engine = create_async_engine(settings.database_url, echo=False)
async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


class Base(DeclarativeBase):
    pass


def _uuid() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# ReadinessWeights: single active row
# ---------------------------------------------------------------------------

class ReadinessWeights(Base):
    __tablename__ = "readiness_weights"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)

    personnel_weight: Mapped[float] = mapped_column(Float, default=DEFAULT_WEIGHTS["personnel"])
    components_weight: Mapped[float] = mapped_column(Float, default=DEFAULT_WEIGHTS["components"])
    training_weight: Mapped[float] = mapped_column(Float, default=DEFAULT_WEIGHTS["training"])
    risk_threat_weight: Mapped[float] = mapped_column(Float, default=DEFAULT_WEIGHTS["risk_threat"])
    risk_infra_weight: Mapped[float] = mapped_column(Float, default=DEFAULT_WEIGHTS["risk_infra"])
    risk_response_weight: Mapped[float] = mapped_column(
        Float, default=DEFAULT_WEIGHTS["risk_response"]
    )
    risk_incidents_weight: Mapped[float] = mapped_column(
        Float, default=DEFAULT_WEIGHTS["risk_incidents"]
    )
    priority_risk_weight: Mapped[float] = mapped_column(
        Float, default=DEFAULT_WEIGHTS["priority_risk"]
    )
    priority_readiness_weight: Mapped[float] = mapped_column(
        Float, default=DEFAULT_WEIGHTS["priority_readiness"]
    )

    # Audit attribution
    updated_by: Mapped[Optional[str]] = mapped_column(String(255), default=None)
    updated_at: Mapped[datetime] = mapped_column(default=_now, onupdate=_now)


# ---------------------------------------------------------------------------
# Personnel
# ---------------------------------------------------------------------------

class Soldier(Base):
    __tablename__ = "soldiers"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    settlement: Mapped[str] = mapped_column(String(100), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    weapon_serial: Mapped[Optional[str]] = mapped_column(String(100), default=None)
    last_shooting_range_date: Mapped[Optional[date]] = mapped_column(Date, default=None)

    __table_args__ = (
        Index("idx_soldiers_settlement", "settlement"),
    )


class Certification(Base):
    __tablename__ = "certifications"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    soldier_id: Mapped[str] = mapped_column(ForeignKey("soldiers.id"), nullable=False)
    cert_type: Mapped[str] = mapped_column(String(30), nullable=False)  # mag, matol, drone, ...
    last_refresh_date: Mapped[Optional[date]] = mapped_column(Date, default=None)


# ---------------------------------------------------------------------------
# Infrastructure
# ---------------------------------------------------------------------------

class SecurityComponent(Base):
    __tablename__ = "security_components"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    settlement: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)

    armory: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    armored_vehicle: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    shelter: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    fence_type: Mapped[Optional[str]] = mapped_column(String(50), default=None)
    command_center_type: Mapped[Optional[str]] = mapped_column(String(50), default=None)
    defensive_security_type: Mapped[Optional[str]] = mapped_column(String(50), default=None)


class Equipment(Base):
    __tablename__ = "equipment"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    settlement: Mapped[str] = mapped_column(String(100), nullable=False)
    expected_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    actual_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


# ---------------------------------------------------------------------------
# Threat picture
# ---------------------------------------------------------------------------

class ThreatRating(Base):
    __tablename__ = "threat_ratings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    settlement: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)

    # Ordinal 1-5
    village_proximity: Mapped[int] = mapped_column(Integer, nullable=False)
    road_proximity: Mapped[int] = mapped_column(Integer, nullable=False)
    topographic_vulnerability: Mapped[int] = mapped_column(Integer, nullable=False)
    regional_alert_level: Mapped[int] = mapped_column(Integer, nullable=False)


class SecurityIncident(Base):
    __tablename__ = "security_incidents"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    settlement: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="open")
    created_at: Mapped[datetime] = mapped_column(default=_now)

    __table_args__ = (
        Index("idx_incidents_status", "status"),
    )


# ---------------------------------------------------------------------------
# Training
# ---------------------------------------------------------------------------

class TrainingEvent(Base):
    __tablename__ = "training_events"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    settlement: Mapped[str] = mapped_column(String(100), nullable=False)
    event_type: Mapped[str] = mapped_column(String(30), nullable=False, default="other")
    event_date: Mapped[date] = mapped_column(Date, nullable=False)


class SettlementDrill(Base):
    __tablename__ = "settlement_drills"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    settlement: Mapped[str] = mapped_column(String(100), nullable=False)
    drill_date: Mapped[date] = mapped_column(Date, nullable=False)


# ---------------------------------------------------------------------------
# Weekend duty
# ---------------------------------------------------------------------------

class WeekendWeaponHolder(Base):
    __tablename__ = "weekend_weapon_holders"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    settlement: Mapped[str] = mapped_column(String(100), nullable=False)
    weekend_date: Mapped[date] = mapped_column(Date, nullable=False)
    is_holding_weapon: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index("idx_weekend_holders_date", "weekend_date"),
    )


async def init_db() -> None:
    """Create all tables (dev convenience; use Alembic in production)."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
