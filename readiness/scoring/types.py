"""Core data types for settlement scoring.

Input records are read-only snapshots supplied by the record-keeping side;
SettlementScore is the engine's output. All of them are frozen.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field, fields
from datetime import date
from numbers import Real
from typing import Any, Mapping, Optional

from readiness.errors import PartialDataWarning, WeightValidationError
from readiness.scoring.constants import (
    DEFAULT_WEIGHTS,
    NORMALIZED_TOLERANCE,
    WEIGHT_GROUPS,
    WEIGHT_NAMES,
)


# ---------------------------------------------------------------------------
# Weights
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Weights:
    """The active weight vector. Values are not required to sum to 1."""

    personnel: float = DEFAULT_WEIGHTS["personnel"]
    components: float = DEFAULT_WEIGHTS["components"]
    training: float = DEFAULT_WEIGHTS["training"]
    risk_threat: float = DEFAULT_WEIGHTS["risk_threat"]
    risk_infra: float = DEFAULT_WEIGHTS["risk_infra"]
    risk_response: float = DEFAULT_WEIGHTS["risk_response"]
    risk_incidents: float = DEFAULT_WEIGHTS["risk_incidents"]
    priority_risk: float = DEFAULT_WEIGHTS["priority_risk"]
    priority_readiness: float = DEFAULT_WEIGHTS["priority_readiness"]

    def to_dict(self) -> dict[str, float]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Weights:
        """Build weights from a mapping, filling missing names with defaults.

        Raises:
            WeightValidationError: unknown name, or a value that is not a
                finite real number (booleans are rejected).
        """
        unknown = set(data) - set(WEIGHT_NAMES)
        if unknown:
            name = sorted(unknown)[0]
            raise WeightValidationError(f"Unknown weight: {name}", field=name)

        values: dict[str, float] = {}
        for name in WEIGHT_NAMES:
            if name not in data:
                continue
            raw = data[name]
            if isinstance(raw, bool) or not isinstance(raw, Real):
                raise WeightValidationError(
                    f"Weight {name} must be numeric, got {raw!r}", field=name
                )
            if not math.isfinite(raw):
                raise WeightValidationError(
                    f"Weight {name} must be finite, got {raw!r}", field=name
                )
            values[name] = float(raw)
        return cls(**values)

    def group_sums(self) -> dict[str, float]:
        """Sum of each weight group (readiness, risk, priority)."""
        return {
            group: sum(getattr(self, name) for name in names)
            for group, names in WEIGHT_GROUPS.items()
        }

    def is_normalized(self) -> dict[str, bool]:
        """Whether each group sums to 1. Informational only."""
        return {
            group: abs(total - 1.0) < NORMALIZED_TOLERANCE
            for group, total in self.group_sums().items()
        }


# ---------------------------------------------------------------------------
# Input records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Soldier:
    id: str
    settlement: str
    is_active: bool
    weapon_serial: Optional[str] = None
    last_range_date: Optional[date] = None
    full_name: str = ""


@dataclass(frozen=True)
class Certification:
    id: str
    soldier_id: str
    cert_type: str
    last_refresh_date: Optional[date] = None


@dataclass(frozen=True)
class SecurityComponent:
    """Security infrastructure of one settlement (at most one per settlement)."""

    settlement: str
    armory: bool = False
    armored_vehicle: bool = False
    shelter: bool = False
    fence_type: Optional[str] = None
    command_center_type: Optional[str] = None
    defensive_security_type: Optional[str] = None


@dataclass(frozen=True)
class EquipmentAggregate:
    settlement: str
    expected_quantity: int
    actual_quantity: int


@dataclass(frozen=True)
class ThreatRating:
    """Four ordinal ratings on a 1-5 scale."""

    settlement: str
    village_proximity: int
    road_proximity: int
    topographic_vulnerability: int
    regional_alert_level: int


@dataclass(frozen=True)
class Incident:
    id: str
    settlement: str
    status: str


@dataclass(frozen=True)
class TrainingEvent:
    id: str
    settlement: str
    event_date: date


@dataclass(frozen=True)
class Drill:
    id: str
    settlement: str
    drill_date: date


@dataclass(frozen=True)
class WeekendWeaponHolder:
    id: str
    settlement: str
    weekend_date: date
    is_holding_weapon: bool


@dataclass(frozen=True)
class AggregatedEntities:
    """Everything one scoring run reads, fetched in a single batch.

    weekend_holders is already limited to [week_start, week_end] and
    incidents to open ones.
    """

    soldiers: tuple[Soldier, ...] = ()
    certifications: tuple[Certification, ...] = ()
    components: tuple[SecurityComponent, ...] = ()
    equipment: tuple[EquipmentAggregate, ...] = ()
    threats: tuple[ThreatRating, ...] = ()
    incidents: tuple[Incident, ...] = ()
    training_events: tuple[TrainingEvent, ...] = ()
    drills: tuple[Drill, ...] = ()
    weekend_holders: tuple[WeekendWeaponHolder, ...] = ()
    week_start: Optional[date] = None
    week_end: Optional[date] = None
    warnings: tuple[PartialDataWarning, ...] = ()

    @property
    def degraded_categories(self) -> list[str]:
        return [w.category for w in self.warnings]


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SettlementScore:
    """Scores for one settlement from one run. Percentages are ints in [0, 100]."""

    settlement: str
    readiness: int
    risk: int
    priority: int

    # Readiness sub-scores
    personnel_fitness: int
    component_health: int
    training_score: int

    # Risk sub-scores
    threat_rating: int
    infra_vulnerability: int
    response_capability: int
    open_incidents: int  # raw count, not a percentage

    reasons: tuple[str, ...] = field(default_factory=tuple)

    # Raw counters
    total_soldiers: int = 0
    active_soldiers: int = 0
    expired_shooting: int = 0
    armed_count: int = 0

    def to_dict(self) -> dict:
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data["reasons"] = list(self.reasons)
        return data
