"""Ranking and presentation helpers for settlement scores.

Scores are ranked by priority descending. The sort is stable, so equal
priorities keep the master-list order the calculator produced.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Optional

from readiness.scoring.calculator import round_half_up
from readiness.scoring.constants import BAND_HIGH, BAND_MID
from readiness.scoring.types import SettlementScore


@dataclass(frozen=True)
class RankedScores:
    """Scores sorted by priority descending (index 0 = most urgent)."""

    scores: tuple[SettlementScore, ...]

    def __iter__(self) -> Iterator[SettlementScore]:
        return iter(self.scores)

    def __len__(self) -> int:
        return len(self.scores)

    def __getitem__(self, index: int) -> SettlementScore:
        return self.scores[index]

    def find(self, settlement: str) -> Optional[SettlementScore]:
        return find_by_settlement(self.scores, settlement)


def rank_scores(scores: Iterable[SettlementScore]) -> RankedScores:
    """Sort by priority descending; ties keep their input order."""
    return RankedScores(tuple(sorted(scores, key=lambda s: s.priority, reverse=True)))


def find_by_settlement(
    scores: Iterable[SettlementScore], settlement: str
) -> Optional[SettlementScore]:
    return next((s for s in scores if s.settlement == settlement), None)


# ---------------------------------------------------------------------------
# Severity bands
# ---------------------------------------------------------------------------

class ScoreBand(str, Enum):
    GOOD = "good"
    WARNING = "warning"
    CRITICAL = "critical"


HIGHER_IS_BETTER = {"readiness"}
METRICS = ("readiness", "risk", "priority")


def severity_band(value: int, metric: str) -> ScoreBand:
    """Bucket a 0-100 value into three bands (>=70, 40-69, <40).

    Readiness reads high as good; risk and priority read high as critical.
    """
    if metric not in METRICS:
        raise ValueError(f"Unknown metric: {metric}")

    if value >= BAND_HIGH:
        tier = 2
    elif value >= BAND_MID:
        tier = 1
    else:
        tier = 0

    if metric in HIGHER_IS_BETTER:
        return (ScoreBand.CRITICAL, ScoreBand.WARNING, ScoreBand.GOOD)[tier]
    return (ScoreBand.GOOD, ScoreBand.WARNING, ScoreBand.CRITICAL)[tier]


# ---------------------------------------------------------------------------
# Dashboard summary
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DashboardSummary:
    settlements: int
    active_soldiers: int
    expired_shooting: int
    open_incidents: int
    armed_soldiers: int
    avg_readiness: int
    critical_settlements: int  # readiness below the mid band
    needs_attention: tuple[str, ...]  # readiness below the high band, most urgent first


def summarize(
    scores: Iterable[SettlementScore], settlement: Optional[str] = None
) -> DashboardSummary:
    """Totals across settlements, optionally scoped to a single one."""
    selected = [s for s in scores if settlement is None or s.settlement == settlement]
    ranked = rank_scores(selected)

    avg = 0
    if selected:
        avg = round_half_up(sum(s.readiness for s in selected) / len(selected))

    return DashboardSummary(
        settlements=len(selected),
        active_soldiers=sum(s.active_soldiers for s in selected),
        expired_shooting=sum(s.expired_shooting for s in selected),
        open_incidents=sum(s.open_incidents for s in selected),
        armed_soldiers=sum(s.armed_count for s in selected),
        avg_readiness=avg,
        critical_settlements=sum(1 for s in selected if s.readiness < BAND_MID),
        needs_attention=tuple(s.settlement for s in ranked if s.readiness < BAND_HIGH),
    )
