"""Shared test fixtures for ranking and settlement registry tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from readiness.scoring.types import SettlementScore


def make_score(settlement: str, priority: int, readiness: int = 50, **counters) -> SettlementScore:
    return SettlementScore(
        settlement=settlement,
        readiness=readiness,
        risk=50,
        priority=priority,
        personnel_fitness=50,
        component_health=50,
        training_score=50,
        threat_rating=50,
        infra_vulnerability=50,
        response_capability=50,
        open_incidents=counters.pop("open_incidents", 0),
        **counters,
    )


@pytest.fixture
def score_factory():
    """Build a SettlementScore with only the fields a test cares about."""
    return make_score


@pytest.fixture
def mixed_scores() -> list[SettlementScore]:
    """Five settlements in master-list order, with a priority tie (Rimonim, Ofra).

    Expected ranking: Ateret(80), Rimonim(55), Ofra(55), Kochav HaShahar(30), Beit El(10)
    """
    return [
        make_score("Kochav HaShahar", priority=30, readiness=85, active_soldiers=12, armed_count=4),
        make_score("Rimonim", priority=55, readiness=60, active_soldiers=8, expired_shooting=3),
        make_score("Ateret", priority=80, readiness=20, active_soldiers=0, open_incidents=2),
        make_score("Ofra", priority=55, readiness=39, active_soldiers=10, expired_shooting=2, armed_count=3),
        make_score("Beit El", priority=10, readiness=95, active_soldiers=15, armed_count=6),
    ]


@pytest.fixture
def settlements_yaml(tmp_path: Path) -> Path:
    path = tmp_path / "settlements.yaml"
    path.write_text(
        """
regions:
  - name: North
    companies:
      - name: Alpha Company
        settlements: [Aleph, Bet]
      - name: Bravo Company
        settlements: [Gimel]
  - name: South
    companies:
      - name: Charlie Company
        settlements: [Dalet]
""",
        encoding="utf-8",
    )
    return path
