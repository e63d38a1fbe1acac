"""Diagnostic reasons attached to a settlement score.

Reasons are appended while each sub-score is evaluated, so their order
follows the evaluation order of the calculator. No deduplication.
"""

from __future__ import annotations

from readiness.scoring.constants import RECENT_WINDOW_MONTHS

NO_ACTIVE_FIGHTERS = "no active fighters"
COMPONENTS_NOT_ENTERED = "security components not entered"
ARMORY_MISSING = "armory missing"
FENCE_NOT_DEFINED = "fence not defined"
COMMAND_CENTER_NOT_DEFINED = "command center not defined"
NO_WEEKEND_HOLDERS = "no approved weekend weapon holders"


def expired_shooting(count: int) -> str:
    return f"{count} fighters without range qualification"


def expired_certs(count: int) -> str:
    return f"{count} expired certifications"


def no_recent_drill(months: int = RECENT_WINDOW_MONTHS) -> str:
    return f"no drill in the last {months} months"


def no_recent_events(months: int = RECENT_WINDOW_MONTHS) -> str:
    return f"no training events in the last {months} months"


def village_proximity(level: int) -> str:
    return f"village proximity at level {level}"


def open_incidents(count: int) -> str:
    return f"{count} open security incidents"


class ReasonBuilder:
    """Collects reasons for one sub-computation and freezes them."""

    def __init__(self) -> None:
        self._items: list[str] = []

    def add(self, reason: str) -> None:
        self._items.append(reason)

    def add_if(self, condition: bool, reason: str) -> None:
        if condition:
            self._items.append(reason)

    def build(self) -> tuple[str, ...]:
        return tuple(self._items)
