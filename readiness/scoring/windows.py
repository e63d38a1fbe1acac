"""Calendar windows used by the scoring model.

All comparisons are on local calendar dates: an instant is first reduced to
the organization's local date, then record dates are compared against it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from typing import Optional

from dateutil.relativedelta import relativedelta

from readiness.scoring.constants import (
    CERT_VALIDITY_DAYS,
    RECENT_WINDOW_MONTHS,
    SHOOTING_VALIDITY_DAYS,
)


@dataclass(frozen=True)
class ValidityWindows:
    """Validity and recency windows applied by the calculator."""

    shooting_days: int = SHOOTING_VALIDITY_DAYS
    cert_days: int = CERT_VALIDITY_DAYS
    recent_months: int = RECENT_WINDOW_MONTHS


def local_date(now: datetime, tz: Optional[tzinfo] = None) -> date:
    """Calendar date of `now` in `tz`. Naive instants are taken as local already."""
    if tz is not None and now.tzinfo is not None:
        now = now.astimezone(tz)
    return now.date()


def week_bounds(today: date) -> tuple[date, date]:
    """Sunday-to-Saturday week containing `today` (both ends inclusive)."""
    days_since_sunday = (today.weekday() + 1) % 7  # Monday=0 ... Sunday=6
    start = today - timedelta(days=days_since_sunday)
    return start, start + timedelta(days=6)


def recent_cutoff(today: date, months: int = RECENT_WINDOW_MONTHS) -> date:
    """First date still inside the trailing window of `months` calendar months."""
    return today - relativedelta(months=months)


def age_days(today: date, when: date) -> int:
    return (today - when).days


def is_expired(today: date, when: Optional[date], validity_days: int) -> bool:
    """A missing date counts as expired."""
    if when is None:
        return True
    return age_days(today, when) > validity_days
