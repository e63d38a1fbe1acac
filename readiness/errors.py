"""Error taxonomy for the readiness engine."""

from __future__ import annotations

from dataclasses import dataclass


class ConfigurationError(Exception):
    """The active weight configuration could not be loaded.

    Fatal for a scoring run: there is no safe weight vector to fall back to
    once the store itself is unreachable.
    """


class WeightValidationError(ValueError):
    """A weight save request was malformed. Prior weights stay in effect."""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


@dataclass(frozen=True)
class PartialDataWarning:
    """An entity category that degraded to empty for this run.

    Recorded on the aggregate and logged, never raised.
    """

    category: str
    detail: str
