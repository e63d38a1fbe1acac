"""Server configuration loaded from environment variables.

All settings use READINESS_ prefix. Example: READINESS_DATABASE_URL=...
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database (SQLite for local dev, PostgreSQL for production)
    database_url: str = "sqlite+aiosqlite:///readiness_dev.db"

    # Settlement hierarchy; None uses the bundled readiness/policy/settlements.yaml
    settlements_path: Optional[Path] = None

    # Organization calendar (week boundaries, record ages)
    timezone: str = "Asia/Jerusalem"

    # Clamp composite scores into [0, 100] (matters only for unnormalized weights)
    clamp_scores: bool = True

    log_level: str = "INFO"

    model_config = {"env_prefix": "READINESS_"}

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


settings = Settings()
