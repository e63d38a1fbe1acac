"""Shared fixtures for API tests.

The database fixtures live in tests/conftest.py; this adds the HTTP client.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from readiness.scoring.windows import local_date
from server.config import settings


@pytest_asyncio.fixture
async def client(patched_db):
    """AsyncClient with the test DB patched into every module."""
    from server.main import app

    # Skip lifespan (DB already initialized by test_engine)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def today() -> date:
    """Local organization date the endpoints will evaluate against."""
    return local_date(datetime.now(timezone.utc), settings.tz)


@pytest.fixture
def operator() -> dict[str, str]:
    return {"X-Operator-Id": "op-test"}
