from __future__ import annotations

import sys
from datetime import date
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from asgi_lifespan import LifespanManager
from fastapi import FastAPI

# Ensure project root is on sys.path for imports
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from tripdates.core.clock import FixedClock
from tripdates.core.placeholders import DatePlaceholderResolver
from tripdates.main import create_app


# Friday
FIXED_TODAY = date(2025, 9, 19)


@pytest.fixture
def fixed_today() -> date:
    return FIXED_TODAY


@pytest.fixture
def resolver(fixed_today: date) -> DatePlaceholderResolver:
    return DatePlaceholderResolver(FixedClock(fixed_today))


@pytest.fixture
def app() -> FastAPI:
    return create_app()


@pytest_asyncio.fixture
async def client(app: FastAPI, monkeypatch: pytest.MonkeyPatch) -> AsyncClient:
    monkeypatch.setenv("TD_CLOCK__TODAY", FIXED_TODAY.isoformat())
    async with LifespanManager(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://testserver") as client:
            yield client
