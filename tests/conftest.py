"""
Pytest fixtures for the stock ledger test suite.

Provides:
- A throwaway SQLite database (aiosqlite) per test, schema created from Base.metadata
- DataAccess / ReconciliationService wired to a private EventBus and a stepping clock
- An httpx client against the FastAPI app with the session and current user overridden
"""

import os

# Must be set before core.config is imported; the module-level engine is never used by tests.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./.pytest-unused.db")

from datetime import datetime, timedelta
from types import SimpleNamespace
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from core.auth import current_active_user
from core.events import EventBus
from db.access import DataAccess
from db.database import create_db_and_tables, get_async_session
from db.inventory.line import InventoryLine
from services import catalog
from services.reconciliation import ReconciliationService
from services.views import view_cache


class StepClock:
    """Returns ``now`` and then moves it forward by ``step``."""

    def __init__(self, start=datetime(2024, 1, 1, 9, 0, 0), step=timedelta(seconds=1)):
        self.now = start
        self.step = step

    def __call__(self):
        current = self.now
        self.now = self.now + self.step
        return current


@pytest.fixture
async def engine(tmp_path):
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'stock.db'}")
    await create_db_and_tables(eng)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
async def session(session_maker):
    async with session_maker() as s:
        yield s


@pytest.fixture
def access(session):
    return DataAccess(session)


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def service(access, bus, clock):
    return ReconciliationService(access, bus=bus, clock=clock)


@pytest.fixture
async def product(access, bus):
    return await catalog.create_product(access, "ts-001", "Basic T-Shirt", bus=bus)


@pytest.fixture
async def line(access, bus, product):
    return await catalog.add_color(access, product["id"], "Black", bus=bus)


@pytest.fixture
def quantity_of(access):
    async def _quantity_of(inventory_id) -> int:
        row = await access.get(InventoryLine.__table__, inventory_id)
        return row["quantity"]

    return _quantity_of


@pytest.fixture
def user():
    return SimpleNamespace(id=uuid4(), email="tester@example.com", is_active=True, is_superuser=False)


@pytest.fixture
async def client(session_maker, user):
    from main import app

    async def _session():
        async with session_maker() as s:
            yield s

    app.dependency_overrides[get_async_session] = _session
    app.dependency_overrides[current_active_user] = lambda: user
    view_cache.clear()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()
    view_cache.clear()
