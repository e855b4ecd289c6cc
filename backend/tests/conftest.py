"""Shared fixtures: temp SQLite DB, stub rate provider, in-process API client."""

import asyncio
import os

import httpx
import pytest
import pytest_asyncio

# Set test environment before importing app modules
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("RATE_PROVIDER_URL", "http://rates.test/v6/key/latest/INR")

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.db.deps import get_session
from app.db.models import Base
from app.main import app
from app.services.currency import RateClient, get_rate_client

# Units of each currency per 1 INR
RATES = {"INR": 1.0, "USD": 0.0125, "EUR": 0.011, "GBP": 0.0095}


class StubRateClient(RateClient):
    """RateClient with the HTTP call replaced; conversion logic stays real."""

    def __init__(self, rates=None, fail=False, delays=None):
        super().__init__("http://rates.test/v6/key/latest/INR")
        self.rates = dict(RATES if rates is None else rates)
        self.fail = fail
        self.delays = delays or {}
        self.calls = 0

    async def convert(self, amount, currency):
        delay = self.delays.get(currency)
        if delay:
            await asyncio.sleep(delay)
        return await super().convert(amount, currency)

    async def fetch_rates(self):
        self.calls += 1
        if self.fail:
            raise httpx.ConnectError("rate provider unreachable")
        return self.rates


@pytest_asyncio.fixture
async def engine(tmp_path):
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}")
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as s:
        yield s


@pytest.fixture
def rates():
    return StubRateClient()


@pytest_asyncio.fixture
async def client(session_factory, rates):
    async def _session():
        async with session_factory() as s:
            yield s

    app.dependency_overrides[get_session] = _session
    app.dependency_overrides[get_rate_client] = lambda: rates
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()
