"""
Shared fixtures for API tests.

Each test gets a fresh in-memory SQLite database with foreign keys enforced,
seeded lookup tables, and an httpx client wired to it through get_db.
"""

import os

# The app validates its environment at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app import models  # noqa: F401  registers every table
from app.core.database import Base, build_engine, get_db
from app.main import app
from app.services.lookups import seed_lookup_tables
from tests.helpers import API, ANNUAL, b64


@pytest_asyncio.fixture
async def engine():
    """In-memory database shared by every session of one test."""
    engine = build_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )
    async with factory() as session:
        await seed_lookup_tables(session)
    return factory


def _client_for(session_factory, raise_app_exceptions: bool = True) -> AsyncClient:
    async def override_get_db():
        session = session_factory()
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app, raise_app_exceptions=raise_app_exceptions)
    return AsyncClient(transport=transport, base_url="http://test")


@pytest_asyncio.fixture
async def client(session_factory):
    """HTTP client against the app with get_db overridden."""
    async with _client_for(session_factory) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def lenient_client(session_factory):
    """Client that returns 500 responses instead of raising server errors."""
    async with _client_for(session_factory, raise_app_exceptions=False) as ac:
        yield ac
    app.dependency_overrides.clear()


# ============================================
# RESOURCE FACTORIES
# ============================================

@pytest.fixture
def create_customer(client):
    async def _create(**overrides):
        payload = {"businessName": "Acme Corp", "contactName": "Jane Roe"}
        payload.update(overrides)
        response = await client.post(f"{API}/customers", json=payload)
        assert response.status_code == 201, response.text
        return response.json()
    return _create


@pytest.fixture
def create_server(client):
    async def _create(customer_id=None, name="srv-01", fingerprint="fp-srv-01", **overrides):
        payload = {
            "name": name,
            "fingerprint": b64(fingerprint),
            "isActive": True,
            "customerId": customer_id,
        }
        payload.update(overrides)
        response = await client.post(f"{API}/servers", json=payload)
        assert response.status_code == 201, response.text
        return response.json()
    return _create


@pytest.fixture
def create_purchase_order(client):
    async def _create(customer_id, po_name="PO-1000", purchase_date="2024-03-01", **overrides):
        payload = {
            "poName": po_name,
            "purchaseDate": purchase_date,
            "customerId": customer_id,
        }
        payload.update(overrides)
        response = await client.post(f"{API}/purchaseOrders", json=payload)
        assert response.status_code == 201, response.text
        return response.json()
    return _create


@pytest.fixture
def add_license(client):
    async def _add(po_id, type_id=ANNUAL, duration=1, **overrides):
        payload = {"typeId": type_id, "duration": duration}
        payload.update(overrides)
        response = await client.post(f"{API}/purchaseOrders/{po_id}/licenses", json=payload)
        assert response.status_code == 201, response.text
        return response.json()
    return _add
