"""Service test fixtures — async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager patched so the readiness check sees the test engine
    - organization fixture seeds one tenant; headers carry its id

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (PostgreSQL-specific features not exercised here)
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from inventory.db.base import Base
from inventory.infrastructure.database import get_db, DatabaseSessionManager
import inventory.infrastructure.database as db_module
from inventory.main import app
from inventory.models.category import Category
from inventory.models.custom_field import CustomField
from inventory.models.location import Location
from inventory.models.organization import Organization
from inventory.models.tag import Tag
from inventory.models.team_member import TeamMember


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
async def organization(test_db):
    organization = Organization(name="Acme Rentals")
    test_db.add(organization)
    await test_db.commit()
    await test_db.refresh(organization)
    return organization


@pytest.fixture
def headers(organization):
    return {"X-Organization-Id": str(organization.id)}


@pytest.fixture
async def add_row(test_db, organization):
    """Insert an organization-scoped row: await add_row(Tag, name="Power tools")."""
    async def _add(model, **columns):
        row = model(organization_id=organization.id, **columns)
        test_db.add(row)
        await test_db.commit()
        await test_db.refresh(row)
        return row
    return _add


@pytest.fixture
async def catalog(add_row):
    """One category, two locations, two tags and a custodian."""
    return {
        "category": await add_row(Category, name="Tools"),
        "warehouse": await add_row(Location, name="Warehouse"),
        "office": await add_row(Location, name="Office"),
        "power": await add_row(Tag, name="Power"),
        "outdoor": await add_row(Tag, name="Outdoor"),
        "custodian": await add_row(TeamMember, name="Ana Souza"),
    }


@pytest.fixture
async def warranty_field(add_row):
    return await add_row(
        CustomField, name="warranty_months", type="number", required=True,
    )
