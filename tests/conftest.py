# Copyright (c) 2026 Mise OS Contributors. All Rights Reserved.

"""
Shared test fixtures for all Mise OS tests.

Storage-backed tests run against an in-memory SQLite database (aiosqlite +
StaticPool) injected through ``override_engine_for_test``.
"""

from types import SimpleNamespace

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from mise_os.core.metrics import platform_metrics
from mise_os.core.security import create_access_token
from mise_os.core.tenant import ResolutionSource, TenantScope
from mise_os.storage.database import (
    Base,
    close_db,
    get_session_factory,
    override_engine_for_test,
)
from mise_os.storage.models import Restaurant, RestaurantStaff, User

# Import models so tables are registered
import mise_os.storage.models  # noqa: F401


@pytest.fixture(autouse=True)
def reset_metrics():
    platform_metrics.reset()
    yield


@pytest.fixture
async def sqlite_engine():
    """In-memory SQLite engine shared by every session in the test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    override_engine_for_test(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await close_db()


@pytest.fixture
async def db(sqlite_engine):
    async with get_session_factory()() as session:
        yield session


@pytest.fixture
async def world(sqlite_engine):
    """
    Restaurants 5, 7, 9 (active) and 11 (deactivated), plus principals:

      alice (1): staff at 5 and 9
      bob   (2): staff at 7; also at 11, which is deactivated
      carol (3): elevated, owner at 5
      dave  (4): assignment to 9 has been deactivated
      eve   (5): elevated, no assignments
    """
    async with get_session_factory()() as s:
        s.add_all([
            Restaurant(id=5, name="Five Spice", slug="five-spice"),
            Restaurant(id=7, name="Seven Seas", slug="seven-seas"),
            Restaurant(id=9, name="Nine Grains", slug="nine-grains"),
            Restaurant(id=11, name="Closed Kitchen", slug="closed", is_active=False),
            User(id=1, email="alice@test.dev", name="Alice"),
            User(id=2, email="bob@test.dev", name="Bob"),
            User(id=3, email="carol@test.dev", name="Carol", global_role="elevated"),
            User(id=4, email="dave@test.dev", name="Dave"),
            User(id=5, email="eve@test.dev", name="Eve", global_role="elevated"),
        ])
        await s.flush()
        s.add_all([
            RestaurantStaff(user_id=1, restaurant_id=5, role="manager"),
            RestaurantStaff(user_id=1, restaurant_id=9, role="staff"),
            RestaurantStaff(user_id=2, restaurant_id=7, role="staff"),
            RestaurantStaff(user_id=2, restaurant_id=11, role="staff"),
            RestaurantStaff(user_id=3, restaurant_id=5, role="owner"),
            RestaurantStaff(user_id=4, restaurant_id=9, role="staff", is_active=False),
        ])
        await s.commit()
    return SimpleNamespace(alice=1, bob=2, carol=3, dave=4, eve=5)


@pytest.fixture
def auth():
    """Build Authorization headers for a user id, plus optional extra headers."""

    def _auth(user_id: int, **extra: str) -> dict:
        headers = {"Authorization": f"Bearer {create_access_token(user_id)}"}
        headers.update(extra)
        return headers

    return _auth


@pytest.fixture
async def client(world):
    from mise_os.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def scope_five() -> TenantScope:
    """Alice's scope with restaurant 5 selected by header."""
    return TenantScope(
        accessible_tenant_ids=frozenset({5, 9}),
        resolved_tenant_id=5,
        resolved_slug="five-spice",
        source=ResolutionSource.HEADER,
    )
