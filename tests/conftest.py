"""
Shared test fixtures for the PharmaHR test suite.

The app runs against an in-memory aiosqlite database; the gateway is reached
through httpx's ASGI transport, either raw (``async_client``) or through the
real :class:`GatewayClient` the engines use (``gateway``).
"""

import os
import sys
from typing import AsyncGenerator

import pytest

# Ensure project root is importable
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Override environment BEFORE importing application modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CORS_ORIGINS"] = '["*"]'
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["TIMEZONE_OFFSET"] = "+07:00"

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from pharmahr.api.v1.deps import get_db, get_optional_user, get_write_lock
from pharmahr.core.exceptions import GatewayError
from pharmahr.core.locking import WriteLock
from pharmahr.db.base import Base
from pharmahr.main import app
from pharmahr.models.user import User
from pharmahr.services.gateway_client import GatewayClient

GATEWAY_URL = "http://test/api/v1/exec"

# Test engine shared by every session of a test
test_engine = create_async_engine(
    "sqlite+aiosqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


@pytest.fixture(autouse=True)
async def setup_db():
    """Create all tables before usage and drop after."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
    async with TestingSessionLocal() as session:
        yield session


async def _override_get_optional_user():
    return User(username="admin", name="Test Admin", role="admin", is_active=True)


app.dependency_overrides[get_db] = _override_get_db
app.dependency_overrides[get_optional_user] = _override_get_optional_user


@pytest.fixture(autouse=True)
def write_lock() -> WriteLock:
    """A fresh write lock per test, bound to that test's event loop."""
    lock = WriteLock(timeout=0.2)
    app.dependency_overrides[get_write_lock] = lambda: lock
    yield lock
    app.dependency_overrides.pop(get_write_lock, None)


@pytest.fixture
def act_as():
    """Switch the caller identity: ``act_as("operator")`` or ``act_as(None)``."""

    def _set(role: str | None, username: str = "caller") -> None:
        if role is None:
            app.dependency_overrides[get_optional_user] = lambda: None
        else:
            user = User(username=username, name=username.title(), role=role, is_active=True)
            app.dependency_overrides[get_optional_user] = lambda: user

    yield _set
    app.dependency_overrides[get_optional_user] = _override_get_optional_user


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    """Return a httpx AsyncClient wired to the app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
async def gateway() -> AsyncGenerator[GatewayClient, None]:
    """The engines' gateway client, talking to the app in-process."""
    async with GatewayClient(GATEWAY_URL, transport=ASGITransport(app=app)) as client:
        yield client


@pytest.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Return a raw database session for direct queries in tests."""
    async with TestingSessionLocal() as session:
        yield session


@pytest.fixture
def exec_action(async_client: AsyncClient):
    """POST one action to the gateway and return the raw httpx response."""

    async def _exec(action: str, **fields):
        return await async_client.post("/api/v1/exec", json={"action": action, **fields})

    return _exec


@pytest.fixture
async def seeded_staff(gateway: GatewayClient) -> list[dict]:
    """Three employees: two active, one terminated."""
    staff = [
        {"id": "NV001", "fullName": "Nguyen Van An", "department": "Outpatient Pharmacy", "position": "Pharmacist"},
        {"id": "NV002", "fullName": "Tran Thi Binh", "department": "Inpatient Pharmacy", "position": "Pharmacist"},
        {"id": "NV003", "fullName": "Le Van Cuong", "department": "Drug Warehouse", "position": "Storekeeper"},
    ]
    for emp in staff:
        await gateway.call("addEmployee", **emp)
    await gateway.call("deleteEmployee", id="NV003")
    return staff


class FlakyGateway:
    """Wraps a GatewayClient; chosen actions fail a set number of times."""

    def __init__(self, inner: GatewayClient, failures: dict[str, int]):
        self._inner = inner
        self.failures = dict(failures)
        self.calls: list[str] = []

    async def call(self, action: str, **fields):
        self.calls.append(action)
        if self.failures.get(action, 0) > 0:
            self.failures[action] -= 1
            raise GatewayError(f"{action} failed", status_code=503)
        return await self._inner.call(action, **fields)


@pytest.fixture
def flaky_gateway(gateway: GatewayClient):
    """``flaky_gateway(saveAttendance=1)`` fails the first saveAttendance call."""

    def _make(**failures: int) -> FlakyGateway:
        return FlakyGateway(gateway, failures)

    return _make
