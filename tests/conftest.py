"""
Pytest configuration and fixtures for KitCheckout tests.
"""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from kitcheckout.api.main import create_app
from kitcheckout.config import AppSettings
from kitcheckout.services import ServiceContainer
from kitcheckout.storage.records import Equipment

ADMIN_CODE = "test-admin-code"


# =============================================================================
# Test Settings
# =============================================================================

def get_test_settings() -> AppSettings:
    """Return settings configured for testing."""
    return AppSettings(
        database_url="sqlite:///:memory:",
        admin_code=ADMIN_CODE,
        undo_window_seconds=5.0,
        environment="test",
        debug=True,
    )


class FakeClock:
    """Controllable wall clock."""

    def __init__(self, start: datetime = None):
        self.now = start or datetime(2024, 9, 2, 8, 30, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeTimer:
    """Controllable monotonic timer for undo windows."""

    def __init__(self):
        self.value = 1000.0

    def __call__(self) -> float:
        return self.value

    def advance(self, seconds: float) -> None:
        self.value += seconds


# =============================================================================
# Service Fixtures
# =============================================================================

@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def timer() -> FakeTimer:
    return FakeTimer()


@pytest.fixture
def services(clock) -> ServiceContainer:
    """Fresh in-memory service container, initialized."""
    container = ServiceContainer(get_test_settings(), clock=clock)
    container.ensure_init()
    return container


@pytest.fixture
def repository(services):
    return services.repository


@pytest.fixture
def store(services):
    return services.store


@pytest.fixture
def identity(services):
    return services.identity


@pytest.fixture
def ledger(services):
    return services.ledger


@pytest.fixture
def catalog(services):
    return services.catalog


@pytest.fixture
def inventory(services):
    return services.inventory


@pytest.fixture
def reports(services):
    return services.reports


# =============================================================================
# Data Fixtures
# =============================================================================

@pytest.fixture
def ball(repository) -> Equipment:
    """Equipment {id: 1, total: 5, avail: 5}."""
    item = Equipment(id=1, name="Size 5 Soccer Ball", type="Soccer", total=5, avail=5, photo="data:image/png;base64,AAA")
    repository.save_equipment([item])
    return item


@pytest.fixture
def sample_inventory(repository) -> list[Equipment]:
    items = [
        Equipment(id=1, name="Size 5 Soccer Ball", type="Soccer", total=5, avail=5),
        Equipment(id=2, name="Badminton Racket", type="Badminton", total=8, avail=6),
        Equipment(id=3, name="Cones (set)", type="General Equipment", total=3, avail=3),
    ]
    repository.save_equipment(items)
    return items


@pytest.fixture
def photo() -> str:
    return "data:image/jpeg;base64,/9j/4AAQSkZJRgABAQ"


# =============================================================================
# Application Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def app(services):
    """Create FastAPI application for testing."""
    application = create_app(settings=services.settings, services=services)
    yield application


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client for API tests."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def _login(client: AsyncClient, email: str, password: str, role: str = "student") -> dict:
    payload = {"email": email, "password": password, "role": role}
    if role == "admin":
        payload["admin_code"] = ADMIN_CODE
    response = await client.post("/api/v1/auth/signup", json=payload)
    assert response.status_code == 201, response.text

    response = await client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest_asyncio.fixture
async def student_headers(client) -> dict:
    return await _login(client, "jordan@school.edu", "goalie123")


@pytest_asyncio.fixture
async def admin_headers(client) -> dict:
    return await _login(client, "coach@school.edu", "whistle42", role="admin")
