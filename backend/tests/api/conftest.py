"""API test fixtures — FastAPI app with in-memory registry services.

Invariants:
    - app.state services are rebuilt per test (no state leaks between tests)
    - The coprocessor is replaced by FakeProofVerifier; nothing leaves the process

Design Decisions:
    - ASGITransport does not run the lifespan: fixtures call install_services directly
      with the same settings the lifespan would use
"""

import pytest
from httpx import ASGITransport, AsyncClient

from athlete_registry.config import get_settings
from athlete_registry.main import app, install_services

from tests.fakes import FakeDisclosureBinder, FakeProofVerifier


@pytest.fixture
def verifier():
    return FakeProofVerifier()


@pytest.fixture
def binder():
    return FakeDisclosureBinder()


@pytest.fixture
def registry(verifier, binder):
    return install_services(app, get_settings(), verifier, binder=binder)


@pytest.fixture
async def client(registry):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
    app.dependency_overrides.clear()

