"""Service test fixtures — in-memory database, manual clock, fake coprocessor.

Invariants:
    - Every test gets a fresh in-memory SQLite database with the schema created
    - The registry clock only moves when a test advances it
    - Controllers are wired exactly as main.install_services wires them

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for repository tests
      (ADR: PostgreSQL-specific features not exercised here)
    - Registry without a repository by default; persistence tests opt in via
      persistent_registry
"""

import pytest
from sqlalchemy.ext.asyncio import create_async_engine

from athlete_registry.infrastructure.database import DatabaseSessionManager
from athlete_registry.infrastructure.sql_repository import SqlRegistryRepository
from athlete_registry.services.admission import AdmissionController
from athlete_registry.services.reconciliation import ReconciliationController
from athlete_registry.services.registry import Registry

from tests.fakes import FakeDisclosureBinder, FakeProofVerifier, ManualClock


@pytest.fixture
async def test_engine():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_manager(test_engine):
    manager = DatabaseSessionManager.from_engine(test_engine)
    await manager.create_schema()
    return manager


@pytest.fixture
async def repository(db_manager):
    return SqlRegistryRepository(db_manager)


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def verifier():
    return FakeProofVerifier()


@pytest.fixture
def binder():
    return FakeDisclosureBinder()


@pytest.fixture
def registry(clock):
    return Registry(clock=clock)


@pytest.fixture
async def persistent_registry(repository, clock):
    return Registry(repository=repository, clock=clock)


@pytest.fixture
def admission(registry, verifier):
    return AdmissionController(registry, verifier, proof_timeout_seconds=0.5)


@pytest.fixture
def reconciliation(registry, binder):
    return ReconciliationController(registry, binder)
