"""Athlete Registry API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery — ExMA anti-pattern)
    - Global error handlers map RegistryError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Registry services built and hydrated in the lifespan, before the first request

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Services live on app.state and are resolved through api/dependencies.py
    - persistence_enabled=False runs the registry purely in memory (no DB connection)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from athlete_registry.api.error_handlers import register_error_handlers
from athlete_registry.api.routes import athletes, health, statistics
from athlete_registry.config import Settings, get_settings
from athlete_registry.core.repository_protocols import (
    DisclosureBinder, ProofVerifier, RegistryRepository, TrustedDisclosureBinder,
)
from athlete_registry.infrastructure.coprocessor_client import CoprocessorClient
from athlete_registry.infrastructure.database import init_db
from athlete_registry.infrastructure.observability import setup_logging
from athlete_registry.infrastructure.sql_repository import SqlRegistryRepository
from athlete_registry.services.admission import AdmissionController
from athlete_registry.services.reconciliation import ReconciliationController
from athlete_registry.services.registry import Registry

logger = logging.getLogger(__name__)


def install_services(
    app: FastAPI,
    settings: Settings,
    verifier: ProofVerifier,
    repository: RegistryRepository | None = None,
    binder: DisclosureBinder | None = None,
) -> Registry:
    """Build registry + controllers and attach them to app.state."""
    registry = Registry(repository=repository)
    app.state.registry = registry
    app.state.admission = AdmissionController(
        registry,
        verifier,
        max_batch_size=settings.max_batch_size,
        proof_timeout_seconds=settings.proof_verifier_timeout_seconds,
    )
    app.state.reconciliation = ReconciliationController(
        registry, binder or TrustedDisclosureBinder(),
    )
    return registry


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)

    coprocessor = CoprocessorClient(
        settings.coprocessor_url,
        timeout_seconds=settings.proof_verifier_timeout_seconds,
    )
    repository = None
    manager = None
    if settings.persistence_enabled:
        manager = init_db(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
        repository = SqlRegistryRepository(manager)

    registry = install_services(
        app,
        settings,
        verifier=coprocessor,
        repository=repository,
        binder=coprocessor if settings.disclosure_binding_enabled else None,
    )
    await registry.hydrate()
    logger.info("Athlete Registry API started")
    yield
    logger.info("Athlete Registry API shutting down")
    await coprocessor.aclose()
    if manager is not None:
        await manager.close()


app = FastAPI(
    title="Athlete Registry API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(athletes.router)
app.include_router(statistics.router)

register_error_handlers(app)
