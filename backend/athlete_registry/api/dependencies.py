"""Route Dependencies — resolves registry services from app.state and gates privileged calls.

Invariants:
    - Services are built once in the lifespan and stored on app.state (never per request)
    - require_coordinator compares tokens in constant time

Design Decisions:
    - Dependencies over module globals: tests override them via app.dependency_overrides
"""

import secrets

from fastapi import Depends, Header, Request

from athlete_registry.config import Settings, get_settings
from athlete_registry.core.errors import CoordinatorRequiredError, ErrorContext
from athlete_registry.services.admission import AdmissionController
from athlete_registry.services.reconciliation import ReconciliationController
from athlete_registry.services.registry import Registry


def get_registry(request: Request) -> Registry:
    return request.app.state.registry


def get_admission(request: Request) -> AdmissionController:
    return request.app.state.admission


def get_reconciliation(request: Request) -> ReconciliationController:
    return request.app.state.reconciliation


def require_coordinator(
    x_coordinator_token: str | None = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> None:
    """finalize_results is privileged: only the registry coordinator may call it."""
    if not x_coordinator_token or not secrets.compare_digest(
        x_coordinator_token.encode(), settings.coordinator_token.encode(),
    ):
        raise CoordinatorRequiredError(ErrorContext(operation="finalize"))
