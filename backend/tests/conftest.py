"""Root conftest — shared test configuration."""

import os

# Tests never reach a real database or coprocessor
os.environ.setdefault("PERSISTENCE_ENABLED", "false")
os.environ.setdefault("COORDINATOR_TOKEN", "test-coordinator-token")
os.environ.setdefault("COPROCESSOR_URL", "http://coprocessor.test")
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///:memory:",
)
