"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets (coordinator token, DB credentials) come from environment variables
    - get_settings() is cached (lru_cache) — single instance per process
    - max_batch_size never exceeds the core ceiling (MAX_BATCH_SIZE)

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support (ADR: developer UX)
    - disclosure_binding_enabled defaults to False: the disclosure channel is trusted unless
      an operator opts into the coprocessor cross-check
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from athlete_registry.core.domain_types import MAX_BATCH_SIZE


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://registry:registry@db:5432/registry"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres URLs come as postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10
    persistence_enabled: bool = True

    # Encryption coprocessor
    coprocessor_url: str = "http://coprocessor:8080"
    proof_verifier_timeout_seconds: float = 10.0
    disclosure_binding_enabled: bool = False

    # Registry
    max_batch_size: int = Field(default=MAX_BATCH_SIZE, ge=1, le=MAX_BATCH_SIZE)
    coordinator_token: str = "coordinator-placeholder"

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
