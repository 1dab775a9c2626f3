"""AthleteRecord ORM — persists one admitted athlete and, later, its disclosure.

Invariants:
    - owner is the primary key: the database enforces one row per owner as well
    - position is the admission order (0-based, unique) used to rebuild list_owners
    - Ciphertext handles stored as raw bytes, never decoded
    - state transitions: submitted -> decrypted (decrypted_at set together with state)

Design Decisions:
    - Generic column types (no postgresql dialect types): the same model runs on
      asyncpg in production and aiosqlite in tests
    - Plaintext columns nullable: absent until finalize_results
"""

from datetime import datetime

from sqlalchemy import (
    BigInteger, CheckConstraint, DateTime, Integer, LargeBinary, String,
)
from sqlalchemy.orm import Mapped, mapped_column

from athlete_registry.core.domain_types import MAX_OWNER_ID_LENGTH
from athlete_registry.db.base import Base


class AthleteRecordRow(Base):
    """Athlete record entity — one row per owner."""
    __tablename__ = "athlete_records"
    __table_args__ = (
        CheckConstraint(
            "(state = 'decrypted') = (decrypted_at IS NOT NULL)",
            name="ck_athlete_records_decrypted_at_state",
        ),
    )

    owner: Mapped[str] = mapped_column(
        String(MAX_OWNER_ID_LENGTH), primary_key=True,
    )
    position: Mapped[int] = mapped_column(
        Integer, nullable=False, unique=True,
    )
    encrypted_name: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    encrypted_age: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    encrypted_contact: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    encrypted_category: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    category: Mapped[str] = mapped_column(String(20), nullable=False)
    state: Mapped[str] = mapped_column(
        String(20), nullable=False, default="submitted",
    )
    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
    decrypted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    plain_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    plain_age: Mapped[int | None] = mapped_column(Integer, nullable=True)
    plain_contact: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
