"""RegistryStatistics ORM — single-row table holding the running aggregates.

Invariants:
    - Exactly one row (id = 1), written in the same transaction as the record change
    - Values are loaded as stored on startup, never recomputed from athlete_records
"""

from sqlalchemy import CheckConstraint, Float, Integer
from sqlalchemy.orm import Mapped, mapped_column

from athlete_registry.db.base import Base

STATISTICS_ROW_ID = 1


class RegistryStatisticsRow(Base):
    """Aggregate counters for the whole registry."""
    __tablename__ = "registry_statistics"
    __table_args__ = (
        CheckConstraint(
            "decrypted_records <= total_records",
            name="ck_registry_statistics_decrypted_le_total",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    total_records: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    decrypted_records: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    cumulative_latency_seconds: Mapped[float] = mapped_column(
        Float, nullable=False, default=0.0,
    )
