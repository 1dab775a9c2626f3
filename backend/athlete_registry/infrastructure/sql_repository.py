"""SQL Registry Repository — persists records and aggregates through SQLAlchemy async sessions.

Invariants:
    - Each save_* call is ONE transaction: record rows and the statistics row commit together
    - load() returns records in admission order (position) and the stored aggregates as-is
    - Timestamps come back timezone-aware (SQLite drops tzinfo; UTC is re-attached)

Design Decisions:
    - Implements core.repository_protocols.RegistryRepository structurally (no inheritance)
    - Uses DatabaseSessionManager.session() so every SQLAlchemy failure surfaces as DatabaseError
    - Statistics row upserted with session.merge(): one code path for first write and updates
"""

import logging
from datetime import datetime, timezone
from typing import Sequence

from sqlalchemy import select

from athlete_registry.core.athlete_record import AthleteRecord, EncryptedProfile
from athlete_registry.core.domain_types import (
    CiphertextHandle, OwnerId, RecordState, SportCategory,
)
from athlete_registry.core.errors import DatabaseError
from athlete_registry.core.registry_stats import RegistryStatistics
from athlete_registry.infrastructure.database import DatabaseSessionManager
from athlete_registry.models.athlete_record import AthleteRecordRow
from athlete_registry.models.registry_statistics import (
    RegistryStatisticsRow, STATISTICS_ROW_ID,
)

logger = logging.getLogger(__name__)


def _as_utc(value: datetime | None) -> datetime | None:
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def record_to_row(record: AthleteRecord, position: int) -> AthleteRecordRow:
    return AthleteRecordRow(
        owner=record.owner,
        position=position,
        encrypted_name=record.encrypted.name.token,
        encrypted_age=record.encrypted.age.token,
        encrypted_contact=record.encrypted.contact.token,
        encrypted_category=record.encrypted.category.token,
        category=record.category.value,
        state=record.state.value,
        submitted_at=record.submitted_at,
        decrypted_at=record.decrypted_at,
        plain_name=record.plain_name,
        plain_age=record.plain_age,
        plain_contact=record.plain_contact,
    )


def row_to_record(row: AthleteRecordRow) -> AthleteRecord:
    return AthleteRecord(
        owner=OwnerId(row.owner),
        encrypted=EncryptedProfile(
            name=CiphertextHandle(row.encrypted_name),
            age=CiphertextHandle(row.encrypted_age),
            contact=CiphertextHandle(row.encrypted_contact),
            category=CiphertextHandle(row.encrypted_category),
        ),
        category=SportCategory(row.category),
        submitted_at=_as_utc(row.submitted_at),
        state=RecordState(row.state),
        decrypted_at=_as_utc(row.decrypted_at),
        plain_name=row.plain_name,
        plain_age=row.plain_age,
        plain_contact=row.plain_contact,
    )


def _stats_row(stats: RegistryStatistics) -> RegistryStatisticsRow:
    return RegistryStatisticsRow(
        id=STATISTICS_ROW_ID,
        total_records=stats.total_records,
        decrypted_records=stats.decrypted_records,
        cumulative_latency_seconds=stats.cumulative_latency_seconds,
    )


class SqlRegistryRepository:
    """Registry persistence backed by the athlete_records / registry_statistics tables."""

    def __init__(self, manager: DatabaseSessionManager):
        self.manager = manager

    async def load(self) -> tuple[list[AthleteRecord], RegistryStatistics]:
        async with self.manager.session() as db:
            result = await db.execute(
                select(AthleteRecordRow).order_by(AthleteRecordRow.position),
            )
            records = [row_to_record(row) for row in result.scalars().all()]
            stats_row = await db.get(RegistryStatisticsRow, STATISTICS_ROW_ID)
        stats = RegistryStatistics()
        if stats_row is not None:
            stats = RegistryStatistics(
                total_records=stats_row.total_records,
                decrypted_records=stats_row.decrypted_records,
                cumulative_latency_seconds=stats_row.cumulative_latency_seconds,
            )
        logger.info(
            f"Loaded {len(records)} athlete records from database",
            extra={"operation": "load"},
        )
        return records, stats

    async def save_admissions(
        self, records: Sequence[AthleteRecord], stats: RegistryStatistics,
    ) -> None:
        """Insert new rows. stats already counts them, so positions end at total - 1."""
        first_position = stats.total_records - len(records)
        async with self.manager.session() as db:
            db.add_all([
                record_to_row(record, first_position + i)
                for i, record in enumerate(records)
            ])
            await db.merge(_stats_row(stats))
            await db.commit()

    async def save_decryption(
        self, record: AthleteRecord, stats: RegistryStatistics,
    ) -> None:
        async with self.manager.session() as db:
            row = await db.get(AthleteRecordRow, record.owner)
            if row is None:
                raise DatabaseError(
                    f"athlete row '{record.owner}' missing", "update",
                )
            row.state = record.state.value
            row.decrypted_at = record.decrypted_at
            row.plain_name = record.plain_name
            row.plain_age = record.plain_age
            row.plain_contact = record.plain_contact
            await db.merge(_stats_row(stats))
            await db.commit()
