"""Registry — process-wide record store + statistics, their lock, and the query surface.

Invariants:
    - store and stats only change inside commit_admissions / commit_decryption,
      and callers hold `lock` around validation + commit
    - Persist first, then apply in memory: a repository failure leaves both untouched
    - Every store mutation is paired with its statistics update (no await in between)
    - Queries are O(1) except list_registered, which copies the owner list

Design Decisions:
    - One asyncio.Lock for the whole registry rather than per-owner locks: batch admission
      spans many owners and the critical sections are short (ADR: store-wide exclusion)
    - Single-process scope: another worker process would hold its own copy
      (ADR: same trade-off as an in-memory state dict behind one uvicorn worker)
    - repository is optional: None keeps the registry purely in memory
"""

import asyncio
import copy
import logging
from datetime import datetime, timezone
from typing import Callable, Sequence

from athlete_registry.core.athlete_record import (
    AthleteRecord, Disclosure, RecordSnapshot,
)
from athlete_registry.core.domain_types import OwnerId
from athlete_registry.core.eligibility import category_min_ages
from athlete_registry.core.record_store import RecordStore
from athlete_registry.core.registry_stats import RegistryStatistics
from athlete_registry.core.repository_protocols import RegistryRepository

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Registry:
    """Holds the registry state and answers read queries."""

    def __init__(
        self,
        repository: RegistryRepository | None = None,
        clock: Clock = utc_now,
    ):
        self.store = RecordStore()
        self.stats = RegistryStatistics()
        self.lock = asyncio.Lock()
        self.repository = repository
        self.clock = clock

    async def hydrate(self) -> None:
        """Load persisted records and aggregates. Called once, before serving."""
        if self.repository is None:
            return
        records, stats = await self.repository.load()
        async with self.lock:
            if len(self.store):
                raise RuntimeError("registry already holds records; hydrate once at startup")
            self.store.load(records)
            self.stats = stats
        logger.info(
            f"Registry hydrated: {stats.total_records} total, "
            f"{stats.decrypted_records} decrypted",
            extra={"operation": "hydrate"},
        )

    # ─── Mutations (caller holds self.lock) ─────────────────────

    async def commit_admissions(self, records: Sequence[AthleteRecord]) -> None:
        stats_after = self.stats.copy()
        stats_after.record_admissions(len(records))
        if self.repository is not None:
            await self.repository.save_admissions(records, stats_after)
        self.store.insert_many(list(records))
        self.stats.record_admissions(len(records))

    async def commit_decryption(
        self, owner: OwnerId, disclosure: Disclosure, now: datetime,
    ) -> AthleteRecord:
        candidate = copy.copy(self.store.get(owner))
        candidate.apply_disclosure(disclosure, now)
        latency = candidate.decryption_latency_seconds
        stats_after = self.stats.copy()
        stats_after.record_decryption(latency)
        if self.repository is not None:
            await self.repository.save_decryption(candidate, stats_after)
        record = self.store.mark_decrypted(
            owner,
            disclosure.plain_name,
            disclosure.plain_age,
            disclosure.plain_contact,
            now,
        )
        self.stats.record_decryption(latency)
        return record

    # ─── Queries ────────────────────────────────────────────────

    def is_registered(self, owner: OwnerId) -> bool:
        return self.store.exists(owner)

    def list_registered(self) -> list[OwnerId]:
        return self.store.list_owners()

    def get_info(self, owner: OwnerId) -> RecordSnapshot:
        return self.store.get(owner).snapshot()

    def get_statistics(self) -> tuple[int, int, float]:
        """(total_records, decrypted_records, average_latency_seconds)."""
        return self.stats.as_tuple()

    def category_min_ages(self) -> dict[str, int]:
        return category_min_ages()
