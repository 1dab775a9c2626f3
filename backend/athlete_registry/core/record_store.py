"""Record Store — owner -> AthleteRecord mapping with an insertion-ordered owner list.

Invariants:
    - At most one record per owner, ever (no delete path exists)
    - set(_records) == set(_owners) and _owners has no duplicates
    - insert/insert_many are the only paths that add records; each is a single
      mutation step, validated before anything is written
    - list_owners returns a copy: readers never observe a list being appended to

Design Decisions:
    - Plain in-memory structure, no locking here: the services layer holds the
      registry lock around every mutation (ADR: core stays sync and pure)
    - Raises typed RegistryError subclasses (store is the last line, checks in
      enforce_* run first and return errors instead)
"""

from datetime import datetime

from athlete_registry.core.athlete_record import AthleteRecord, Disclosure
from athlete_registry.core.domain_types import OwnerId
from athlete_registry.core.errors import (
    AlreadyDecryptedError, DuplicateOwnerError, RecordNotFoundError,
)


class RecordStore:
    """In-memory registry of athlete records — pure, no IO."""

    def __init__(self) -> None:
        self._records: dict[OwnerId, AthleteRecord] = {}
        self._owners: list[OwnerId] = []

    def __len__(self) -> int:
        return len(self._owners)

    def __contains__(self, owner: object) -> bool:
        return owner in self._records

    def exists(self, owner: OwnerId) -> bool:
        return owner in self._records

    def insert(self, owner: OwnerId, record: AthleteRecord) -> None:
        if owner != record.owner:
            raise ValueError(f"record owner {record.owner!r} does not match {owner!r}")
        if self.exists(owner):
            raise DuplicateOwnerError(owner)
        self._records[owner] = record
        self._owners.append(owner)

    def insert_many(self, records: list[AthleteRecord]) -> None:
        """All-or-nothing insert. Duplicates against the store or inside the batch abort it."""
        seen: set[OwnerId] = set()
        for record in records:
            if self.exists(record.owner) or record.owner in seen:
                raise DuplicateOwnerError(record.owner)
            seen.add(record.owner)
        for record in records:
            self._records[record.owner] = record
        self._owners.extend(r.owner for r in records)

    def get(self, owner: OwnerId) -> AthleteRecord:
        record = self._records.get(owner)
        if record is None:
            raise RecordNotFoundError(owner)
        return record

    def mark_decrypted(
        self,
        owner: OwnerId,
        plain_name: str,
        plain_age: int,
        plain_contact: int,
        now: datetime,
    ) -> AthleteRecord:
        record = self.get(owner)
        if record.is_decrypted:
            raise AlreadyDecryptedError(owner)
        record.apply_disclosure(
            Disclosure(plain_name, plain_age, plain_contact), now,
        )
        return record

    def list_owners(self) -> list[OwnerId]:
        return list(self._owners)

    def load(self, records: list[AthleteRecord]) -> None:
        """Hydrate from persistence, preserving the given (submission) order."""
        self.insert_many(records)
