"""Athlete Record — the registry's unit of state and its two-state lifecycle.

Invariants:
    - owner is immutable once set
    - decrypted_at is set iff state == DECRYPTED
    - submitted_at <= decrypted_at whenever both are set
    - Plaintext fields are None until reconciliation
    - State moves SUBMITTED -> DECRYPTED exactly once

Design Decisions:
    - Pure dataclass, no IO: the store owns instances, ORM rows are built from them
    - EncryptedProfile groups the four handles so admission code never unpacks ciphertext
    - snapshot() is the only read path exposed to callers: plaintext only after finalization
"""

from dataclasses import dataclass
from datetime import datetime

from athlete_registry.core.domain_types import (
    CiphertextHandle, OwnerId, RecordState, SportCategory,
)
from athlete_registry.core.errors import AlreadyDecryptedError


@dataclass(frozen=True)
class EncryptedProfile:
    """The four ciphertext handles submitted at admission."""
    name: CiphertextHandle
    age: CiphertextHandle
    contact: CiphertextHandle
    category: CiphertextHandle

    def handles(self) -> list[CiphertextHandle]:
        return [self.name, self.age, self.contact, self.category]


@dataclass(frozen=True)
class Disclosure:
    """Authorized plaintext produced out-of-band by the decryption collaborator."""
    plain_name: str
    plain_age: int
    plain_contact: int


@dataclass
class AthleteRecord:
    """Per-athlete registry state — pure dataclass, no IO."""

    owner: OwnerId
    encrypted: EncryptedProfile
    category: SportCategory
    submitted_at: datetime

    state: RecordState = RecordState.SUBMITTED
    decrypted_at: datetime | None = None

    # Populated only by finalize
    plain_name: str | None = None
    plain_age: int | None = None
    plain_contact: int | None = None

    @property
    def is_decrypted(self) -> bool:
        return self.state == RecordState.DECRYPTED

    @property
    def decryption_latency_seconds(self) -> float:
        if self.decrypted_at is None:
            return 0.0
        return (self.decrypted_at - self.submitted_at).total_seconds()

    def apply_disclosure(self, disclosure: Disclosure, now: datetime) -> None:
        """Submitted -> Decrypted. Callers check state first (core/enforce_reconciliation.py)."""
        if self.is_decrypted:
            raise AlreadyDecryptedError(self.owner)
        self.plain_name = disclosure.plain_name
        self.plain_age = disclosure.plain_age
        self.plain_contact = disclosure.plain_contact
        # Clamp: a clock running backwards must not break submitted_at <= decrypted_at
        self.decrypted_at = max(now, self.submitted_at)
        self.state = RecordState.DECRYPTED

    def snapshot(self) -> "RecordSnapshot":
        if not self.is_decrypted:
            return RecordSnapshot(
                owner=self.owner,
                category=self.category,
                state=self.state,
                submitted_at=self.submitted_at,
                encrypted=self.encrypted,
            )
        return RecordSnapshot(
            owner=self.owner,
            category=self.category,
            state=self.state,
            submitted_at=self.submitted_at,
            encrypted=self.encrypted,
            decrypted_at=self.decrypted_at,
            plain_name=self.plain_name,
            plain_age=self.plain_age,
            plain_contact=self.plain_contact,
        )


@dataclass(frozen=True)
class RecordSnapshot:
    """Read-only view returned by get_info."""
    owner: OwnerId
    category: SportCategory
    state: RecordState
    submitted_at: datetime
    encrypted: EncryptedProfile
    decrypted_at: datetime | None = None
    plain_name: str | None = None
    plain_age: int | None = None
    plain_contact: int | None = None

    @property
    def is_decrypted(self) -> bool:
        return self.state == RecordState.DECRYPTED
