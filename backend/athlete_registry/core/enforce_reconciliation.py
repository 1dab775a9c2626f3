"""Reconciliation Enforcement — checks a disclosure before it is accepted as ground truth.

Invariants:
    - All functions are PURE: no IO, no async, no side effects
    - Return an error instance on violation, None on success
    - Order: record exists -> not yet decrypted -> age meets the category minimum

Design Decisions:
    - Eligibility is re-derived from the record's stored category, never from caller
      input (ADR: category is fixed at admission)
    - The disclosure/ciphertext binding check is NOT here: it needs the external
      collaborator and lives in services/reconciliation.py behind DisclosureBinder
"""

from athlete_registry.core.athlete_record import AthleteRecord, Disclosure
from athlete_registry.core.domain_types import OwnerId
from athlete_registry.core.eligibility import check_age_requirement
from athlete_registry.core.errors import (
    AlreadyDecryptedError, ErrorContext, RecordNotFoundError, RegistryError,
)
from athlete_registry.core.record_store import RecordStore


def check_record_exists(
    store: RecordStore, owner: OwnerId, context: ErrorContext | None = None,
) -> RecordNotFoundError | None:
    if not store.exists(owner):
        return RecordNotFoundError(owner, context)
    return None


def check_not_decrypted(
    record: AthleteRecord, context: ErrorContext | None = None,
) -> AlreadyDecryptedError | None:
    """Rule: Submitted -> Decrypted happens once."""
    if record.is_decrypted:
        return AlreadyDecryptedError(record.owner, context)
    return None


def validate_finalization(
    store: RecordStore,
    owner: OwnerId,
    disclosure: Disclosure,
    context: ErrorContext | None = None,
) -> RegistryError | None:
    """Chain all finalization checks. Returns first error or None."""
    missing = check_record_exists(store, owner, context)
    if missing:
        return missing
    record = store.get(owner)
    return (
        check_not_decrypted(record, context)
        or check_age_requirement(record.category, disclosure.plain_age, context)
    )
