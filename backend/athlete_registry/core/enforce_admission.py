"""Admission Enforcement — validates single and batch submissions before any mutation.

Invariants:
    - All functions are PURE: no IO, no async, no side effects
    - Return an error instance on violation, None on success
    - validate_batch_shape runs before the proof call; check_batch_owners runs
      inside the registry lock, right before insert_many
    - Chains use `or`: first error wins

Design Decisions:
    - Pure functions over method dispatch: testable without mocks (ADR: ExMA Functional Core)
    - Length mismatch is checked before the size ceiling: a malformed batch is
      reported as malformed even when it is also too large
    - No age check here: age is still ciphertext at admission (see core/eligibility.py)
"""

from athlete_registry.core.domain_types import MAX_BATCH_SIZE, OwnerId
from athlete_registry.core.errors import (
    ArrayLengthMismatchError,
    BatchTooLargeError,
    DuplicateOwnerError,
    EmptyBatchError,
    ErrorContext,
    RegistryError,
)
from athlete_registry.core.record_store import RecordStore


def check_owner_available(
    store: RecordStore, owner: OwnerId, context: ErrorContext | None = None,
) -> DuplicateOwnerError | None:
    """Rule: one record per owner, permanently."""
    if store.exists(owner):
        return DuplicateOwnerError(owner, context)
    return None


def check_array_lengths(
    columns: dict[str, list], context: ErrorContext | None = None,
) -> ArrayLengthMismatchError | None:
    """Rule: every batch column has the same length."""
    lengths = {name: len(values) for name, values in columns.items()}
    if len(set(lengths.values())) > 1:
        return ArrayLengthMismatchError(lengths, context)
    return None


def check_batch_not_empty(
    size: int, context: ErrorContext | None = None,
) -> EmptyBatchError | None:
    if size == 0:
        return EmptyBatchError(context)
    return None


def check_batch_size(
    size: int, limit: int = MAX_BATCH_SIZE, context: ErrorContext | None = None,
) -> BatchTooLargeError | None:
    """Rule: a batch is a bounded unit of work."""
    if size > limit:
        return BatchTooLargeError(size, limit, context)
    return None


def check_batch_owners(
    store: RecordStore, owners: list[OwnerId], context: ErrorContext | None = None,
) -> DuplicateOwnerError | None:
    """Rule: no owner in the batch is registered, and none appears twice."""
    seen: set[OwnerId] = set()
    for owner in owners:
        if owner in seen or store.exists(owner):
            return DuplicateOwnerError(owner, context)
        seen.add(owner)
    return None


def validate_batch_shape(
    columns: dict[str, list],
    limit: int = MAX_BATCH_SIZE,
    context: ErrorContext | None = None,
) -> RegistryError | None:
    """Chain the shape checks. Returns first error or None."""
    size = len(next(iter(columns.values()), []))
    return (
        check_array_lengths(columns, context)
        or check_batch_not_empty(size, context)
        or check_batch_size(size, limit, context)
    )
