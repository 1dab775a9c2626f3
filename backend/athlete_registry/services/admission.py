"""Admission Controller — single and batch admission of encrypted athlete records.

Invariants:
    - Check order (single): proof -> owner available -> insert + total += 1
    - Check order (batch): array lengths -> non-empty -> size ceiling -> shared proof ->
      owners available and distinct -> insert all + total += n
    - No age check at admission: age is ciphertext until finalize_results
    - A rejected call leaves store and statistics untouched (all-or-nothing)

Design Decisions:
    - Proof verified before the registry lock: the external call never blocks other
      admissions, and uniqueness is re-checked under the lock right before insert
    - The batch shares one proof over every handle in the batch, verified once
      (ADR: one verify_and_bind per admission call, single or batch)
    - One `now` per batch: every record in a batch has the same submitted_at
"""

import logging
from typing import Sequence

from athlete_registry.core.athlete_record import (
    AthleteRecord, EncryptedProfile, RecordSnapshot,
)
from athlete_registry.core.domain_types import (
    MAX_BATCH_SIZE, CiphertextHandle, OwnerId, SportCategory,
)
from athlete_registry.core.enforce_admission import (
    check_batch_owners, check_owner_available, validate_batch_shape,
)
from athlete_registry.core.errors import ErrorContext, RegistryError
from athlete_registry.core.repository_protocols import ProofVerifier
from athlete_registry.services.proof_gate import verify_input_proof
from athlete_registry.services.registry import Registry

logger = logging.getLogger(__name__)


class AdmissionController:
    """Validates submissions and inserts them atomically into the registry."""

    def __init__(
        self,
        registry: Registry,
        verifier: ProofVerifier,
        max_batch_size: int = MAX_BATCH_SIZE,
        proof_timeout_seconds: float = 10.0,
    ):
        self.registry = registry
        self.verifier = verifier
        self.max_batch_size = min(max_batch_size, MAX_BATCH_SIZE)
        self.proof_timeout_seconds = proof_timeout_seconds

    async def register_athlete(
        self,
        owner: OwnerId,
        encrypted_name: CiphertextHandle,
        encrypted_age: CiphertextHandle,
        encrypted_contact: CiphertextHandle,
        encrypted_category: CiphertextHandle,
        category: SportCategory,
        input_proof: bytes,
    ) -> RecordSnapshot:
        context = ErrorContext(owner=owner, operation="register")
        profile = EncryptedProfile(
            encrypted_name, encrypted_age, encrypted_contact, encrypted_category,
        )
        try:
            await verify_input_proof(
                self.verifier, profile.handles(), input_proof,
                self.proof_timeout_seconds, context,
            )
            async with self.registry.lock:
                error = check_owner_available(self.registry.store, owner, context)
                if error:
                    raise error
                record = AthleteRecord(
                    owner=owner,
                    encrypted=profile,
                    category=SportCategory(category),
                    submitted_at=self.registry.clock(),
                )
                await self.registry.commit_admissions([record])
        except RegistryError as e:
            _log_rejection(e, context)
            raise

        logger.info(
            "Athlete registered",
            extra={"owner": owner, "operation": "register"},
        )
        return record.snapshot()

    async def batch_register_athletes(
        self,
        owners: Sequence[OwnerId],
        encrypted_names: Sequence[CiphertextHandle],
        encrypted_ages: Sequence[CiphertextHandle],
        encrypted_contacts: Sequence[CiphertextHandle],
        encrypted_categories: Sequence[CiphertextHandle],
        categories: Sequence[SportCategory],
        input_proof: bytes,
    ) -> list[RecordSnapshot]:
        context = ErrorContext(operation="batch_register", batch_size=len(owners))
        columns = {
            "owners": list(owners),
            "encrypted_names": list(encrypted_names),
            "encrypted_ages": list(encrypted_ages),
            "encrypted_contacts": list(encrypted_contacts),
            "encrypted_categories": list(encrypted_categories),
            "categories": list(categories),
        }
        try:
            error = validate_batch_shape(columns, self.max_batch_size, context)
            if error:
                raise error

            profiles = [
                EncryptedProfile(*handles)
                for handles in zip(
                    columns["encrypted_names"],
                    columns["encrypted_ages"],
                    columns["encrypted_contacts"],
                    columns["encrypted_categories"],
                )
            ]
            await verify_input_proof(
                self.verifier,
                [h for profile in profiles for h in profile.handles()],
                input_proof,
                self.proof_timeout_seconds,
                context,
            )

            async with self.registry.lock:
                error = check_batch_owners(
                    self.registry.store, columns["owners"], context,
                )
                if error:
                    raise error
                now = self.registry.clock()
                records = [
                    AthleteRecord(
                        owner=owner,
                        encrypted=profile,
                        category=SportCategory(category),
                        submitted_at=now,
                    )
                    for owner, profile, category in zip(
                        columns["owners"], profiles, columns["categories"],
                    )
                ]
                await self.registry.commit_admissions(records)
        except RegistryError as e:
            _log_rejection(e, context)
            raise

        logger.info(
            f"Batch of {len(records)} athletes registered",
            extra={"operation": "batch_register", "batch_size": len(records)},
        )
        return [r.snapshot() for r in records]


def _log_rejection(error: RegistryError, context: ErrorContext) -> None:
    logger.warning(
        f"Admission rejected: {error.message}",
        extra={
            "owner": context.owner,
            "operation": context.operation,
            "batch_size": context.batch_size,
            "error_code": error.code,
        },
    )
