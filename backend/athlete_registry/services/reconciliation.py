"""Reconciliation Controller — accepts an authorized disclosure and finalizes one record.

Invariants:
    - Check order: record exists -> not yet decrypted -> age meets category minimum ->
      disclosure binding (if configured)
    - The core checks run again under the registry lock right before commit, so two
      finalizations for one owner never both succeed
    - mark_decrypted and the statistics update commit together (Registry.commit_decryption)
    - A rejected call leaves the record and statistics untouched

Design Decisions:
    - Binder consulted outside the lock: with binding enabled it is a retried HTTP call,
      and admissions must not queue behind it (ADR: same shape as the admission proof gate)
    - Privileged operation: the API layer gates it with the coordinator credential;
      this controller trusts its caller (ADR: identity stays outside the core)
    - Whether plaintext is cross-checked against the stored ciphertext is decided by the
      injected DisclosureBinder (trusting default, coprocessor check opt-in)
"""

import logging

from athlete_registry.core.athlete_record import (
    AthleteRecord, Disclosure, RecordSnapshot,
)
from athlete_registry.core.domain_types import OwnerId
from athlete_registry.core.enforce_reconciliation import validate_finalization
from athlete_registry.core.errors import (
    DisclosureMismatchError, ErrorContext, RegistryError,
)
from athlete_registry.core.repository_protocols import (
    DisclosureBinder, TrustedDisclosureBinder,
)
from athlete_registry.services.registry import Registry

logger = logging.getLogger(__name__)


class ReconciliationController:
    """Applies plaintext disclosures to submitted records."""

    def __init__(
        self, registry: Registry, binder: DisclosureBinder | None = None,
    ):
        self.registry = registry
        self.binder = binder or TrustedDisclosureBinder()

    async def finalize_results(
        self,
        owner: OwnerId,
        plain_name: str,
        plain_age: int,
        plain_contact: int,
    ) -> RecordSnapshot:
        context = ErrorContext(owner=owner, operation="finalize")
        disclosure = Disclosure(plain_name, plain_age, plain_contact)
        try:
            async with self.registry.lock:
                record = self._checked_record(owner, disclosure, context)
            if not await self.binder.matches(record, disclosure):
                raise DisclosureMismatchError(owner, context)
            async with self.registry.lock:
                self._checked_record(owner, disclosure, context)
                record = await self.registry.commit_decryption(
                    owner, disclosure, self.registry.clock(),
                )
        except RegistryError as e:
            logger.warning(
                f"Finalization rejected: {e.message}",
                extra={"owner": owner, "operation": "finalize", "error_code": e.code},
            )
            raise

        logger.info(
            "Athlete results finalized",
            extra={
                "owner": owner,
                "operation": "finalize",
                "latency_seconds": record.decryption_latency_seconds,
            },
        )
        return record.snapshot()

    def _checked_record(
        self, owner: OwnerId, disclosure: Disclosure, context: ErrorContext,
    ) -> AthleteRecord:
        """Caller holds the registry lock."""
        error = validate_finalization(
            self.registry.store, owner, disclosure, context,
        )
        if error:
            raise error
        return self.registry.store.get(owner)
