"""Proof Gate — the single external call that gates every admission.

Invariants:
    - Exactly one verify_and_bind call per single or batch admission
    - Timeout, coprocessor failure, empty proof, or a False answer -> InvalidProofError
    - Never touches registry state: callers run it BEFORE taking the registry lock

Design Decisions:
    - asyncio.wait_for around the verifier: the caller's timeout applies to any
      ProofVerifier implementation, not only the HTTP one
"""

import asyncio
import logging
from typing import Sequence

from athlete_registry.core.domain_types import CiphertextHandle
from athlete_registry.core.errors import (
    CoprocessorError, ErrorContext, InvalidProofError,
)
from athlete_registry.core.repository_protocols import ProofVerifier

logger = logging.getLogger(__name__)


async def verify_input_proof(
    verifier: ProofVerifier,
    handles: Sequence[CiphertextHandle],
    proof: bytes,
    timeout_seconds: float,
    context: ErrorContext | None = None,
) -> None:
    """Raise InvalidProofError unless the collaborator accepts `proof` for `handles`."""
    if not proof:
        raise InvalidProofError("empty proof", context)
    try:
        valid = await asyncio.wait_for(
            verifier.verify_and_bind(list(handles), proof), timeout_seconds,
        )
    except asyncio.TimeoutError:
        logger.warning(
            f"Proof verification timed out after {timeout_seconds}s",
            extra=_log_extra(context, "PROOF_TIMEOUT"),
        )
        raise InvalidProofError("verification timed out", context)
    except CoprocessorError as e:
        logger.warning(
            f"Proof verification failed: {e.message}",
            extra=_log_extra(context, e.code),
        )
        raise InvalidProofError(e.error_type, context) from e
    if not valid:
        raise InvalidProofError("rejected", context)


def _log_extra(context: ErrorContext | None, error_code: str) -> dict:
    ctx = context or ErrorContext()
    return {
        "owner": ctx.owner,
        "operation": ctx.operation,
        "batch_size": ctx.batch_size,
        "error_code": error_code,
    }
