"""Coprocessor Client — httpx wrapper for the encryption coprocessor's verification endpoints.

Invariants:
    - Transient errors (5xx, connection): max_retries retries with exponential backoff
    - Client errors (4xx): immediate failure, no retry
    - Timeouts: immediate failure, no retry (the caller's budget is already spent)
    - All failures mapped to CoprocessorError (core/errors.py)
    - Handles and proofs travel as 0x-hex strings; the client never interprets them
    - Only a JSON object whose verdict is literally true counts as acceptance;
      any other body shape is a bad_response failure

Design Decisions:
    - One client implements both ProofVerifier and DisclosureBinder: same service, same auth,
      same retry policy (ADR: single responsibility per external dependency)
    - ±25% jitter on backoff: prevents thundering herd against a shared coprocessor
    - The disclosure endpoint receives plaintext: only called when
      disclosure_binding_enabled is set
"""

import asyncio
import logging
import random
from typing import Sequence

import httpx

from athlete_registry.core.athlete_record import AthleteRecord, Disclosure
from athlete_registry.core.domain_types import CiphertextHandle
from athlete_registry.core.errors import CoprocessorError, ErrorContext

logger = logging.getLogger(__name__)

PROOF_VERIFY_PATH = "/v1/proofs/verify"
DISCLOSURE_VERIFY_PATH = "/v1/disclosures/verify"


class CoprocessorClient:
    """Wraps httpx.AsyncClient with retry logic, timeouts, and error mapping."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 10.0,
        max_retries: int = 2,
        base_delay_ms: int = 200,
        max_delay_ms: int = 5_000,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_seconds,
            transport=transport,
        )
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms

    async def verify_and_bind(
        self, handles: Sequence[CiphertextHandle], proof: bytes,
    ) -> bool:
        """Ask the coprocessor whether `proof` covers every handle in the submission."""
        body = await self._post(
            PROOF_VERIFY_PATH,
            {
                "handles": [h.hex() for h in handles],
                "proof": "0x" + proof.hex(),
            },
            ErrorContext(operation="verify_and_bind", batch_size=len(handles)),
        )
        return body.get("valid") is True

    async def matches(self, record: AthleteRecord, disclosure: Disclosure) -> bool:
        body = await self._post(
            DISCLOSURE_VERIFY_PATH,
            {
                "owner": record.owner,
                "handles": {
                    "name": record.encrypted.name.hex(),
                    "age": record.encrypted.age.hex(),
                    "contact": record.encrypted.contact.hex(),
                },
                "plaintext": {
                    "name": disclosure.plain_name,
                    "age": disclosure.plain_age,
                    "contact": disclosure.plain_contact,
                },
            },
            ErrorContext(owner=record.owner, operation="disclosure_binding"),
        )
        return body.get("match") is True

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _post(self, path: str, payload: dict, context: ErrorContext) -> dict:
        for attempt in range(self.max_retries + 1):
            try:
                response = await self.client.post(path, json=payload)
                if response.status_code >= 500:
                    await self._handle_transient_error(
                        f"HTTP {response.status_code}", attempt, context,
                    )
                    continue
                if response.status_code >= 400:
                    raise CoprocessorError(
                        f"HTTP {response.status_code}", "client_error", context,
                    )
                body = response.json()
                if not isinstance(body, dict):
                    raise CoprocessorError(
                        f"expected a JSON object, got {type(body).__name__}",
                        "bad_response", context,
                    )
                return body

            except httpx.TimeoutException:
                raise CoprocessorError("request timed out", "timeout", context)

            except httpx.TransportError as e:
                await self._handle_transient_error(str(e), attempt, context)

            except ValueError as e:
                raise CoprocessorError(
                    f"malformed response: {e}", "bad_response", context,
                )
        raise CoprocessorError("retries exhausted", "unavailable", context)

    async def _handle_transient_error(
        self, reason: str, attempt: int, context: ErrorContext,
    ) -> None:
        if attempt >= self.max_retries:
            raise CoprocessorError(reason, "unavailable", context)
        delay = self._backoff(attempt)
        logger.warning(
            f"Coprocessor transient error, retry after {delay}ms: {reason}",
            extra={"operation": context.operation, "attempt": attempt + 1},
        )
        await asyncio.sleep(delay / 1000)

    def _backoff(self, attempt: int) -> int:
        """Exponential backoff with ±25% jitter."""
        delay = min(self.max_delay_ms, (2 ** attempt) * self.base_delay_ms)
        return int(delay * random.uniform(0.75, 1.25))  # nosec B311
