"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy (ADR: ExMA anti-pattern)
    - Async in Protocol: boundary methods are async because implementations do IO,
      but core pure functions never await; services orchestrate the calls around them
    - DisclosureBinder is the extension point for tying plaintext to stored ciphertext;
      the default trusts the out-of-band channel (documented trust boundary)
"""

from typing import Protocol, Sequence

from athlete_registry.core.athlete_record import AthleteRecord, Disclosure
from athlete_registry.core.domain_types import CiphertextHandle
from athlete_registry.core.registry_stats import RegistryStatistics


class ProofVerifier(Protocol):
    """Encryption collaborator gate — called once per single or batch admission."""
    async def verify_and_bind(
        self, handles: Sequence[CiphertextHandle], proof: bytes,
    ) -> bool: ...


class DisclosureBinder(Protocol):
    """Confirms that a disclosure decrypts from the record's stored handles."""
    async def matches(
        self, record: AthleteRecord, disclosure: Disclosure,
    ) -> bool: ...


class RegistryRepository(Protocol):
    """Contract for registry persistence — implemented by shell."""
    async def load(self) -> tuple[list[AthleteRecord], RegistryStatistics]: ...
    async def save_admissions(
        self, records: Sequence[AthleteRecord], stats: RegistryStatistics,
    ) -> None: ...
    async def save_decryption(
        self, record: AthleteRecord, stats: RegistryStatistics,
    ) -> None: ...


class TrustedDisclosureBinder:
    """Default binder: the disclosure channel already authenticated the plaintext."""

    async def matches(self, record: AthleteRecord, disclosure: Disclosure) -> bool:
        return True
