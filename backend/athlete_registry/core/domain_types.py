"""Domain Types — rich types that replace bare primitives across the registry.

Invariants:
    - OwnerId wraps str — never use a bare str for participant identity in domain logic
    - CiphertextHandle is opaque: equality and transport encodings only, no decode path
    - SportCategory is a closed value-set (5 members) — eligibility is total over it
    - RecordState is two-state and monotonic: SUBMITTED -> DECRYPTED, never back

Design Decisions:
    - NewType for identifiers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders (ADR: REST payloads are JSON)
    - CiphertextHandle as frozen dataclass over bytes: hashable, comparable as a whole,
      and the registry has nothing to branch on besides identity
"""

from dataclasses import dataclass
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

OwnerId = NewType("OwnerId", str)


# ─── Limits ──────────────────────────────────────────────────────

MAX_BATCH_SIZE = 10
MAX_OWNER_ID_LENGTH = 128


# ─── Opaque Values ───────────────────────────────────────────────

@dataclass(frozen=True)
class CiphertextHandle:
    """Opaque reference to an encrypted value held by the coprocessor."""

    token: bytes

    def __post_init__(self):
        if not isinstance(self.token, bytes) or not self.token:
            raise ValueError("ciphertext handle must be non-empty bytes")

    @classmethod
    def from_hex(cls, value: str) -> "CiphertextHandle":
        """Parse a hex transport encoding (optional 0x prefix)."""
        raw = value[2:] if value.startswith(("0x", "0X")) else value
        return cls(bytes.fromhex(raw))

    def hex(self) -> str:
        return "0x" + self.token.hex()

    def __repr__(self) -> str:
        # Never print the whole token into logs
        return f"CiphertextHandle(0x{self.token[:4].hex()}…)"


# ─── Enums ───────────────────────────────────────────────────────

class SportCategory(str, Enum):
    """Sport categories — each maps to a minimum age in core/eligibility.py."""
    INDIVIDUAL = "individual"
    TEAM = "team"
    ENDURANCE = "endurance"
    COMBAT = "combat"
    OTHER = "other"


class RecordState(str, Enum):
    """Record lifecycle — maps to DB `state` column."""
    SUBMITTED = "submitted"
    DECRYPTED = "decrypted"
