"""Registration Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - Ciphertext handles and proofs are 0x-prefixed (or bare) non-empty hex strings
    - Owner ids: 1-128 chars, stripped, non-empty
    - BatchRegistration does NOT enforce equal lengths or the size ceiling: those are
      registry rules (ArrayLengthMismatch / BatchTooLarge), checked in core
    - AthleteInfoResponse carries plaintext only when is_decrypted is true

Design Decisions:
    - HexToken as Annotated str + validator: handles stay strings at the boundary and are
      converted to CiphertextHandle in the route, never decoded further
    - category typed as SportCategory: Pydantic rejects values outside the enum natively
"""

from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, Field, field_validator

from athlete_registry.core.athlete_record import RecordSnapshot
from athlete_registry.core.domain_types import (
    MAX_OWNER_ID_LENGTH, CiphertextHandle, RecordState, SportCategory,
)


def _validate_hex(value: str) -> str:
    raw = value[2:] if value.startswith(("0x", "0X")) else value
    # bytes.fromhex skips whitespace, so "0x  " would decode to b""
    if any(c.isspace() for c in raw):
        raise ValueError("hex value cannot contain whitespace")
    try:
        decoded = bytes.fromhex(raw)
    except ValueError:
        raise ValueError("must be an even-length hex string")
    if not decoded:
        raise ValueError("hex value cannot be empty")
    return value


HexToken = Annotated[str, AfterValidator(_validate_hex)]
OwnerField = Annotated[str, Field(min_length=1, max_length=MAX_OWNER_ID_LENGTH)]


def hex_to_bytes(value: str) -> bytes:
    return CiphertextHandle.from_hex(value).token


class AthleteRegistration(BaseModel):
    """Single admission — owner comes from the X-Participant-Id header."""
    encrypted_name: HexToken
    encrypted_age: HexToken
    encrypted_contact: HexToken
    encrypted_category: HexToken
    category: SportCategory
    input_proof: HexToken


class BatchRegistration(BaseModel):
    """Batch admission — parallel arrays, one entry per athlete."""
    owners: list[OwnerField]
    encrypted_names: list[HexToken]
    encrypted_ages: list[HexToken]
    encrypted_contacts: list[HexToken]
    encrypted_categories: list[HexToken]
    categories: list[SportCategory]
    input_proof: HexToken

    @field_validator("owners")
    @classmethod
    def strip_owners(cls, v: list[str]) -> list[str]:
        stripped = [o.strip() for o in v]
        if any(not o for o in stripped):
            raise ValueError("owner ids cannot be empty or whitespace")
        return stripped


class FinalizeRequest(BaseModel):
    """Authorized plaintext disclosure for one athlete."""
    plain_name: str = Field(min_length=1, max_length=200)
    plain_age: int = Field(ge=0, le=150)
    plain_contact: int = Field(ge=0)


class AthleteInfoResponse(BaseModel):
    """get_info view — handles always, plaintext only after finalization."""
    owner: str
    category: SportCategory
    state: RecordState
    is_decrypted: bool
    submitted_at: datetime
    decrypted_at: datetime | None = None
    encrypted_name: str
    encrypted_age: str
    encrypted_contact: str
    encrypted_category: str
    plain_name: str | None = None
    plain_age: int | None = None
    plain_contact: int | None = None

    @classmethod
    def from_snapshot(cls, snapshot: RecordSnapshot) -> "AthleteInfoResponse":
        return cls(
            owner=snapshot.owner,
            category=snapshot.category,
            state=snapshot.state,
            is_decrypted=snapshot.is_decrypted,
            submitted_at=snapshot.submitted_at,
            decrypted_at=snapshot.decrypted_at,
            encrypted_name=snapshot.encrypted.name.hex(),
            encrypted_age=snapshot.encrypted.age.hex(),
            encrypted_contact=snapshot.encrypted.contact.hex(),
            encrypted_category=snapshot.encrypted.category.hex(),
            plain_name=snapshot.plain_name,
            plain_age=snapshot.plain_age,
            plain_contact=snapshot.plain_contact,
        )


class RegisteredAthletesResponse(BaseModel):
    owners: list[str]
    count: int


class RegistrationStatusResponse(BaseModel):
    owner: str
    is_registered: bool


class StatisticsResponse(BaseModel):
    total_records: int
    decrypted_records: int
    average_latency_seconds: float
