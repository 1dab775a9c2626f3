"""Registration schemas — boundary validation for hex tokens, owners and disclosures.

Invariants:
    - Hex tokens accept 0x-prefixed or bare even-length hex, reject empty
    - Batch owners are stripped; blank owners rejected
    - Batch schema does NOT enforce equal lengths (core rule, reported as ARRAY_LENGTH_MISMATCH)
    - Response carries plaintext only for decrypted snapshots
"""

import pytest
from pydantic import ValidationError

from athlete_registry.core.athlete_record import Disclosure
from athlete_registry.core.domain_types import SportCategory
from athlete_registry.schemas.registration import (
    AthleteInfoResponse,
    AthleteRegistration,
    BatchRegistration,
    FinalizeRequest,
    hex_to_bytes,
)

from tests.fakes import T0, make_record


def _registration(**overrides) -> dict:
    body = {
        "encrypted_name": "0x01",
        "encrypted_age": "02",
        "encrypted_contact": "0x0a0b",
        "encrypted_category": "0xff",
        "category": "team",
        "input_proof": "0x01",
    }
    body.update(overrides)
    return body


# --- Hex tokens ---------------------------------------------------------------

def test_registration_accepts_prefixed_and_bare_hex():
    reg = AthleteRegistration(**_registration())
    assert reg.encrypted_age == "02"
    assert reg.category == SportCategory.TEAM


@pytest.mark.parametrize("bad", ["", "0x", "0x123", "zz", "0xgg", " ", "0x  ", "0a 0b", "\t"])
def test_registration_rejects_bad_hex(bad):
    with pytest.raises(ValidationError):
        AthleteRegistration(**_registration(encrypted_name=bad))


def test_hex_to_bytes_strips_prefix():
    assert hex_to_bytes("0x0a0b") == b"\x0a\x0b"
    assert hex_to_bytes("0a0b") == b"\x0a\x0b"


def test_registration_rejects_unknown_category():
    with pytest.raises(ValidationError):
        AthleteRegistration(**_registration(category="chess"))


# --- BatchRegistration --------------------------------------------------------

def test_batch_strips_owner_ids():
    batch = BatchRegistration(
        owners=[" a ", "b"],
        encrypted_names=["01", "02"],
        encrypted_ages=["01", "02"],
        encrypted_contacts=["01", "02"],
        encrypted_categories=["01", "02"],
        categories=["team", "combat"],
        input_proof="0x01",
    )
    assert batch.owners == ["a", "b"]


def test_batch_rejects_blank_owner():
    with pytest.raises(ValidationError):
        BatchRegistration(
            owners=["   "],
            encrypted_names=["01"],
            encrypted_ages=["01"],
            encrypted_contacts=["01"],
            encrypted_categories=["01"],
            categories=["team"],
            input_proof="0x01",
        )


def test_batch_allows_unequal_lengths():
    batch = BatchRegistration(
        owners=["a", "b"],
        encrypted_names=["01"],
        encrypted_ages=["01", "02", "03"],
        encrypted_contacts=[],
        encrypted_categories=["01"],
        categories=["team"],
        input_proof="0x01",
    )
    assert len(batch.encrypted_ages) == 3


# --- FinalizeRequest ----------------------------------------------------------

def test_finalize_request_bounds():
    with pytest.raises(ValidationError):
        FinalizeRequest(plain_name="", plain_age=20, plain_contact=1)
    with pytest.raises(ValidationError):
        FinalizeRequest(plain_name="A", plain_age=-1, plain_contact=1)
    with pytest.raises(ValidationError):
        FinalizeRequest(plain_name="A", plain_age=20, plain_contact=-5)


# --- AthleteInfoResponse ------------------------------------------------------

def test_response_from_submitted_snapshot():
    record = make_record("alice")
    response = AthleteInfoResponse.from_snapshot(record.snapshot())
    assert response.is_decrypted is False
    assert response.plain_name is None
    assert response.encrypted_name == record.encrypted.name.hex()
    assert response.encrypted_name.startswith("0x")


def test_response_from_decrypted_snapshot():
    record = make_record("alice")
    record.apply_disclosure(Disclosure("Alice", 25, 42), T0)
    response = AthleteInfoResponse.from_snapshot(record.snapshot())
    assert response.is_decrypted is True
    assert response.plain_name == "Alice"
    assert response.plain_contact == 42
