"""Proof Gate — every failure of the collaborator becomes InvalidProofError."""

import pytest

from athlete_registry.core.errors import InvalidProofError
from athlete_registry.services.proof_gate import verify_input_proof

from tests.fakes import VALID_PROOF, FakeProofVerifier, make_profile

HANDLES = make_profile("alice").handles()


async def test_accepted_proof_passes():
    verifier = FakeProofVerifier()
    await verify_input_proof(verifier, HANDLES, VALID_PROOF, 1.0)
    assert len(verifier.calls) == 1


async def test_rejected_proof_raises():
    with pytest.raises(InvalidProofError) as exc:
        await verify_input_proof(FakeProofVerifier(accept=False), HANDLES, VALID_PROOF, 1.0)
    assert exc.value.reason == "rejected"


async def test_empty_proof_never_reaches_verifier():
    verifier = FakeProofVerifier()
    with pytest.raises(InvalidProofError):
        await verify_input_proof(verifier, HANDLES, b"", 1.0)
    assert verifier.calls == []


async def test_timeout_is_invalid_proof():
    with pytest.raises(InvalidProofError) as exc:
        await verify_input_proof(FakeProofVerifier(delay=1.0), HANDLES, VALID_PROOF, 0.05)
    assert exc.value.reason == "verification timed out"


async def test_coprocessor_failure_is_invalid_proof():
    with pytest.raises(InvalidProofError) as exc:
        await verify_input_proof(FakeProofVerifier(fail=True), HANDLES, VALID_PROOF, 1.0)
    assert exc.value.reason == "unavailable"
    assert exc.value.__cause__ is not None
