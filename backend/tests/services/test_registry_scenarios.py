"""Registry scenarios — end-to-end properties across admission, reconciliation and queries.

Tests cover:
    - registration is permanent once granted
    - single/batch duplicate combinations leave the first admission intact
    - counters track successful calls exactly
    - the Endurance 17 -> 18 scenario
    - concurrent admissions of one owner: exactly one wins
    - concurrent finalizations of one owner: exactly one wins, its plaintext is kept
"""

import asyncio

import pytest

from athlete_registry.core.domain_types import OwnerId, SportCategory
from athlete_registry.core.errors import (
    AgeRequirementNotMetError, AlreadyDecryptedError, DuplicateOwnerError,
    RegistryError,
)

from tests.fakes import (
    FakeDisclosureBinder, FakeProofVerifier, make_profile, register, register_batch,
)


async def test_is_registered_false_until_admitted_then_permanent(
    admission, reconciliation, registry,
):
    owner = OwnerId("alice")
    assert registry.is_registered(owner) is False
    await register(admission, "alice")
    assert registry.is_registered(owner) is True
    await reconciliation.finalize_results(owner, "Alice", 30, 1)
    assert registry.is_registered(owner) is True


async def test_single_then_batch_duplicate(admission, registry):
    await register(admission, "a", SportCategory.COMBAT)
    before = registry.get_info(OwnerId("a"))
    with pytest.raises(DuplicateOwnerError):
        await register_batch(admission, ["b", "a"])
    assert registry.get_info(OwnerId("a")) == before
    assert registry.list_registered() == ["a"]


async def test_batch_then_single_duplicate(admission, registry):
    await register_batch(admission, ["a", "b"])
    before = registry.get_info(OwnerId("b"))
    with pytest.raises(DuplicateOwnerError):
        await register(admission, "b", SportCategory.OTHER)
    assert registry.get_info(OwnerId("b")) == before


async def test_counters_track_successful_calls(admission, reconciliation, registry):
    await register(admission, "a")
    await register_batch(admission, ["b", "c", "d"])
    with pytest.raises(RegistryError):
        await register(admission, "a")
    await reconciliation.finalize_results(OwnerId("b"), "B", 20, 1)
    with pytest.raises(RegistryError):
        await reconciliation.finalize_results(OwnerId("b"), "B", 20, 1)

    total, decrypted, _ = registry.get_statistics()
    assert total == 4
    assert decrypted == 1


async def test_endurance_minimum_age_scenario(admission, reconciliation, registry):
    await register(admission, "A", SportCategory.ENDURANCE)
    with pytest.raises(AgeRequirementNotMetError):
        await reconciliation.finalize_results(OwnerId("A"), "A", 17, 1)
    await reconciliation.finalize_results(OwnerId("A"), "A", 18, 1)
    assert registry.get_statistics()[1] == 1


async def test_partial_finalization_statistics(admission, reconciliation, registry):
    await register(admission, "A")
    await register(admission, "B")
    await reconciliation.finalize_results(OwnerId("A"), "A", 30, 1)
    total, decrypted, average = registry.get_statistics()
    assert (total, decrypted) == (2, 1)
    assert average >= 0


async def test_category_min_ages_query(registry):
    assert registry.category_min_ages() == {
        "individual": 16, "team": 14, "endurance": 18, "combat": 16, "other": 14,
    }


async def test_concurrent_admissions_of_one_owner(registry):
    from athlete_registry.services.admission import AdmissionController

    # A slow verifier lets both calls pass the proof gate before either inserts
    admission = AdmissionController(registry, FakeProofVerifier(delay=0.01))
    results = await asyncio.gather(
        register(admission, "alice"),
        register(admission, "alice"),
        return_exceptions=True,
    )
    assert sum(isinstance(r, DuplicateOwnerError) for r in results) == 1
    assert registry.get_statistics()[0] == 1


async def test_handles_stored_verbatim(admission, registry):
    await register(admission, "alice")
    assert registry.get_info(OwnerId("alice")).encrypted == make_profile("alice")


async def test_concurrent_finalizations_of_one_owner(admission, registry):
    from athlete_registry.services.reconciliation import ReconciliationController

    await register(admission, "alice")
    # A slow binder lets both calls pass the first checks before either commits
    controller = ReconciliationController(registry, FakeDisclosureBinder(delay=0.01))
    results = await asyncio.gather(
        controller.finalize_results(OwnerId("alice"), "Alice", 25, 1),
        controller.finalize_results(OwnerId("alice"), "Mallory", 40, 2),
        return_exceptions=True,
    )

    assert sum(isinstance(r, AlreadyDecryptedError) for r in results) == 1
    assert registry.get_statistics()[1] == 1
    winner = next(r for r in results if not isinstance(r, Exception))
    stored = registry.get_info(OwnerId("alice"))
    assert stored.plain_name == winner.plain_name == "Alice"
    assert stored.plain_age == 25
