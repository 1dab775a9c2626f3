"""Reconciliation Controller — finalize_results and the statistics it feeds.

Tests cover:
    - finalize exposes plaintext and bumps decrypted_records
    - latency = decrypted_at - submitted_at, averaged over decrypted records
    - second finalize rejected, first disclosure kept
    - unknown owner rejected
    - age below category minimum rejected, record stays submitted
    - binder mismatch rejected, binder consulted only after core checks pass
    - binder runs outside the registry lock, so admissions are not held up by it
"""

import asyncio

import pytest

from athlete_registry.core.domain_types import OwnerId, SportCategory
from athlete_registry.core.errors import (
    AgeRequirementNotMetError,
    AlreadyDecryptedError,
    DisclosureMismatchError,
    RecordNotFoundError,
)
from athlete_registry.services.reconciliation import ReconciliationController

from tests.fakes import FakeDisclosureBinder, T0, register


async def test_finalize_exposes_plaintext(admission, reconciliation, registry, clock):
    await register(admission, "alice", SportCategory.ENDURANCE)
    clock.advance(30)

    snapshot = await reconciliation.finalize_results(
        OwnerId("alice"), "Alice", 25, 1234567890,
    )

    assert snapshot.is_decrypted is True
    assert snapshot.plain_name == "Alice"
    assert snapshot.plain_age == 25
    assert snapshot.plain_contact == 1234567890
    assert snapshot.decrypted_at == clock.now
    assert registry.get_info(OwnerId("alice")).is_decrypted
    assert registry.get_statistics() == (1, 1, 30.0)


async def test_average_latency_over_decrypted_records(
    admission, reconciliation, registry, clock,
):
    await register(admission, "a")
    await register(admission, "b")
    await register(admission, "c")
    clock.advance(10)
    await reconciliation.finalize_results(OwnerId("a"), "A", 20, 1)
    clock.advance(20)
    await reconciliation.finalize_results(OwnerId("b"), "B", 20, 2)

    assert registry.get_statistics() == (3, 2, 20.0)


async def test_second_finalize_rejected(admission, reconciliation, registry):
    await register(admission, "alice")
    await reconciliation.finalize_results(OwnerId("alice"), "Alice", 25, 1)

    with pytest.raises(AlreadyDecryptedError):
        await reconciliation.finalize_results(OwnerId("alice"), "Mallory", 40, 2)

    info = registry.get_info(OwnerId("alice"))
    assert info.plain_name == "Alice"
    assert registry.get_statistics()[1] == 1


async def test_unknown_owner_rejected(reconciliation):
    with pytest.raises(RecordNotFoundError):
        await reconciliation.finalize_results(OwnerId("ghost"), "G", 30, 1)


async def test_underage_disclosure_rejected(admission, reconciliation, registry):
    await register(admission, "teen", SportCategory.ENDURANCE)

    with pytest.raises(AgeRequirementNotMetError) as exc:
        await reconciliation.finalize_results(OwnerId("teen"), "Teen", 17, 1)

    assert exc.value.minimum_age == 18
    assert registry.get_info(OwnerId("teen")).is_decrypted is False
    assert registry.get_statistics() == (1, 0, 0.0)


async def test_binder_mismatch_rejected(admission, registry):
    binder = FakeDisclosureBinder(match=False)
    controller = ReconciliationController(registry, binder)
    await register(admission, "alice")

    with pytest.raises(DisclosureMismatchError):
        await controller.finalize_results(OwnerId("alice"), "Alice", 25, 1)

    assert binder.calls[0][0] == "alice"
    assert registry.get_info(OwnerId("alice")).is_decrypted is False


async def test_binder_not_called_when_core_checks_fail(admission, reconciliation, binder):
    await register(admission, "teen", SportCategory.ENDURANCE)
    with pytest.raises(AgeRequirementNotMetError):
        await reconciliation.finalize_results(OwnerId("teen"), "Teen", 10, 1)
    assert binder.calls == []


async def test_default_binder_trusts_disclosure(admission, registry):
    controller = ReconciliationController(registry)
    await register(admission, "alice")
    snapshot = await controller.finalize_results(OwnerId("alice"), "Alice", 25, 1)
    assert snapshot.is_decrypted


async def test_backwards_clock_clamped_to_submission(admission, reconciliation, clock):
    clock.advance(100)
    await register(admission, "alice")
    clock.now = T0

    snapshot = await reconciliation.finalize_results(OwnerId("alice"), "Alice", 25, 1)

    assert snapshot.decrypted_at == snapshot.submitted_at


async def test_binder_runs_without_registry_lock(admission, registry):
    binder = FakeDisclosureBinder(lock=registry.lock)
    controller = ReconciliationController(registry, binder)
    await register(admission, "alice")

    await controller.finalize_results(OwnerId("alice"), "Alice", 25, 1)

    assert binder.lock_held == [False]


async def test_admission_proceeds_while_binder_is_slow(admission, registry):
    binder = FakeDisclosureBinder(delay=0.05)
    controller = ReconciliationController(registry, binder)
    await register(admission, "alice")

    finalize = asyncio.create_task(
        controller.finalize_results(OwnerId("alice"), "Alice", 25, 1),
    )
    await asyncio.sleep(0)
    await register(admission, "bob")

    assert registry.is_registered(OwnerId("bob"))
    assert not finalize.done()
    snapshot = await finalize
    assert snapshot.is_decrypted
