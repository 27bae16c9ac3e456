"""
Optimistic versioning and isolation in the in-memory store.
"""

import asyncio
from decimal import Decimal

import pytest

from hospitalflow.adapters.store.memory import InMemoryHospitalStore
from hospitalflow.application.services import change_feed as topics
from hospitalflow.core.exceptions import StoreError
from hospitalflow.domain.entities.patient import Patient
from hospitalflow.domain.errors import (
    DuplicateClaimError,
    PatientNotFoundError,
    StaleEntityError,
)


@pytest.mark.asyncio
async def test_add_starts_at_version_one_and_updates_increment(store, register):
    patient = await register()
    assert patient.version == 1

    patient.address = "12 Marina Road"
    updated = await store.patients.update(patient)
    assert updated.version == 2
    assert (await store.patients.find_by_id(patient.patient_id)).version == 2


@pytest.mark.asyncio
async def test_stale_update_is_rejected(store, register):
    patient = await register()
    first = await store.patients.find_by_id(patient.patient_id)
    second = await store.patients.find_by_id(patient.patient_id)

    first.address = "Ikeja"
    await store.patients.update(first)

    second.address = "Lekki"
    with pytest.raises(StaleEntityError) as exc_info:
        await store.patients.update(second)
    assert exc_info.value.details["expected_version"] == 1
    assert exc_info.value.details["actual_version"] == 2

    stored = await store.patients.find_by_id(patient.patient_id)
    assert stored.address == "Ikeja"


@pytest.mark.asyncio
async def test_concurrent_writers_only_one_wins(store, register):
    patient = await register()

    async def rename(name):
        current = await store.patients.find_by_id(patient.patient_id)
        await asyncio.sleep(0)
        current.name = name
        return await store.patients.update(current)

    results = await asyncio.gather(rename("Ada A"), rename("Ada B"), return_exceptions=True)
    stale = [r for r in results if isinstance(r, StaleEntityError)]
    assert len(stale) == 1


@pytest.mark.asyncio
async def test_reads_are_isolated_copies(store, register):
    patient = await register()
    loaded = await store.patients.find_by_id(patient.patient_id)
    loaded.name = "Changed Without Update"
    loaded.balance = Decimal("999")

    again = await store.patients.find_by_id(patient.patient_id)
    assert again.name == "Ada Obi"
    assert again.balance == Decimal("0")


@pytest.mark.asyncio
async def test_update_balance_adjusts_and_versions(store, register):
    patient = await register()
    updated = await store.patients.update_balance(patient.patient_id, Decimal("2500"))
    assert updated.balance == Decimal("2500.00")
    assert updated.version == 2

    updated = await store.patients.update_balance(patient.patient_id, Decimal("-500"))
    assert updated.balance == Decimal("2000.00")

    with pytest.raises(PatientNotFoundError):
        await store.patients.update_balance("P-9999", Decimal("1"))


@pytest.mark.asyncio
async def test_update_unknown_entity_is_not_found(store):
    ghost = Patient(patient_id="P-9999", name="Nobody", phone="0800", version=1)
    with pytest.raises(PatientNotFoundError):
        await store.patients.update(ghost)


@pytest.mark.asyncio
async def test_duplicate_insert_is_a_store_error(store, register):
    patient = await register()
    with pytest.raises(StoreError):
        await store.patients.add(patient)


@pytest.mark.asyncio
async def test_one_claim_per_bill(store, register, walk_in):
    patient = await register(hmo=True)
    check_in = await walk_in(patient)

    duplicate = await store.claims.find_by_id(check_in.claim.claim_id)
    duplicate.claim_id = "HMO-CONS-COPY"
    with pytest.raises(DuplicateClaimError):
        await store.claims.add(duplicate)


@pytest.mark.asyncio
async def test_sequences_issue_readable_ids():
    store = InMemoryHospitalStore()
    assert await store.patients.next_id() == "P-1001"
    assert await store.patients.next_id() == "P-1002"
    assert await store.appointments.next_id() == "A-1001"
    assert await store.bills.next_id() == "BILL-1001"
    assert await store.bills.next_deposit_id() == "BILL-DEP-1001"
    assert await store.staff.next_id() == "STAFF-001"


@pytest.mark.asyncio
async def test_every_write_is_published(store, register):
    before = store.feed.revision(topics.PATIENT)
    patient = await register()
    await store.patients.update_balance(patient.patient_id, Decimal("100"))

    events = store.feed.changes_since(topics.PATIENT, before)
    assert [(e.entity_id, e.version) for e in events] == [
        (patient.patient_id, 1),
        (patient.patient_id, 2),
    ]
