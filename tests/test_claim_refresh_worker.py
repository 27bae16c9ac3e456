"""
Tests for the background claim refresh worker.
"""

import asyncio

import pytest

from hospitalflow.core.config import ClaimFeedSettings
from hospitalflow.domain.entities.bill import Bill, BillItem
from hospitalflow.domain.enums.billing import BillStatus, BillType
from hospitalflow.workers.claim_refresh_worker import _refresh_once, run_claim_refresh_forever


async def _orphan_pharmacy_bill(store, patient):
    bill = Bill(
        bill_id=await store.bills.next_id(),
        patient_id=patient.patient_id,
        patient_name=patient.name,
        bill_type=BillType.PHARMACY,
        items=[BillItem(description="Paracetamol 500mg", quantity=2, unit_price=300)],
        status=BillStatus.HMO_PENDING,
    )
    return await store.bills.add(bill)


@pytest.mark.asyncio
async def test_refresh_once_opens_claim(store, register, fee_schedule):
    patient = await register(hmo=True)
    bill = await _orphan_pharmacy_bill(store, patient)

    created = await _refresh_once(store, fee_schedule)
    assert [c.claim_id for c in created] == [f"HMO-PHARM-{bill.bill_id}"]


@pytest.mark.asyncio
async def test_disabled_worker_returns_immediately(store, fee_schedule):
    settings = ClaimFeedSettings(refresh_enabled=False)
    await asyncio.wait_for(run_claim_refresh_forever(store, fee_schedule, settings), timeout=1)


@pytest.mark.asyncio
async def test_enabled_worker_runs_until_cancelled(store, register, fee_schedule):
    patient = await register(hmo=True)
    bill = await _orphan_pharmacy_bill(store, patient)
    settings = ClaimFeedSettings(refresh_enabled=True, refresh_interval_seconds=1)

    task = asyncio.create_task(run_claim_refresh_forever(store, fee_schedule, settings))
    await asyncio.sleep(0.05)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert await store.claims.find_by_source_id(bill.bill_id) is not None
