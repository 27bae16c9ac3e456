"""Read-only billing queries."""

from typing import List

from ...domain.entities.bill import Bill
from ..ports.store import HospitalStore
from ..services.lookups import require_bill, require_patient


class ListPendingBillsUseCase:
    def __init__(self, store: HospitalStore):
        self._store = store

    async def execute(self) -> List[Bill]:
        bills = await self._store.bills.find_pending()
        return sorted(bills, key=lambda b: b.date)


class GetPatientBillsUseCase:
    def __init__(self, store: HospitalStore):
        self._store = store

    async def execute(self, patient_id: str) -> List[Bill]:
        await require_patient(self._store, patient_id)
        bills = await self._store.bills.find_by_patient(patient_id)
        return sorted(bills, key=lambda b: b.date, reverse=True)


class GetBillUseCase:
    def __init__(self, store: HospitalStore):
        self._store = store

    async def execute(self, bill_id: str) -> Bill:
        return await require_bill(self._store, bill_id)
