"""Patient lookup use cases."""

from typing import List

from ...domain.entities.patient import Patient
from ...domain.errors import InvalidFieldError
from ..dto.patient_dto import PatientHistoryResponse, SearchPatientsRequest
from ..ports.store import HospitalStore
from ..services.lookups import require_patient

SEARCH_FIELDS = ("name", "id", "phone")


class SearchPatientsUseCase:
    def __init__(self, store: HospitalStore):
        self._store = store

    async def execute(self, request: SearchPatientsRequest) -> List[Patient]:
        if request.by not in SEARCH_FIELDS:
            raise InvalidFieldError("by", request.by, f"must be one of {', '.join(SEARCH_FIELDS)}")
        return await self._store.patients.search(request.term, by=request.by)


class GetPatientHistoryUseCase:
    """Patient record with every appointment, bill and claim raised against it."""

    def __init__(self, store: HospitalStore):
        self._store = store

    async def execute(self, patient_id: str) -> PatientHistoryResponse:
        patient = await require_patient(self._store, patient_id)
        appointments = await self._store.appointments.find_by_patient(patient_id)
        bills = await self._store.bills.find_by_patient(patient_id)
        claims = await self._store.claims.find_by_patient(patient_id)
        return PatientHistoryResponse(
            patient=patient,
            appointments=sorted(appointments, key=lambda a: a.created_at, reverse=True),
            bills=sorted(bills, key=lambda b: b.date, reverse=True),
            claims=sorted(claims, key=lambda c: c.date, reverse=True),
        )
