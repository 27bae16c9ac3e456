"""Complete Lab use case."""

import logging
from typing import Optional

from ...core.utils import format_display_date
from ...domain.entities.bill import Bill
from ...domain.entities.visit import Visit
from ...domain.enums.billing import BillStatus, BillType
from ...domain.enums.pathway import Department
from ...domain.errors import MissingFieldError, PaymentRequiredError
from ...domain.value_objects.fee_schedule import FeeSchedule
from ..dto.clinical_dto import ClinicalOutcome, CompleteLabRequest
from ..ports.store import HospitalStore
from ..services.billing_service import BillingService
from ..services.lookups import patient_at

logger = logging.getLogger("hospitalflow")


async def latest_service_bill(
    store: HospitalStore, visit: Visit, *bill_types: BillType
) -> Optional[Bill]:
    """Most recent live bill of the given types raised on this visit."""
    bills = [
        bill
        for bill in await store.bills.find_by_visit(visit.visit_id)
        if bill.bill_type in bill_types and bill.status != BillStatus.CANCELLED
    ]
    return max(bills, key=lambda b: b.date) if bills else None


def require_paid(bill: Optional[Bill], is_hmo: bool) -> None:
    """Cash patients pay before the service; HMO patients were cleared by the desk."""
    if is_hmo or bill is None:
        return
    if not bill.is_settled:
        raise PaymentRequiredError(bill.bill_id, bill.status.value)


class CompleteLabUseCase:
    """Record lab results and return the patient to the doctor."""

    def __init__(self, store: HospitalStore, fee_schedule: FeeSchedule):
        self._store = store
        self._billing = BillingService(store, fee_schedule)

    async def execute(self, request: CompleteLabRequest) -> ClinicalOutcome:
        if not request.results:
            raise MissingFieldError("results")
        patient, visit = await patient_at(self._store, request.patient_id, Department.LABORATORY)
        bill = await latest_service_bill(self._store, visit, BillType.LABORATORY)
        require_paid(bill, patient.is_hmo)

        completed_by = request.completed_by or "Laboratory"
        visit.lab_results.update(request.results)
        visit.move_to(Department.DOCTOR_QUEUE, visit.original_diagnosis or visit.diagnosis_text)
        line = f"Laboratory ({format_display_date()}): results recorded by {completed_by}"
        if request.notes:
            line = f"{line}. {request.notes.strip()}"
        visit.append_note(line)

        await self._store.patients.update(patient)
        claim = await self._billing.complete_claim_for(bill) if bill is not None else None

        logger.info(f"Lab results recorded for patient {patient.patient_id}, visit {visit.visit_id}")
        return ClinicalOutcome(visit=visit, bill=bill, claim=claim)
