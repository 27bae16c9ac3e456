"""Complete Injection use case."""

import logging

from ...core.utils import format_display_date
from ...domain.enums.billing import BillType
from ...domain.enums.pathway import Department
from ...domain.value_objects.fee_schedule import FeeSchedule
from ..dto.clinical_dto import ClinicalOutcome, CompleteInjectionRequest
from ..ports.store import HospitalStore
from ..services.billing_service import BillingService
from ..services.lifecycle import settle_visit
from ..services.lookups import patient_at
from .complete_lab import latest_service_bill, require_paid

logger = logging.getLogger("hospitalflow")


class CompleteInjectionUseCase:
    """Injection room: administer the injection or vaccine and discharge."""

    def __init__(self, store: HospitalStore, fee_schedule: FeeSchedule):
        self._store = store
        self._billing = BillingService(store, fee_schedule)

    async def execute(self, request: CompleteInjectionRequest) -> ClinicalOutcome:
        patient, visit = await patient_at(self._store, request.patient_id, Department.INJECTION_ROOM)
        bill = await latest_service_bill(
            self._store, visit, BillType.INJECTION, BillType.VACCINATION
        )
        require_paid(bill, patient.is_hmo)

        administered_by = request.administered_by or "Injection Room"
        visit.move_to(Department.COMPLETED)
        line = f"Injection Room ({format_display_date()}): administered by {administered_by}"
        if request.notes:
            line = f"{line}. {request.notes.strip()}"
        visit.append_note(line)

        await self._store.patients.update(patient)
        claim = await self._billing.complete_claim_for(bill) if bill is not None else None
        appointment = await settle_visit(self._store, visit)

        logger.info(f"Injection completed for patient {patient.patient_id}, visit {visit.visit_id}")
        return ClinicalOutcome(visit=visit, bill=bill, claim=claim, appointment=appointment)
