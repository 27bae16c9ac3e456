"""Request Vaccination use case."""

import logging

from ...core.utils import format_display_date
from ...domain.entities.bill import BillItem
from ...domain.enums.billing import BillType, ItemType
from ...domain.enums.claims import SourceDepartment
from ...domain.enums.pathway import Department
from ...domain.enums.workflow import VisitType
from ...domain.errors import (
    IneligibleVaccineDoseError,
    InvalidFieldError,
    InvalidPathwayStateError,
)
from ...domain.value_objects.care_location import CareLocation
from ...domain.value_objects.fee_schedule import FeeSchedule
from ..dto.clinical_dto import ClinicalOutcome, VaccinationRequest
from ..ports.store import HospitalStore
from ..services.billing_service import BillingService
from ..services.lookups import require_patient, require_text

logger = logging.getLogger("hospitalflow")

VACCINATION = "Vaccination"


class RequestVaccinationUseCase:
    """Open a vaccination visit for the next dose in the patient's schedule.

    Refused while another visit is still under way.
    """

    def __init__(self, store: HospitalStore, fee_schedule: FeeSchedule):
        self._store = store
        self._billing = BillingService(store, fee_schedule)

    async def execute(self, request: VaccinationRequest) -> ClinicalOutcome:
        vaccine = require_text(request.vaccine, "vaccine")
        if request.dose_number < 1:
            raise InvalidFieldError("dose_number", request.dose_number, "must be at least 1")
        if request.price < 0:
            raise InvalidFieldError("price", request.price, "cannot be negative")

        patient = await require_patient(self._store, request.patient_id)
        active = patient.latest_visit
        if active is not None and not active.location.is_completed:
            raise InvalidPathwayStateError(
                patient.patient_id, active.department.value, [Department.COMPLETED.value]
            )
        expected = patient.next_vaccine_dose(vaccine)
        if request.dose_number != expected:
            raise IneligibleVaccineDoseError(
                patient.patient_id, vaccine, request.dose_number, expected
            )

        department = Department.HMO_DESK if patient.is_hmo else Department.CASH_POINT
        visit = patient.open_visit(
            CareLocation(department, VACCINATION), visit_type=VisitType.VACCINATION
        )
        visit.injections = [f"{vaccine} - Dose {request.dose_number}"]
        visit.append_note(
            f"Vaccination ({format_display_date()}): {vaccine} dose {request.dose_number} requested"
            + (f" by {request.requested_by}" if request.requested_by else "")
        )

        bill = await self._billing.build_bill(
            patient,
            BillType.VACCINATION,
            [
                BillItem(
                    description=f"{vaccine} - Dose {request.dose_number}",
                    quantity=1,
                    unit_price=request.price,
                    item_type=ItemType.VACCINE,
                )
            ],
            source=SourceDepartment.INJECTION_ROOM,
            visit_id=visit.visit_id,
            processed_by=request.requested_by,
        )
        patient.record_vaccination(vaccine, request.dose_number, bill.bill_id)

        await self._store.patients.update(patient)
        bill, claim = await self._billing.store_bill(patient, bill)

        logger.info(
            f"Vaccination {vaccine} dose {request.dose_number} requested for patient "
            f"{patient.patient_id} ({visit.location})"
        )
        return ClinicalOutcome(visit=visit, bill=bill, claim=claim)
