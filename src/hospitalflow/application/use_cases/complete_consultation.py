"""Complete Consultation use case: the doctor's diagnosis and next destination."""

import logging
from typing import List, Optional

from ...core.utils import format_display_date
from ...domain.entities.bill import BillItem
from ...domain.entities.patient import Patient
from ...domain.entities.visit import Visit
from ...domain.enums.billing import BillType, ItemType
from ...domain.enums.claims import SourceDepartment
from ...domain.enums.pathway import Department
from ...domain.enums.workflow import ConsultationDestination
from ...domain.errors import MissingFieldError
from ...domain.value_objects.fee_schedule import FeeSchedule
from ..dto.clinical_dto import ClinicalOutcome, CompleteConsultationRequest, OrderLine
from ..ports.store import HospitalStore
from ..services.billing_service import BillingService
from ..services.lifecycle import settle_visit
from ..services.lookups import patient_at, require_text

logger = logging.getLogger("hospitalflow")

# Destinations that raise a bill: (bill type, item type, claim source, cash-patient department).
ORDERED_SERVICES = {
    ConsultationDestination.LABORATORY: (
        BillType.LABORATORY,
        ItemType.LAB,
        SourceDepartment.LABORATORY,
        Department.LABORATORY,
    ),
    ConsultationDestination.INJECTION: (
        BillType.INJECTION,
        ItemType.INJECTION,
        SourceDepartment.INJECTION_ROOM,
        Department.INJECTION_ROOM,
    ),
}

DIRECT_DESTINATIONS = {
    ConsultationDestination.PHARMACY: Department.PHARMACY,
    ConsultationDestination.DISCHARGE: Department.COMPLETED,
    ConsultationDestination.ADMISSION: Department.ADMISSION_PENDING,
}


def _order_items(lines: List[OrderLine], item_type: ItemType) -> List[BillItem]:
    return [
        BillItem(
            description=line.description,
            quantity=line.quantity,
            unit_price=line.unit_price,
            item_type=item_type,
        )
        for line in lines
    ]


class CompleteConsultationUseCase:
    """Record the doctor's findings and route the patient onward."""

    def __init__(self, store: HospitalStore, fee_schedule: FeeSchedule):
        self._store = store
        self._billing = BillingService(store, fee_schedule)

    async def execute(self, request: CompleteConsultationRequest) -> ClinicalOutcome:
        diagnosis = require_text(request.diagnosis, "diagnosis")
        if request.destination is None:
            raise MissingFieldError("destination")
        destination = ConsultationDestination(request.destination)
        orders = self._orders_for(request, destination)
        patient, visit = await patient_at(self._store, request.patient_id, Department.DOCTOR_QUEUE)

        visit.original_diagnosis = diagnosis
        if request.doctor_name:
            visit.doctor = request.doctor_name
        doctor = visit.doctor or "Doctor"
        line = f"{doctor} ({format_display_date()}): Diagnosis {diagnosis}; sent to {destination.value}"
        if request.notes:
            line = f"{line}. {request.notes.strip()}"
        visit.append_note(line)

        bill = None
        if destination in ORDERED_SERVICES:
            bill = await self._order_services(patient, visit, destination, orders, diagnosis)
        else:
            if destination == ConsultationDestination.PHARMACY:
                visit.prescriptions = list(request.prescriptions)
            visit.move_to(DIRECT_DESTINATIONS[destination], diagnosis)

        await self._store.patients.update(patient)
        claim = None
        if bill is not None:
            bill, claim = await self._billing.store_bill(patient, bill)

        appointment = None
        if visit.location.is_completed:
            appointment = await settle_visit(self._store, visit)

        logger.info(
            f"Consultation completed for patient {patient.patient_id}: {destination.value} "
            f"-> {visit.location}"
        )
        return ClinicalOutcome(visit=visit, bill=bill, claim=claim, appointment=appointment)

    @staticmethod
    def _orders_for(
        request: CompleteConsultationRequest, destination: ConsultationDestination
    ) -> Optional[List[OrderLine]]:
        if destination == ConsultationDestination.PHARMACY and not request.prescriptions:
            raise MissingFieldError("prescriptions", "when sending to pharmacy")
        if destination == ConsultationDestination.LABORATORY:
            if not request.lab_tests:
                raise MissingFieldError("lab_tests", "when sending to laboratory")
            return request.lab_tests
        if destination == ConsultationDestination.INJECTION:
            if not request.injections:
                raise MissingFieldError("injections", "when sending to the injection room")
            return request.injections
        return None

    async def _order_services(
        self,
        patient: Patient,
        visit: Visit,
        destination: ConsultationDestination,
        orders: List[OrderLine],
        diagnosis: str,
    ):
        bill_type, item_type, source, cash_department = ORDERED_SERVICES[destination]
        if destination == ConsultationDestination.LABORATORY:
            visit.lab_tests = [line.description for line in orders]
        else:
            visit.injections = [line.description for line in orders]

        bill = await self._billing.build_bill(
            patient,
            bill_type,
            _order_items(orders, item_type),
            source=source,
            visit_id=visit.visit_id,
            processed_by=visit.doctor,
        )
        visit.move_to(Department.HMO_DESK if patient.is_hmo else cash_department, diagnosis)
        return bill
