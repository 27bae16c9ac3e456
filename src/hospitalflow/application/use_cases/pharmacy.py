"""Pharmacy use cases: billing prescriptions and dispensing them."""

import logging

from ...core.utils import format_display_date
from ...domain.entities.bill import BillItem
from ...domain.enums.billing import BillType, ItemType
from ...domain.enums.claims import SourceDepartment
from ...domain.enums.pathway import Department
from ...domain.errors import InvalidFieldError, MissingFieldError
from ...domain.services.fees import format_currency
from ...domain.value_objects.fee_schedule import FeeSchedule
from ..dto.clinical_dto import BillPrescriptionsRequest, ClinicalOutcome, DispenseRequest
from ..ports.store import HospitalStore
from ..services.billing_service import BillingService
from ..services.lifecycle import settle_visit
from ..services.lookups import patient_at, require_bill, require_patient

logger = logging.getLogger("hospitalflow")


class BillPrescriptionsUseCase:
    """Price the prescriptions and send the patient to pay (cash) or to the HMO desk."""

    def __init__(self, store: HospitalStore, fee_schedule: FeeSchedule):
        self._store = store
        self._billing = BillingService(store, fee_schedule)

    async def execute(self, request: BillPrescriptionsRequest) -> ClinicalOutcome:
        patient, visit = await patient_at(self._store, request.patient_id, Department.PHARMACY)

        if request.items:
            items = [
                BillItem(
                    description=line.description,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    item_type=ItemType.MEDICATION,
                )
                for line in request.items
            ]
        else:
            items = [
                BillItem(
                    description=f"{rx.medication} {rx.dosage}".strip(),
                    quantity=rx.quantity,
                    unit_price=rx.unit_price,
                    item_type=ItemType.MEDICATION,
                )
                for rx in visit.prescriptions
            ]
        if not items:
            raise MissingFieldError("items", "to bill a prescription")

        bill = await self._billing.build_bill(
            patient,
            BillType.PHARMACY,
            items,
            source=SourceDepartment.PHARMACY,
            visit_id=visit.visit_id,
            processed_by=request.processed_by,
        )
        visit.move_to(Department.HMO_DESK if patient.is_hmo else Department.CASH_POINT)
        visit.append_note(
            f"Pharmacy ({format_display_date()}): {len(items)} item(s) billed, "
            f"{format_currency(bill.total)}"
        )

        await self._store.patients.update(patient)
        bill, claim = await self._billing.store_bill(patient, bill)
        logger.info(f"Prescriptions billed for patient {patient.patient_id} on {bill.bill_id}")
        return ClinicalOutcome(visit=visit, bill=bill, claim=claim)


class DispenseMedicationUseCase:
    """Hand over paid medication; closes the bill, its claim and the appointment."""

    def __init__(self, store: HospitalStore, fee_schedule: FeeSchedule):
        self._store = store
        self._billing = BillingService(store, fee_schedule)

    async def execute(self, request: DispenseRequest) -> ClinicalOutcome:
        bill = await require_bill(self._store, request.bill_id)
        if bill.bill_type != BillType.PHARMACY:
            raise InvalidFieldError("bill_id", bill.bill_id, "only pharmacy bills can be dispensed")
        patient = await require_patient(self._store, bill.patient_id)
        visit = patient.find_visit(bill.visit_id) if bill.visit_id else patient.current_visit()

        bill.mark_dispensed()
        dispensed_by = request.dispensed_by or "Pharmacy"
        bill.append_note(f"Dispensed by {dispensed_by} ({format_display_date()})")
        for prescription in visit.prescriptions:
            prescription.dispensed = True
        visit.append_note(f"Pharmacy ({format_display_date()}): medication dispensed by {dispensed_by}")

        bill = await self._store.bills.update(bill)
        await self._store.patients.update(patient)
        claim = await self._billing.complete_claim_for(bill)
        appointment = await settle_visit(self._store, visit)

        logger.info(f"Bill {bill.bill_id} dispensed for patient {patient.patient_id}")
        return ClinicalOutcome(visit=visit, bill=bill, claim=claim, appointment=appointment)
