"""Change Consultation Doctor use case."""

import logging

from ...domain.entities.bill import BillItem
from ...domain.entities.visit import DoctorChange
from ...domain.enums.billing import BillStatus, BillType, ItemType
from ...domain.enums.claims import SourceDepartment
from ...domain.errors import DoctorChangeNotAllowedError, DuplicateDoctorChangeError
from ...domain.services.appointments import can_change_doctor
from ...domain.services.fees import consultation_fee, format_currency
from ...domain.value_objects.fee_schedule import FeeSchedule
from ...domain.value_objects.money import ZERO
from ...core.utils import format_display_date
from ..dto.appointment_dto import ChangeDoctorRequest, ChangeDoctorResponse
from ..ports.store import HospitalStore
from ..services.billing_service import BillingService
from ..services.lookups import require_appointment, require_doctor, require_patient
from .check_in_appointment import DEFAULT_DEPARTMENT

logger = logging.getLogger("hospitalflow")


class ChangeConsultationDoctorUseCase:
    """Reassign an open consultation to another doctor.

    A pending consultation bill is repriced in place. Once paid, a move to a
    dearer doctor raises an upgrade bill for the difference; a cheaper one
    is not refunded. The visit diagnosis is never touched.
    """

    def __init__(self, store: HospitalStore, fee_schedule: FeeSchedule):
        self._store = store
        self._fee_schedule = fee_schedule
        self._billing = BillingService(store, fee_schedule)

    async def execute(self, request: ChangeDoctorRequest) -> ChangeDoctorResponse:
        appointment = await require_appointment(self._store, request.appointment_id)
        if appointment.doctor_id == request.new_doctor_id:
            raise DuplicateDoctorChangeError(appointment.appointment_id, request.new_doctor_id)
        new_doctor = await require_doctor(self._store, request.new_doctor_id)

        patient = await require_patient(self._store, appointment.patient_id)
        visit = patient.find_visit(appointment.visit_id) if appointment.visit_id else None
        bill = await self._store.bills.find_by_id(appointment.bill_id) if appointment.bill_id else None
        if not can_change_doctor(appointment, bill, visit):
            raise DoctorChangeNotAllowedError(appointment.appointment_id)

        new_department = new_doctor.department or DEFAULT_DEPARTMENT
        new_fee = consultation_fee(new_doctor.department, self._fee_schedule)
        old_fee = consultation_fee(appointment.department, self._fee_schedule)
        consultation_item = None
        if bill is not None:
            consultation_item = next(
                (item for item in bill.items if item.item_type == ItemType.CONSULTATION), None
            )
            if consultation_item is not None:
                old_fee = consultation_item.unit_price
        difference = new_fee - old_fee

        upgrade_bill = None
        bill_changed = False
        if bill is not None and bill.status == BillStatus.PENDING and consultation_item is not None:
            bill.replace_item_price(consultation_item.item_id, new_fee)
            consultation_item.description = f"Consultation - {new_doctor.name} ({new_department})"
            bill.append_note(
                f"Doctor changed to {new_doctor.name} by {request.changed_by}: "
                f"fee {format_currency(old_fee)} -> {format_currency(new_fee)}"
            )
            bill_changed = True
        elif bill is not None and bill.status == BillStatus.PAID and difference > 0:
            upgrade_bill = await self._billing.build_bill(
                patient,
                BillType.CONSULTATION,
                [
                    BillItem(
                        description=(
                            f"Consultation upgrade - {appointment.doctor_name} to {new_doctor.name}"
                        ),
                        quantity=1,
                        unit_price=difference,
                        item_type=ItemType.CONSULTATION,
                    )
                ],
                source=SourceDepartment.DOCTOR,
                visit_id=visit.visit_id if visit else None,
                appointment_id=appointment.appointment_id,
                processed_by=request.changed_by,
            )

        if visit is not None:
            visit.doctor_changes.append(
                DoctorChange(
                    from_doctor_id=appointment.doctor_id,
                    from_doctor_name=appointment.doctor_name,
                    to_doctor_id=new_doctor.staff_id,
                    to_doctor_name=new_doctor.name,
                    changed_by=request.changed_by,
                    fee_difference=difference if upgrade_bill is not None else ZERO,
                    upgrade_bill_id=upgrade_bill.bill_id if upgrade_bill is not None else None,
                )
            )
            visit.doctor = new_doctor.name
            visit.append_note(
                f"Doctor changed ({format_display_date()}): {appointment.doctor_name} -> "
                f"{new_doctor.name} by {request.changed_by}"
            )

        previous_doctor = appointment.doctor_name
        appointment.doctor_id = new_doctor.staff_id
        appointment.doctor_name = new_doctor.name
        appointment.department = new_doctor.department

        if bill_changed:
            bill = await self._store.bills.update(bill)
        claim = None
        if upgrade_bill is not None:
            upgrade_bill, claim = await self._billing.store_bill(patient, upgrade_bill)
        if visit is not None:
            await self._store.patients.update(patient)
        appointment = await self._store.appointments.update(appointment)

        logger.info(
            f"Appointment {appointment.appointment_id} moved from {previous_doctor} "
            f"to {new_doctor.name}"
            + (f"; upgrade bill {upgrade_bill.bill_id}" if upgrade_bill is not None else "")
        )
        return ChangeDoctorResponse(
            appointment=appointment,
            bill=bill,
            upgrade_bill=upgrade_bill,
            claim=claim,
            fee_difference=difference,
        )
