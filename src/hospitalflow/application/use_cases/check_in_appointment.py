"""Check-in use cases: booked appointments and walk-in consultations."""

import logging
from datetime import datetime
from typing import Optional

from ...domain.entities.appointment import Appointment
from ...domain.entities.bill import BillItem
from ...domain.entities.patient import Patient
from ...domain.entities.staff import Staff
from ...domain.enums.billing import BillType, ItemType
from ...domain.enums.claims import SourceDepartment
from ...domain.enums.pathway import Department
from ...domain.enums.workflow import AppointmentStatus
from ...domain.errors import InvalidTransitionError
from ...domain.services.appointments import can_transition, transition
from ...domain.services.fees import consultation_fee
from ...domain.value_objects.care_location import CareLocation
from ...domain.value_objects.fee_schedule import FeeSchedule
from ...core.utils import format_display_date, today
from ..dto.appointment_dto import CheckInRequest, CheckInResponse, WalkInRequest
from ..ports.store import HospitalStore
from ..services.billing_service import BillingService
from ..services.lookups import (
    require_appointment,
    require_doctor,
    require_patient,
    require_text,
)

logger = logging.getLogger("hospitalflow")

INITIAL_CONSULTATION = "Initial Consultation"
DEFAULT_DEPARTMENT = "General Medicine"


async def _start_consultation(
    store: HospitalStore,
    billing: BillingService,
    fee_schedule: FeeSchedule,
    appointment: Appointment,
    patient: Patient,
    doctor: Staff,
    complaints: str,
    processed_by: Optional[str],
) -> CheckInResponse:
    """Open the visit and consultation bill and move the appointment in progress.

    HMO patients are authorised up front: the bill is settled by the HMO and
    the visit waits at the HMO desk for the consultation claim. Cash
    patients join the doctor queue with a pending bill.
    """
    if patient.is_hmo:
        location = CareLocation(Department.HMO_DESK, INITIAL_CONSULTATION)
    else:
        location = CareLocation(Department.DOCTOR_QUEUE, "")

    visit = patient.open_visit(location, doctor=doctor.name)
    visit.append_note(f"Check-in ({format_display_date()}): {complaints}")

    department = doctor.department or DEFAULT_DEPARTMENT
    bill = await billing.build_bill(
        patient,
        BillType.CONSULTATION,
        [
            BillItem(
                description=f"Consultation - {doctor.name} ({department})",
                quantity=1,
                unit_price=consultation_fee(doctor.department, fee_schedule),
                item_type=ItemType.CONSULTATION,
            )
        ],
        source=SourceDepartment.DOCTOR,
        visit_id=visit.visit_id,
        appointment_id=appointment.appointment_id,
        prepaid_by_hmo=True,
        processed_by=processed_by,
    )

    transition(appointment, AppointmentStatus.IN_PROGRESS)
    appointment.bill_id = bill.bill_id
    appointment.visit_id = visit.visit_id
    appointment.presenting_complaints = complaints

    await store.patients.update(patient)
    bill, claim = await billing.store_bill(patient, bill)
    appointment = await store.appointments.update(appointment)

    logger.info(
        f"Appointment {appointment.appointment_id} checked in: patient {patient.patient_id} "
        f"at {visit.location}, bill {bill.bill_id} [{bill.status.value}]"
    )
    return CheckInResponse(appointment=appointment, visit=visit, bill=bill, claim=claim)


class CheckInAppointmentUseCase:
    """Use case for checking a scheduled patient in for consultation."""

    def __init__(self, store: HospitalStore, fee_schedule: FeeSchedule):
        self._store = store
        self._fee_schedule = fee_schedule
        self._billing = BillingService(store, fee_schedule)

    async def execute(self, request: CheckInRequest) -> CheckInResponse:
        appointment = await require_appointment(self._store, request.appointment_id)
        complaints = require_text(
            request.presenting_complaints, "presenting_complaints", "at check-in"
        )
        if not can_transition(appointment.status, AppointmentStatus.IN_PROGRESS):
            raise InvalidTransitionError(
                "appointment",
                appointment.appointment_id,
                appointment.status.value,
                AppointmentStatus.IN_PROGRESS.value,
            )
        patient = await require_patient(self._store, appointment.patient_id)
        doctor = await require_doctor(self._store, appointment.doctor_id)

        return await _start_consultation(
            self._store,
            self._billing,
            self._fee_schedule,
            appointment,
            patient,
            doctor,
            complaints,
            request.processed_by,
        )


class CreateWalkInConsultationUseCase:
    """Book an appointment for today and check it in straight away."""

    def __init__(self, store: HospitalStore, fee_schedule: FeeSchedule):
        self._store = store
        self._fee_schedule = fee_schedule
        self._billing = BillingService(store, fee_schedule)

    async def execute(self, request: WalkInRequest) -> CheckInResponse:
        complaints = require_text(
            request.presenting_complaints, "presenting_complaints", "for walk-in consultations"
        )
        patient = await require_patient(self._store, request.patient_id)
        doctor = await require_doctor(self._store, request.doctor_id)

        appointment = Appointment(
            appointment_id=await self._store.appointments.next_id(),
            patient_id=patient.patient_id,
            patient_name=patient.name,
            doctor_id=doctor.staff_id,
            doctor_name=doctor.name,
            date=today(),
            time=datetime.utcnow().strftime("%H:%M"),
            department=doctor.department,
            consultation_type=request.consultation_type or "general",
        )
        appointment = await self._store.appointments.add(appointment)
        logger.info(f"Walk-in appointment {appointment.appointment_id} for patient {patient.patient_id}")

        return await _start_consultation(
            self._store,
            self._billing,
            self._fee_schedule,
            appointment,
            patient,
            doctor,
            complaints,
            request.processed_by,
        )
