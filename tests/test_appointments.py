"""
Appointment lifecycle: scheduling, check-in, cancellation and doctor changes.
"""

from datetime import date
from decimal import Decimal

import pytest

from hospitalflow.application.dto.appointment_dto import (
    CancelConsultationRequest,
    ChangeDoctorRequest,
    CheckInRequest,
    ScheduleAppointmentRequest,
)
from hospitalflow.application.dto.clinical_dto import BillPrescriptionsRequest, CompleteConsultationRequest
from hospitalflow.application.use_cases.cancel_consultation import CancelConsultationUseCase
from hospitalflow.application.use_cases.change_consultation_doctor import (
    ChangeConsultationDoctorUseCase,
)
from hospitalflow.application.use_cases.check_in_appointment import CheckInAppointmentUseCase
from hospitalflow.application.use_cases.complete_consultation import CompleteConsultationUseCase
from hospitalflow.application.use_cases.pharmacy import BillPrescriptionsUseCase
from hospitalflow.application.use_cases.schedule_appointment import ScheduleAppointmentUseCase
from hospitalflow.domain.entities.appointment import Appointment
from hospitalflow.domain.entities.bill import Bill
from hospitalflow.domain.entities.visit import Prescription, Visit
from hospitalflow.domain.enums.billing import BillStatus, BillType, PaymentMethod
from hospitalflow.domain.enums.pathway import Department
from hospitalflow.domain.enums.workflow import AppointmentStatus, ConsultationDestination
from hospitalflow.domain.errors import (
    CancellationNotAllowedError,
    DoctorChangeNotAllowedError,
    DuplicateDoctorChangeError,
    InvalidFieldError,
    InvalidTransitionError,
    MissingFieldError,
)
from hospitalflow.domain.services import appointments
from hospitalflow.domain.value_objects.care_location import CareLocation

from conftest import CARDIOLOGIST, GENERAL_DOCTOR, NURSE, PEDIATRICIAN


def _appointment(status=AppointmentStatus.SCHEDULED):
    return Appointment(
        appointment_id="A-1",
        patient_id="P-1",
        patient_name="Ada",
        doctor_id=GENERAL_DOCTOR,
        doctor_name="Dr. Smith",
        date=date(2026, 1, 5),
        time="09:00",
        status=status,
    )


@pytest.mark.parametrize(
    "current,target,allowed",
    [
        (AppointmentStatus.SCHEDULED, AppointmentStatus.IN_PROGRESS, True),
        (AppointmentStatus.SCHEDULED, AppointmentStatus.CANCELLED, True),
        (AppointmentStatus.SCHEDULED, AppointmentStatus.COMPLETED, False),
        (AppointmentStatus.IN_PROGRESS, AppointmentStatus.COMPLETED, True),
        (AppointmentStatus.IN_PROGRESS, AppointmentStatus.CANCELLED, True),
        (AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED, False),
        (AppointmentStatus.CANCELLED, AppointmentStatus.IN_PROGRESS, False),
    ],
)
def test_transition_table(current, target, allowed):
    appointment = _appointment(current)
    if allowed:
        assert appointments.transition(appointment, target).status == target
    else:
        with pytest.raises(InvalidTransitionError):
            appointments.transition(appointment, target)


def test_settle_needs_paid_bill_and_completed_visit():
    appointment = _appointment(AppointmentStatus.IN_PROGRESS)
    bill = Bill(
        bill_id="BILL-1",
        patient_id="P-1",
        patient_name="Ada",
        bill_type=BillType.CONSULTATION,
        status=BillStatus.PENDING,
    )
    visit = Visit(visit_id="V-1", location=CareLocation(Department.COMPLETED, "Malaria"))

    assert appointments.settle(appointment, bill, visit) is False
    bill.mark_paid(PaymentMethod.CASH, "CASH-1", "Cash Point")
    assert appointments.settle(appointment, bill, visit) is True
    assert appointment.status == AppointmentStatus.COMPLETED
    assert appointments.settle(appointment, bill, visit) is False


def test_in_progress_status_value():
    assert AppointmentStatus.IN_PROGRESS.value == "In Progress"


@pytest.mark.asyncio
async def test_schedule_and_check_in_cash_patient(store, register, fee_schedule):
    patient = await register()
    appointment = await ScheduleAppointmentUseCase(store).execute(
        ScheduleAppointmentRequest(
            patient_id=patient.patient_id,
            doctor_id=PEDIATRICIAN,
            date=date(2026, 1, 5),
            time="10:30",
        )
    )
    assert appointment.status == AppointmentStatus.SCHEDULED
    assert appointment.department == "Pediatrics"

    outcome = await CheckInAppointmentUseCase(store, fee_schedule).execute(
        CheckInRequest(appointment_id=appointment.appointment_id, presenting_complaints="Cough")
    )

    assert outcome.appointment.status == AppointmentStatus.IN_PROGRESS
    assert outcome.appointment.bill_id == outcome.bill.bill_id
    assert outcome.appointment.visit_id == outcome.visit.visit_id
    assert outcome.bill.status == BillStatus.PENDING
    assert outcome.bill.total == Decimal("7500.00")
    assert outcome.claim is None
    assert outcome.visit.diagnosis == "Pending"


@pytest.mark.asyncio
async def test_check_in_requires_complaints(store, register, fee_schedule):
    patient = await register()
    appointment = await ScheduleAppointmentUseCase(store).execute(
        ScheduleAppointmentRequest(
            patient_id=patient.patient_id, doctor_id=GENERAL_DOCTOR, date=date(2026, 1, 5), time="10:30"
        )
    )
    with pytest.raises(MissingFieldError):
        await CheckInAppointmentUseCase(store, fee_schedule).execute(
            CheckInRequest(appointment_id=appointment.appointment_id, presenting_complaints="  ")
        )


@pytest.mark.asyncio
async def test_cannot_book_with_non_doctor(store, register):
    patient = await register()
    with pytest.raises(InvalidFieldError):
        await ScheduleAppointmentUseCase(store).execute(
            ScheduleAppointmentRequest(
                patient_id=patient.patient_id, doctor_id=NURSE, date=date(2026, 1, 5), time="10:30"
            )
        )


@pytest.mark.asyncio
async def test_check_in_twice_is_refused(store, register, walk_in, fee_schedule):
    patient = await register()
    outcome = await walk_in(patient)
    with pytest.raises(InvalidTransitionError):
        await CheckInAppointmentUseCase(store, fee_schedule).execute(
            CheckInRequest(appointment_id=outcome.appointment.appointment_id, presenting_complaints="Again")
        )


@pytest.mark.asyncio
async def test_cancel_unpaid_consultation(store, register, walk_in):
    patient = await register()
    outcome = await walk_in(patient)

    result = await CancelConsultationUseCase(store).execute(
        CancelConsultationRequest(appointment_id=outcome.appointment.appointment_id, reason="Left")
    )

    assert result.appointment.status == AppointmentStatus.CANCELLED
    assert result.appointment.cancellation_reason == "Left"
    assert result.bill.status == BillStatus.CANCELLED
    assert result.visit.location == CareLocation(Department.COMPLETED, "Cancelled")
    assert result.refunded_amount == Decimal("0.00")


@pytest.mark.asyncio
async def test_cancel_paid_cash_consultation_refunds_balance(store, register, walk_in, pay):
    patient = await register()
    outcome = await walk_in(patient)
    await pay(outcome.bill.bill_id)

    result = await CancelConsultationUseCase(store).execute(
        CancelConsultationRequest(appointment_id=outcome.appointment.appointment_id)
    )

    assert result.refunded_amount == Decimal("5000.00")
    assert result.patient_balance == Decimal("5000.00")
    assert "Refunded" in result.bill.notes
    stored = await store.patients.find_by_id(patient.patient_id)
    assert stored.balance == Decimal("5000.00")


@pytest.mark.asyncio
async def test_cancel_at_cash_point_drops_pending_prescription_bill(store, register, walk_in, pay, fee_schedule):
    patient = await register()
    outcome = await walk_in(patient)
    await pay(outcome.bill.bill_id)
    await CompleteConsultationUseCase(store, fee_schedule).execute(
        CompleteConsultationRequest(
            patient_id=patient.patient_id,
            diagnosis="Malaria",
            destination=ConsultationDestination.PHARMACY,
            prescriptions=[Prescription(medication="Coartem", quantity=1, unit_price=Decimal("3500"))],
        )
    )
    billed = await BillPrescriptionsUseCase(store, fee_schedule).execute(
        BillPrescriptionsRequest(patient_id=patient.patient_id)
    )
    assert billed.visit.department == Department.CASH_POINT

    await CancelConsultationUseCase(store).execute(
        CancelConsultationRequest(appointment_id=outcome.appointment.appointment_id)
    )

    pharmacy_bill = await store.bills.find_by_id(billed.bill.bill_id)
    assert pharmacy_bill.status == BillStatus.CANCELLED
    assert await store.bills.find_pending() == []
    with pytest.raises(InvalidTransitionError):
        await pay(billed.bill.bill_id)


@pytest.mark.asyncio
async def test_cancel_refused_while_waiting_at_hmo_desk(store, register, walk_in):
    patient = await register(hmo=True)
    outcome = await walk_in(patient)
    with pytest.raises(CancellationNotAllowedError):
        await CancelConsultationUseCase(store).execute(
            CancelConsultationRequest(appointment_id=outcome.appointment.appointment_id)
        )


@pytest.mark.asyncio
async def test_cancel_scheduled_appointment(store, register):
    patient = await register()
    appointment = await ScheduleAppointmentUseCase(store).execute(
        ScheduleAppointmentRequest(
            patient_id=patient.patient_id, doctor_id=GENERAL_DOCTOR, date=date(2026, 1, 5), time="08:00"
        )
    )
    result = await CancelConsultationUseCase(store).execute(
        CancelConsultationRequest(appointment_id=appointment.appointment_id)
    )
    assert result.appointment.status == AppointmentStatus.CANCELLED
    assert result.bill is None
    assert result.visit is None

    with pytest.raises(InvalidTransitionError):
        await CancelConsultationUseCase(store).execute(
            CancelConsultationRequest(appointment_id=appointment.appointment_id)
        )


@pytest.mark.asyncio
async def test_cancel_refused_once_patient_is_at_pharmacy(store, register, walk_in):
    patient = await register()
    outcome = await walk_in(patient)
    stored = await store.patients.find_by_id(patient.patient_id)
    stored.current_visit().move_to(Department.PHARMACY, "Malaria")
    await store.patients.update(stored)

    with pytest.raises(CancellationNotAllowedError):
        await CancelConsultationUseCase(store).execute(
            CancelConsultationRequest(appointment_id=outcome.appointment.appointment_id)
        )


@pytest.mark.asyncio
async def test_change_doctor_reprices_pending_bill(store, register, walk_in, fee_schedule):
    patient = await register()
    outcome = await walk_in(patient)

    result = await ChangeConsultationDoctorUseCase(store, fee_schedule).execute(
        ChangeDoctorRequest(appointment_id=outcome.appointment.appointment_id, new_doctor_id=CARDIOLOGIST)
    )

    assert result.appointment.doctor_id == CARDIOLOGIST
    assert result.bill.total == Decimal("10000.00")
    assert result.upgrade_bill is None
    assert result.fee_difference == Decimal("5000.00")
    stored = await store.patients.find_by_id(patient.patient_id)
    visit = stored.current_visit()
    assert visit.doctor == "Dr. Adeyemi"
    assert visit.diagnosis == "Pending"
    assert visit.doctor_changes[0].from_doctor_id == GENERAL_DOCTOR


@pytest.mark.asyncio
async def test_change_doctor_after_payment_raises_upgrade_bill(store, register, walk_in, pay, fee_schedule):
    patient = await register()
    outcome = await walk_in(patient)
    await pay(outcome.bill.bill_id)

    result = await ChangeConsultationDoctorUseCase(store, fee_schedule).execute(
        ChangeDoctorRequest(appointment_id=outcome.appointment.appointment_id, new_doctor_id=CARDIOLOGIST)
    )

    assert result.bill.status == BillStatus.PAID
    assert result.upgrade_bill.total == Decimal("5000.00")
    assert result.upgrade_bill.status == BillStatus.PENDING
    stored = await store.patients.find_by_id(patient.patient_id)
    assert stored.current_visit().doctor_changes[0].upgrade_bill_id == result.upgrade_bill.bill_id


@pytest.mark.asyncio
async def test_change_to_cheaper_doctor_after_payment_is_not_refunded(
    store, register, walk_in, pay, fee_schedule
):
    patient = await register()
    outcome = await walk_in(patient, doctor_id=CARDIOLOGIST)
    await pay(outcome.bill.bill_id)

    result = await ChangeConsultationDoctorUseCase(store, fee_schedule).execute(
        ChangeDoctorRequest(appointment_id=outcome.appointment.appointment_id, new_doctor_id=GENERAL_DOCTOR)
    )
    assert result.upgrade_bill is None
    assert result.fee_difference == Decimal("-5000.00")
    assert result.bill.total == Decimal("10000.00")


@pytest.mark.asyncio
async def test_change_to_same_doctor_is_refused(store, register, walk_in, fee_schedule):
    patient = await register()
    outcome = await walk_in(patient)
    with pytest.raises(DuplicateDoctorChangeError):
        await ChangeConsultationDoctorUseCase(store, fee_schedule).execute(
            ChangeDoctorRequest(appointment_id=outcome.appointment.appointment_id, new_doctor_id=GENERAL_DOCTOR)
        )


@pytest.mark.asyncio
async def test_change_doctor_refused_after_consultation(store, register, walk_in, pay, fee_schedule):
    patient = await register()
    outcome = await walk_in(patient)
    await pay(outcome.bill.bill_id)
    stored = await store.patients.find_by_id(patient.patient_id)
    stored.current_visit().move_to(Department.LABORATORY, "Typhoid")
    await store.patients.update(stored)

    with pytest.raises(DoctorChangeNotAllowedError):
        await ChangeConsultationDoctorUseCase(store, fee_schedule).execute(
            ChangeDoctorRequest(appointment_id=outcome.appointment.appointment_id, new_doctor_id=CARDIOLOGIST)
        )
