"""Appointment DTOs for API communication."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ...domain.entities.appointment import Appointment
from ...domain.entities.bill import Bill
from ...domain.entities.claim import HMOClaim
from ...domain.entities.visit import Visit
from ...domain.value_objects.money import ZERO


@dataclass
class ScheduleAppointmentRequest:
    """Request DTO for booking an appointment."""

    patient_id: str
    doctor_id: str
    date: date
    time: str
    consultation_type: str = "general"


@dataclass
class CheckInRequest:
    """Request DTO for checking a booked patient in."""

    appointment_id: str
    presenting_complaints: str
    processed_by: Optional[str] = None


@dataclass
class WalkInRequest:
    """Request DTO for an unbooked consultation."""

    patient_id: str
    doctor_id: str
    presenting_complaints: str
    consultation_type: str = "general"
    processed_by: Optional[str] = None


@dataclass
class CheckInResponse:
    appointment: Appointment
    visit: Visit
    bill: Bill
    claim: Optional[HMOClaim] = None


@dataclass
class CancelConsultationRequest:
    appointment_id: str
    reason: Optional[str] = None
    cancelled_by: Optional[str] = None


@dataclass
class CancelConsultationResponse:
    """Outcome of a cancellation, including any refund to the deposit balance."""

    appointment: Appointment
    bill: Optional[Bill] = None
    visit: Optional[Visit] = None
    refunded_amount: Decimal = ZERO
    patient_balance: Decimal = ZERO


@dataclass
class ChangeDoctorRequest:
    appointment_id: str
    new_doctor_id: str
    changed_by: str = "Front Desk"


@dataclass
class ChangeDoctorResponse:
    appointment: Appointment
    bill: Optional[Bill] = None
    upgrade_bill: Optional[Bill] = None
    claim: Optional[HMOClaim] = None
    fee_difference: Decimal = ZERO
