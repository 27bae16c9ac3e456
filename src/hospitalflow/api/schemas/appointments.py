"""
Pydantic schemas for appointment endpoints.
"""

import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...domain.entities.appointment import Appointment
from ...domain.entities.staff import Staff
from ...domain.enums.workflow import AppointmentStatus, StaffRole
from .billing import BillSchema
from .claims import ClaimSchema
from .visits import VisitSchema


class ScheduleAppointmentRequest(BaseModel):
    patient_id: str = Field(..., description="Patient ID, e.g. P-1001")
    doctor_id: str = Field(..., description="Doctor staff ID, e.g. STAFF-002")
    date: dt.date
    time: str = Field(..., description="Time slot, e.g. 09:30")
    consultation_type: str = Field("general", description="Consultation type")

    @field_validator("time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Time cannot be empty")
        return v.strip()


class CheckInRequest(BaseModel):
    presenting_complaints: str = Field(..., description="Why the patient came in")
    processed_by: Optional[str] = None


class WalkInRequest(BaseModel):
    patient_id: str
    doctor_id: str
    presenting_complaints: str
    consultation_type: str = "general"
    processed_by: Optional[str] = None


class CancelAppointmentRequest(BaseModel):
    reason: Optional[str] = None
    cancelled_by: Optional[str] = None


class ChangeDoctorRequest(BaseModel):
    new_doctor_id: str
    changed_by: str = "Front Desk"


class AppointmentSchema(BaseModel):
    appointment_id: str
    patient_id: str
    patient_name: str
    doctor_id: str
    doctor_name: str
    department: Optional[str] = None
    date: dt.date
    time: str
    consultation_type: str
    status: AppointmentStatus
    bill_id: Optional[str] = None
    visit_id: Optional[str] = None
    presenting_complaints: Optional[str] = None
    cancellation_reason: Optional[str] = None
    version: int
    created_at: dt.datetime
    updated_at: dt.datetime

    @classmethod
    def from_domain(cls, appointment: Appointment) -> "AppointmentSchema":
        return cls(
            appointment_id=appointment.appointment_id,
            patient_id=appointment.patient_id,
            patient_name=appointment.patient_name,
            doctor_id=appointment.doctor_id,
            doctor_name=appointment.doctor_name,
            department=appointment.department,
            date=appointment.date,
            time=appointment.time,
            consultation_type=appointment.consultation_type,
            status=appointment.status,
            bill_id=appointment.bill_id,
            visit_id=appointment.visit_id,
            presenting_complaints=appointment.presenting_complaints,
            cancellation_reason=appointment.cancellation_reason,
            version=appointment.version,
            created_at=appointment.created_at,
            updated_at=appointment.updated_at,
        )


class CheckInResponse(BaseModel):
    appointment: AppointmentSchema
    visit: VisitSchema
    bill: BillSchema
    claim: Optional[ClaimSchema] = None


class CancelAppointmentResponse(BaseModel):
    appointment: AppointmentSchema
    bill: Optional[BillSchema] = None
    refunded_amount: float = 0
    patient_balance: float = 0


class ChangeDoctorResponse(BaseModel):
    appointment: AppointmentSchema
    bill: Optional[BillSchema] = None
    upgrade_bill: Optional[BillSchema] = None
    claim: Optional[ClaimSchema] = None
    fee_difference: float = 0


class StaffSchema(BaseModel):
    staff_id: str
    name: str
    role: StaffRole
    department: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None

    @classmethod
    def from_domain(cls, staff: Staff) -> "StaffSchema":
        return cls(
            staff_id=staff.staff_id,
            name=staff.name,
            role=staff.role,
            department=staff.department,
            phone=staff.phone,
            email=staff.email,
        )
