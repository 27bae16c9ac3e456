"""
Fetch-or-raise helpers shared by the workflow use cases.
"""

from typing import Optional, Tuple

from ...domain.entities.appointment import Appointment
from ...domain.entities.bill import Bill
from ...domain.entities.claim import HMOClaim
from ...domain.entities.patient import Patient
from ...domain.entities.staff import Staff
from ...domain.entities.visit import Visit
from ...domain.enums.pathway import Department
from ...domain.errors import (
    AppointmentNotFoundError,
    BillNotFoundError,
    ClaimNotFoundError,
    InvalidFieldError,
    InvalidPathwayStateError,
    MissingFieldError,
    PatientNotFoundError,
    StaffNotFoundError,
)
from ..ports.store import HospitalStore


async def require_patient(store: HospitalStore, patient_id: str) -> Patient:
    patient = await store.patients.find_by_id(patient_id)
    if patient is None:
        raise PatientNotFoundError(patient_id)
    return patient


async def require_appointment(store: HospitalStore, appointment_id: str) -> Appointment:
    appointment = await store.appointments.find_by_id(appointment_id)
    if appointment is None:
        raise AppointmentNotFoundError(appointment_id)
    return appointment


async def require_bill(store: HospitalStore, bill_id: str) -> Bill:
    bill = await store.bills.find_by_id(bill_id)
    if bill is None:
        raise BillNotFoundError(bill_id)
    return bill


async def require_claim(store: HospitalStore, claim_id: str) -> HMOClaim:
    claim = await store.claims.find_by_id(claim_id)
    if claim is None:
        raise ClaimNotFoundError(claim_id)
    return claim


async def require_doctor(store: HospitalStore, staff_id: str) -> Staff:
    staff = await store.staff.find_by_id(staff_id)
    if staff is None:
        raise StaffNotFoundError(staff_id)
    if not staff.is_doctor:
        raise InvalidFieldError("doctor_id", staff_id, f"{staff.name} is not a doctor")
    return staff


def require_text(value: Optional[str], field: str, context: Optional[str] = None) -> str:
    """Stripped value, or MissingFieldError when blank."""
    text = (value or "").strip()
    if not text:
        raise MissingFieldError(field, context)
    return text


def require_location(patient: Patient, *departments: Department) -> Visit:
    """Latest visit of a patient who must be waiting at one of ``departments``."""
    visit = patient.current_visit()
    if not visit.location.is_at(*departments):
        raise InvalidPathwayStateError(
            patient.patient_id,
            visit.department.value,
            [department.value for department in departments],
        )
    return visit


async def patient_at(
    store: HospitalStore, patient_id: str, *departments: Department
) -> Tuple[Patient, Visit]:
    patient = await require_patient(store, patient_id)
    return patient, require_location(patient, *departments)
