from .appointment_repo import AppointmentRepository
from .bill_repo import BillRepository
from .claim_repo import ClaimRepository
from .patient_repo import PatientRepository
from .staff_repo import StaffRepository

__all__ = [
    "AppointmentRepository",
    "BillRepository",
    "ClaimRepository",
    "PatientRepository",
    "StaffRepository",
]
