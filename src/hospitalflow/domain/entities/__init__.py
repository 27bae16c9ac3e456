"""
Domain entities package.
"""

from .appointment import Appointment
from .bill import Bill, BillItem
from .claim import ClaimItem, HMOClaim
from .patient import Patient, VaccinationRecord
from .staff import Staff
from .visit import DoctorChange, Prescription, Visit, VitalSigns

__all__ = [
    "Appointment",
    "Bill",
    "BillItem",
    "ClaimItem",
    "DoctorChange",
    "HMOClaim",
    "Patient",
    "Prescription",
    "Staff",
    "VaccinationRecord",
    "Visit",
    "VitalSigns",
]
