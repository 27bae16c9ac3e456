"""
Patient, appointment and consultation enums.
"""

from enum import Enum


class PatientType(str, Enum):
    """How the patient pays."""
    CASH = "cash"
    HMO = "hmo"


class AppointmentStatus(str, Enum):
    """Appointment lifecycle states."""
    SCHEDULED = "scheduled"
    IN_PROGRESS = "In Progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class VisitType(str, Enum):
    CONSULTATION = "consultation"
    VACCINATION = "vaccination"


class ConsultationDestination(str, Enum):
    """Where the doctor sends the patient after consultation."""
    PHARMACY = "pharmacy"
    LABORATORY = "laboratory"
    INJECTION = "injection"
    DISCHARGE = "discharge"
    ADMISSION = "admission"


class StaffRole(str, Enum):
    DOCTOR = "doctor"
    NURSE = "nurse"
    PHARMACIST = "pharmacist"
    LAB_SCIENTIST = "lab_scientist"
    CASHIER = "cashier"
    HMO_OFFICER = "hmo_officer"
    ADMIN = "admin"
