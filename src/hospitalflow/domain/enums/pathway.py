"""
Care-pathway departments a patient can be waiting at.
"""

from enum import Enum


class Department(str, Enum):
    """Where the patient's current visit is sitting."""

    DOCTOR_QUEUE = "doctor_queue"
    PHARMACY = "pharmacy"
    LABORATORY = "laboratory"
    INJECTION_ROOM = "injection_room"
    HMO_DESK = "hmo_desk"
    VITALS = "vitals"
    CASH_POINT = "cash_point"
    ADMISSION_PENDING = "admission_pending"
    COMPLETED = "completed"
