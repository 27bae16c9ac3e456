"""
HMO claim enums.
"""

from enum import Enum


class ClaimStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"


class ClaimDecision(str, Enum):
    APPROVED = "approved"
    REJECTED = "rejected"


class SourceDepartment(str, Enum):
    """Department whose bill produced the claim."""
    DOCTOR = "doctor"
    PHARMACY = "pharmacy"
    LABORATORY = "laboratory"
    INJECTION_ROOM = "injection_room"
