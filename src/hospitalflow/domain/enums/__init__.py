from .billing import BillDestination, BillStatus, BillType, ItemType, PaymentMethod
from .claims import ClaimDecision, ClaimStatus, SourceDepartment
from .pathway import Department
from .workflow import (
    AppointmentStatus,
    ConsultationDestination,
    PatientType,
    StaffRole,
    VisitType,
)

__all__ = [
    "AppointmentStatus",
    "BillDestination",
    "BillStatus",
    "BillType",
    "ClaimDecision",
    "ClaimStatus",
    "ConsultationDestination",
    "Department",
    "ItemType",
    "PatientType",
    "PaymentMethod",
    "SourceDepartment",
    "StaffRole",
    "VisitType",
]
