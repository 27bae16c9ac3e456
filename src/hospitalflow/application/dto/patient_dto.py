"""Patient DTOs for API communication."""

from dataclasses import dataclass, field
from typing import List, Optional

from ...domain.entities.appointment import Appointment
from ...domain.entities.bill import Bill
from ...domain.entities.claim import HMOClaim
from ...domain.entities.patient import Patient
from ...domain.enums.workflow import PatientType


@dataclass
class RegisterPatientRequest:
    """Request DTO for patient registration."""

    name: str
    phone: str
    patient_type: PatientType = PatientType.CASH
    hmo_provider: Optional[str] = None
    gender: Optional[str] = None
    date_of_birth: Optional[str] = None
    address: Optional[str] = None
    email: Optional[str] = None


@dataclass
class UpdatePatientRequest:
    """Request DTO for editing a patient record.

    Fields left as None keep their stored value. ``version`` is the version the
    caller last read; an edit against an older version is refused.
    """

    patient_id: str
    name: Optional[str] = None
    phone: Optional[str] = None
    patient_type: Optional[PatientType] = None
    hmo_provider: Optional[str] = None
    gender: Optional[str] = None
    date_of_birth: Optional[str] = None
    address: Optional[str] = None
    email: Optional[str] = None
    version: Optional[int] = None


@dataclass
class CreatePatientFromStaffRequest:
    """Request DTO for registering a staff member as a patient."""

    staff_id: str
    phone: Optional[str] = None
    gender: Optional[str] = None
    date_of_birth: Optional[str] = None


@dataclass
class SearchPatientsRequest:
    term: str
    by: str = "name"


@dataclass
class PatientHistoryResponse:
    """Everything recorded against one patient."""

    patient: Patient
    appointments: List[Appointment] = field(default_factory=list)
    bills: List[Bill] = field(default_factory=list)
    claims: List[HMOClaim] = field(default_factory=list)
