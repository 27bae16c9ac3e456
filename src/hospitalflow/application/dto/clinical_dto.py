"""Clinical workflow DTOs for API communication."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional

from ...domain.entities.appointment import Appointment
from ...domain.entities.bill import Bill
from ...domain.entities.claim import HMOClaim
from ...domain.entities.visit import Prescription, Visit, VitalSigns
from ...domain.enums.workflow import ConsultationDestination
from ...domain.value_objects.money import ZERO, to_money


@dataclass
class OrderLine:
    """A priced service ordered by a clinician (lab test, injection, drug)."""

    description: str
    unit_price: Decimal = ZERO
    quantity: int = 1

    def __post_init__(self) -> None:
        self.unit_price = to_money(self.unit_price)


@dataclass
class RecordVitalsRequest:
    patient_id: str
    vitals: VitalSigns


@dataclass
class CompleteConsultationRequest:
    """Request DTO for the doctor's decision at the end of a consultation."""

    patient_id: str
    diagnosis: str
    destination: ConsultationDestination
    prescriptions: List[Prescription] = field(default_factory=list)
    lab_tests: List[OrderLine] = field(default_factory=list)
    injections: List[OrderLine] = field(default_factory=list)
    notes: Optional[str] = None
    doctor_name: Optional[str] = None


@dataclass
class ClinicalOutcome:
    """Where a clinical step left the patient, with any bill it raised."""

    visit: Visit
    bill: Optional[Bill] = None
    claim: Optional[HMOClaim] = None
    appointment: Optional[Appointment] = None


@dataclass
class BillPrescriptionsRequest:
    patient_id: str
    items: List[OrderLine] = field(default_factory=list)
    processed_by: Optional[str] = None


@dataclass
class DispenseRequest:
    bill_id: str
    dispensed_by: Optional[str] = None


@dataclass
class CompleteLabRequest:
    patient_id: str
    results: Dict[str, str]
    completed_by: Optional[str] = None
    notes: Optional[str] = None


@dataclass
class CompleteInjectionRequest:
    patient_id: str
    administered_by: Optional[str] = None
    notes: Optional[str] = None


@dataclass
class DischargeAdmissionRequest:
    patient_id: str
    discharge_diagnosis: Optional[str] = None
    discharged_by: Optional[str] = None
    notes: Optional[str] = None


@dataclass
class VaccinationRequest:
    """Request DTO for booking a vaccine dose."""

    patient_id: str
    vaccine: str
    dose_number: int
    price: Decimal
    requested_by: Optional[str] = None

    def __post_init__(self) -> None:
        self.price = to_money(self.price)
