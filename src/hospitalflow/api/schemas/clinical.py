"""
Pydantic schemas for the clinical workflow endpoints.
"""

from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ...application.dto.clinical_dto import ClinicalOutcome, OrderLine
from ...domain.enums.workflow import ConsultationDestination
from .appointments import AppointmentSchema
from .billing import BillSchema
from .claims import ClaimSchema
from .visits import PrescriptionInput, VisitSchema, VitalSignsSchema


class OrderLineInput(BaseModel):
    description: str = Field(..., min_length=1, description="Test, injection or drug name")
    unit_price: Decimal = Field(..., ge=0)
    quantity: int = Field(1, ge=1)

    def to_domain(self) -> OrderLine:
        return OrderLine(
            description=self.description.strip(),
            unit_price=self.unit_price,
            quantity=self.quantity,
        )


class RecordVitalsRequest(VitalSignsSchema):
    patient_id: str


class CompleteConsultationRequest(BaseModel):
    """Doctor's diagnosis and where the patient goes next."""

    patient_id: str
    diagnosis: str
    destination: ConsultationDestination
    prescriptions: List[PrescriptionInput] = Field(default_factory=list)
    lab_tests: List[OrderLineInput] = Field(default_factory=list)
    injections: List[OrderLineInput] = Field(default_factory=list)
    notes: Optional[str] = None
    doctor_name: Optional[str] = None


class BillPrescriptionsRequest(BaseModel):
    patient_id: str
    items: List[OrderLineInput] = Field(
        default_factory=list, description="Priced items; defaults to the visit's prescriptions"
    )
    processed_by: Optional[str] = None


class DispenseRequest(BaseModel):
    dispensed_by: Optional[str] = None


class CompleteLabRequest(BaseModel):
    patient_id: str
    results: Dict[str, str] = Field(..., description="Result per test")
    completed_by: Optional[str] = None
    notes: Optional[str] = None


class CompleteInjectionRequest(BaseModel):
    patient_id: str
    administered_by: Optional[str] = None
    notes: Optional[str] = None


class DischargeAdmissionRequest(BaseModel):
    patient_id: str
    discharge_diagnosis: Optional[str] = Field(None, description="Defaults to the admitting diagnosis")
    discharged_by: Optional[str] = None
    notes: Optional[str] = None


class VaccinationRequest(BaseModel):
    patient_id: str
    vaccine: str
    dose_number: int
    price: Decimal = Field(..., ge=0)
    requested_by: Optional[str] = None


class ClinicalOutcomeSchema(BaseModel):
    visit: VisitSchema
    bill: Optional[BillSchema] = None
    claim: Optional[ClaimSchema] = None
    appointment: Optional[AppointmentSchema] = None

    @classmethod
    def from_domain(cls, outcome: ClinicalOutcome) -> "ClinicalOutcomeSchema":
        return cls(
            visit=VisitSchema.from_domain(outcome.visit),
            bill=BillSchema.from_domain(outcome.bill) if outcome.bill else None,
            claim=ClaimSchema.from_domain(outcome.claim) if outcome.claim else None,
            appointment=(
                AppointmentSchema.from_domain(outcome.appointment) if outcome.appointment else None
            ),
        )
