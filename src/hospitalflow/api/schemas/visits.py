"""
Pydantic schemas for visits and their clinical records.
"""

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ...domain.entities.visit import DoctorChange, Prescription, Visit, VitalSigns
from ...domain.enums.pathway import Department
from ...domain.enums.workflow import VisitType
from .common import as_amount


class VitalSignsSchema(BaseModel):
    blood_pressure: Optional[str] = Field(None, description="e.g. 120/80")
    temperature: Optional[str] = None
    pulse: Optional[str] = None
    respiratory_rate: Optional[str] = None
    weight: Optional[str] = None
    height: Optional[str] = None
    oxygen_saturation: Optional[str] = None
    recorded_by: Optional[str] = None

    def to_domain(self) -> VitalSigns:
        return VitalSigns(**self.model_dump())

    @classmethod
    def from_domain(cls, vitals: VitalSigns) -> "VitalSignsSchema":
        return cls(
            blood_pressure=vitals.blood_pressure,
            temperature=vitals.temperature,
            pulse=vitals.pulse,
            respiratory_rate=vitals.respiratory_rate,
            weight=vitals.weight,
            height=vitals.height,
            oxygen_saturation=vitals.oxygen_saturation,
            recorded_by=vitals.recorded_by,
        )


class PrescriptionInput(BaseModel):
    medication: str = Field(..., min_length=1)
    dosage: str = ""
    quantity: int = Field(1, ge=1)
    unit_price: Decimal = Field(Decimal("0"), ge=0)
    instructions: str = ""

    def to_domain(self) -> Prescription:
        return Prescription(
            medication=self.medication,
            dosage=self.dosage,
            quantity=self.quantity,
            unit_price=self.unit_price,
            instructions=self.instructions,
        )


class PrescriptionSchema(BaseModel):
    medication: str
    dosage: str = ""
    quantity: int
    unit_price: float
    instructions: str = ""
    dispensed: bool = False

    @classmethod
    def from_domain(cls, rx: Prescription) -> "PrescriptionSchema":
        return cls(
            medication=rx.medication,
            dosage=rx.dosage,
            quantity=rx.quantity,
            unit_price=as_amount(rx.unit_price),
            instructions=rx.instructions,
            dispensed=rx.dispensed,
        )


class DoctorChangeSchema(BaseModel):
    from_doctor_name: str
    to_doctor_name: str
    changed_by: str
    fee_difference: float
    upgrade_bill_id: Optional[str] = None
    changed_at: datetime

    @classmethod
    def from_domain(cls, change: DoctorChange) -> "DoctorChangeSchema":
        return cls(
            from_doctor_name=change.from_doctor_name,
            to_doctor_name=change.to_doctor_name,
            changed_by=change.changed_by,
            fee_difference=as_amount(change.fee_difference),
            upgrade_bill_id=change.upgrade_bill_id,
            changed_at=change.changed_at,
        )


class VisitSchema(BaseModel):
    """Visit with its structured location and the legacy diagnosis rendering."""

    visit_id: str
    visit_type: VisitType
    department: Department
    diagnosis_text: str
    diagnosis: str = Field(..., description="Legacy prefixed form, e.g. 'With Pharmacy: Malaria'")
    doctor: Optional[str] = None
    date: datetime
    original_diagnosis: Optional[str] = None
    notes: str = ""
    prescriptions: List[PrescriptionSchema] = Field(default_factory=list)
    lab_tests: List[str] = Field(default_factory=list)
    lab_results: Dict[str, str] = Field(default_factory=dict)
    injections: List[str] = Field(default_factory=list)
    vitals: Optional[VitalSignsSchema] = None
    doctor_changes: List[DoctorChangeSchema] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, visit: Visit) -> "VisitSchema":
        return cls(
            visit_id=visit.visit_id,
            visit_type=visit.visit_type,
            department=visit.department,
            diagnosis_text=visit.diagnosis_text,
            diagnosis=visit.diagnosis,
            doctor=visit.doctor,
            date=visit.date,
            original_diagnosis=visit.original_diagnosis,
            notes=visit.notes,
            prescriptions=[PrescriptionSchema.from_domain(rx) for rx in visit.prescriptions],
            lab_tests=list(visit.lab_tests),
            lab_results=dict(visit.lab_results),
            injections=list(visit.injections),
            vitals=VitalSignsSchema.from_domain(visit.vitals) if visit.vitals else None,
            doctor_changes=[DoctorChangeSchema.from_domain(c) for c in visit.doctor_changes],
        )
