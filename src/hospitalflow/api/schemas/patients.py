"""
Pydantic schemas for patient endpoints.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...application.dto.patient_dto import PatientHistoryResponse
from ...domain.entities.patient import Patient, VaccinationRecord
from ...domain.enums.pathway import Department
from ...domain.enums.workflow import PatientType
from .appointments import AppointmentSchema
from .billing import BillSchema
from .claims import ClaimSchema
from .common import as_amount
from .visits import VisitSchema


class RegisterPatientRequest(BaseModel):
    """Request schema for patient registration."""

    name: str = Field(..., min_length=1, max_length=120, description="Full name")
    phone: str = Field(..., min_length=1, max_length=20, description="Phone number")
    patient_type: PatientType = Field(PatientType.CASH, description="cash or hmo")
    hmo_provider: Optional[str] = Field(None, description="Required for HMO patients")
    gender: Optional[str] = None
    date_of_birth: Optional[str] = Field(None, description="YYYY-MM-DD")
    address: Optional[str] = None
    email: Optional[str] = None

    @field_validator("name", "phone")
    @classmethod
    def validate_required(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Field cannot be empty")
        return v.strip()

    @model_validator(mode="after")
    def validate_hmo_provider(self) -> "RegisterPatientRequest":
        if self.patient_type == PatientType.HMO and not (self.hmo_provider or "").strip():
            raise ValueError("hmo_provider is required for HMO patients")
        return self


class UpdatePatientRequest(BaseModel):
    """Partial edit; omitted fields keep their stored value."""

    name: Optional[str] = Field(None, max_length=120)
    phone: Optional[str] = Field(None, max_length=20)
    patient_type: Optional[PatientType] = None
    hmo_provider: Optional[str] = None
    gender: Optional[str] = None
    date_of_birth: Optional[str] = Field(None, description="YYYY-MM-DD")
    address: Optional[str] = None
    email: Optional[str] = None
    version: Optional[int] = Field(None, ge=1, description="Version the edit was based on")

    @field_validator("name", "phone")
    @classmethod
    def validate_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Field cannot be empty")
        return v.strip() if v is not None else v


class StaffPatientRequest(BaseModel):
    staff_id: str
    phone: Optional[str] = None
    gender: Optional[str] = None
    date_of_birth: Optional[str] = None


class VaccinationRecordSchema(BaseModel):
    vaccine: str
    dose_number: int
    bill_id: Optional[str] = None
    recorded_at: datetime

    @classmethod
    def from_domain(cls, record: VaccinationRecord) -> "VaccinationRecordSchema":
        return cls(
            vaccine=record.vaccine,
            dose_number=record.dose_number,
            bill_id=record.bill_id,
            recorded_at=record.recorded_at,
        )


class PatientSchema(BaseModel):
    """Patient summary with the current care-pathway location."""

    patient_id: str
    name: str
    phone: str
    patient_type: PatientType
    hmo_provider: Optional[str] = None
    gender: Optional[str] = None
    date_of_birth: Optional[str] = None
    address: Optional[str] = None
    email: Optional[str] = None
    balance: float
    is_staff: bool
    staff_id: Optional[str] = None
    current_department: Optional[Department] = None
    current_diagnosis: Optional[str] = None
    visit_count: int = 0
    version: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def fields_from(cls, patient: Patient) -> dict:
        visit = patient.latest_visit
        return dict(
            patient_id=patient.patient_id,
            name=patient.name,
            phone=patient.phone,
            patient_type=patient.patient_type,
            hmo_provider=patient.hmo_provider,
            gender=patient.gender,
            date_of_birth=patient.date_of_birth,
            address=patient.address,
            email=patient.email,
            balance=as_amount(patient.balance),
            is_staff=patient.is_staff,
            staff_id=patient.staff_id,
            current_department=visit.department if visit else None,
            current_diagnosis=visit.diagnosis if visit else None,
            visit_count=len(patient.visits),
            version=patient.version,
            created_at=patient.created_at,
            updated_at=patient.updated_at,
        )

    @classmethod
    def from_domain(cls, patient: Patient) -> "PatientSchema":
        return cls(**cls.fields_from(patient))


class PatientDetailSchema(PatientSchema):
    visits: List[VisitSchema] = Field(default_factory=list)
    vaccinations: List[VaccinationRecordSchema] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, patient: Patient) -> "PatientDetailSchema":
        return cls(
            **cls.fields_from(patient),
            visits=[VisitSchema.from_domain(v) for v in patient.visits],
            vaccinations=[VaccinationRecordSchema.from_domain(r) for r in patient.vaccinations],
        )


class PatientHistorySchema(BaseModel):
    patient: PatientDetailSchema
    appointments: List[AppointmentSchema] = Field(default_factory=list)
    bills: List[BillSchema] = Field(default_factory=list)
    claims: List[ClaimSchema] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, history: PatientHistoryResponse) -> "PatientHistorySchema":
        return cls(
            patient=PatientDetailSchema.from_domain(history.patient),
            appointments=[AppointmentSchema.from_domain(a) for a in history.appointments],
            bills=[BillSchema.from_domain(b) for b in history.bills],
            claims=[ClaimSchema.from_domain(c) for c in history.claims],
        )
