"""Patient domain entity representing a registered hospital patient."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from ..enums.workflow import PatientType, VisitType
from ..errors import MissingFieldError, VisitNotFoundError
from ..value_objects.care_location import CareLocation
from ..value_objects.money import ZERO, Amount, to_money
from .visit import Visit


@dataclass
class VaccinationRecord:
    vaccine: str
    dose_number: int
    bill_id: Optional[str] = None
    recorded_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class Patient:
    """Patient domain entity."""

    patient_id: str
    name: str
    phone: str
    patient_type: PatientType = PatientType.CASH
    hmo_provider: Optional[str] = None
    gender: Optional[str] = None
    date_of_birth: Optional[str] = None
    address: Optional[str] = None
    email: Optional[str] = None
    balance: Decimal = ZERO
    is_staff: bool = False
    staff_id: Optional[str] = None
    visits: List[Visit] = field(default_factory=list)
    vaccinations: List[VaccinationRecord] = field(default_factory=list)
    version: int = 0
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Validate patient data."""
        if not self.name or not self.name.strip():
            raise MissingFieldError("name")
        if not self.phone or not self.phone.strip():
            raise MissingFieldError("phone")

        self.name = self.name.strip()
        self.phone = self.phone.strip()
        self.patient_type = PatientType(self.patient_type)
        if self.patient_type == PatientType.HMO and not (self.hmo_provider or "").strip():
            raise MissingFieldError("hmo_provider", "for HMO patients")
        self.balance = to_money(self.balance)

    @property
    def is_hmo(self) -> bool:
        return self.patient_type == PatientType.HMO

    @property
    def latest_visit(self) -> Optional[Visit]:
        return self.visits[-1] if self.visits else None

    def current_visit(self) -> Visit:
        """Latest visit; raises when the patient has never been seen."""
        visit = self.latest_visit
        if visit is None:
            raise VisitNotFoundError(self.patient_id)
        return visit

    def find_visit(self, visit_id: str) -> Visit:
        for visit in self.visits:
            if visit.visit_id == visit_id:
                return visit
        raise VisitNotFoundError(self.patient_id, visit_id)

    def open_visit(
        self,
        location: CareLocation,
        visit_type: VisitType = VisitType.CONSULTATION,
        doctor: Optional[str] = None,
    ) -> Visit:
        visit = Visit(
            visit_id=f"V-{self.patient_id}-{len(self.visits) + 1}",
            location=location,
            visit_type=visit_type,
            doctor=doctor,
        )
        self.visits.append(visit)
        return visit

    def adjust_balance(self, delta: Amount) -> Decimal:
        self.balance = to_money(self.balance + to_money(delta))
        return self.balance

    def next_vaccine_dose(self, vaccine: str) -> int:
        key = vaccine.strip().lower()
        doses = [r.dose_number for r in self.vaccinations if r.vaccine.lower() == key]
        return max(doses, default=0) + 1

    def record_vaccination(self, vaccine: str, dose_number: int, bill_id: Optional[str]) -> None:
        self.vaccinations.append(
            VaccinationRecord(vaccine=vaccine.strip(), dose_number=dose_number, bill_id=bill_id)
        )

    def remove_vaccination(self, bill_id: str) -> bool:
        """Drop the dose recorded against a bill that will never be administered."""
        kept = [r for r in self.vaccinations if r.bill_id != bill_id]
        removed = len(kept) != len(self.vaccinations)
        self.vaccinations = kept
        return removed

    def touch(self) -> None:
        self.updated_at = datetime.utcnow()
