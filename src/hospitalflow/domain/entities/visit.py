"""Visit domain entity representing one trip through the care pathway.

A visit belongs to a patient and is never deleted. Its ``location`` records
the department the patient is waiting at together with the working
diagnosis; ``diagnosis`` renders the same information in the legacy prefixed
string form.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from ..enums.pathway import Department
from ..enums.workflow import PatientType, VisitType
from ..services.pathway import decode, encode_location
from ..value_objects.care_location import CareLocation
from ..value_objects.money import ZERO, to_money


@dataclass
class Prescription:
    """Medication ordered by the doctor."""

    medication: str
    dosage: str = ""
    quantity: int = 1
    unit_price: Decimal = ZERO
    instructions: str = ""
    dispensed: bool = False

    def __post_init__(self) -> None:
        self.unit_price = to_money(self.unit_price)


@dataclass
class VitalSigns:
    blood_pressure: Optional[str] = None
    temperature: Optional[str] = None
    pulse: Optional[str] = None
    respiratory_rate: Optional[str] = None
    weight: Optional[str] = None
    height: Optional[str] = None
    oxygen_saturation: Optional[str] = None
    recorded_by: Optional[str] = None
    recorded_at: datetime = field(default_factory=datetime.utcnow)

    def is_empty(self) -> bool:
        readings = (
            self.blood_pressure,
            self.temperature,
            self.pulse,
            self.respiratory_rate,
            self.weight,
            self.height,
            self.oxygen_saturation,
        )
        return not any((value or "").strip() for value in readings)


@dataclass
class DoctorChange:
    """Audit record of a consultation being reassigned."""

    from_doctor_id: str
    from_doctor_name: str
    to_doctor_id: str
    to_doctor_name: str
    changed_by: str
    fee_difference: Decimal = ZERO
    upgrade_bill_id: Optional[str] = None
    changed_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class Visit:
    """Visit domain entity."""

    visit_id: str
    location: CareLocation
    visit_type: VisitType = VisitType.CONSULTATION
    doctor: Optional[str] = None
    date: datetime = field(default_factory=datetime.utcnow)
    original_diagnosis: Optional[str] = None
    notes: str = ""
    prescriptions: List[Prescription] = field(default_factory=list)
    lab_tests: List[str] = field(default_factory=list)
    lab_results: Dict[str, str] = field(default_factory=dict)
    injections: List[str] = field(default_factory=list)
    vitals: Optional[VitalSigns] = None
    doctor_changes: List[DoctorChange] = field(default_factory=list)

    @classmethod
    def from_legacy(
        cls,
        visit_id: str,
        diagnosis: Optional[str],
        patient_type: Optional[PatientType] = None,
        **fields,
    ) -> "Visit":
        """Build a visit from a record that stored its location in the diagnosis string."""
        return cls(visit_id=visit_id, location=decode(diagnosis, patient_type), **fields)

    @property
    def department(self) -> Department:
        return self.location.department

    @property
    def diagnosis_text(self) -> str:
        return self.location.diagnosis_text

    @property
    def diagnosis(self) -> str:
        """Legacy prefixed rendering of the location."""
        return encode_location(self.location)

    def move_to(self, department: Department, diagnosis_text: Optional[str] = None) -> None:
        self.location = self.location.moved_to(department, diagnosis_text)

    def append_note(self, line: str) -> None:
        self.notes = f"{self.notes}\n\n{line}" if self.notes else line
