"""
Care-pathway state encoder.

Older records keep the patient's location inside the visit diagnosis string,
using a department prefix such as ``"With Pharmacy: Malaria"`` or the bare
sentinel ``"Pending"`` for the doctor queue. Visits now store a structured
:class:`CareLocation`; this module translates between the two forms so that
legacy strings can be migrated once at load time and rendered again for
display or export.
"""

from typing import TYPE_CHECKING, Dict, Optional

from ..enums.pathway import Department
from ..enums.workflow import PatientType
from ..value_objects.care_location import CareLocation

if TYPE_CHECKING:
    from ..entities.patient import Patient

PENDING = "Pending"

# Terminal diagnosis literals written by cancellation and completion flows.
CANCELLED = "Cancelled"
TERMINAL_DIAGNOSES = frozenset({CANCELLED, "Completed"})

PREFIXES: Dict[Department, str] = {
    Department.PHARMACY: "With Pharmacy: ",
    Department.LABORATORY: "With Laboratory: ",
    Department.INJECTION_ROOM: "With Injection Room: ",
    Department.HMO_DESK: "With HMO: ",
    Department.VITALS: "With Vitals: ",
    Department.CASH_POINT: "With Cash Point: ",
    Department.ADMISSION_PENDING: "For Admission: ",
}


def decode(
    diagnosis: Optional[str], patient_type: Optional[PatientType] = None
) -> CareLocation:
    """Parse a legacy diagnosis string into a location.

    An unprefixed diagnosis normally means the patient was discharged. For HMO
    patients it means the visit is still waiting on the HMO desk, except for
    the terminal literals ``Cancelled`` and ``Completed``.
    """
    text = diagnosis or ""
    if text == PENDING:
        return CareLocation(Department.DOCTOR_QUEUE, "")

    for department, prefix in PREFIXES.items():
        if text.startswith(prefix):
            return CareLocation(department, text[len(prefix):])

    if (
        patient_type == PatientType.HMO
        and text
        and text not in TERMINAL_DIAGNOSES
    ):
        return CareLocation(Department.HMO_DESK, text)

    return CareLocation(Department.COMPLETED, text)


def encode(department: Department, diagnosis_text: str = "") -> str:
    """Render a location in the legacy prefixed form."""
    if department == Department.DOCTOR_QUEUE:
        return PENDING
    if department == Department.COMPLETED:
        return diagnosis_text
    return f"{PREFIXES[Department(department)]}{diagnosis_text}"


def encode_location(location: CareLocation) -> str:
    return encode(location.department, location.diagnosis_text)


def strip_prefix(diagnosis: Optional[str]) -> str:
    """Underlying diagnosis text of a legacy string, prefix removed."""
    return decode(diagnosis).diagnosis_text


def location_of(patient: "Patient") -> Optional[CareLocation]:
    """Location of the patient's latest visit, or None without visits."""
    visit = patient.latest_visit
    return visit.location if visit else None
