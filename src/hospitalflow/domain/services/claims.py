"""
Billing to HMO claim linkage rules.
"""

from typing import Dict, Iterable, Optional

from ..entities.bill import Bill
from ..entities.claim import ClaimItem, HMOClaim
from ..entities.patient import Patient
from ..enums.claims import ClaimDecision, SourceDepartment
from ..enums.pathway import Department
from ..enums.workflow import VisitType
from ..errors import DuplicateClaimError
from ..value_objects.care_location import CareLocation
from .pathway import CANCELLED

# Where an approved claim sends the patient next.
APPROVAL_ROUTES: Dict[SourceDepartment, Department] = {
    SourceDepartment.DOCTOR: Department.VITALS,
    SourceDepartment.PHARMACY: Department.COMPLETED,
    SourceDepartment.LABORATORY: Department.LABORATORY,
    SourceDepartment.INJECTION_ROOM: Department.INJECTION_ROOM,
}

REJECTION_ROUTES: Dict[SourceDepartment, Department] = {
    SourceDepartment.DOCTOR: Department.COMPLETED,
    SourceDepartment.PHARMACY: Department.PHARMACY,
    SourceDepartment.LABORATORY: Department.DOCTOR_QUEUE,
    SourceDepartment.INJECTION_ROOM: Department.DOCTOR_QUEUE,
}

SOURCE_LABELS: Dict[SourceDepartment, str] = {
    SourceDepartment.DOCTOR: "Consultation",
    SourceDepartment.PHARMACY: "Pharmacy",
    SourceDepartment.LABORATORY: "Laboratory",
    SourceDepartment.INJECTION_ROOM: "Injection",
}

DEFAULT_APPROVAL_REFERENCE = "HMO-APPROVED"


def claim_id_for(source: SourceDepartment, patient_id: str, bill_id: str) -> str:
    if source == SourceDepartment.DOCTOR:
        return f"HMO-CONS-{patient_id}-{bill_id}"
    if source == SourceDepartment.PHARMACY:
        return f"HMO-PHARM-{bill_id}"
    if source == SourceDepartment.LABORATORY:
        return f"HMO-LAB-{bill_id}"
    return f"HMO-INJ-{bill_id}"


def ensure_unlinked(bill: Bill, existing: Iterable[HMOClaim]) -> None:
    """Refuse a second claim for the same bill."""
    for claim in existing:
        if claim.source_id == bill.bill_id:
            raise DuplicateClaimError(bill.bill_id, claim.claim_id)


def claim_from_bill(bill: Bill, patient: Patient, source: SourceDepartment) -> HMOClaim:
    """Pending claim mirroring the bill's items, none of them approved yet."""
    return HMOClaim(
        claim_id=claim_id_for(source, patient.patient_id, bill.bill_id),
        patient_id=patient.patient_id,
        patient_name=patient.name,
        hmo_provider=patient.hmo_provider or "",
        source_department=source,
        source_id=bill.bill_id,
        items=[
            ClaimItem(
                item_id=item.item_id,
                description=item.description,
                quantity=item.quantity,
                unit_price=item.unit_price,
                item_type=item.item_type,
                approved=False,
            )
            for item in bill.items
        ],
    )


def route_after_decision(
    location: CareLocation,
    source: SourceDepartment,
    decision: ClaimDecision,
    visit_type: VisitType = VisitType.CONSULTATION,
) -> CareLocation:
    if decision == ClaimDecision.APPROVED:
        return location.moved_to(APPROVAL_ROUTES[source])
    # A vaccination visit has no doctor to return to.
    if source == SourceDepartment.DOCTOR or visit_type == VisitType.VACCINATION:
        return CareLocation(Department.COMPLETED, CANCELLED)
    return location.moved_to(REJECTION_ROUTES[source])


def decision_note(
    claim: HMOClaim,
    decision: ClaimDecision,
    desk_name: str,
    when: str,
    approval_code: Optional[str] = None,
) -> str:
    label = SOURCE_LABELS[claim.source_department]
    if decision == ClaimDecision.APPROVED:
        code = approval_code or DEFAULT_APPROVAL_REFERENCE
        return f"{desk_name} ({when}): {label} claim {claim.claim_id} approved with code {code}"
    return (
        f"{desk_name} ({when}): {label} claim {claim.claim_id} rejected. "
        f"Reason: {claim.rejection_reason}"
    )
