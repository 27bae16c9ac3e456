"""Discharge Admission use case."""

import logging

from ...core.utils import format_display_date
from ...domain.enums.pathway import Department
from ..dto.clinical_dto import ClinicalOutcome, DischargeAdmissionRequest
from ..ports.store import HospitalStore
from ..services.lifecycle import settle_visit
from ..services.lookups import patient_at

logger = logging.getLogger("hospitalflow")


class DischargeAdmissionUseCase:
    """Close a visit that was sent for admission.

    The appointment completes here when the consultation bill is already paid,
    otherwise when the cash point settles it.
    """

    def __init__(self, store: HospitalStore):
        self._store = store

    async def execute(self, request: DischargeAdmissionRequest) -> ClinicalOutcome:
        patient, visit = await patient_at(
            self._store, request.patient_id, Department.ADMISSION_PENDING
        )

        diagnosis = (request.discharge_diagnosis or "").strip() or visit.diagnosis_text
        discharged_by = request.discharged_by or "Ward"
        visit.move_to(Department.COMPLETED, diagnosis)
        line = f"{discharged_by} ({format_display_date()}): discharged from admission"
        if request.notes:
            line = f"{line}. {request.notes.strip()}"
        visit.append_note(line)

        await self._store.patients.update(patient)
        appointment = await settle_visit(self._store, visit)

        logger.info(f"Patient {patient.patient_id} discharged from admission, visit {visit.visit_id}")
        return ClinicalOutcome(visit=visit, appointment=appointment)
