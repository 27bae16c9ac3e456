"""Record Vitals use case."""

import logging

from ...domain.entities.visit import Visit
from ...domain.enums.pathway import Department
from ...domain.errors import MissingFieldError
from ..dto.clinical_dto import RecordVitalsRequest
from ..ports.store import HospitalStore
from ..services.lookups import patient_at

logger = logging.getLogger("hospitalflow")

VITALS_NOTE = "Vitals recorded, awaiting doctor consultation"


class RecordVitalsUseCase:
    """Nursing station: store the readings and send the patient to the doctor."""

    def __init__(self, store: HospitalStore):
        self._store = store

    async def execute(self, request: RecordVitalsRequest) -> Visit:
        if request.vitals is None or request.vitals.is_empty():
            raise MissingFieldError("vitals", "(at least one reading)")
        patient, visit = await patient_at(
            self._store, request.patient_id, Department.VITALS, Department.DOCTOR_QUEUE
        )

        visit.vitals = request.vitals
        visit.move_to(Department.DOCTOR_QUEUE)
        visit.append_note(VITALS_NOTE)
        await self._store.patients.update(patient)

        logger.info(f"Vitals recorded for patient {patient.patient_id}, visit {visit.visit_id}")
        return visit
