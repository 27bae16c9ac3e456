"""Schedule Appointment use case."""

import logging

from ...domain.entities.appointment import Appointment
from ...domain.errors import MissingFieldError
from ..dto.appointment_dto import ScheduleAppointmentRequest
from ..ports.store import HospitalStore
from ..services.lookups import require_doctor, require_patient, require_text

logger = logging.getLogger("hospitalflow")


class ScheduleAppointmentUseCase:
    """Book a patient with a doctor; the appointment starts as scheduled."""

    def __init__(self, store: HospitalStore):
        self._store = store

    async def execute(self, request: ScheduleAppointmentRequest) -> Appointment:
        if request.date is None:
            raise MissingFieldError("date")
        time = require_text(request.time, "time")
        patient = await require_patient(self._store, request.patient_id)
        doctor = await require_doctor(self._store, request.doctor_id)

        appointment = Appointment(
            appointment_id=await self._store.appointments.next_id(),
            patient_id=patient.patient_id,
            patient_name=patient.name,
            doctor_id=doctor.staff_id,
            doctor_name=doctor.name,
            date=request.date,
            time=time,
            department=doctor.department,
            consultation_type=request.consultation_type or "general",
        )
        appointment = await self._store.appointments.add(appointment)
        logger.info(
            f"Appointment {appointment.appointment_id} scheduled for patient "
            f"{patient.patient_id} with {doctor.name} on {appointment.date} {appointment.time}"
        )
        return appointment
