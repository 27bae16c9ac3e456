"""Appointment domain entity."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..enums.workflow import AppointmentStatus


@dataclass
class Appointment:
    """Appointment domain entity.

    ``status`` is only written through
    :func:`hospitalflow.domain.services.appointments.transition`.
    """

    appointment_id: str
    patient_id: str
    patient_name: str
    doctor_id: str
    doctor_name: str
    date: date
    time: str
    department: Optional[str] = None
    consultation_type: str = "general"
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    bill_id: Optional[str] = None
    visit_id: Optional[str] = None
    presenting_complaints: Optional[str] = None
    cancellation_reason: Optional[str] = None
    version: int = 0
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_open(self) -> bool:
        return self.status in (AppointmentStatus.SCHEDULED, AppointmentStatus.IN_PROGRESS)
