"""
Appointment repository interface.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ....domain.entities.appointment import Appointment
from ....domain.enums.workflow import AppointmentStatus


class AppointmentRepository(ABC):
    """Abstract repository for appointment data access."""

    @abstractmethod
    async def next_id(self) -> str:
        pass

    @abstractmethod
    async def add(self, appointment: Appointment) -> Appointment:
        pass

    @abstractmethod
    async def update(self, appointment: Appointment) -> Appointment:
        """Compare-and-swap write on ``Appointment.version``."""
        pass

    @abstractmethod
    async def find_by_id(self, appointment_id: str) -> Optional[Appointment]:
        pass

    @abstractmethod
    async def find_by_patient(self, patient_id: str) -> List[Appointment]:
        pass

    @abstractmethod
    async def find_by_visit(self, visit_id: str) -> Optional[Appointment]:
        """Appointment whose check-in opened the given visit."""
        pass

    @abstractmethod
    async def find_by_status(self, status: AppointmentStatus) -> List[Appointment]:
        pass
