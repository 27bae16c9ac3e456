"""
Store port bundling the repositories a workflow use case needs.
"""

from abc import ABC, abstractmethod

from ..services.change_feed import ChangeFeed
from .repositories import (
    AppointmentRepository,
    BillRepository,
    ClaimRepository,
    PatientRepository,
    StaffRepository,
)


class HospitalStore(ABC):
    """Shared hospital state: patients, appointments, bills, claims and staff."""

    @property
    @abstractmethod
    def patients(self) -> PatientRepository:
        pass

    @property
    @abstractmethod
    def appointments(self) -> AppointmentRepository:
        pass

    @property
    @abstractmethod
    def bills(self) -> BillRepository:
        pass

    @property
    @abstractmethod
    def claims(self) -> ClaimRepository:
        pass

    @property
    @abstractmethod
    def staff(self) -> StaffRepository:
        pass

    @property
    @abstractmethod
    def feed(self) -> ChangeFeed:
        """Change notifications for every write made through this store."""
        pass
