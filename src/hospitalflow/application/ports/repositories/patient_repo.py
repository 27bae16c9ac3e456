"""
Patient repository interface for data access abstraction.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List, Optional

from ....domain.entities.patient import Patient


class PatientRepository(ABC):
    """Abstract repository for patient data access.

    ``update`` is a compare-and-swap on ``Patient.version``: it raises
    ``StaleEntityError`` when the stored version moved since the caller read it.
    """

    @abstractmethod
    async def next_id(self) -> str:
        """Reserve a new patient ID."""
        pass

    @abstractmethod
    async def add(self, patient: Patient) -> Patient:
        """Store a new patient."""
        pass

    @abstractmethod
    async def update(self, patient: Patient) -> Patient:
        """Write back a patient read earlier from this repository."""
        pass

    @abstractmethod
    async def find_by_id(self, patient_id: str) -> Optional[Patient]:
        """Find a patient by ID."""
        pass

    @abstractmethod
    async def find_by_staff_id(self, staff_id: str) -> Optional[Patient]:
        """Find the patient record created for a staff member."""
        pass

    @abstractmethod
    async def find_all(self, limit: int = 100, offset: int = 0) -> List[Patient]:
        pass

    @abstractmethod
    async def search(self, term: str, by: str = "name") -> List[Patient]:
        """Case-insensitive substring search on name, id or phone."""
        pass

    @abstractmethod
    async def update_balance(self, patient_id: str, delta: Decimal) -> Patient:
        """Atomically add ``delta`` to the patient's deposit balance."""
        pass
