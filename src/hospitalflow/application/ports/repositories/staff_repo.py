"""
Staff repository interface.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ....domain.entities.staff import Staff


class StaffRepository(ABC):
    @abstractmethod
    async def next_id(self) -> str:
        """Reserve a new staff ID (``STAFF-001`` onwards)."""
        pass

    @abstractmethod
    async def add(self, staff: Staff) -> Staff:
        pass

    @abstractmethod
    async def find_by_id(self, staff_id: str) -> Optional[Staff]:
        pass

    @abstractmethod
    async def find_doctors(self) -> List[Staff]:
        pass

    @abstractmethod
    async def find_all(self) -> List[Staff]:
        pass
