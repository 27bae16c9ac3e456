"""
Bill repository interface.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ....domain.entities.bill import Bill


class BillRepository(ABC):
    """Abstract repository for bill data access."""

    @abstractmethod
    async def next_id(self) -> str:
        """Reserve a new bill ID (``BILL-1001`` onwards)."""
        pass

    @abstractmethod
    async def next_deposit_id(self) -> str:
        """Reserve a new deposit bill ID (``BILL-DEP-1001`` onwards)."""
        pass

    @abstractmethod
    async def add(self, bill: Bill) -> Bill:
        pass

    @abstractmethod
    async def update(self, bill: Bill) -> Bill:
        """Compare-and-swap write on ``Bill.version``."""
        pass

    @abstractmethod
    async def find_by_id(self, bill_id: str) -> Optional[Bill]:
        pass

    @abstractmethod
    async def find_by_patient(self, patient_id: str) -> List[Bill]:
        pass

    @abstractmethod
    async def find_by_visit(self, visit_id: str) -> List[Bill]:
        pass

    @abstractmethod
    async def find_pending(self) -> List[Bill]:
        """Bills waiting at the cash point."""
        pass

    @abstractmethod
    async def find_all(self) -> List[Bill]:
        pass
