"""
HMO claim repository interface.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ....domain.entities.claim import HMOClaim
from ....domain.enums.claims import ClaimStatus


class ClaimRepository(ABC):
    """Abstract repository for HMO claims.

    ``add`` refuses a claim whose ``source_id`` is already linked to another
    claim, so a bill never has more than one.
    """

    @abstractmethod
    async def add(self, claim: HMOClaim) -> HMOClaim:
        pass

    @abstractmethod
    async def update(self, claim: HMOClaim) -> HMOClaim:
        """Compare-and-swap write on ``HMOClaim.version``."""
        pass

    @abstractmethod
    async def find_by_id(self, claim_id: str) -> Optional[HMOClaim]:
        pass

    @abstractmethod
    async def find_by_source_id(self, source_id: str) -> Optional[HMOClaim]:
        """The claim raised against a bill, if any."""
        pass

    @abstractmethod
    async def find_by_status(self, status: Optional[ClaimStatus] = None) -> List[HMOClaim]:
        """Claims with the given status, or all claims when status is None."""
        pass

    @abstractmethod
    async def find_by_patient(self, patient_id: str) -> List[HMOClaim]:
        pass
