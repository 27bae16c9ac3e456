"""HMO desk DTOs for API communication."""

from dataclasses import dataclass, field
from typing import List, Optional

from ...domain.entities.appointment import Appointment
from ...domain.entities.bill import Bill
from ...domain.entities.claim import HMOClaim
from ...domain.entities.visit import Visit
from ...domain.enums.claims import ClaimDecision, ClaimStatus


@dataclass
class ProcessClaimRequest:
    """Request DTO for an HMO desk decision."""

    claim_id: str
    decision: ClaimDecision
    approver: Optional[str] = None
    approval_code: Optional[str] = None
    approved_item_ids: Optional[List[str]] = None
    rejection_reason: Optional[str] = None
    notes: Optional[str] = None


@dataclass
class ProcessClaimResponse:
    claim: HMOClaim
    bill: Bill
    visit: Optional[Visit] = None
    appointment: Optional[Appointment] = None


@dataclass
class WatchClaimsRequest:
    since: Optional[int] = None
    timeout: float = 5.0
    status: Optional[ClaimStatus] = None


@dataclass
class ClaimFeedResponse:
    """Claims as of ``revision``; ``changed`` is False when the wait timed out."""

    revision: int
    changed: bool
    claims: List[HMOClaim] = field(default_factory=list)
