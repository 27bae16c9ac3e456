"""HMO claim domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Optional

from ..enums.billing import ItemType
from ..enums.claims import ClaimStatus, SourceDepartment
from ..errors import InvalidTransitionError
from ..services import fees
from ..value_objects.money import ZERO, to_money


@dataclass
class ClaimItem:
    """Bill item under HMO review."""

    item_id: str
    description: str
    quantity: int = 1
    unit_price: Decimal = ZERO
    item_type: Optional[ItemType] = None
    approved: bool = False

    def __post_init__(self) -> None:
        self.unit_price = to_money(self.unit_price)


@dataclass
class HMOClaim:
    """HMO claim domain entity.

    A claim is linked to exactly one bill through ``source_id``.
    """

    claim_id: str
    patient_id: str
    patient_name: str
    hmo_provider: str
    source_department: SourceDepartment
    source_id: str
    items: List[ClaimItem] = field(default_factory=list)
    status: ClaimStatus = ClaimStatus.PENDING
    date: datetime = field(default_factory=datetime.utcnow)
    approval_code: Optional[str] = None
    rejection_reason: Optional[str] = None
    notes: Optional[str] = None
    processed_by: Optional[str] = None
    processed_date: Optional[datetime] = None
    version: int = 0
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def total(self) -> Decimal:
        return fees.subtotal(self.items)

    @property
    def approved_total(self) -> Decimal:
        return fees.subtotal(item for item in self.items if item.approved)

    def _require_pending(self, target: ClaimStatus) -> None:
        if self.status != ClaimStatus.PENDING:
            raise InvalidTransitionError("claim", self.claim_id, self.status.value, target.value)

    def approve(
        self,
        approver: str,
        approval_code: Optional[str] = None,
        item_ids: Optional[Iterable[str]] = None,
        notes: Optional[str] = None,
    ) -> None:
        self._require_pending(ClaimStatus.APPROVED)
        selected = None if item_ids is None else set(item_ids)
        for item in self.items:
            item.approved = selected is None or item.item_id in selected
        self.status = ClaimStatus.APPROVED
        self.approval_code = approval_code
        self._processed(approver, notes)

    def reject(self, approver: str, reason: str, notes: Optional[str] = None) -> None:
        self._require_pending(ClaimStatus.REJECTED)
        self.status = ClaimStatus.REJECTED
        self.rejection_reason = reason
        self._processed(approver, notes)

    def complete(self) -> None:
        if self.status != ClaimStatus.APPROVED:
            raise InvalidTransitionError(
                "claim", self.claim_id, self.status.value, ClaimStatus.COMPLETED.value
            )
        self.status = ClaimStatus.COMPLETED
        self.updated_at = datetime.utcnow()

    def _processed(self, approver: str, notes: Optional[str]) -> None:
        self.processed_by = approver
        self.processed_date = datetime.utcnow()
        self.updated_at = self.processed_date
        if notes:
            self.notes = notes
