"""
Pydantic schemas for HMO desk endpoints.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ...domain.entities.claim import ClaimItem, HMOClaim
from ...domain.enums.billing import ItemType
from ...domain.enums.claims import ClaimDecision, ClaimStatus, SourceDepartment
from .common import as_amount


class ClaimItemSchema(BaseModel):
    item_id: str
    description: str
    quantity: int
    unit_price: float
    item_type: Optional[ItemType] = None
    approved: bool

    @classmethod
    def from_domain(cls, item: ClaimItem) -> "ClaimItemSchema":
        return cls(
            item_id=item.item_id,
            description=item.description,
            quantity=item.quantity,
            unit_price=as_amount(item.unit_price),
            item_type=item.item_type,
            approved=item.approved,
        )


class ClaimSchema(BaseModel):
    claim_id: str
    patient_id: str
    patient_name: str
    hmo_provider: str
    source_department: SourceDepartment
    source_id: str
    status: ClaimStatus
    items: List[ClaimItemSchema]
    total: float
    approved_total: float
    approval_code: Optional[str] = None
    rejection_reason: Optional[str] = None
    notes: Optional[str] = None
    processed_by: Optional[str] = None
    processed_date: Optional[datetime] = None
    date: datetime
    version: int

    @classmethod
    def from_domain(cls, claim: HMOClaim) -> "ClaimSchema":
        return cls(
            claim_id=claim.claim_id,
            patient_id=claim.patient_id,
            patient_name=claim.patient_name,
            hmo_provider=claim.hmo_provider,
            source_department=claim.source_department,
            source_id=claim.source_id,
            status=claim.status,
            items=[ClaimItemSchema.from_domain(item) for item in claim.items],
            total=as_amount(claim.total),
            approved_total=as_amount(claim.approved_total),
            approval_code=claim.approval_code,
            rejection_reason=claim.rejection_reason,
            notes=claim.notes,
            processed_by=claim.processed_by,
            processed_date=claim.processed_date,
            date=claim.date,
            version=claim.version,
        )


class ProcessClaimRequest(BaseModel):
    """HMO desk decision on a pending claim."""

    decision: ClaimDecision
    approver: Optional[str] = Field(None, description="Defaults to the configured desk name")
    approval_code: Optional[str] = None
    approved_item_ids: Optional[List[str]] = Field(
        None, description="Items to approve; all items when omitted"
    )
    rejection_reason: Optional[str] = Field(None, description="Required when rejecting")
    notes: Optional[str] = None


class ClaimFeedSchema(BaseModel):
    revision: int = Field(..., description="Pass back as 'since' on the next poll")
    changed: bool
    claims: List[ClaimSchema] = Field(default_factory=list)
