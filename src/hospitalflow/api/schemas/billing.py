"""
Pydantic schemas for billing endpoints.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from ...domain.entities.bill import Bill, BillItem
from ...domain.enums.billing import (
    BillDestination,
    BillStatus,
    BillType,
    ItemType,
    PaymentMethod,
)
from ...domain.enums.claims import SourceDepartment
from .common import as_amount


class BillItemInput(BaseModel):
    description: str = Field(..., min_length=1, description="Line item description")
    quantity: int = Field(1, ge=1, description="Quantity")
    unit_price: Decimal = Field(..., ge=0, description="Unit price in Naira")
    item_type: Optional[ItemType] = Field(None, description="Kind of item")

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Description cannot be empty")
        return v.strip()

    def to_domain(self) -> BillItem:
        return BillItem(
            description=self.description,
            quantity=self.quantity,
            unit_price=self.unit_price,
            item_type=self.item_type,
        )


class BillItemSchema(BaseModel):
    item_id: str
    description: str
    quantity: int
    unit_price: float
    amount: float
    item_type: Optional[ItemType] = None

    @classmethod
    def from_domain(cls, item: BillItem) -> "BillItemSchema":
        return cls(
            item_id=item.item_id,
            description=item.description,
            quantity=item.quantity,
            unit_price=as_amount(item.unit_price),
            amount=as_amount(item.amount),
            item_type=item.item_type,
        )


class BillSchema(BaseModel):
    """Bill as shown at the cash point."""

    bill_id: str
    patient_id: str
    patient_name: str
    bill_type: BillType
    status: BillStatus
    items: List[BillItemSchema]
    subtotal: float
    total: float
    discount: Optional[int] = None
    discount_reason: Optional[str] = None
    original_total: Optional[float] = None
    destination: Optional[BillDestination] = None
    payment_method: Optional[PaymentMethod] = None
    payment_reference: Optional[str] = None
    payment_date: Optional[datetime] = None
    processed_by: Optional[str] = None
    visit_id: Optional[str] = None
    appointment_id: Optional[str] = None
    source_department: Optional[SourceDepartment] = None
    notes: str = ""
    date: datetime
    version: int

    @classmethod
    def from_domain(cls, bill: Bill) -> "BillSchema":
        return cls(
            bill_id=bill.bill_id,
            patient_id=bill.patient_id,
            patient_name=bill.patient_name,
            bill_type=bill.bill_type,
            status=bill.status,
            items=[BillItemSchema.from_domain(item) for item in bill.items],
            subtotal=as_amount(bill.subtotal),
            total=as_amount(bill.total),
            discount=bill.discount,
            discount_reason=bill.discount_reason,
            original_total=as_amount(bill.original_total),
            destination=bill.destination,
            payment_method=bill.payment_method,
            payment_reference=bill.payment_reference,
            payment_date=bill.payment_date,
            processed_by=bill.processed_by,
            visit_id=bill.visit_id,
            appointment_id=bill.appointment_id,
            source_department=bill.source_department,
            notes=bill.notes,
            date=bill.date,
            version=bill.version,
        )


class PaymentRequest(BaseModel):
    method: PaymentMethod = Field(..., description="cash, card, transfer or balance")
    reference: Optional[str] = Field(None, description="Card or transfer reference")
    processed_by: Optional[str] = Field(None, description="Cashier name")


class DepositRequest(BaseModel):
    amount: Decimal = Field(..., gt=0, description="Deposit amount in Naira")
    method: PaymentMethod = Field(PaymentMethod.CASH, description="How the deposit was paid")
    reference: Optional[str] = None
    received_by: Optional[str] = None


class DepositResponse(BaseModel):
    bill: BillSchema
    patient_balance: float


class CalculateTotalRequest(BaseModel):
    items: List[BillItemInput] = Field(..., min_length=1)
    is_staff: bool = Field(False, description="Apply the staff discount")


class CalculateTotalResponse(BaseModel):
    subtotal: float
    total: float
    discount: Optional[int] = None
    discount_reason: Optional[str] = None
    formatted_total: str
