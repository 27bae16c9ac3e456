"""Bill domain entity and its line items."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import uuid4

from ..enums.billing import BillDestination, BillStatus, BillType, ItemType, PaymentMethod
from ..enums.claims import SourceDepartment
from ..errors import InvalidFieldError, InvalidTransitionError, MissingFieldError
from ..services import fees
from ..value_objects.money import ZERO, to_money


def _item_id() -> str:
    return f"ITEM-{uuid4().hex[:8].upper()}"


@dataclass
class BillItem:
    description: str
    quantity: int = 1
    unit_price: Decimal = ZERO
    item_type: Optional[ItemType] = None
    item_id: str = field(default_factory=_item_id)

    def __post_init__(self) -> None:
        if not self.description or not self.description.strip():
            raise MissingFieldError("description", "for bill items")
        if int(self.quantity) < 1:
            raise InvalidFieldError("quantity", self.quantity, "must be at least 1")
        self.quantity = int(self.quantity)
        self.unit_price = to_money(self.unit_price)
        if self.unit_price < 0:
            raise InvalidFieldError("unit_price", self.unit_price, "cannot be negative")

    @property
    def amount(self) -> Decimal:
        return to_money(self.unit_price * self.quantity)


@dataclass
class Bill:
    """Bill domain entity."""

    bill_id: str
    patient_id: str
    patient_name: str
    bill_type: BillType
    items: List[BillItem] = field(default_factory=list)
    status: BillStatus = BillStatus.PENDING
    date: datetime = field(default_factory=datetime.utcnow)
    destination: Optional[BillDestination] = None
    payment_method: Optional[PaymentMethod] = None
    payment_reference: Optional[str] = None
    payment_date: Optional[datetime] = None
    processed_by: Optional[str] = None
    discount: Optional[int] = None
    discount_reason: Optional[str] = None
    original_total: Optional[Decimal] = None
    visit_id: Optional[str] = None
    appointment_id: Optional[str] = None
    source_department: Optional[SourceDepartment] = None
    notes: str = ""
    version: int = 0
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def subtotal(self) -> Decimal:
        return fees.subtotal(self.items)

    @property
    def total(self) -> Decimal:
        if self.discount:
            return fees.discounted(self.subtotal, self.discount)
        return self.subtotal

    @property
    def is_settled(self) -> bool:
        return self.status in (BillStatus.PAID, BillStatus.DISPENSED)

    def mark_paid(
        self,
        method: PaymentMethod,
        reference: Optional[str],
        processed_by: Optional[str],
    ) -> None:
        if self.status not in (BillStatus.PENDING, BillStatus.HMO_PENDING, BillStatus.BILLED):
            raise InvalidTransitionError("bill", self.bill_id, self.status.value, BillStatus.PAID.value)
        self.status = BillStatus.PAID
        self.payment_method = method
        self.payment_reference = reference
        self.payment_date = datetime.utcnow()
        self.processed_by = processed_by
        self.updated_at = self.payment_date

    def mark_dispensed(self) -> None:
        if self.status != BillStatus.PAID:
            raise InvalidTransitionError(
                "bill", self.bill_id, self.status.value, BillStatus.DISPENSED.value
            )
        self.status = BillStatus.DISPENSED
        self.updated_at = datetime.utcnow()

    def cancel(self, note: Optional[str] = None) -> None:
        if self.status in (BillStatus.CANCELLED, BillStatus.DISPENSED):
            raise InvalidTransitionError(
                "bill", self.bill_id, self.status.value, BillStatus.CANCELLED.value
            )
        self.status = BillStatus.CANCELLED
        if note:
            self.append_note(note)
        self.updated_at = datetime.utcnow()

    def replace_item_price(self, item_id: str, unit_price) -> None:
        for item in self.items:
            if item.item_id == item_id:
                item.unit_price = to_money(unit_price)
                self.updated_at = datetime.utcnow()
                return
        raise InvalidFieldError("item_id", item_id, "not on this bill")

    def append_note(self, line: str) -> None:
        self.notes = f"{self.notes}\n{line}" if self.notes else line
