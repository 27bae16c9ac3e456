"""
Fee and discount calculator.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional, Protocol

from ..value_objects.fee_schedule import FeeSchedule
from ..value_objects.money import ZERO, Amount, to_money

STAFF_DISCOUNT_REASON = "Staff Discount"

PEDIATRICS = "pediatrics"
SPECIALIST_DEPARTMENTS = frozenset(
    {
        "cardiology",
        "orthopedics",
        "obstetrics & gynecology",
        "ophthalmology",
    }
)


class PricedItem(Protocol):
    quantity: int
    unit_price: Decimal


@dataclass(frozen=True)
class Pricing:
    """Outcome of pricing a subtotal for a patient."""

    total: Decimal
    discount: Optional[int] = None
    discount_reason: Optional[str] = None
    original_total: Optional[Decimal] = None


def subtotal(items: Iterable[PricedItem]) -> Decimal:
    """Sum of quantity x unit price over the items."""
    total = ZERO
    for item in items:
        total += Decimal(int(item.quantity)) * to_money(item.unit_price)
    return to_money(total)


def calculate_total(items: Iterable[PricedItem]) -> Decimal:
    return subtotal(items)


def consultation_fee(doctor_department: Optional[str], schedule: FeeSchedule) -> Decimal:
    department = (doctor_department or "").strip().lower()
    if department == PEDIATRICS:
        return schedule.pediatrics_fee
    if department in SPECIALIST_DEPARTMENTS:
        return schedule.specialist_fee
    return schedule.general_medicine_fee


def discounted(amount: Amount, percent: int) -> Decimal:
    """``amount * (100 - percent) / 100`` in exact decimal arithmetic."""
    if not 0 <= percent <= 100:
        raise ValueError("Discount percent must be between 0 and 100")
    return to_money(to_money(amount) * (100 - percent) / 100)


def final_total(amount: Amount, is_staff: bool, schedule: FeeSchedule) -> Pricing:
    base = to_money(amount)
    if not is_staff:
        return Pricing(total=base)
    return Pricing(
        total=discounted(base, schedule.staff_discount),
        discount=schedule.staff_discount,
        discount_reason=STAFF_DISCOUNT_REASON,
        original_total=base,
    )


def apply_staff_discount(bill, is_staff: bool, schedule: FeeSchedule) -> bool:
    """Record the staff discount on a bill once.

    Returns True when the bill changed. Non-staff patients and bills that
    already carry the staff discount are left alone.
    """
    if not is_staff or bill.discount_reason == STAFF_DISCOUNT_REASON:
        return False

    pricing = final_total(bill.subtotal, True, schedule)
    bill.discount = pricing.discount
    bill.discount_reason = pricing.discount_reason
    bill.original_total = pricing.original_total
    return True


def format_currency(amount: Amount, symbol: str = "₦") -> str:
    """Format as Naira with thousands separators, e.g. ``₦5,000``."""
    value = to_money(amount)
    if value == value.to_integral_value():
        return f"{symbol}{int(value):,}"
    return f"{symbol}{value:,.2f}"
