"""
Fee and discount tests.
"""

from decimal import Decimal

import pytest

from hospitalflow.domain.entities.bill import Bill, BillItem
from hospitalflow.domain.enums.billing import BillType
from hospitalflow.domain.errors import InvalidFieldError
from hospitalflow.domain.services import fees
from hospitalflow.domain.value_objects.fee_schedule import FeeSchedule
from hospitalflow.domain.value_objects.money import to_money


@pytest.mark.parametrize(
    "department,expected",
    [
        ("General Medicine", 5000),
        (None, 5000),
        ("Pediatrics", 7500),
        ("pediatrics", 7500),
        ("Cardiology", 10000),
        ("Orthopedics", 10000),
        ("Obstetrics & Gynecology", 10000),
        ("Ophthalmology", 10000),
        ("Dermatology", 5000),
    ],
)
def test_consultation_fee_by_department(department, expected):
    assert fees.consultation_fee(department, FeeSchedule()) == to_money(expected)


def test_subtotal_multiplies_quantity():
    items = [
        BillItem(description="Paracetamol", quantity=2, unit_price=500),
        BillItem(description="Amoxicillin", quantity=1, unit_price="1250.50"),
    ]
    assert fees.calculate_total(items) == Decimal("2250.50")


def test_staff_discount_is_exact():
    pricing = fees.final_total(5000, True, FeeSchedule())
    assert pricing.total == Decimal("4000.00")
    assert pricing.discount == 20
    assert pricing.discount_reason == fees.STAFF_DISCOUNT_REASON
    assert pricing.original_total == Decimal("5000.00")


def test_no_discount_for_non_staff():
    pricing = fees.final_total(5000, False, FeeSchedule())
    assert pricing.total == Decimal("5000.00")
    assert pricing.discount is None


def test_discount_rounds_to_kobo():
    assert fees.discounted(Decimal("333.33"), 20) == Decimal("266.66")


def test_discount_percent_is_bounded():
    with pytest.raises(ValueError):
        fees.discounted(100, 120)


def test_apply_staff_discount_only_once():
    bill = Bill(
        bill_id="BILL-1",
        patient_id="P-1",
        patient_name="Nurse Johnson",
        bill_type=BillType.CONSULTATION,
        items=[BillItem(description="Consultation", unit_price=5000)],
    )
    schedule = FeeSchedule()
    assert fees.apply_staff_discount(bill, True, schedule) is True
    assert fees.apply_staff_discount(bill, True, schedule) is False
    assert bill.total == Decimal("4000.00")
    assert bill.original_total == Decimal("5000.00")


def test_floats_are_refused():
    with pytest.raises(TypeError):
        to_money(10.5)


def test_bill_item_validation():
    with pytest.raises(InvalidFieldError):
        BillItem(description="Paracetamol", quantity=0, unit_price=100)
    with pytest.raises(InvalidFieldError):
        BillItem(description="Paracetamol", quantity=1, unit_price=-1)


def test_fee_schedule_rejects_bad_values():
    with pytest.raises(ValueError):
        FeeSchedule(staff_discount=101)
    with pytest.raises(ValueError):
        FeeSchedule(general_medicine_fee=-5)


@pytest.mark.parametrize(
    "value,expected",
    [(5000, "₦5,000"), (Decimal("1250.50"), "₦1,250.50"), (0, "₦0")],
)
def test_format_currency(value, expected):
    assert fees.format_currency(value) == expected
