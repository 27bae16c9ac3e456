"""Billing DTOs for API communication."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ...domain.entities.appointment import Appointment
from ...domain.entities.bill import Bill
from ...domain.entities.visit import Visit
from ...domain.enums.billing import PaymentMethod
from ...domain.value_objects.money import to_money


@dataclass
class ProcessPaymentRequest:
    """Request DTO for taking payment on a pending bill."""

    bill_id: str
    method: PaymentMethod
    reference: Optional[str] = None
    processed_by: Optional[str] = None


@dataclass
class PaymentResponse:
    bill: Bill
    patient_balance: Decimal
    visit: Optional[Visit] = None
    appointment: Optional[Appointment] = None


@dataclass
class DepositRequest:
    patient_id: str
    amount: Decimal
    method: PaymentMethod = PaymentMethod.CASH
    reference: Optional[str] = None
    received_by: Optional[str] = None

    def __post_init__(self) -> None:
        self.amount = to_money(self.amount)


@dataclass
class DepositResponse:
    bill: Bill
    patient_balance: Decimal
