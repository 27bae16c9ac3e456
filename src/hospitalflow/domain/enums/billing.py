"""
Bill enums.
"""

from enum import Enum


class BillStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    CANCELLED = "cancelled"
    HMO_PENDING = "hmo_pending"
    BILLED = "billed"
    DISPENSED = "dispensed"


class BillType(str, Enum):
    CONSULTATION = "consultation"
    PHARMACY = "pharmacy"
    LABORATORY = "laboratory"
    INJECTION = "injection"
    VACCINATION = "vaccination"
    DEPOSIT = "deposit"
    OTHER = "other"


class PaymentMethod(str, Enum):
    CASH = "cash"
    CARD = "card"
    TRANSFER = "transfer"
    HMO = "hmo"
    BALANCE = "balance"


class BillDestination(str, Enum):
    """Next stop for a paid pharmacy or vaccination bill."""
    INJECTION = "injection"
    FINAL = "final"


class ItemType(str, Enum):
    CONSULTATION = "consultation"
    MEDICATION = "medication"
    LAB = "lab"
    INJECTION = "injection"
    VACCINE = "vaccine"
    DEPOSIT = "deposit"
