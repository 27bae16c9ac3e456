"""
Hospital fee schedule value object.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from .money import to_money


@dataclass(frozen=True)
class FeeSchedule:
    """Consultation fees and the staff discount percentage."""

    general_medicine_fee: Decimal = field(default_factory=lambda: to_money(5000))
    pediatrics_fee: Decimal = field(default_factory=lambda: to_money(7500))
    specialist_fee: Decimal = field(default_factory=lambda: to_money(10000))
    staff_discount: int = 20

    def __post_init__(self) -> None:
        for name in ("general_medicine_fee", "pediatrics_fee", "specialist_fee"):
            value = to_money(getattr(self, name))
            if value < 0:
                raise ValueError(f"{name} cannot be negative")
            object.__setattr__(self, name, value)

        if not 0 <= int(self.staff_discount) <= 100:
            raise ValueError("staff_discount must be between 0 and 100")
        object.__setattr__(self, "staff_discount", int(self.staff_discount))
