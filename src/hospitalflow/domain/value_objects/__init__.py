"""
Value objects package for domain layer.
"""

from .care_location import CareLocation
from .fee_schedule import FeeSchedule
from .money import ZERO, to_money

__all__ = [
    "CareLocation",
    "FeeSchedule",
    "ZERO",
    "to_money",
]
