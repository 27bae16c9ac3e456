"""
Utility functions for HospitalFlow.
"""

from .datetime_utils import format_display_date, today
from .reference_utils import generate_reference

__all__ = [
    "format_display_date",
    "generate_reference",
    "today",
]
