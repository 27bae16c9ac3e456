"""
Date and time utility functions for HospitalFlow.
"""

from datetime import date, datetime
from typing import Optional, Union


def today() -> date:
    return datetime.utcnow().date()


def format_display_date(value: Optional[Union[date, datetime]] = None) -> str:
    """Short date used in visit notes, e.g. ``17/10/2026``."""
    value = value or datetime.utcnow()
    return value.strftime("%d/%m/%Y")

