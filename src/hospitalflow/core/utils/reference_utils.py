"""
Payment reference generation.
"""

import secrets
import string

_ALPHABET = string.ascii_uppercase + string.digits


def generate_reference(prefix: str, length: int = 6) -> str:
    """Random reference such as ``CASH-4F7K2Q``."""
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(length))
    return f"{prefix}-{suffix}"
