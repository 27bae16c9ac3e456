"""
Exception handling for HospitalFlow infrastructure.

Business rule violations live in ``hospitalflow.domain.errors``; the classes
here cover storage failures that are not the caller's fault.
"""

from typing import Any, Dict, Optional


class HospitalFlowException(Exception):
    """Base exception class for HospitalFlow infrastructure errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class StoreError(HospitalFlowException):
    """Raised when the store cannot carry out an operation."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, "STORE_ERROR", details)
