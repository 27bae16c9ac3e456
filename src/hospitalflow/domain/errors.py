"""
Domain-specific error types for business rule violations.
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base domain error."""

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


class EntityNotFoundError(DomainError):
    """Base class for lookups that found nothing."""


class PatientNotFoundError(EntityNotFoundError):
    """Patient not found."""

    def __init__(self, patient_id: str) -> None:
        message = f"Patient with ID '{patient_id}' not found"
        super().__init__(message, "PATIENT_NOT_FOUND", {"patient_id": patient_id})


class VisitNotFoundError(EntityNotFoundError):
    """Patient has no visit to act on."""

    def __init__(self, patient_id: str, visit_id: Optional[str] = None) -> None:
        if visit_id:
            message = f"Visit '{visit_id}' not found for patient '{patient_id}'"
        else:
            message = f"Patient '{patient_id}' has no visits"
        super().__init__(
            message, "VISIT_NOT_FOUND", {"patient_id": patient_id, "visit_id": visit_id}
        )


class AppointmentNotFoundError(EntityNotFoundError):
    """Appointment not found."""

    def __init__(self, appointment_id: str) -> None:
        message = f"Appointment with ID '{appointment_id}' not found"
        super().__init__(
            message, "APPOINTMENT_NOT_FOUND", {"appointment_id": appointment_id}
        )


class BillNotFoundError(EntityNotFoundError):
    """Bill not found."""

    def __init__(self, bill_id: str) -> None:
        message = f"Bill with ID '{bill_id}' not found"
        super().__init__(message, "BILL_NOT_FOUND", {"bill_id": bill_id})


class ClaimNotFoundError(EntityNotFoundError):
    """HMO claim not found."""

    def __init__(self, claim_id: str) -> None:
        message = f"HMO claim with ID '{claim_id}' not found"
        super().__init__(message, "CLAIM_NOT_FOUND", {"claim_id": claim_id})


class StaffNotFoundError(EntityNotFoundError):
    """Staff member not found."""

    def __init__(self, staff_id: str) -> None:
        message = f"Staff member with ID '{staff_id}' not found"
        super().__init__(message, "STAFF_NOT_FOUND", {"staff_id": staff_id})


class MissingFieldError(DomainError):
    """A required input was absent or blank."""

    def __init__(self, field: str, context: Optional[str] = None) -> None:
        message = f"'{field}' is required"
        if context:
            message = f"{message} {context}"
        super().__init__(message, "MISSING_FIELD", {"field": field})


class InvalidFieldError(DomainError):
    """An input was present but not acceptable."""

    def __init__(self, field: str, value: Any, reason: str) -> None:
        message = f"Invalid value for '{field}': {reason}"
        super().__init__(
            message, "INVALID_FIELD", {"field": field, "value": str(value)}
        )


class InvalidTransitionError(DomainError):
    """A status change that the lifecycle does not allow."""

    def __init__(self, entity: str, entity_id: str, current: str, target: str) -> None:
        message = f"Cannot move {entity} '{entity_id}' from '{current}' to '{target}'"
        super().__init__(
            message,
            "INVALID_TRANSITION",
            {"entity": entity, "entity_id": entity_id, "current": current, "target": target},
        )


class InvalidPathwayStateError(DomainError):
    """The patient is not at the department the action belongs to."""

    def __init__(self, patient_id: str, current: str, expected: list) -> None:
        expected_names = ", ".join(expected)
        message = (
            f"Patient '{patient_id}' is at '{current}'; "
            f"this action requires one of: {expected_names}"
        )
        super().__init__(
            message,
            "INVALID_PATHWAY_STATE",
            {"patient_id": patient_id, "current": current, "expected": expected},
        )


class CancellationNotAllowedError(DomainError):
    """Consultation has progressed past the point where it can be cancelled."""

    def __init__(self, appointment_id: str, department: str) -> None:
        message = (
            f"Appointment '{appointment_id}' cannot be cancelled while the patient "
            f"is at '{department}'"
        )
        super().__init__(
            message,
            "CANCELLATION_NOT_ALLOWED",
            {"appointment_id": appointment_id, "department": department},
        )


class InsufficientBalanceError(DomainError):
    """Patient deposit balance does not cover the bill."""

    def __init__(self, patient_id: str, balance: Any, required: Any) -> None:
        message = (
            f"Insufficient balance for patient '{patient_id}'. "
            f"Available: {balance}, required: {required}"
        )
        super().__init__(
            message,
            "INSUFFICIENT_BALANCE",
            {"patient_id": patient_id, "balance": str(balance), "required": str(required)},
        )


class IneligibleVaccineDoseError(DomainError):
    """Requested dose does not follow the patient's dose history."""

    def __init__(self, patient_id: str, vaccine: str, requested: int, expected: int) -> None:
        message = (
            f"Patient '{patient_id}' is not eligible for dose {requested} of {vaccine}; "
            f"next eligible dose is {expected}"
        )
        super().__init__(
            message,
            "INELIGIBLE_VACCINE_DOSE",
            {
                "patient_id": patient_id,
                "vaccine": vaccine,
                "requested_dose": requested,
                "expected_dose": expected,
            },
        )


class DuplicateDoctorChangeError(DomainError):
    """Doctor change that would not change the doctor."""

    def __init__(self, appointment_id: str, doctor_id: str) -> None:
        message = f"Appointment '{appointment_id}' is already assigned to doctor '{doctor_id}'"
        super().__init__(
            message,
            "DUPLICATE_DOCTOR_CHANGE",
            {"appointment_id": appointment_id, "doctor_id": doctor_id},
        )


class DoctorChangeNotAllowedError(DomainError):
    """Consultation is too far along to reassign."""

    def __init__(self, appointment_id: str) -> None:
        message = f"Doctor can no longer be changed for appointment '{appointment_id}'"
        super().__init__(
            message, "DOCTOR_CHANGE_NOT_ALLOWED", {"appointment_id": appointment_id}
        )


class DuplicateClaimError(DomainError):
    """A bill already has an HMO claim."""

    def __init__(self, bill_id: str, claim_id: str) -> None:
        message = f"Bill '{bill_id}' already has HMO claim '{claim_id}'"
        super().__init__(
            message, "DUPLICATE_CLAIM", {"bill_id": bill_id, "claim_id": claim_id}
        )


class StaleEntityError(DomainError):
    """Optimistic version check failed on update."""

    def __init__(self, entity: str, entity_id: str, expected: int, actual: int) -> None:
        message = (
            f"{entity} '{entity_id}' was modified concurrently "
            f"(expected version {expected}, found {actual})"
        )
        super().__init__(
            message,
            "STALE_ENTITY",
            {
                "entity": entity,
                "entity_id": entity_id,
                "expected_version": expected,
                "actual_version": actual,
            },
        )


class PaymentRequiredError(DomainError):
    """Service requested before its bill was settled."""

    def __init__(self, bill_id: str, status: str) -> None:
        message = f"Bill '{bill_id}' must be paid before this service (current status: {status})"
        super().__init__(message, "PAYMENT_REQUIRED", {"bill_id": bill_id, "status": status})
