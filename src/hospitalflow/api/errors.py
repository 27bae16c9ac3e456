from ..domain.errors import (
    DomainError,
    DuplicateClaimError,
    EntityNotFoundError,
    InvalidFieldError,
    MissingFieldError,
    StaleEntityError,
)


class APIError(Exception):
    def __init__(self, code: str, message: str, http_status: int = 400, details: dict = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.http_status = http_status
        self.details = details


class ValidationError(APIError):
    def __init__(self, message: str, details: dict = None):
        super().__init__("INVALID_INPUT", message, 422, details)


class NotFoundError(APIError):
    def __init__(self, message: str, details: dict = None):
        super().__init__("NOT_FOUND", message, 404, details)


class ConflictError(APIError):
    def __init__(self, message: str, details: dict = None):
        super().__init__("CONFLICT", message, 409, details)


def http_status_for(error: DomainError) -> int:
    """HTTP status a domain error is reported with."""
    if isinstance(error, EntityNotFoundError):
        return 404
    if isinstance(error, (StaleEntityError, DuplicateClaimError)):
        return 409
    if isinstance(error, (MissingFieldError, InvalidFieldError)):
        return 422
    return 400


def from_domain_error(error: DomainError) -> APIError:
    return APIError(
        code=error.error_code or "DOMAIN_ERROR",
        message=error.message,
        http_status=http_status_for(error),
        details=error.details,
    )
