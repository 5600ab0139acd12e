"""Custom exceptions and error codes."""

from dataclasses import asdict, dataclass
from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"

    # Not found errors (404)
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Conflict errors (409)
    EMAIL_ALREADY_REGISTERED = "EMAIL_ALREADY_REGISTERED"
    VERSION_CONFLICT = "VERSION_CONFLICT"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (5xx)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    CACHE_UNAVAILABLE = "CACHE_UNAVAILABLE"


@dataclass(frozen=True)
class FieldError:
    """A single invalid input field."""

    field: str
    message: str


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class AuthorizationError(AppException):
    """Authorization failed."""

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(
            error_code=ErrorCode.FORBIDDEN,
            message=message,
            status_code=403,
        )


class ProfileNotFoundError(AppException):
    """Profile not found."""

    def __init__(self, profile_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.PROFILE_NOT_FOUND,
            message=f"Profile not found: {profile_id}",
            status_code=404,
            details={"profile_id": profile_id},
        )


class ValidationError(AppException):
    """One or more input fields are malformed or out of range."""

    def __init__(self, errors: list[FieldError]) -> None:
        self.errors = list(errors)
        summary = "; ".join(f"{e.field}: {e.message}" for e in self.errors)
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message=f"Validation failed: {summary}" if summary else "Validation failed",
            status_code=400,
            details=[asdict(e) for e in self.errors],
        )

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationError":
        return cls([FieldError(field=field, message=message)])


class EmailAlreadyRegisteredError(AppException):
    """Email is already registered to another profile."""

    def __init__(self, email: str) -> None:
        super().__init__(
            error_code=ErrorCode.EMAIL_ALREADY_REGISTERED,
            message=f"Email already registered: {email}",
            status_code=409,
            details={"email": email},
        )


class VersionConflictError(AppException):
    """The profile was modified since the caller last read it."""

    def __init__(self, profile_id: str, expected_version: int | None = None) -> None:
        details: dict[str, Any] = {"profile_id": profile_id}
        if expected_version is not None:
            details["expected_version"] = expected_version
        super().__init__(
            error_code=ErrorCode.VERSION_CONFLICT,
            message=f"Profile {profile_id} was modified by another request",
            status_code=409,
            details=details,
        )


class StoreUnavailableError(AppException):
    """The primary store could not complete the operation."""

    def __init__(self, operation: str, reason: str) -> None:
        super().__init__(
            error_code=ErrorCode.STORE_UNAVAILABLE,
            message=f"Primary store operation '{operation}' failed",
            status_code=503,
            details={"operation": operation, "reason": reason},
        )


class CacheUnavailableError(AppException):
    """The cache backend could not complete the operation.

    Never surfaces to API callers; the read-through cache degrades to
    store-only behavior when it sees this.
    """

    def __init__(self, operation: str, reason: str) -> None:
        super().__init__(
            error_code=ErrorCode.CACHE_UNAVAILABLE,
            message=f"Cache operation '{operation}' failed: {reason}",
            status_code=500,
            details={"operation": operation, "reason": reason},
        )
