"""
Custom exception classes for PasteIt.

This module defines a hierarchy of custom exceptions that map to HTTP status codes
and provide consistent error responses across the API.

Exception hierarchy:
    AppException (base)
    ├── AuthenticationError (401)
    │   ├── InvalidCredentialsError
    │   ├── InvalidPasswordError
    │   ├── AccountDisabledError
    │   ├── LoginRequiredError
    │   └── InvalidTokenError
    ├── AuthorizationError (403)
    │   └── NotAuthorizedError
    ├── ResourceError
    │   ├── NotFoundError (404)
    │   │   └── PasteNotFoundOrExpiredError
    │   ├── AlreadyExistsError (409)
    │   │   ├── DuplicateUsernameError
    │   │   └── DuplicateEmailError
    │   └── ConflictError (409)
    │       └── ShortIdCollisionError
    ├── ValidationError (400)
    │   ├── InvalidInputError
    │   ├── EmptyContentError
    │   └── ImmutableFieldError
    └── StoreUnavailableError (503)
"""

from typing import Any


class AppException(Exception):
    """
    Base exception class for all application exceptions.

    Attributes:
        status_code: HTTP status code for the error
        error_code: Machine-readable error code
        message: Human-readable error message
        details: Optional additional error details
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = "INTERNAL_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for JSON response.

        Returns:
            Dictionary with error information
        """
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details,
            }
        }


# =============================================================================
# Authentication Errors (401 Unauthorized)
# =============================================================================


class AuthenticationError(AppException):
    """Base class for authentication errors."""

    def __init__(
        self,
        message: str = "Authentication failed",
        error_code: str = "AUTHENTICATION_FAILED",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=401,
            error_code=error_code,
            details=details,
        )


class InvalidCredentialsError(AuthenticationError):
    """
    Raised when login credentials are invalid.

    Unknown email and wrong password share this error and its message.
    """

    def __init__(
        self,
        message: str = "Invalid email or password",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code="INVALID_CREDENTIALS",
            details=details,
        )


class InvalidPasswordError(AuthenticationError):
    """Raised when the password supplied for a protected paste does not match."""

    def __init__(
        self,
        message: str = "Invalid password",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code="INVALID_PASSWORD",
            details=details,
        )


class AccountDisabledError(AuthenticationError):
    """Raised when a disabled account attempts to log in."""

    def __init__(
        self,
        message: str = "Account is disabled",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code="ACCOUNT_DISABLED",
            details=details,
        )


class LoginRequiredError(AuthenticationError):
    """Raised when an operation needs an authenticated account."""

    def __init__(
        self,
        message: str = "Login required",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code="LOGIN_REQUIRED",
            details=details,
        )


class LoginRequiredForPrivateError(LoginRequiredError):
    """Raised when a private paste would have no owner."""

    def __init__(
        self,
        message: str = "User must be logged in to create private pastes",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, details=details)


class InvalidTokenError(AuthenticationError):
    """Raised when a session token is invalid, expired or malformed."""

    def __init__(
        self,
        message: str = "Invalid or expired token",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code="INVALID_TOKEN",
            details=details,
        )


# =============================================================================
# Authorization Errors (403 Forbidden)
# =============================================================================


class AuthorizationError(AppException):
    """Base class for authorization errors."""

    def __init__(
        self,
        message: str = "Access denied",
        error_code: str = "ACCESS_DENIED",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=403,
            error_code=error_code,
            details=details,
        )


class NotAuthorizedError(AuthorizationError):
    """Raised when an authenticated account lacks rights on a resource."""

    def __init__(
        self,
        message: str = "Not authorized to perform this action",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code="NOT_AUTHORIZED",
            details=details,
        )


# =============================================================================
# Resource Errors
# =============================================================================


class ResourceError(AppException):
    """Base class for resource-related errors."""

    def __init__(
        self,
        message: str,
        status_code: int,
        error_code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=status_code,
            error_code=error_code,
            details=details,
        )


class NotFoundError(ResourceError):
    """Raised when a requested resource is not found."""

    def __init__(
        self,
        resource: str = "Resource",
        message: str | None = None,
        error_code: str = "NOT_FOUND",
        details: dict[str, Any] | None = None,
    ) -> None:
        if message is None:
            message = f"{resource} not found"
        super().__init__(
            message=message,
            status_code=404,
            error_code=error_code,
            details=details,
        )


class PasteNotFoundOrExpiredError(NotFoundError):
    """Raised when a paste is absent, soft-deleted or past its expiry."""

    def __init__(self, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message="Paste not found or has expired",
            error_code="PASTE_NOT_FOUND_OR_EXPIRED",
            details=details,
        )


class AlreadyExistsError(ResourceError):
    """Raised when attempting to create a resource that already exists."""

    def __init__(
        self,
        resource: str = "Resource",
        message: str | None = None,
        error_code: str = "ALREADY_EXISTS",
        details: dict[str, Any] | None = None,
    ) -> None:
        if message is None:
            message = f"{resource} already exists"
        super().__init__(
            message=message,
            status_code=409,
            error_code=error_code,
            details=details,
        )


class DuplicateUsernameError(AlreadyExistsError):
    """Raised when a username is already taken."""

    def __init__(self, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message="Username already exists",
            error_code="DUPLICATE_USERNAME",
            details=details,
        )


class DuplicateEmailError(AlreadyExistsError):
    """Raised when an email is already registered."""

    def __init__(self, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message="Email already exists",
            error_code="DUPLICATE_EMAIL",
            details=details,
        )


class ConflictError(ResourceError):
    """Raised when there's a conflict with the current state of the resource."""

    def __init__(
        self,
        message: str = "Resource conflict",
        error_code: str = "CONFLICT",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=409,
            error_code=error_code,
            details=details,
        )


class ShortIdCollisionError(ConflictError):
    """
    Raised when a generated short ID is already in use.

    Retryable: the caller may call create() again to draw a new ID.
    """

    def __init__(self, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message="Generated short ID already exists, retry the request",
            error_code="SHORT_ID_COLLISION",
            details=details,
        )


# =============================================================================
# Validation Errors (400 Bad Request)
# =============================================================================


class ValidationError(AppException):
    """Base class for validation errors raised by the services."""

    def __init__(
        self,
        message: str = "Validation failed",
        error_code: str = "VALIDATION_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=400,
            error_code=error_code,
            details=details,
        )


class InvalidInputError(ValidationError):
    """Raised when input data is invalid."""

    def __init__(
        self,
        field: str | None = None,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        if message is None and field:
            message = f"Invalid input for field: {field}"
        elif message is None:
            message = "Invalid input"

        super().__init__(
            message=message,
            error_code="INVALID_INPUT",
            details=details,
        )


class EmptyContentError(ValidationError):
    """Raised when a paste has no content."""

    def __init__(
        self,
        message: str = "Paste content is required",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code="EMPTY_CONTENT",
            details=details,
        )


class ImmutableFieldError(ValidationError):
    """Raised when an account update touches a field that cannot be changed."""

    def __init__(self, fields: list[str]) -> None:
        super().__init__(
            message=f"Fields cannot be updated: {', '.join(sorted(fields))}",
            error_code="IMMUTABLE_FIELD",
            details={"fields": sorted(fields)},
        )


# =============================================================================
# Store Errors (503 Service Unavailable)
# =============================================================================


class StoreUnavailableError(AppException):
    """Raised when the database cannot be reached. Retrying later may succeed."""

    def __init__(
        self,
        message: str = "Storage is temporarily unavailable",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=503,
            error_code="STORE_UNAVAILABLE",
            details=details,
        )
