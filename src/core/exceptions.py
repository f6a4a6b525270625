"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"

    # Not found errors (404)
    USER_NOT_FOUND = "USER_NOT_FOUND"

    # Client errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    MALFORMED_REQUEST = "MALFORMED_REQUEST"
    UNSUPPORTED_ROUTE = "UNSUPPORTED_ROUTE"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    STORAGE_FAULT = "STORAGE_FAULT"

    # Gateway errors (504), raised client side only
    REQUEST_TIMEOUT = "REQUEST_TIMEOUT"


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


class UserNotFoundError(AppException):
    """No user record matched by primary key or by email."""

    def __init__(self, identifier: str) -> None:
        super().__init__(
            error_code=ErrorCode.USER_NOT_FOUND,
            message="User not found",
            status_code=404,
            details={"identifier": identifier},
        )


class StorageFaultError(AppException):
    """The backing store failed.

    The underlying cause is passed through in the message; this is an
    internal tool and the detail helps diagnose store outages.
    """

    def __init__(self, operation: str, cause: str) -> None:
        super().__init__(
            error_code=ErrorCode.STORAGE_FAULT,
            message=f"Could not {operation}: {cause}",
            status_code=500,
            details={"operation": operation},
        )


class MalformedRequestError(AppException):
    """Request payload could not be parsed or is missing required shape."""

    def __init__(self, message: str = "Invalid JSON in request body") -> None:
        super().__init__(
            error_code=ErrorCode.MALFORMED_REQUEST,
            message=message,
            status_code=400,
        )


class UnsupportedRouteError(AppException):
    """No handler is registered for the method and path."""

    def __init__(self, method: str, path: str) -> None:
        super().__init__(
            error_code=ErrorCode.UNSUPPORTED_ROUTE,
            message=f"Unsupported route: {method} {path}",
            status_code=400,
            details={"method": method, "path": path},
        )


class RequestTimeoutError(AppException):
    """A client round-trip exceeded its timeout."""

    def __init__(self, operation: str, timeout: float) -> None:
        super().__init__(
            error_code=ErrorCode.REQUEST_TIMEOUT,
            message=f"Timed out after {timeout:g}s during {operation}",
            status_code=504,
            details={"operation": operation, "timeout": timeout},
        )


class ProfileValidationError(AppException):
    """A profile edit was rejected before it reached the store."""

    def __init__(self, message: str, details: Any | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message=message,
            status_code=400,
            details=details,
        )
