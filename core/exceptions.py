"""Custom exception classes for the application.

Routers and services raise these; the handlers in `core.error_handlers`
turn them into the uniform JSON error body.
"""

from typing import Optional, Any, Dict


class AppException(Exception):
    """Base exception class for all application exceptions.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status code to return.
        details: Optional additional error details.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(AppException):
    """Raised when a requested resource does not exist."""

    def __init__(self, resource: str, identifier: Any):
        """Initialize not found error.

        Args:
            resource: Type of resource (e.g., 'Client', 'DietPlan').
            identifier: ID or identifier that was not found.
        """
        message = f"{resource} with id '{identifier}' not found"
        super().__init__(message, status_code=404, details={"resource": resource, "id": identifier})


class ValidationError(AppException):
    """Raised when input validation fails outside of the request schema."""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, status_code=400, details=details)


class ConflictError(AppException):
    """Raised when a unique value (such as an e-mail) is already taken."""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, status_code=400, details=details)


class AuthenticationError(AppException):
    """Raised for missing, invalid or expired credentials."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, status_code=401)


class PermissionDeniedError(AppException):
    """Raised when a dietitian touches a record owned by someone else."""

    def __init__(self, resource: str, identifier: Any):
        message = f"You do not have access to {resource} '{identifier}'"
        super().__init__(message, status_code=403, details={"resource": resource, "id": identifier})


class DatabaseError(AppException):
    """Raised when database operations fail."""

    def __init__(self, message: str, operation: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        merged = dict(details or {})
        if operation:
            merged["operation"] = operation
        super().__init__(message, status_code=500, details=merged)


class ExternalServiceError(AppException):
    """Raised when a downstream service (Telegram, file storage) fails."""

    def __init__(self, service: str, message: str):
        super().__init__(message, status_code=502, details={"service": service})


class ConfigurationError(AppException):
    """Raised when a feature is used before it has been configured."""

    def __init__(self, message: str, config_key: Optional[str] = None):
        details = {"config_key": config_key} if config_key else {}
        super().__init__(message, status_code=400, details=details)
