"""Domain error codes for the portal."""

from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    API_ERROR = "API_ERROR"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    UNKNOWN_ROLE = "UNKNOWN_ROLE"


class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return self.message


class FormValidationError(DomainError):
    """Raised when a client-side form check fails."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.VALIDATION_FAILED, message=message)


class UnknownRoleError(DomainError):
    """Raised when the server reports a role the portal does not know."""

    def __init__(self, role: object) -> None:
        super().__init__(code=ErrorCode.UNKNOWN_ROLE, message="Unknown user role")
        self.role = role
