# troop_manager/core/exceptions.py
"""
Application exception hierarchy.
Services raise these; the handlers in core.error_handlers turn them into the
{success: false, error, details?} envelope with the matching HTTP status.
"""

from typing import Any, Dict, List, Optional


class AppException(Exception):
    """Base exception class for application errors"""

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"
    default_message: str = "Internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[List[Dict[str, Any]]] = None,
    ):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to the response envelope"""
        body: Dict[str, Any] = {"success": False, "error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class BadRequestError(AppException):
    """Missing or malformed input"""
    status_code = 400
    error_code = "BAD_REQUEST"
    default_message = "Bad request"


class ValidationError(AppException):
    """Schema violation, carries a field-level detail list"""
    status_code = 400
    error_code = "VALIDATION_ERROR"
    default_message = "Validation error"


class InvalidCredentialsError(AppException):
    status_code = 401
    error_code = "INVALID_CREDENTIALS"
    default_message = "Invalid credentials"


class UnauthorizedError(AppException):
    """Missing, invalid or expired bearer token"""
    status_code = 401
    error_code = "UNAUTHORIZED"
    default_message = "Authentication required"


class InvalidTokenError(AppException):
    """Token signature invalid or token malformed"""
    status_code = 401
    error_code = "INVALID_TOKEN"
    default_message = "Invalid token"


class TokenExpiredError(InvalidTokenError):
    error_code = "TOKEN_EXPIRED"
    default_message = "Token expired"


class ForbiddenError(AppException):
    status_code = 403
    error_code = "FORBIDDEN"
    default_message = "Insufficient permissions"


class NotFoundError(AppException):
    status_code = 404
    error_code = "NOT_FOUND"
    default_message = "Record not found"


class ConflictError(AppException):
    """Duplicate value for a unique field"""
    status_code = 409
    error_code = "CONFLICT"
    default_message = "Duplicate entry. This record already exists."


class InternalError(AppException):
    """Unexpected failure; the message never exposes internals"""
    status_code = 500
    error_code = "INTERNAL_ERROR"
    default_message = "Internal server error"
