# troop_manager/models/errors.py
from pydantic import BaseModel
from typing import List, Optional

class FieldError(BaseModel):
    """One field-level validation problem"""
    field: str
    message: str

class ErrorResponse(BaseModel):
    """Standard error response"""
    success: bool = False
    error: str
    details: Optional[List[FieldError]] = None
    stack: Optional[str] = None

class ValidationErrorResponse(BaseModel):
    """Validation error response"""
    success: bool = False
    error: str = "Validation error"
    details: List[FieldError]

# OpenAPI documentation of the error envelope shared by every API router
ERROR_RESPONSES = {
    400: {"model": ValidationErrorResponse, "description": "Validation error or bad request"},
    401: {"model": ErrorResponse, "description": "Missing, invalid or expired access token"},
    403: {"model": ErrorResponse, "description": "Insufficient permissions"},
    404: {"model": ErrorResponse, "description": "Record not found"},
    409: {"model": ErrorResponse, "description": "Duplicate entry"},
}
