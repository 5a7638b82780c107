"""
Custom Exception Classes for Site Widgets

This module defines custom exceptions for better error handling and
consistent error responses across the application.
"""

from enum import Enum
from typing import Any

from fastapi import status


class ErrorCode(str, Enum):
    """Machine-readable error codes returned alongside every error response."""

    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"

    AUTH_FAILED = "AUTH_FAILED"
    AUTH_PERMISSION_DENIED = "AUTH_PERMISSION_DENIED"

    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    CONTENT_TYPE_NOT_AVAILABLE = "RESOURCE_CONTENT_TYPE_NOT_AVAILABLE"
    BLOCK_NOT_FOUND = "RESOURCE_BLOCK_NOT_FOUND"
    FILE_NOT_FOUND = "RESOURCE_FILE_NOT_FOUND"

    VALIDATION_FAILED = "VALIDATION_FAILED"
    VALIDATION_DUPLICATE_RESOURCE = "VALIDATION_DUPLICATE_RESOURCE"
    INVALID_OPERATION = "INVALID_OPERATION"

    ASSET_PROMOTION_FAILED = "ASSET_PROMOTION_FAILED"
    DATABASE_ERROR = "DATABASE_ERROR"


class SiteWidgetsError(Exception):
    """Base exception class for all Site Widgets exceptions"""

    error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: dict[str, Any] | None = None,
        error_code: ErrorCode | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        if error_code is not None:
            self.error_code = error_code
        super().__init__(self.message)


# ============================================================================
# Authentication & Authorization Exceptions
# ============================================================================


class AuthenticationError(SiteWidgetsError):
    """Raised when authentication fails"""

    error_code = ErrorCode.AUTH_FAILED

    def __init__(self, message: str = "Authentication failed", details: dict[str, Any] | None = None):
        super().__init__(message=message, status_code=status.HTTP_401_UNAUTHORIZED, details=details or {})


class AuthorizationError(SiteWidgetsError):
    """Raised when the caller lacks the role required for an action"""

    error_code = ErrorCode.AUTH_PERMISSION_DENIED

    def __init__(self, message: str = "You do not have permission to perform this action", required_role: str | None = None):
        details = {"required_role": required_role} if required_role else {}
        super().__init__(message=message, status_code=status.HTTP_403_FORBIDDEN, details=details)


# ============================================================================
# Resource Not Found Exceptions
# ============================================================================


class ResourceNotFoundError(SiteWidgetsError):
    """Base class for resource not found errors"""

    error_code = ErrorCode.RESOURCE_NOT_FOUND

    def __init__(self, resource_type: str, resource_id: Any | None = None, message: str | None = None):
        if message is None:
            message = f"{resource_type} not found"
            if resource_id is not None:
                message = f"{resource_type} with id '{resource_id}' not found"
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource_type": resource_type, "resource_id": resource_id},
        )


class ContentTypeNotAvailableError(ResourceNotFoundError):
    """Raised when a listing targets a content type that is not installed"""

    error_code = ErrorCode.CONTENT_TYPE_NOT_AVAILABLE

    def __init__(self, bundle: str):
        super().__init__(
            resource_type="ContentType",
            resource_id=bundle,
            message=f'The "{bundle}" content type is not available.',
        )


class BlockNotFoundError(ResourceNotFoundError):
    """Raised when a block instance is not found"""

    error_code = ErrorCode.BLOCK_NOT_FOUND

    def __init__(self, block_id: Any | None = None):
        super().__init__(resource_type="Block", resource_id=block_id)


class ManagedFileNotFoundError(ResourceNotFoundError):
    """Raised when a managed file is not found"""

    error_code = ErrorCode.FILE_NOT_FOUND

    def __init__(self, file_id: Any | None = None):
        super().__init__(resource_type="File", resource_id=file_id)


# ============================================================================
# Validation & Business Logic Exceptions
# ============================================================================


class ValidationError(SiteWidgetsError):
    """Raised when submitted settings fail validation"""

    error_code = ErrorCode.VALIDATION_FAILED

    def __init__(
        self,
        message: str,
        field: str | None = None,
        errors: dict[str, str] | None = None,
        details: dict[str, Any] | None = None,
    ):
        error_details = details or {}
        if field:
            error_details["field"] = field
        if errors:
            error_details["errors"] = errors
        self.errors = dict(errors or {})
        if field and field not in self.errors:
            self.errors[field] = message
        super().__init__(message=message, status_code=status.HTTP_400_BAD_REQUEST, details=error_details)


class InvalidOperationError(SiteWidgetsError):
    """Raised when an operation is invalid in the current context"""

    error_code = ErrorCode.INVALID_OPERATION

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message=message, status_code=status.HTTP_400_BAD_REQUEST, details=details or {})


class AssetPromotionError(SiteWidgetsError):
    """Raised when a pending upload could not be promoted while saving rows"""

    error_code = ErrorCode.ASSET_PROMOTION_FAILED

    def __init__(self, message: str, code: int, file_id: int | None = None):
        details = {"file_id": file_id} if file_id is not None else {}
        super().__init__(message=message, status_code=code, details=details)


# ============================================================================
# Database Exceptions
# ============================================================================


class DatabaseError(SiteWidgetsError):
    """Raised when a database operation fails"""

    error_code = ErrorCode.DATABASE_ERROR

    def __init__(self, message: str = "A database error occurred", operation: str | None = None):
        details = {"operation": operation} if operation else {}
        super().__init__(message=message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, details=details)
