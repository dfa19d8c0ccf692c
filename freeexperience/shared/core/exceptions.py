# 📄 File: freeexperience/shared/core/exceptions.py
#
# 🧭 Purpose (Layman Explanation):
# This file defines all the special error types the marketplace uses to say
# what went wrong in a clear, organized way instead of generic error messages.
#
# 🧪 Purpose (Technical Summary):
# Custom exception hierarchy with a closed ErrorKind set, HTTP status codes,
# error details and serialization for API responses. Cache and store layers
# raise these so callers can tell transport, storage and domain failures apart.
#
# 🔗 Dependencies:
# FastAPI status constants, typing, enum
#
# 🔄 Connected Modules / Calls From:
# KeyedAsyncCache, DualBackendStore backends, application services,
# error-handling middleware, API exception handler

from enum import Enum
from typing import Any, Dict, List, Optional

from fastapi import status


class ErrorKind(str, Enum):
    """Closed set of failure categories surfaced by the data-access core."""

    NOT_CONFIGURED = "NOT_CONFIGURED"
    TRANSPORT_FAILURE = "TRANSPORT_FAILURE"
    STORAGE_QUOTA_EXCEEDED = "STORAGE_QUOTA_EXCEEDED"
    STORAGE_UNAVAILABLE = "STORAGE_UNAVAILABLE"
    MALFORMED_STORED_DATA = "MALFORMED_STORED_DATA"
    DUPLICATE_APPLICATION = "DUPLICATE_APPLICATION"
    VALIDATION = "VALIDATION"
    AUTHENTICATION = "AUTHENTICATION"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INTERNAL = "INTERNAL"


class FreeExperienceException(Exception):
    """
    Base exception class for the FreeExperience core.
    All custom exceptions should inherit from this class.
    """

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
        kind: Optional[ErrorKind] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        if kind is not None:
            self.kind = kind
        super().__init__(self.message)

    @property
    def error_code(self) -> str:
        """Stable machine-readable code."""
        return self.kind.value

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format."""
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details,
                "status_code": self.status_code
            }
        }


# =============================================================================
# BACKEND & TRANSPORT EXCEPTIONS
# =============================================================================

class NotConfiguredError(FreeExperienceException):
    """
    Raised when the remote backend is expected but has no credentials.
    Store construction catches it and falls back to the local backend.
    """

    def __init__(
        self,
        message: str = "Remote backend is not configured",
        missing_settings: Optional[List[str]] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}
        if missing_settings:
            details["missing_settings"] = missing_settings

        super().__init__(
            message=message,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            details=details,
            kind=ErrorKind.NOT_CONFIGURED
        )


class TransportFailureError(FreeExperienceException):
    """
    Raised for network or remote-service failures, including timeouts
    and provider rate limiting.
    """

    def __init__(
        self,
        message: str = "Remote service request failed",
        operation: Optional[str] = None,
        service_response: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}
        if operation:
            details["operation"] = operation
        if service_response:
            details["service_response"] = service_response

        super().__init__(
            message=message,
            status_code=status.HTTP_502_BAD_GATEWAY,
            details=details,
            kind=ErrorKind.TRANSPORT_FAILURE
        )


class StorageQuotaExceededError(FreeExperienceException):
    """
    Exception raised when the local durable store hits its capacity ceiling.
    """
    def __init__(
        self,
        message: str = "Local storage quota exceeded",
        key: Optional[str] = None,
        quota_bytes: Optional[int] = None,
        required_bytes: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if key:
            details["key"] = key
        if quota_bytes is not None:
            details["quota_bytes"] = quota_bytes
        if required_bytes is not None:
            details["required_bytes"] = required_bytes

        super().__init__(
            message=message,
            status_code=status.HTTP_507_INSUFFICIENT_STORAGE,
            details=details,
            kind=ErrorKind.STORAGE_QUOTA_EXCEEDED
        )


class StorageUnavailableError(FreeExperienceException):
    """
    Raised when the local durable store cannot be written to disk.
    The in-memory contents are left as they were before the write.
    """

    def __init__(
        self,
        message: str = "Local storage is unavailable",
        key: Optional[str] = None,
        path: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}
        if key:
            details["key"] = key
        if path:
            details["path"] = path

        super().__init__(
            message=message,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            details=details,
            kind=ErrorKind.STORAGE_UNAVAILABLE
        )


class MalformedStoredDataError(FreeExperienceException):
    """
    Stored JSON or a row that fails shape validation.
    Backends recover from it by treating the record as absent.
    """

    def __init__(
        self,
        message: str = "Stored data is malformed",
        key: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}
        if key:
            details["key"] = key

        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details,
            kind=ErrorKind.MALFORMED_STORED_DATA
        )


# =============================================================================
# DOMAIN EXCEPTIONS
# =============================================================================

class DuplicateApplicationError(FreeExperienceException):
    """
    Raised when a specialist applies to the same project twice.
    """

    def __init__(
        self,
        message: str = "You have already applied to this project",
        project_id: Optional[str] = None,
        applicant_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}
        if project_id:
            details["project_id"] = project_id
        if applicant_id:
            details["applicant_id"] = applicant_id

        super().__init__(
            message=message,
            status_code=status.HTTP_409_CONFLICT,
            details=details,
            kind=ErrorKind.DUPLICATE_APPLICATION
        )


class ValidationError(FreeExperienceException):
    """
    Exception raised for data validation failures.
    Used when input data doesn't meet validation requirements.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)
        if constraint:
            details["constraint"] = constraint

        super().__init__(
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=details,
            kind=ErrorKind.VALIDATION
        )


class AuthenticationError(FreeExperienceException):
    """
    Exception raised for authentication failures.
    Used when credentials are invalid, unconfirmed or missing.
    """

    def __init__(
        self,
        message: str = "Authentication failed",
        details: Optional[Dict[str, Any]] = None,
        email: Optional[str] = None
    ):
        if not details:
            details = {}
        if email:
            details["email"] = email

        super().__init__(
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            details=details,
            kind=ErrorKind.AUTHENTICATION
        )


class PermissionDeniedError(FreeExperienceException):
    """
    Exception raised when the actor may not touch a resource,
    including remote row-level security rejections.
    """

    def __init__(
        self,
        message: str = "Access denied",
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        actor_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if resource_type:
            details["resource_type"] = resource_type
        if resource_id:
            details["resource_id"] = resource_id
        if actor_id:
            details["actor_id"] = actor_id

        super().__init__(
            message=message,
            status_code=status.HTTP_403_FORBIDDEN,
            details=details,
            kind=ErrorKind.PERMISSION_DENIED
        )


class NotFoundError(FreeExperienceException):
    """
    Exception raised when requested resource is not found.
    Stores return None instead; only the API layer raises this.
    """

    def __init__(
        self,
        message: str = "Resource not found",
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if resource_type:
            details["resource_type"] = resource_type
        if resource_id:
            details["resource_id"] = resource_id

        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details=details,
            kind=ErrorKind.NOT_FOUND
        )


class ConflictError(FreeExperienceException):
    """
    Exception raised for resource conflicts.
    Used for already-registered emails and unique violations outside applications.
    """

    def __init__(
        self,
        message: str = "Resource conflict",
        resource_type: Optional[str] = None,
        conflict_field: Optional[str] = None,
        existing_value: Optional[Any] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if resource_type:
            details["resource_type"] = resource_type
        if conflict_field:
            details["conflict_field"] = conflict_field
        if existing_value is not None:
            details["existing_value"] = str(existing_value)

        super().__init__(
            message=message,
            status_code=status.HTTP_409_CONFLICT,
            details=details,
            kind=ErrorKind.CONFLICT
        )


# =============================================================================
# EXCEPTION UTILITIES
# =============================================================================

def exception_to_dict(exception: Exception) -> Dict[str, Any]:
    """
    Convert any exception to dictionary format.

    Args:
        exception: Exception to convert

    Returns:
        Dict: Exception data as dictionary
    """
    if isinstance(exception, FreeExperienceException):
        return exception.to_dict()

    return {
        "error": {
            "code": ErrorKind.INTERNAL.value,
            "message": str(exception),
            "details": {},
            "status_code": 500
        }
    }


def is_server_error(exception: Exception) -> bool:
    """
    Check if exception represents a server error (5xx).

    Args:
        exception: Exception to check

    Returns:
        bool: True if server error, False otherwise
    """
    if isinstance(exception, FreeExperienceException):
        return 500 <= exception.status_code < 600

    return True  # Default to server error for unknown exceptions
