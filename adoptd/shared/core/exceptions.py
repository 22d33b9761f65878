# 📄 File: adoptd/shared/core/exceptions.py
# 🧭 Purpose (Layman Explanation):
# This file defines all the special error types the plant doctor uses to say
# what went wrong in a clear, organized way instead of generic error messages.
# 🧪 Purpose (Technical Summary):
# Custom exception hierarchy providing specific error types with HTTP status codes,
# error details, and serialization for API responses. Covers the error taxonomy:
# authentication (redirect), usage quota refusal, remote failures, input validation.
# 🔗 Dependencies:
# typing, FastAPI HTTP status constants
# 🔄 Connected Modules / Calls From:
# State services, repositories, external clients, adoptd.main exception handler

from typing import Any, Dict, List, Optional
from fastapi import status


class PlantCareException(Exception):
    """
    Base exception class for the plant doctor application.
    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.error_code = error_code or self.__class__.__name__.upper()
        super().__init__(self.message)

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
# AUTHENTICATION & AUTHORIZATION EXCEPTIONS
# =============================================================================

class AuthenticationError(PlantCareException):
    """
    Exception raised for missing or expired sessions.
    Clients are expected to follow ``redirect_to`` instead of rendering an error.
    """

    def __init__(
        self,
        message: str = "Authentication required",
        redirect_to: str = "/login",
        details: Optional[Dict[str, Any]] = None,
        user_id: Optional[str] = None
    ):
        if not details:
            details = {}
        details["redirect_to"] = redirect_to
        if user_id:
            details["user_id"] = user_id

        super().__init__(
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            details=details,
            error_code="AUTHENTICATION_ERROR"
        )
        self.redirect_to = redirect_to


class AuthorizationError(PlantCareException):
    """
    Exception raised for authorization failures.
    Used when user lacks permission to act on a resource.
    """

    def __init__(
        self,
        message: str = "Access denied",
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        required_role: Optional[str] = None,
        user_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if resource_type:
            details["resource_type"] = resource_type
        if resource_id:
            details["resource_id"] = resource_id
        if required_role:
            details["required_role"] = required_role
        if user_id:
            details["user_id"] = user_id

        super().__init__(
            message=message,
            status_code=status.HTTP_403_FORBIDDEN,
            details=details,
            error_code="AUTHORIZATION_ERROR"
        )


# =============================================================================
# VALIDATION & DATA EXCEPTIONS
# =============================================================================

class ValidationError(PlantCareException):
    """
    Exception raised for data validation failures.
    Raised before any remote call is attempted.
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
            error_code="VALIDATION_ERROR"
        )


class NotFoundError(PlantCareException):
    """
    Exception raised when requested resource is not found.
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
            error_code="NOT_FOUND"
        )


class InvalidFileTypeError(PlantCareException):
    """
    Exception raised when the uploaded file type is not supported.
    """
    def __init__(
        self,
        message: str = "Invalid or unsupported file type",
        filename: Optional[str] = None,
        expected_types: Optional[List[str]] = None,
        actual_type: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if filename:
            details["filename"] = filename
        if expected_types:
            details["expected_types"] = expected_types
        if actual_type:
            details["actual_type"] = actual_type

        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details,
            error_code="INVALID_FILE_TYPE"
        )


class FileTooLargeError(PlantCareException):
    """Exception raised when uploaded file exceeds allowed size."""

    def __init__(self, size: int, max_size: int):
        super().__init__(
            message=f"File size {size} exceeds maximum {max_size} bytes",
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            details={"size": size, "max_size": max_size},
            error_code="FILE_TOO_LARGE"
        )


# =============================================================================
# USAGE LIMITS
# =============================================================================

class RateLimitError(PlantCareException):
    """
    Exception raised when rate limits are exceeded.
    """

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        limit: Optional[int] = None,
        window: Optional[str] = None,
        retry_after: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        error_code: str = "RATE_LIMIT_EXCEEDED"
    ):
        if not details:
            details = {}

        if limit:
            details["limit"] = limit
        if window:
            details["window"] = window
        if retry_after:
            details["retry_after"] = retry_after

        super().__init__(
            message=message,
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            details=details,
            error_code=error_code
        )


class QuotaExceededError(RateLimitError):
    """
    Daily free-tier quota is used up.

    Recoverable and user-visible; carries an upgrade call-to-action that
    clients render differently from generic failures.
    """

    def __init__(self, action: str, limit: int, upgrade_path: str = "/pricing"):
        super().__init__(
            message=f"Daily {action} limit reached",
            limit=limit,
            window="day",
            details={
                "action": action,
                "call_to_action": "upgrade",
                "upgrade_path": upgrade_path,
                "suggestion": "Try again tomorrow or upgrade to premium",
            },
            error_code="USAGE_LIMIT_EXCEEDED"
        )
        self.action = action


# =============================================================================
# REMOTE SERVICE EXCEPTIONS
# =============================================================================

class ExternalAPIError(PlantCareException):
    """
    Exception raised for external API failures.
    Used when the data gateway, the generative model or the weather API fail.
    """

    def __init__(
        self,
        message: str = "External API error",
        api_name: Optional[str] = None,
        api_status_code: Optional[int] = None,
        api_response: Optional[Dict[str, Any]] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if api_name:
            details["api_name"] = api_name
        if api_status_code:
            details["api_status_code"] = api_status_code
        if api_response:
            details["api_response"] = api_response

        super().__init__(
            message=message,
            status_code=status.HTTP_502_BAD_GATEWAY,
            details=details,
            error_code="EXTERNAL_API_ERROR"
        )


class GatewayError(ExternalAPIError):
    """A Supabase table, RPC or storage call failed."""

    def __init__(self, operation: str, error: Any = None):
        super().__init__(
            message=f"Data gateway operation failed: {operation}",
            api_name="supabase",
            details={"operation": operation, "reason": str(error) if error else None},
        )
        self.operation = operation


class APITimeoutError(ExternalAPIError):
    """Exception raised when an external API call times out."""

    def __init__(self, api_name: str, timeout_seconds: int = 10):
        super().__init__(
            message=f"{api_name} API request timed out after {timeout_seconds} seconds",
            api_name=api_name,
            details={
                "timeout_seconds": timeout_seconds,
                "suggestion": "Retry after some time or check network"
            }
        )


class FileStorageError(PlantCareException):
    """Exception raised when a photo cannot be stored."""

    def __init__(self, message: str = "File storage operation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_502_BAD_GATEWAY,
            details=details,
            error_code="FILE_STORAGE_ERROR"
        )
