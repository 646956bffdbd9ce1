"""
Custom exceptions for the workout analytics engine.

The aggregation and query code never raises for empty or partial data.
Errors only surface at the edges: parsing stored session documents and
talking to the session and profile stores. Each exception carries:
- A descriptive message
- An error code
- Optional details for debugging
"""

from typing import Any, Dict, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for consistent error reporting."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    # Session data errors
    INVALID_SESSION_DATA = "INVALID_SESSION_DATA"

    # Store errors
    SESSION_STORE_ERROR = "SESSION_STORE_ERROR"
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"
    PROFILE_SYNC_FAILED = "PROFILE_SYNC_FAILED"


class LyftUpError(Exception):
    """
    Base exception for all analytics errors.

    Attributes:
        message: Human-readable error message
        code: Error code from ErrorCode enum
        details: Optional dictionary with additional error details
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a serializable dictionary."""
        result: Dict[str, Any] = {
            "error": {
                "code": self.code.value,
                "message": self.message,
            }
        }
        if self.details:
            result["error"]["details"] = self.details
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value}, message={self.message!r})"


class InvalidSessionDataError(LyftUpError):
    """Raised when a stored session document cannot be turned into a session."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        if field:
            error_details["field"] = field
        super().__init__(
            message=message,
            code=ErrorCode.INVALID_SESSION_DATA,
            details=error_details,
        )


class SessionStoreError(LyftUpError):
    """Raised when the session store fails to fetch sessions."""

    def __init__(
        self,
        message: str,
        original_error: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        if original_error:
            error_details["original_error"] = str(original_error)
        super().__init__(
            message=message,
            code=ErrorCode.SESSION_STORE_ERROR,
            details=error_details,
        )
        self.original_error = original_error


class ProfileNotFoundError(LyftUpError):
    """Raised when there is no profile to write recalculated counters to."""

    def __init__(self, user_id: str, details: Optional[Dict[str, Any]] = None) -> None:
        error_details = details or {}
        error_details["user_id"] = user_id
        super().__init__(
            message=f"Profile for user '{user_id}' not found",
            code=ErrorCode.PROFILE_NOT_FOUND,
            details=error_details,
        )


class ProfileSyncError(LyftUpError):
    """Raised when recalculated counters cannot be persisted."""

    def __init__(
        self,
        message: str,
        original_error: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        if original_error:
            error_details["original_error"] = str(original_error)
        super().__init__(
            message=message,
            code=ErrorCode.PROFILE_SYNC_FAILED,
            details=error_details,
        )
        self.original_error = original_error


class ConfigurationError(LyftUpError):
    """Raised when a setting or command-line option has an unusable value."""

    def __init__(
        self,
        message: str,
        setting: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        if setting:
            error_details["setting"] = setting
        super().__init__(
            message=message,
            code=ErrorCode.CONFIGURATION_ERROR,
            details=error_details,
        )
