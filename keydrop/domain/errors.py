"""
Error Handling Module

Defines domain exceptions and error categories for the application.
Every domain error carries the HTTP status code it maps to, so the API
layer only needs to read ``status_code`` off an exception.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(Enum):
    """Error category enumeration for structured error handling."""

    INVALID_REQUEST = "invalid_request"
    NO_FILES_UPLOADED = "no_files_uploaded"
    FILE_NOT_FOUND = "file_not_found"
    STORAGE_ERROR = "storage_error"
    DELETE_FAILED = "delete_failed"
    DOWNLOAD_FAILED = "download_failed"
    RATE_LIMITED = "rate_limited"
    SYSTEM_ERROR = "system_error"


# Default client-facing messages per category
ERROR_MESSAGES: Dict[ErrorCategory, str] = {
    ErrorCategory.INVALID_REQUEST: "Invalid request.",
    ErrorCategory.NO_FILES_UPLOADED: "No files uploaded.",
    ErrorCategory.FILE_NOT_FOUND: "File not found",
    ErrorCategory.STORAGE_ERROR: "Server error while accessing files",
    ErrorCategory.DELETE_FAILED: "Failed to delete file",
    ErrorCategory.DOWNLOAD_FAILED: "Could not download the file.",
    ErrorCategory.RATE_LIMITED: "Too many requests, please try again later.",
    ErrorCategory.SYSTEM_ERROR: "An unexpected error occurred.",
}


# ============================================================================
# Domain Exceptions
# ============================================================================

class DomainError(Exception):
    """
    Base exception for all domain errors.

    Subclasses pin a category and status code. The message defaults to the
    category's entry in ERROR_MESSAGES and can be overridden per raise site.
    """

    category: ErrorCategory = ErrorCategory.SYSTEM_ERROR
    status_code: int = 500

    def __init__(self, message: Optional[str] = None, original_error: Exception = None):
        """
        Initialize domain error.

        Args:
            message: Error message, defaults to the category message
            original_error: Optional original exception that caused this error
        """
        self.message = message or ERROR_MESSAGES[self.category]
        super().__init__(self.message)
        self.original_error = original_error


class InvalidKeyError(DomainError):
    """Raised when a public or private key argument is missing or empty."""

    category = ErrorCategory.INVALID_REQUEST
    status_code = 400


class StoredFileNotFoundError(DomainError):
    """Raised when no stored file matches the given key."""

    category = ErrorCategory.FILE_NOT_FOUND
    status_code = 404


class StorageAccessError(DomainError):
    """Raised when the storage directory cannot be read or written."""

    category = ErrorCategory.STORAGE_ERROR
    status_code = 500


class DeleteFailedError(DomainError):
    """Raised when a stored file could not be removed."""

    category = ErrorCategory.DELETE_FAILED
    status_code = 500


class RateLimitExceededError(DomainError):
    """Raised when rate limit is exceeded."""

    category = ErrorCategory.RATE_LIMITED
    status_code = 429

    def __init__(
        self,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.context = context or {}


def is_classified(error: BaseException) -> bool:
    """Return True if the error already carries an HTTP status code."""
    return getattr(error, "status_code", None) is not None


def create_error_response(message: str, status_code: int = 500) -> tuple[Dict[str, Any], int]:
    """
    Create a structured error response for API endpoints.

    Args:
        message: Client-facing error message
        status_code: HTTP status code

    Returns:
        Tuple of (error_dict, status_code)
    """
    return {"message": message}, status_code


def error_response_from(error: BaseException) -> tuple[Dict[str, Any], int]:
    """
    Build an error response from an exception.

    Reads ``status_code`` off the error (default 500) and uses its message.
    """
    status_code = getattr(error, "status_code", None) or 500
    message = getattr(error, "message", None) or str(error) or ERROR_MESSAGES[ErrorCategory.SYSTEM_ERROR]
    return create_error_response(message, status_code)
