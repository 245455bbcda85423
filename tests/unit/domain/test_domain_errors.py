"""
Unit tests for domain errors and error response helpers.
"""

import pytest

from keydrop.domain.errors import (
    DeleteFailedError,
    DomainError,
    ErrorCategory,
    InvalidKeyError,
    RateLimitExceededError,
    StorageAccessError,
    StoredFileNotFoundError,
    create_error_response,
    error_response_from,
    is_classified,
)


class TestDomainErrorStatus:
    """Each error class pins its category and HTTP status."""

    @pytest.mark.parametrize("error_class,category,status_code", [
        (InvalidKeyError, ErrorCategory.INVALID_REQUEST, 400),
        (StoredFileNotFoundError, ErrorCategory.FILE_NOT_FOUND, 404),
        (StorageAccessError, ErrorCategory.STORAGE_ERROR, 500),
        (DeleteFailedError, ErrorCategory.DELETE_FAILED, 500),
        (RateLimitExceededError, ErrorCategory.RATE_LIMITED, 429),
    ])
    def test_category_and_status(self, error_class, category, status_code):
        error = error_class()

        assert error.category == category
        assert error.status_code == status_code
        assert isinstance(error, DomainError)

    def test_default_messages(self):
        assert StorageAccessError().message == "Server error while accessing files"
        assert DeleteFailedError().message == "Failed to delete file"
        assert StoredFileNotFoundError().message == "File not found"

    def test_message_override_and_original_error(self):
        cause = OSError("disk")
        error = StorageAccessError("Could not download the file.", original_error=cause)

        assert str(error) == "Could not download the file."
        assert error.original_error is cause

    def test_rate_limit_error_carries_context(self):
        error = RateLimitExceededError(context={"limit": 5})

        assert error.context == {"limit": 5}
        assert RateLimitExceededError().context == {}


class TestErrorResponses:
    """Test create_error_response, error_response_from and is_classified."""

    def test_create_error_response(self):
        assert create_error_response("No files uploaded.", 400) == ({"message": "No files uploaded."}, 400)
        assert create_error_response("oops") == ({"message": "oops"}, 500)

    def test_response_from_domain_error(self):
        assert error_response_from(StoredFileNotFoundError()) == ({"message": "File not found"}, 404)

    def test_response_from_foreign_classified_error(self):
        error = PermissionError("Forbidden")
        error.status_code = 403

        assert error_response_from(error) == ({"message": "Forbidden"}, 403)

    def test_response_from_plain_exception_defaults_to_500(self):
        assert error_response_from(ValueError("bad")) == ({"message": "bad"}, 500)
        assert error_response_from(ValueError()) == ({"message": "An unexpected error occurred."}, 500)

    def test_is_classified(self):
        assert is_classified(InvalidKeyError())
        assert not is_classified(OSError())
