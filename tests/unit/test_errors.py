"""Unit tests for the error taxonomy and classification."""

import pytest

from taskflow.core.errors import (
    BackendUnavailableError,
    ErrorCode,
    ErrorSeverity,
    NotFoundError,
    PartialBatchFailureError,
    TaskFlowError,
    ValidationFailedError,
    classify_error,
)


@pytest.mark.unit
class TestErrorTypes:
    """Tests for exception types."""

    def test_not_found_message(self):
        """Test the message names the entity and id without KeyError quoting."""
        error = NotFoundError("task", "abc")

        assert str(error) == "Task not found: abc"
        assert isinstance(error, KeyError)
        assert isinstance(error, TaskFlowError)

    def test_validation_failed_is_value_error(self):
        """Test validation failures can be caught as ValueError."""
        error = ValidationFailedError("bad", {"title": "required"})

        assert isinstance(error, ValueError)
        assert error.field_errors == {"title": "required"}

    def test_validation_failed_defaults_field_errors(self):
        """Test field errors default to an empty dict."""
        assert ValidationFailedError("bad").field_errors == {}


@pytest.mark.unit
class TestClassifyError:
    """Tests for classify_error function."""

    def test_not_found(self):
        """Test classification of a missing record."""
        response = classify_error(NotFoundError("category", "1"))

        assert response.code == ErrorCode.ERR_NOT_FOUND
        assert "category" in response.message
        assert response.severity == ErrorSeverity.LOW

    def test_validation_failed(self):
        """Test classification of a validation failure keeps its message."""
        response = classify_error(ValidationFailedError("Task title is required"))

        assert response.code == ErrorCode.ERR_VALIDATION_FAILED
        assert response.message == "Task title is required"

    def test_partial_batch_failure(self):
        """Test the message counts failed items out of the total."""
        response = classify_error(PartialBatchFailureError("x", succeeded=["a", "b"], failed={"c": "boom"}))

        assert response.code == ErrorCode.ERR_PARTIAL_BATCH_FAILURE
        assert response.message == "1 of 3 items failed."
        assert response.severity == ErrorSeverity.MEDIUM

    @pytest.mark.parametrize("error", [BackendUnavailableError("down"), ConnectionError("refused"), TimeoutError()])
    def test_backend_unavailable(self, error):
        """Test transport-level failures map to the unavailable code."""
        response = classify_error(error)

        assert response.code == ErrorCode.ERR_BACKEND_UNAVAILABLE
        assert response.severity == ErrorSeverity.HIGH
        assert "connection" in response.suggestion.lower()

    def test_unknown_error(self):
        """Test anything else is classified as unknown."""
        response = classify_error(RuntimeError("boom"))

        assert response.code == ErrorCode.ERR_UNKNOWN
        assert "boom" not in response.message
