"""Error taxonomy for the stores and user-facing error classification."""

from enum import Enum

from pydantic import BaseModel, ValidationError


class TaskFlowError(Exception):
    """Base class for all taskflow errors."""


class NotFoundError(TaskFlowError, KeyError):
    """An operation referenced an id absent from the collection."""

    def __init__(self, entity: str, record_id: str) -> None:
        self.entity = entity
        self.record_id = record_id
        super().__init__(f"{entity.capitalize()} not found: {record_id}")

    def __str__(self) -> str:
        # KeyError.__str__ wraps the message in quotes
        return str(self.args[0])


class ValidationFailedError(TaskFlowError, ValueError):
    """A required field is missing or the storage tier rejected field values."""

    def __init__(self, message: str, field_errors: dict[str, str] | None = None) -> None:
        self.field_errors = field_errors or {}
        super().__init__(message)

    @classmethod
    def from_validation_error(cls, message: str, error: ValidationError) -> "ValidationFailedError":
        """Build from a pydantic ValidationError, keyed by payload field name."""
        field_errors = {".".join(str(part) for part in e["loc"]) or "__root__": e["msg"] for e in error.errors()}
        return cls(message, field_errors)


class BackendUnavailableError(TaskFlowError):
    """Transport-level failure or an overall-failure response from the backend."""


class PartialBatchFailureError(TaskFlowError):
    """Some records of a batch failed; the ones that succeeded are not rolled back."""

    def __init__(self, message: str, *, succeeded: list[str], failed: dict[str, str]) -> None:
        self.succeeded = succeeded
        self.failed = failed
        super().__init__(message)


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ErrorCode:
    """Error codes for specific error conditions."""

    ERR_NOT_FOUND = "ERR_NOT_FOUND"
    ERR_VALIDATION_FAILED = "ERR_VALIDATION_FAILED"
    ERR_BACKEND_UNAVAILABLE = "ERR_BACKEND_UNAVAILABLE"
    ERR_PARTIAL_BATCH_FAILURE = "ERR_PARTIAL_BATCH_FAILURE"
    ERR_UNKNOWN = "ERR_UNKNOWN"


class ErrorResponse(BaseModel):
    """Structured error response with user-friendly messaging."""

    code: str
    message: str
    suggestion: str
    severity: ErrorSeverity


def classify_error(exception: Exception) -> ErrorResponse:
    """Classify an error and return a structured response with recovery suggestions.

    Args:
        exception: The exception raised by a store or service call

    Returns:
        ErrorResponse with code, message, suggestion, and severity
    """
    if isinstance(exception, NotFoundError):
        return ErrorResponse(
            code=ErrorCode.ERR_NOT_FOUND,
            message=f"That {exception.entity} no longer exists.",
            suggestion="Refresh the list to see current items.",
            severity=ErrorSeverity.LOW,
        )

    if isinstance(exception, ValidationFailedError):
        return ErrorResponse(
            code=ErrorCode.ERR_VALIDATION_FAILED,
            message=str(exception),
            suggestion="Check the highlighted fields and try again.",
            severity=ErrorSeverity.LOW,
        )

    if isinstance(exception, PartialBatchFailureError):
        return ErrorResponse(
            code=ErrorCode.ERR_PARTIAL_BATCH_FAILURE,
            message=f"{len(exception.failed)} of {len(exception.failed) + len(exception.succeeded)} items failed.",
            suggestion="Retry the action for the remaining items.",
            severity=ErrorSeverity.MEDIUM,
        )

    if isinstance(exception, BackendUnavailableError | ConnectionError | TimeoutError):
        return ErrorResponse(
            code=ErrorCode.ERR_BACKEND_UNAVAILABLE,
            message="Storage is currently unavailable.",
            suggestion="Please check your connection and try again.",
            severity=ErrorSeverity.HIGH,
        )

    return ErrorResponse(
        code=ErrorCode.ERR_UNKNOWN,
        message="An unexpected error occurred.",
        suggestion="Please try again later.",
        severity=ErrorSeverity.MEDIUM,
    )
