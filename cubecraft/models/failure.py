"""
Failure envelope and known error types.

Every failure a caller can act on is a KnownError carrying a FailureKind,
a user-facing message and an HTTP status. The API layer turns it into an
ApiResponse so clients always receive a classified failure.
"""

from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Input validation failures
    INVALID_INPUT = "invalid_input"
    MISSING_REQUIRED = "missing_required"

    # Resource failures
    NOT_FOUND = "not_found"

    # Constraint violations
    VALIDATION_FAILED = "validation_failed"
    DUPLICATE_LIMIT = "duplicate_limit"

    # Service failures
    SERVICE_UNAVAILABLE = "service_unavailable"

    # Internal errors
    INVARIANT_VIOLATION = "invariant_violation"

    # Unknown
    UNKNOWN = "unknown"


class OutcomeType(str, Enum):
    """High-level outcome classification."""

    SUCCESS = "success"
    KNOWN_FAILURE = "known_failure"
    UNKNOWN_FAILURE = "unknown_failure"


T = TypeVar("T")


class FailureDetail(BaseModel):
    """Detailed information about a failure."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="User-appropriate explanation of what went wrong",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )
    suggestion: str | None = Field(
        default=None,
        description="Suggested action for the user",
    )


class ApiResponse(BaseModel, Generic[T]):
    """Response envelope carrying either data or a classified failure."""

    outcome: OutcomeType = Field(
        ...,
        description="High-level classification of the result",
    )
    data: T | None = Field(
        default=None,
        description="Response data (present on success)",
    )
    failure: FailureDetail | None = Field(
        default=None,
        description="Failure details (present on non-success)",
    )

    @classmethod
    def success(cls, data: T) -> "ApiResponse[T]":
        """Create a success response."""
        return cls(outcome=OutcomeType.SUCCESS, data=data)

    @classmethod
    def known_failure(
        cls,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
    ) -> "ApiResponse[Any]":
        """Create a known failure response."""
        return cls(
            outcome=OutcomeType.KNOWN_FAILURE,
            failure=FailureDetail(
                kind=kind,
                message=message,
                detail=detail,
                suggestion=suggestion,
            ),
        )

    @classmethod
    def unknown_failure(cls, detail: str | None = None) -> "ApiResponse[Any]":
        """Create an unknown failure response for unexpected exceptions."""
        return cls(
            outcome=OutcomeType.UNKNOWN_FAILURE,
            failure=FailureDetail(
                kind=FailureKind.UNKNOWN,
                message="The operation failed unexpectedly.",
                detail=detail,
                suggestion="If this persists, please report the issue.",
            ),
        )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        self.status_code = status_code
        super().__init__(message)

    def to_response(self) -> ApiResponse[Any]:
        """Convert to an ApiResponse."""
        return ApiResponse.known_failure(
            kind=self.kind,
            message=self.message,
            detail=self.detail,
            suggestion=self.suggestion,
        )


class CubeValidationError(KnownError):
    """
    A cube edit was rejected.

    The operation is aborted as a whole; the cube is left unchanged.
    """

    def __init__(
        self,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
        kind: FailureKind = FailureKind.VALIDATION_FAILED,
    ):
        super().__init__(
            kind=kind,
            message=message,
            detail=detail,
            suggestion=suggestion,
            status_code=400,
        )


class DuplicateLimitError(CubeValidationError):
    """Raised when adding copies would exceed the cube's duplicate limit."""

    def __init__(self, card_id: str, current: int, requested: int, limit: int):
        self.card_id = card_id
        self.current = current
        self.requested = requested
        self.limit = limit
        super().__init__(
            message=(
                f"Cannot add {requested} more of card {card_id}: "
                f"cube already has {current} and the limit is {limit}."
            ),
            suggestion="Raise the duplicate limit or remove existing copies first.",
            kind=FailureKind.DUPLICATE_LIMIT,
        )


class NotFoundError(KnownError):
    """Raised when a game, card, cube, session or export format does not exist."""

    def __init__(self, resource: str, identifier: str, available: list[str] | None = None):
        self.resource = resource
        self.identifier = identifier
        detail = f"Available: {', '.join(available)}" if available else None
        super().__init__(
            kind=FailureKind.NOT_FOUND,
            message=f"Unknown {resource}: {identifier}",
            detail=detail,
            status_code=404,
        )


class PersistenceError(KnownError):
    """Raised when the storage backend fails to save or load a cube."""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(
            kind=FailureKind.SERVICE_UNAVAILABLE,
            message=message,
            detail=detail,
            suggestion="Your edits are kept. Try saving again.",
            status_code=503,
        )


class InvariantViolationError(Exception):
    """
    Internal consistency failure.

    Not user-facing: indicates a programming error such as a reused
    instance id or a corrupted history cursor.
    """
