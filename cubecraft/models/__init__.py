from cubecraft.models.card import Card, CardLike
from cubecraft.models.cube import (
    CubeCard,
    CubeEntry,
    CubeRecord,
    CubeSnapshot,
    CubeSummary,
    SaveResult,
)
from cubecraft.models.failure import (
    ApiResponse,
    CubeValidationError,
    DuplicateLimitError,
    FailureDetail,
    FailureKind,
    InvariantViolationError,
    KnownError,
    NotFoundError,
    OutcomeType,
    PersistenceError,
)
from cubecraft.models.filter_request import FilterRequest

__all__ = [
    "ApiResponse",
    "Card",
    "CardLike",
    "CubeCard",
    "CubeEntry",
    "CubeRecord",
    "CubeSnapshot",
    "CubeSummary",
    "CubeValidationError",
    "DuplicateLimitError",
    "FailureDetail",
    "FailureKind",
    "FilterRequest",
    "InvariantViolationError",
    "KnownError",
    "NotFoundError",
    "OutcomeType",
    "PersistenceError",
    "SaveResult",
]
