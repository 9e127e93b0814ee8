"""
Failure classification and the error taxonomy.

Every error raised by the sync and deck pipelines is a `KnownError`
carrying both a `FailureKind` and an HTTP-style status code, so the API
layer can turn it into a response without re-deriving the cause.

Response types:
- Success: Operation completed successfully
- KnownFailure: System knows why it failed
- UnknownFailure: System does not know why it failed
"""

from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Input failures
    INVALID_INPUT = "invalid_input"
    UNSUPPORTED_SOURCE = "unsupported_source"

    # Resource failures
    EMPTY_RESULT = "empty_result"
    DECODE_FAILED = "decode_failed"
    PERSISTENCE_FAILED = "persistence_failed"

    # Service failures
    SERVICE_UNAVAILABLE = "service_unavailable"
    EXTERNAL_API_ERROR = "external_api_error"

    CANCELLED = "cancelled"

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


class ApiResponse(BaseModel, Generic[T]):
    """
    Universal response envelope for all API endpoints.

    Every response is classified into one of three outcome types,
    ensuring no failure reaches the user unexplained.
    """

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
    ) -> "ApiResponse[Any]":
        """Create a known failure response."""
        return cls(
            outcome=OutcomeType.KNOWN_FAILURE,
            failure=FailureDetail(kind=kind, message=message, detail=detail),
        )

    @classmethod
    def unknown_failure(cls, exception: Exception) -> "ApiResponse[Any]":
        """
        Create an unknown failure response.

        The message is fixed; only the exception type is exposed.
        """
        return cls(
            outcome=OutcomeType.UNKNOWN_FAILURE,
            failure=FailureDetail(
                kind=FailureKind.UNKNOWN,
                message="I failed and I don't know why. Try again later.",
                detail=type(exception).__name__,
            ),
        )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    kind = FailureKind.UNKNOWN
    status_code = 500

    def __init__(
        self,
        message: str,
        detail: str | None = None,
        status_code: int | None = None,
    ):
        self.message = message
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)

    def to_response(self) -> ApiResponse[Any]:
        """Convert to an ApiResponse."""
        return ApiResponse.known_failure(
            kind=self.kind,
            message=self.message,
            detail=self.detail,
        )


class TransientFetchError(KnownError):
    """Network or timeout failure that outlasted the retry budget."""

    kind = FailureKind.SERVICE_UNAVAILABLE
    status_code = 503


class DocumentFetchError(TransientFetchError):
    """The document store multi-get failed."""


class UpstreamStatusError(KnownError):
    """An external source answered with a non-success status."""

    kind = FailureKind.EXTERNAL_API_ERROR
    status_code = 502

    def __init__(self, message: str, upstream_status: int, detail: str | None = None):
        self.upstream_status = upstream_status
        super().__init__(message, detail=detail)


class UnsupportedSourceError(KnownError):
    """The deck URL points at a host with no adapter."""

    kind = FailureKind.UNSUPPORTED_SOURCE
    status_code = 422


class NormalizationError(KnownError):
    """A site's export body could not be turned into a canonical deck list."""

    kind = FailureKind.EXTERNAL_API_ERROR
    status_code = 502


class DecodeError(KnownError):
    """A record or document could not be decoded."""

    kind = FailureKind.DECODE_FAILED
    status_code = 422


class DocumentDecodeError(DecodeError):
    """
    A deck document could not be decoded.

    Fatal to deck resolution: a partially decoded deck is never returned.
    """

    def __init__(self, key: str, detail: str | None = None):
        self.key = key
        super().__init__(f"Cannot decode card document '{key}'", detail=detail)


class CatalogFormatError(DecodeError):
    """The catalog stream is unreadable or not a JSON array."""

    status_code = 502


class PersistenceError(KnownError):
    """A single document write failed."""

    kind = FailureKind.PERSISTENCE_FAILED
    status_code = 500

    def __init__(self, key: str, detail: str | None = None):
        self.key = key
        super().__init__(f"Cannot write document '{key}'", detail=detail)


class EmptyResultError(KnownError):
    """An operation produced nothing worth reporting, e.g. an empty deck."""

    kind = FailureKind.EMPTY_RESULT
    status_code = 422


class UploadCancelledError(KnownError):
    """Bulk upload was cancelled before every entry was attempted."""

    kind = FailureKind.CANCELLED
    # Client Closed Request, nginx convention
    status_code = 499
