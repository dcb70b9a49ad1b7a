# nexttogo_service/core/exceptions.py
"""
Custom, application-specific exceptions for the Next To Go service.

Every failure of the feed layer is raised as a ``FeedError`` subclass so the
engine can apply it to the feed state without knowing anything about the
transport that produced it.
"""

from enum import Enum
from typing import Any
from typing import Optional


class NextToGoException(Exception):
    """Base class for all custom exceptions in this application."""

    pass


class FeedErrorKind(Enum):
    """The closed set of ways a feed fetch can fail."""

    INVALID_ENDPOINT = "invalid_endpoint"
    INVALID_TRANSPORT_RESPONSE = "invalid_transport_response"
    HTTP_STATUS = "http_status"
    DECODING_FAILURE = "decoding_failure"
    UNKNOWN = "unknown"


class FeedError(NextToGoException):
    """Base class for all feed fetch failures."""

    kind: FeedErrorKind = FeedErrorKind.UNKNOWN

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def _identity(self) -> Any:
        return self.message

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FeedError):
            return NotImplemented
        return self.kind is other.kind and self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash((self.kind, self._identity()))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"

    @classmethod
    def from_exception(cls, exc: BaseException) -> "FeedError":
        """Maps any exception onto the feed error taxonomy."""
        if isinstance(exc, FeedError):
            return exc
        error = UnknownFeedError(exc)
        error.__cause__ = exc
        return error


class InvalidEndpointError(FeedError):
    """Raised when the feed address could not be constructed."""

    kind = FeedErrorKind.INVALID_ENDPOINT

    def __init__(self, url: str, detail: Optional[str] = None):
        self.url = url
        message = f"Invalid feed endpoint: {url!r}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)

    def _identity(self) -> Any:
        return self.url


class InvalidTransportResponseError(FeedError):
    """Raised when the response envelope was not a well-formed HTTP response."""

    kind = FeedErrorKind.INVALID_TRANSPORT_RESPONSE

    def __init__(self, detail: str = "Malformed HTTP response"):
        self.detail = detail
        super().__init__(detail)

    def _identity(self) -> Any:
        return None


class HttpStatusError(FeedError):
    """Raised for unsuccessful HTTP responses (anything other than 200)."""

    kind = FeedErrorKind.HTTP_STATUS

    def __init__(self, status_code: int, url: Optional[str] = None):
        self.status_code = status_code
        self.url = url
        message = f"Received HTTP {status_code}"
        if url:
            message = f"{message} from {url}"
        super().__init__(message)

    def _identity(self) -> Any:
        return self.status_code


class DecodingFailureError(FeedError):
    """Raised when the response body did not match the expected schema."""

    kind = FeedErrorKind.DECODING_FAILURE

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Failed to decode feed response: {detail}")


class UnknownFeedError(FeedError):
    """Wraps any other failure, keeping the original cause for diagnostics."""

    kind = FeedErrorKind.UNKNOWN

    def __init__(self, wrapped: BaseException):
        self.wrapped = wrapped
        super().__init__(str(wrapped) or type(wrapped).__name__)

    def _identity(self) -> Any:
        return (type(self.wrapped), str(self.wrapped))
