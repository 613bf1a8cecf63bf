"""
Error taxonomy shared by routes, the fallback invoker and provider helpers.

Every error that reaches the HTTP boundary is a ServiceError and is rendered
as {"error": ..., "details": ...} with the status of its kind.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    INVALID_INPUT = "invalid-input"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not-found"
    RATE_LIMITED = "rate-limited"
    OVERLOADED = "overloaded"
    MALFORMED_UPSTREAM = "malformed-upstream"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"

    @property
    def status_code(self) -> int:
        return _STATUS_BY_KIND[self]

    @classmethod
    def from_status(cls, status: Optional[int]) -> "ErrorKind":
        """Map an upstream HTTP status to the kind we report."""
        if status in (401, 403):
            return cls.UNAUTHORIZED
        if status == 404:
            return cls.NOT_FOUND
        if status == 429:
            return cls.RATE_LIMITED
        if status == 503:
            return cls.OVERLOADED
        if status == 400:
            return cls.INVALID_INPUT
        return cls.UNKNOWN


_STATUS_BY_KIND = {
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.RATE_LIMITED: 429,
    ErrorKind.OVERLOADED: 503,
    ErrorKind.MALFORMED_UPSTREAM: 500,
    ErrorKind.CONFIGURATION: 500,
    ErrorKind.UNKNOWN: 500,
}

RETRY_AFTER_HINT = "2-5 minutes"


class ServiceError(Exception):
    """An error with a classification the HTTP layer knows how to render."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        details: Optional[str] = None,
        failure=None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.details = details
        # The models.outcome.Failure this error was raised for, if any
        self.failure = failure

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    def to_payload(self) -> dict:
        payload = {"error": self.message}
        if self.details:
            payload["details"] = self.details
        if self.kind is ErrorKind.RATE_LIMITED:
            payload["retryAfter"] = RETRY_AFTER_HINT
        return payload


class CandidatesExhausted(ServiceError):
    """Every candidate was tried and none succeeded."""

    def __init__(self, candidates: list[str], last_failure, label: str = "request"):
        self.candidates = list(candidates)
        kind = last_failure.kind if last_failure is not None else ErrorKind.UNKNOWN
        # A trailing 400 usually means "model unsupported" after a resolver miss
        if kind is ErrorKind.INVALID_INPUT:
            kind = ErrorKind.NOT_FOUND
        tried = ", ".join(self.candidates)
        super().__init__(
            kind,
            f"{_EXHAUSTED_MESSAGES.get(kind, 'All candidates failed')} "
            f"(last failure: {kind.value}). Tried: {tried}",
            details=last_failure.message if last_failure is not None else None,
            failure=last_failure,
        )
        self.label = label


_EXHAUSTED_MESSAGES = {
    ErrorKind.OVERLOADED: "All models are currently overloaded. Please try again in a few moments.",
    ErrorKind.NOT_FOUND: "No available models found. Your API key may not have access to these models.",
    ErrorKind.RATE_LIMITED: "Rate limit exceeded. All models are currently rate-limited.",
    ErrorKind.UNAUTHORIZED: "Authentication failed. Please check your API key.",
}
