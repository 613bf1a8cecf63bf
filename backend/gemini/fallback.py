"""
Shared fallback helper.

invoke_with_fallback() tries each candidate in order with the same operation.
A Retryable failure is logged and the next candidate is tried; a Fatal one
is raised immediately. If every candidate fails, CandidatesExhausted is
raised naming all of them and the kind of the last failure.

attempt() adapts a plain coroutine (which raises on error) into an operation
returning an InvocationOutcome, classified by a RetryPolicy.
"""

import logging
from typing import Any, Awaitable, Callable, Optional

import httpx
from google.genai import errors as genai_errors

from errors import CandidatesExhausted, ErrorKind, ServiceError
from gemini.config import GEMINI_POLICY, RetryPolicy
from models.outcome import Classification, Failure, InvocationOutcome, Success

logger = logging.getLogger(__name__)

Operation = Callable[[str], Awaitable[InvocationOutcome]]


def _status_of(exc: BaseException) -> Optional[int]:
    # Our own ServiceErrors carry a kind, not an upstream status
    if isinstance(exc, ServiceError):
        return None
    if isinstance(exc, genai_errors.APIError):
        return exc.code
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code
    return getattr(exc, "status_code", None)


def _kind_of(exc: BaseException, status: Optional[int]) -> ErrorKind:
    if isinstance(exc, ServiceError):
        return exc.kind
    err = str(exc).lower()
    if "api key" in err or "api_key" in err:
        return ErrorKind.UNAUTHORIZED
    if isinstance(exc, httpx.TransportError):
        return ErrorKind.OVERLOADED
    if status is None and ("quota" in err or "resource_exhausted" in err):
        return ErrorKind.RATE_LIMITED
    return ErrorKind.from_status(status)


def classify_exception(exc: BaseException, policy: RetryPolicy = GEMINI_POLICY) -> Failure:
    """Turn an exception raised by a provider call into a Failure."""
    status = _status_of(exc)
    kind = _kind_of(exc, status)
    return Failure(
        classification=policy.classify(status, kind),
        message=str(exc) or type(exc).__name__,
        status=status,
        kind=kind,
    )


async def attempt(
    call: Callable[[], Awaitable[Any]],
    policy: RetryPolicy = GEMINI_POLICY,
) -> InvocationOutcome:
    """Run one provider call; an exception becomes a classified Failure."""
    try:
        return Success(await call())
    except Exception as exc:
        return classify_exception(exc, policy)


def failure_to_error(failure: Failure) -> ServiceError:
    return ServiceError(failure.kind, failure.message, failure=failure)


async def invoke_with_fallback(
    candidates: list[str],
    operation: Operation,
    *,
    label: str = "request",
) -> Any:
    """
    Try each candidate in order until one succeeds.

    Args:
        candidates: ordered candidate identifiers, non-empty
        operation: async callable taking one candidate, returning an outcome
        label: short name used in log lines ("generate", "tts", ...)

    Returns:
        The payload of the first Success.

    Raises:
        ServiceError: on the first Fatal failure (carrying that Failure)
        CandidatesExhausted: when every candidate failed with Retryable
    """
    if not candidates:
        raise ValueError("invoke_with_fallback needs at least one candidate")

    last_failure: Optional[Failure] = None
    for candidate in candidates:
        logger.info("[%s] trying %s", label, candidate)
        outcome = await operation(candidate)

        if isinstance(outcome, Success):
            logger.info("[%s] %s succeeded", label, candidate)
            return outcome.payload

        last_failure = outcome
        if outcome.classification is Classification.FATAL:
            logger.error(
                "[%s] %s failed fatally (status=%s): %s",
                label, candidate, outcome.status, outcome.message,
            )
            raise failure_to_error(outcome)

        logger.warning(
            "[%s] %s failed (status=%s, %s), trying next candidate",
            label, candidate, outcome.status, outcome.kind.value,
        )

    logger.error("[%s] all candidates exhausted: %s", label, candidates)
    raise CandidatesExhausted(candidates, last_failure, label=label)
