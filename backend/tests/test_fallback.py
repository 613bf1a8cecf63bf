"""
Tests for the fallback invoker and exception classification.

Operations are plain async functions recording every candidate they see,
so the tests can assert exactly how many attempts happened.
"""

import asyncio

import httpx
import pytest

from conftest import gemini_error, http_error
from errors import CandidatesExhausted, ErrorKind, ServiceError
from gemini.config import GEMINI_POLICY, IMAGE_POLICY, SPEECH_POLICY
from gemini.fallback import attempt, classify_exception, invoke_with_fallback
from models.outcome import Classification, Failure, Success


def _retryable(status=503, kind=ErrorKind.OVERLOADED):
    return Failure(Classification.RETRYABLE, f"HTTP {status}", status=status, kind=kind)


def _scripted(outcomes: dict):
    """Operation returning outcomes[candidate] and recording the call order."""
    seen = []

    async def operation(candidate):
        seen.append(candidate)
        return outcomes[candidate]

    return operation, seen


def _run(candidates, operation, **kwargs):
    return asyncio.run(invoke_with_fallback(candidates, operation, **kwargs))


class TestInvokeWithFallback:

    def test_first_success_returned_without_further_attempts(self):
        operation, seen = _scripted({"a": Success("A"), "b": Success("B")})
        assert _run(["a", "b"], operation) == "A"
        assert seen == ["a"]

    def test_success_after_retryable_failures(self):
        outcomes = {f"m{i}": _retryable() for i in range(4)}
        outcomes["m4"] = Success("X")
        outcomes["m5"] = Success("never")
        operation, seen = _scripted(outcomes)

        assert _run([f"m{i}" for i in range(6)], operation) == "X"
        assert seen == ["m0", "m1", "m2", "m3", "m4"]

    def test_overloaded_then_ok_takes_two_attempts(self):
        operation, seen = _scripted({
            "gemini-1.5-flash": _retryable(503),
            "gemini-1.5-pro": Success("ok"),
        })
        assert _run(["gemini-1.5-flash", "gemini-1.5-pro"], operation) == "ok"
        assert len(seen) == 2

    def test_fatal_stops_immediately_and_is_surfaced_unchanged(self):
        fatal = Failure(Classification.FATAL, "bad key", status=401, kind=ErrorKind.UNAUTHORIZED)
        operation, seen = _scripted({"a": fatal, "b": Success("never")})

        with pytest.raises(ServiceError) as exc_info:
            _run(["a", "b"], operation)

        assert seen == ["a"]
        assert exc_info.value.failure is fatal
        assert exc_info.value.kind is ErrorKind.UNAUTHORIZED
        assert exc_info.value.status_code == 401

    def test_fatal_in_the_middle(self):
        fatal = Failure(Classification.FATAL, "boom", status=500)
        operation, seen = _scripted({"a": _retryable(), "b": fatal, "c": Success("never")})

        with pytest.raises(ServiceError) as exc_info:
            _run(["a", "b", "c"], operation)

        assert seen == ["a", "b"]
        assert not isinstance(exc_info.value, CandidatesExhausted)

    def test_exhausted_message_lists_every_candidate(self):
        names = ["gemini-1.5-flash", "gemini-1.5-flash-8b", "gemma-3-4b"]
        operation, seen = _scripted({n: _retryable(404, ErrorKind.NOT_FOUND) for n in names})

        with pytest.raises(CandidatesExhausted) as exc_info:
            _run(names, operation)

        err = exc_info.value
        assert seen == names
        for name in names:
            assert name in str(err)
        assert "not-found" in str(err)
        assert err.status_code == 404
        assert err.candidates == names

    @pytest.mark.parametrize("status,kind,expected_status", [
        (503, ErrorKind.OVERLOADED, 503),
        (429, ErrorKind.RATE_LIMITED, 429),
        (404, ErrorKind.NOT_FOUND, 404),
        (400, ErrorKind.INVALID_INPUT, 404),
    ])
    def test_exhausted_status_follows_last_failure(self, status, kind, expected_status):
        operation, _ = _scripted({"a": _retryable(503), "b": _retryable(status, kind)})
        with pytest.raises(CandidatesExhausted) as exc_info:
            _run(["a", "b"], operation)
        assert exc_info.value.status_code == expected_status

    def test_rate_limited_payload_has_retry_hint(self):
        operation, _ = _scripted({"a": _retryable(429, ErrorKind.RATE_LIMITED)})
        with pytest.raises(CandidatesExhausted) as exc_info:
            _run(["a"], operation)
        payload = exc_info.value.to_payload()
        assert payload["retryAfter"]
        assert "a" in payload["error"]

    def test_empty_candidate_list_is_rejected(self):
        operation, _ = _scripted({})
        with pytest.raises(ValueError):
            _run([], operation)


class TestClassification:

    @pytest.mark.parametrize("status", [400, 404, 429, 503])
    def test_gemini_retryable_statuses(self, status):
        failure = classify_exception(gemini_error(status), GEMINI_POLICY)
        assert failure.classification is Classification.RETRYABLE
        assert failure.status == status

    @pytest.mark.parametrize("status", [401, 403, 500])
    def test_gemini_fatal_statuses(self, status):
        failure = classify_exception(gemini_error(status), GEMINI_POLICY)
        assert failure.classification is Classification.FATAL

    def test_gemini_invalid_key_reported_as_400_is_fatal(self):
        exc = gemini_error(400, "API key not valid. Please pass a valid API key.", "INVALID_ARGUMENT")
        failure = classify_exception(exc, GEMINI_POLICY)
        assert failure.kind is ErrorKind.UNAUTHORIZED
        assert failure.classification is Classification.FATAL

    def test_speech_401_is_fatal(self):
        failure = classify_exception(http_error(401), SPEECH_POLICY)
        assert failure.classification is Classification.FATAL
        assert failure.kind is ErrorKind.UNAUTHORIZED

    @pytest.mark.parametrize("status", [400, 403, 404, 429, 500, 503])
    def test_speech_other_statuses_are_retryable(self, status):
        failure = classify_exception(http_error(status), SPEECH_POLICY)
        assert failure.classification is Classification.RETRYABLE

    def test_network_error_is_overloaded(self):
        exc = httpx.ConnectError("connection refused")
        failure = classify_exception(exc, GEMINI_POLICY)
        assert failure.kind is ErrorKind.OVERLOADED
        assert failure.status is None
        assert failure.classification is Classification.FATAL
        assert classify_exception(exc, SPEECH_POLICY).classification is Classification.RETRYABLE

    def test_image_policy_never_stops(self):
        for exc in (http_error(401), http_error(500), LookupError("no results")):
            assert classify_exception(exc, IMAGE_POLICY).retryable

    def test_our_own_errors_keep_their_kind(self):
        exc = ServiceError(ErrorKind.MALFORMED_UPSTREAM, "empty response")
        failure = classify_exception(exc, GEMINI_POLICY)
        assert failure.kind is ErrorKind.MALFORMED_UPSTREAM
        assert failure.classification is Classification.FATAL


class TestAttempt:

    def test_success_wraps_payload(self):
        async def call():
            return 42

        outcome = asyncio.run(attempt(call))
        assert outcome == Success(42)

    def test_exception_becomes_failure(self):
        async def call():
            raise gemini_error(503, "The model is overloaded", "UNAVAILABLE")

        outcome = asyncio.run(attempt(call))
        assert isinstance(outcome, Failure)
        assert outcome.kind is ErrorKind.OVERLOADED
        assert outcome.retryable
