"""
Gemini model configuration.

STATIC_MODEL_CHAIN is used whenever live model discovery fails or returns
nothing usable. It is ordered by stability and free-tier availability.

Override the first candidate via GEMINI_MODEL env var (e.g. in .env):
  GEMINI_MODEL=gemini-2.5-flash
"""

from dataclasses import dataclass, field
from typing import Optional

from errors import ErrorKind
from models.outcome import Classification

STATIC_MODEL_CHAIN = [
    "gemini-1.5-flash",           # Most stable and common for free tier
    "gemini-1.5-flash-8b",
    "gemini-1.5-flash-latest",
    "gemini-1.5-pro",             # May require paid tier
    "gemini-1.0-pro",
    "gemini-pro",                 # Legacy
]

# Substrings that mark a model as preview/experimental
PREVIEW_MARKERS = ("preview", "experimental", "exp", "beta")

# Versions considered for the preferred flash/pro buckets
PREFERRED_VERSIONS = ("2.5", "2.0", "1.5", "1.0")

GENERATE_ACTION = "generateContent"


@dataclass(frozen=True)
class RetryPolicy:
    """Decides whether a failed attempt moves on to the next candidate."""

    retryable_statuses: frozenset = field(default_factory=frozenset)
    fatal_statuses: frozenset = field(default_factory=frozenset)
    retry_by_default: bool = False
    unauthorized_is_fatal: bool = True

    def classify(self, status: Optional[int], kind: ErrorKind) -> Classification:
        if status in self.fatal_statuses:
            return Classification.FATAL
        # Gemini reports a bad key as 400 INVALID_ARGUMENT
        if kind is ErrorKind.UNAUTHORIZED and self.unauthorized_is_fatal:
            return Classification.FATAL
        if status in self.retryable_statuses:
            return Classification.RETRYABLE
        return Classification.RETRYABLE if self.retry_by_default else Classification.FATAL


# Text + vision: overloaded, not found / unsupported, per-model quota
GEMINI_POLICY = RetryPolicy(retryable_statuses=frozenset({400, 404, 429, 503}))

# Text-to-speech: only a bad key stops the chain
SPEECH_POLICY = RetryPolicy(
    fatal_statuses=frozenset({401}), retry_by_default=True, unauthorized_is_fatal=False,
)

# Image providers: every provider is optional, always fall through
IMAGE_POLICY = RetryPolicy(retry_by_default=True, unauthorized_is_fatal=False)
