"""
Parse JSON produced by an LLM.

parse_llm_json() tries a strict json.loads first. If that fails it runs one
ordered repair pass and parses again; a second failure is reported as a
MALFORMED_UPSTREAM error. Each repair step is a pure str -> str function.
"""

import json
import logging
import re
from typing import Any

from errors import ErrorKind, ServiceError

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json|JSON)?\s*(.*?)\s*```", re.DOTALL)
_BLOCK_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)
# Only whole-line or trailing // comments; "http://" inside strings is left alone
_LINE_COMMENT_RE = re.compile(r"(^|[\s,{\[])//[^\n]*", re.MULTILINE)
_TRAILING_COMMA_RE = re.compile(r",(\s*[}\]])")
_BARE_VALUE_RE = re.compile(r'("[\w]+"\s*:\s*)([A-Z][A-Za-z ]*?[A-Za-z])(\s*[,}\]\n])')


def strip_code_fences(text: str) -> str:
    match = _FENCE_RE.search(text)
    return match.group(1) if match else text.strip()


def extract_object(text: str) -> str:
    """Cut the text down to its outermost {...} block, if it has one."""
    start = text.find("{")
    end = text.rfind("}") + 1
    if start != -1 and end > start:
        return text[start:end]
    return text


def strip_comments(text: str) -> str:
    text = _BLOCK_COMMENT_RE.sub("", text)
    return _LINE_COMMENT_RE.sub(lambda m: m.group(1), text)


def strip_trailing_commas(text: str) -> str:
    return _TRAILING_COMMA_RE.sub(r"\1", text)


def quote_bare_identifiers(text: str) -> str:
    """'"reps": Max,' -> '"reps": "Max",'. true/false/null are lowercase and untouched."""
    return _BARE_VALUE_RE.sub(lambda m: f'{m.group(1)}"{m.group(2)}"{m.group(3)}', text)


REPAIR_STEPS = (
    strip_code_fences,
    extract_object,
    strip_comments,
    strip_trailing_commas,
    quote_bare_identifiers,
)


def repair(text: str) -> str:
    for step in REPAIR_STEPS:
        text = step(text)
    return text


def parse_llm_json(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        logger.info("Strict JSON parse failed (%s), attempting repair", exc)

    repaired = repair(text)
    try:
        return json.loads(repaired)
    except json.JSONDecodeError as exc:
        logger.error(
            "JSON repair failed at position %d: %r",
            exc.pos, repaired[max(0, exc.pos - 100):exc.pos + 100],
        )
        raise ServiceError(
            ErrorKind.MALFORMED_UPSTREAM,
            "Failed to parse JSON from AI response",
            details=(
                f"The AI may have generated invalid JSON. Error: {exc.msg}. "
                "Please try again - the AI will generate a new response."
            ),
        ) from exc
