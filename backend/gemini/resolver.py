"""
Model resolver.

Works out which Gemini models to try, best first, for the API key a client
was built with. Live discovery is preferred so deprecated names drop out on
their own; the static chain in gemini.config covers discovery outages.

Ordering:
  1. stable gemini flash (2.5 / 2.0 / 1.5 / 1.0)
  2. stable gemini pro
  3. other stable gemini
  4. other stable vendors
  5. gemma (smaller, less reliable at JSON)
  6. preview / experimental / beta (often overloaded)
"""

import logging
from typing import Any, Iterable, Optional

from gemini.config import (
    GENERATE_ACTION,
    PREFERRED_VERSIONS,
    PREVIEW_MARKERS,
    STATIC_MODEL_CHAIN,
)

logger = logging.getLogger(__name__)


def _model_name(descriptor: Any) -> Optional[str]:
    name = descriptor.get("name") if isinstance(descriptor, dict) else getattr(descriptor, "name", None)
    if not name:
        return None
    return name.removeprefix("models/")


def _supports_generate(descriptor: Any) -> bool:
    if isinstance(descriptor, dict):
        actions = descriptor.get("supported_actions") or descriptor.get("supportedGenerationMethods")
    else:
        actions = getattr(descriptor, "supported_actions", None)
    return bool(actions) and GENERATE_ACTION in actions


def generation_model_names(descriptors: Iterable[Any]) -> list[str]:
    """Names of the descriptors that support generateContent, input order kept."""
    names = []
    for descriptor in descriptors:
        name = _model_name(descriptor)
        if name and _supports_generate(descriptor):
            names.append(name)
    return names


def is_preview(name: str) -> bool:
    return any(marker in name for marker in PREVIEW_MARKERS)


def _bucket(name: str) -> int:
    versioned = any(v in name for v in PREFERRED_VERSIONS)
    if name.startswith("gemini"):
        if "flash" in name and versioned:
            return 0
        if "pro" in name and "flash" not in name and versioned:
            return 1
        return 2
    if name.startswith("gemma"):
        return 4
    return 3


def order_candidates(names: Iterable[str]) -> list[str]:
    """
    Order model names by preference. Every input name appears exactly once
    in the output; input order is kept inside each bucket.
    """
    unique = list(dict.fromkeys(n for n in names if n))
    stable = [n for n in unique if not is_preview(n)]
    preview = [n for n in unique if is_preview(n)]
    return sorted(stable, key=_bucket) + preview


def _pin(candidates: list[str], pinned: Optional[str]) -> list[str]:
    """
    Move GEMINI_MODEL forward without breaking the ordering rules: only a
    listed model moves, and a preview model only leads the preview group.
    """
    if not pinned:
        return candidates
    if pinned not in candidates:
        logger.warning("GEMINI_MODEL=%s is not available, ignoring it", pinned)
        return candidates

    rest = [c for c in candidates if c != pinned]
    if not is_preview(pinned):
        return [pinned] + rest
    stable = [c for c in rest if not is_preview(c)]
    return stable + [pinned] + [c for c in rest if is_preview(c)]


async def fetch_available_models(client) -> list[Any]:
    """List the models visible to the client's key. Never raises."""
    try:
        pager = await client.aio.models.list()
        return [model async for model in pager]
    except Exception as exc:
        logger.warning("Model discovery failed, using static chain: %s", exc)
        return []


async def resolve_candidates(
    client,
    descriptors: Optional[list[Any]] = None,
    *,
    pinned: Optional[str] = None,
) -> list[str]:
    """
    Return the non-empty ordered list of models to try.

    Args:
        client: google.genai.Client built for the caller's API key
        descriptors: pre-fetched model descriptors; discovered when None
        pinned: preferred model (GEMINI_MODEL), moved forward if listed
    """
    if descriptors is None:
        descriptors = await fetch_available_models(client)

    live = generation_model_names(descriptors)
    if live:
        candidates = order_candidates(live)
        logger.info("Resolved %d live models: %s", len(candidates), candidates)
    else:
        candidates = list(STATIC_MODEL_CHAIN)
        logger.info("No live models usable, falling back to %s", candidates)

    return _pin(candidates, pinned)
