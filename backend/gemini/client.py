"""
Gemini client helpers.

A google.genai.Client is built per request by the get_gemini_client
dependency and passed down explicitly; nothing here keeps a module-level
client. generate_with_fallback() and analyze_with_fallback() combine the
single-model operations with the resolver and the fallback invoker:

    text = await generate_with_fallback(
        client, prompt, label="describe", pinned=settings.gemini_model,
    )

Edge cases handled:
  - Missing API key (CONFIGURATION error before any call)
  - Safety filter blocks (INVALID_INPUT, not retried)
  - Empty / malformed responses (MALFORMED_UPSTREAM, not retried)
"""

import logging
from typing import Optional

from fastapi import Depends
from google import genai
from google.genai import types

from config import Settings, get_settings
from errors import ErrorKind, ServiceError
from gemini.fallback import attempt, invoke_with_fallback
from gemini.resolver import resolve_candidates

logger = logging.getLogger(__name__)

MAX_OUTPUT_TOKENS = 8192
DEFAULT_TEMPERATURE = 0.7


def build_client(api_key: Optional[str]) -> genai.Client:
    if not api_key:
        logger.warning("Gemini call refused, GEMINI_API_KEY not set")
        raise ServiceError(
            ErrorKind.CONFIGURATION,
            "GEMINI_API_KEY not configured",
            details="Add it to backend/.env and restart the server.",
        )
    return genai.Client(api_key=api_key)


def get_gemini_client(settings: Settings = Depends(get_settings)) -> genai.Client:
    """FastAPI dependency: one client per request."""
    return build_client(settings.gemini_api_key)


# ─── Response extractor ───────────────────────────────────────────────

def extract_text(response) -> str:
    """
    Pull text from a Gemini response, handling:
      - Normal text responses
      - Safety-blocked prompts
      - Empty / malformed responses
    """
    try:
        text = response.text
        if text and text.strip():
            return text.strip()
    except (ValueError, AttributeError):
        pass

    feedback = getattr(response, "prompt_feedback", None)
    if feedback is not None and getattr(feedback, "block_reason", None):
        raise ServiceError(
            ErrorKind.INVALID_INPUT,
            "Content was flagged by safety filters",
            details=str(feedback.block_reason),
        )

    for candidate in getattr(response, "candidates", None) or []:
        content = getattr(candidate, "content", None)
        for part in getattr(content, "parts", None) or []:
            text = getattr(part, "text", None)
            if text and text.strip():
                return text.strip()

    raise ServiceError(
        ErrorKind.MALFORMED_UPSTREAM,
        "The AI returned an empty response",
        details="Please try again - the AI will generate a new response.",
    )


# ─── Operations (one candidate model each) ────────────────────────────

# No response_mime_type: JSON mode is rejected by gemma and 1.0 models,
# so JSON is requested in the prompt and repaired by json_repair.
def _config(temperature: float) -> types.GenerateContentConfig:
    return types.GenerateContentConfig(
        max_output_tokens=MAX_OUTPUT_TOKENS,
        temperature=temperature,
    )


async def generate_text(
    client: genai.Client,
    model: str,
    prompt: str,
    *,
    temperature: float = DEFAULT_TEMPERATURE,
) -> str:
    response = await client.aio.models.generate_content(
        model=model,
        contents=prompt,
        config=_config(temperature),
    )
    return extract_text(response)


async def analyze_image(
    client: genai.Client,
    model: str,
    image: bytes,
    mime_type: str,
    prompt: str,
) -> str:
    """Multimodal call: image part first, then the instructions."""
    response = await client.aio.models.generate_content(
        model=model,
        contents=[
            types.Part.from_bytes(data=image, mime_type=mime_type),
            prompt,
        ],
        config=_config(temperature=0.2),
    )
    return extract_text(response)


# ─── With fallback across resolved models ─────────────────────────────

async def generate_with_fallback(
    client: genai.Client,
    prompt: str,
    *,
    label: str,
    pinned: Optional[str] = None,
    temperature: float = DEFAULT_TEMPERATURE,
) -> str:
    """Text generation on the first resolved model that answers."""
    candidates = await resolve_candidates(client, pinned=pinned)
    return await invoke_with_fallback(
        candidates,
        lambda model: attempt(
            lambda: generate_text(client, model, prompt, temperature=temperature)
        ),
        label=label,
    )


async def analyze_with_fallback(
    client: genai.Client,
    image: bytes,
    mime_type: str,
    prompt: str,
    *,
    pinned: Optional[str] = None,
) -> str:
    """Vision analysis on the first resolved model that answers."""
    candidates = await resolve_candidates(client, pinned=pinned)
    return await invoke_with_fallback(
        candidates,
        lambda model: attempt(lambda: analyze_image(client, model, image, mime_type, prompt)),
        label="analyze",
    )
