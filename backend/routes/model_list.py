import logging
from typing import Optional

from fastapi import APIRouter, Depends
from google import genai
from pydantic import BaseModel

from config import Settings, get_settings
from gemini.client import generate_text, get_gemini_client
from gemini.config import STATIC_MODEL_CHAIN
from gemini.fallback import classify_exception
from gemini.resolver import fetch_available_models, generation_model_names, resolve_candidates

logger = logging.getLogger(__name__)

router = APIRouter(tags=["models"])


# ---------- Response schemas ----------

class ModelsResponse(BaseModel):
    available: list[str]
    candidates: list[str]


class ModelProbe(BaseModel):
    model: str
    working: bool
    error: Optional[str] = None
    status_code: Optional[int] = None


class VerifyKeyResponse(BaseModel):
    available: list[str]
    results: list[ModelProbe]
    working_models: list[str]


# ---------- Endpoints ----------

@router.get("/models", response_model=ModelsResponse)
async def list_models(
    client: genai.Client = Depends(get_gemini_client),
    settings: Settings = Depends(get_settings),
):
    """Models the key can use for generateContent, and the order they'd be tried in."""
    descriptors = await fetch_available_models(client)
    candidates = await resolve_candidates(client, descriptors, pinned=settings.gemini_model)
    return ModelsResponse(
        available=generation_model_names(descriptors),
        candidates=candidates,
    )


@router.get("/verify-key", response_model=VerifyKeyResponse)
async def verify_key(client: genai.Client = Depends(get_gemini_client)):
    """
    Sends a tiny prompt to each well-known model to check what the key can
    actually reach. Every model is probed; failures are reported, not raised.
    """
    descriptors = await fetch_available_models(client)

    results = []
    for model in STATIC_MODEL_CHAIN:
        try:
            await generate_text(client, model, "Say 'test'", temperature=0.0)
            results.append(ModelProbe(model=model, working=True))
        except Exception as exc:
            failure = classify_exception(exc)
            logger.info("Probe %s failed: %s", model, failure.message)
            results.append(ModelProbe(
                model=model, working=False,
                error=failure.message, status_code=failure.status,
            ))

    return VerifyKeyResponse(
        available=generation_model_names(descriptors),
        results=results,
        working_models=[r.model for r in results if r.working],
    )
