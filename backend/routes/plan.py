import logging

from fastapi import APIRouter, Depends
from google import genai
from pydantic import ValidationError

from config import Settings, get_settings
from errors import ErrorKind, ServiceError
from gemini.client import generate_with_fallback, get_gemini_client
from gemini.prompts import plan_prompt
from json_repair import parse_llm_json
from models.plan import GenerateResponse
from models.profile import UserData

logger = logging.getLogger(__name__)

router = APIRouter(tags=["plan"])


# ---------- Endpoint ----------

@router.post("/generate", response_model=GenerateResponse)
async def generate_plan(
    body: UserData,
    client: genai.Client = Depends(get_gemini_client),
    settings: Settings = Depends(get_settings),
):
    """
    Generates a 7-day workout plan, a diet plan, 5 tips and a motivation quote
    for the submitted profile. The LLM's JSON is parsed strictly, repaired once
    if needed, then validated against GenerateResponse.
    """
    text = await generate_with_fallback(
        client, plan_prompt(body), label="generate", pinned=settings.gemini_model,
    )
    data = parse_llm_json(text)

    try:
        return GenerateResponse.model_validate(data)
    except ValidationError as exc:
        logger.error("Plan JSON failed validation: %s", exc)
        raise ServiceError(
            ErrorKind.MALFORMED_UPSTREAM,
            "Invalid response structure from AI",
            details="Please try again - the AI will generate a new response.",
        ) from exc
