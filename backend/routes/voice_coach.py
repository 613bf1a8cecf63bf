import logging
from typing import Literal

from fastapi import APIRouter, Depends
from google import genai
from pydantic import BaseModel, Field

from config import Settings, get_settings
from errors import ErrorKind, ServiceError
from gemini.client import generate_with_fallback, get_gemini_client
from gemini.prompts import speech_prompt
from json_repair import parse_llm_json
from models.profile import CamelModel

logger = logging.getLogger(__name__)

router = APIRouter(tags=["voice-coach"])


# ---------- Request / Response schemas ----------

class VoiceCoachRequest(CamelModel):
    name: str = Field(min_length=1)
    goal: str = Field(min_length=1)
    fitness_level: str = Field(min_length=1)
    tone: Literal["motivational", "calm"]


class VoiceCoachResponse(BaseModel):
    speech: str


def _speech_from(text: str) -> str:
    """The speech field of the model's JSON, or the whole text if it isn't JSON."""
    try:
        data = parse_llm_json(text)
    except ServiceError:
        logger.info("Voice coach reply was not JSON, using raw text")
        return text.strip()

    speech = data.get("speech") if isinstance(data, dict) else None
    if not isinstance(speech, str) or not speech.strip():
        raise ServiceError(ErrorKind.MALFORMED_UPSTREAM, "Invalid response structure from AI")
    return speech.strip()


# ---------- Endpoint ----------

@router.post("/voice-coach", response_model=VoiceCoachResponse)
async def voice_coach(
    body: VoiceCoachRequest,
    client: genai.Client = Depends(get_gemini_client),
    settings: Settings = Depends(get_settings),
):
    """Short personalised speech in the requested tone, ready for TTS."""
    prompt = speech_prompt(body.name, body.goal, body.fitness_level, body.tone)
    text = await generate_with_fallback(
        client, prompt, label="voice-coach", pinned=settings.gemini_model,
    )
    return VoiceCoachResponse(speech=_speech_from(text))
