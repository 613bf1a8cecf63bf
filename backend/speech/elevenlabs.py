"""
Text-to-speech via ElevenLabs.

synthesize() tries each ElevenLabs model, newest first, through the shared
fallback invoker. Only a 401 stops the chain; model-not-found (404) and any
other failure move on to the next model.
"""

import logging

import httpx

from config import Settings
from errors import CandidatesExhausted, ErrorKind, ServiceError
from gemini.config import SPEECH_POLICY
from gemini.fallback import attempt, invoke_with_fallback

logger = logging.getLogger(__name__)

TTS_URL = "https://api.elevenlabs.io/v1/text-to-speech/{voice_id}"

SPEECH_MODELS = [
    "eleven_turbo_v2_5",      # Latest turbo (fastest)
    "eleven_turbo_v2",
    "eleven_multilingual_v2",
    "eleven_monolingual_v1",  # Legacy, may be deprecated
]

SPEECH_TYPES = ("workout", "diet", "voice-coach")


def voice_settings(speech_type: str) -> dict:
    coach = speech_type == "voice-coach"
    return {
        "stability": 0.6 if coach else 0.5,
        "similarity_boost": 0.8 if coach else 0.75,
    }


def api_key(settings: Settings) -> str:
    """Validated ElevenLabs key; keys always start with 'sk_'."""
    key = (settings.elevenlabs_api_key or "").strip()
    if not key:
        raise ServiceError(ErrorKind.CONFIGURATION, "ELEVENLABS_API_KEY not configured")
    if not key.startswith("sk_"):
        logger.error("Invalid ElevenLabs API key format, key should start with 'sk_'")
        raise ServiceError(
            ErrorKind.INVALID_INPUT,
            "Invalid API key format",
            details="ElevenLabs API key should start with 'sk_'. Please check your ELEVENLABS_API_KEY.",
        )
    return key


async def synthesize(
    http: httpx.AsyncClient,
    settings: Settings,
    text: str,
    speech_type: str,
) -> bytes:
    """Return MP3 audio for text, using the first ElevenLabs model that works."""
    key = api_key(settings)
    url = TTS_URL.format(voice_id=settings.elevenlabs_voice_id)

    async def call(model_id: str) -> bytes:
        response = await http.post(
            url,
            headers={
                "Accept": "audio/mpeg",
                "Content-Type": "application/json",
                "xi-api-key": key,
            },
            json={
                "text": text.strip(),
                "model_id": model_id,
                "voice_settings": voice_settings(speech_type),
            },
        )
        response.raise_for_status()
        return response.content

    try:
        return await invoke_with_fallback(
            SPEECH_MODELS,
            lambda model_id: attempt(lambda: call(model_id), SPEECH_POLICY),
            label="tts",
        )
    except ServiceError as exc:
        if exc.kind is ErrorKind.UNAUTHORIZED and not isinstance(exc, CandidatesExhausted):
            raise ServiceError(
                ErrorKind.UNAUTHORIZED,
                "Authentication failed: Invalid ElevenLabs API key",
                details=(
                    "Your API key may be invalid, expired, or lack the required permissions. "
                    "Verify it at https://elevenlabs.io/app/settings/api-keys"
                ),
                failure=exc.failure,
            ) from exc
        raise
