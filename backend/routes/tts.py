import base64
from typing import Literal

import httpx
from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field

from config import Settings, get_settings
from dependencies import get_http_client
from models.profile import CamelModel
from speech.elevenlabs import synthesize

router = APIRouter(tags=["tts"])


# ---------- Request / Response schemas ----------

class TTSRequest(BaseModel):
    type: Literal["workout", "diet", "voice-coach"]
    text: str = Field(min_length=1)

    model_config = {"str_strip_whitespace": True}


class VoiceCoachAudio(CamelModel):
    audio_url: str
    audio_base64: str
    content_type: str = "audio/mpeg"


# ---------- Endpoint ----------

@router.post("/tts")
async def text_to_speech(
    body: TTSRequest,
    http: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
):
    """
    Reads text aloud with ElevenLabs.
    "workout" and "diet" return an MP3 attachment; "voice-coach" returns
    JSON with the audio inlined as base64 so the page can play it directly.
    """
    audio = await synthesize(http, settings, body.text, body.type)

    if body.type == "voice-coach":
        encoded = base64.b64encode(audio).decode("ascii")
        return VoiceCoachAudio(
            audio_url=f"data:audio/mpeg;base64,{encoded}",
            audio_base64=encoded,
        )

    return Response(
        content=audio,
        media_type="audio/mpeg",
        headers={
            "Content-Disposition": f'attachment; filename="{body.type}-audio.mp3"',
            "Cache-Control": "no-cache",
        },
    )
