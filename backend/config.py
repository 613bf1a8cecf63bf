"""
Runtime configuration.

Values come from the process environment; main.py loads backend/.env first
via python-dotenv. Settings are rebuilt per request through the get_settings
dependency so tests can override them.
"""

import os
from typing import Optional

from pydantic import BaseModel, Field

DEFAULT_VOICE_ID = "21m00Tcm4TlvDq8ikWAM"  # ElevenLabs "Rachel"
DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://localhost:5173"]


class Settings(BaseModel):
    gemini_api_key: Optional[str] = None
    gemini_model: Optional[str] = None        # preferred model, if listed
    openai_api_key: Optional[str] = None
    unsplash_access_key: Optional[str] = None
    elevenlabs_api_key: Optional[str] = None
    elevenlabs_voice_id: str = DEFAULT_VOICE_ID
    cache_dir: str = ".cache/images"
    cors_origins: list[str] = Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    http_timeout: float = 30.0


def _env(name: str) -> Optional[str]:
    value = os.environ.get(name, "").strip()
    return value or None


def get_settings() -> Settings:
    origins = _env("CORS_ORIGINS")
    timeout = _env("HTTP_TIMEOUT")
    return Settings(
        gemini_api_key=_env("GEMINI_API_KEY"),
        gemini_model=_env("GEMINI_MODEL"),
        openai_api_key=_env("OPENAI_API_KEY"),
        unsplash_access_key=_env("UNSPLASH_ACCESS_KEY"),
        elevenlabs_api_key=_env("ELEVENLABS_API_KEY"),
        elevenlabs_voice_id=_env("ELEVENLABS_VOICE_ID") or DEFAULT_VOICE_ID,
        cache_dir=_env("CACHE_DIR") or ".cache/images",
        cors_origins=(
            [o.strip() for o in origins.split(",") if o.strip()]
            if origins else list(DEFAULT_CORS_ORIGINS)
        ),
        http_timeout=float(timeout) if timeout else 30.0,
    )
