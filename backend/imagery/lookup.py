"""
Image lookup for exercises and meals.

Each image source is a candidate for the fallback invoker, tried in order:
  openai: DALL-E 3 generation (needs OPENAI_API_KEY)
  unsplash: Unsplash search (needs UNSPLASH_ACCESS_KEY)
  curated: keyword map of known Unsplash photos (used without a key)
  placeholder: generic themed photo picked by name hash, always succeeds

Any failure moves on to the next source, so a lookup never ends without a URL.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

import httpx

from classification import ItemKind
from config import Settings
from gemini.config import IMAGE_POLICY
from gemini.fallback import attempt, invoke_with_fallback

logger = logging.getLogger(__name__)

OPENAI_IMAGES_URL = "https://api.openai.com/v1/images/generations"
UNSPLASH_SEARCH_URL = "https://api.unsplash.com/search/photos"

_U = "https://images.unsplash.com/"

CURATED_FOOD = {
    "burger": _U + "photo-1568901346375-23c9450c58cd?w=800&h=600&fit=crop&q=80",
    "shake": _U + "photo-1572490122747-3968b75cc699?w=800&h=600&fit=crop&q=80",
    "smoothie": _U + "photo-1553530666-ba11a7da3888?w=800&h=600&fit=crop&q=80",
    "salad": _U + "photo-1512621776951-a57141f2eefd?w=800&h=600&fit=crop&q=80",
    "chicken": _U + "photo-1604503468506-a8da13d82791?w=800&h=600&fit=crop&q=80",
    "fish": _U + "photo-1544947950-fa07a98d237f?w=800&h=600&fit=crop&q=80",
    "pasta": _U + "photo-1551183053-bf91a1d81141?w=800&h=600&fit=crop&q=80",
    "pizza": _U + "photo-1565299624946-b28f40a0ae38?w=800&h=600&fit=crop&q=80",
    "soup": _U + "photo-1547592166-23ac45744acd?w=800&h=600&fit=crop&q=80",
    "sandwich": _U + "photo-1539252554453-80ab65ce3586?w=800&h=600&fit=crop&q=80",
    "vegan": _U + "photo-1512621776951-a57141f2eefd?w=800&h=600&fit=crop&q=80",
    "protein": _U + "photo-1546069901-ba9599a7e63c?w=800&h=600&fit=crop&q=80",
    "grilled": _U + "photo-1604503468506-a8da13d82791?w=800&h=600&fit=crop&q=80",
    "baked": _U + "photo-1544947950-fa07a98d237f?w=800&h=600&fit=crop&q=80",
    "potato": _U + "photo-1512621776951-a57141f2eefd?w=800&h=600&fit=crop&q=80",
    "broccoli": _U + "photo-1512621776951-a57141f2eefd?w=800&h=600&fit=crop&q=80",
}

_RUN = _U + "photo-1544367567-0f2fcb009e0b?w=800&h=600&fit=crop&q=80"
_LIFT = _U + "photo-1517836357463-d25dfeac3438?w=800&h=600&fit=crop&q=80"

CURATED_EXERCISE = {
    "walk": _RUN, "jog": _RUN, "run": _RUN,
    "push": _LIFT, "squat": _LIFT, "deadlift": _LIFT,
    "bench": _LIFT, "curl": _LIFT, "press": _LIFT,
}

PLACEHOLDER_FOOD = [
    _U + "photo-1546069901-ba9599a7e63c?w=400&h=300&fit=crop&q=80",
    _U + "photo-1490645935967-10de6ba17061?w=400&h=300&fit=crop&q=80",
    _U + "photo-1504674900247-0877df9cc836?w=400&h=300&fit=crop&q=80",
    _U + "photo-1512621776951-a57141f2eefd?w=400&h=300&fit=crop&q=80",
]

PLACEHOLDER_FITNESS = [
    _U + "photo-1571019613454-1cb2f99b2d8b?w=400&h=300&fit=crop&q=80",
    _U + "photo-1517836357463-d25dfeac3438?w=400&h=300&fit=crop&q=80",
    _U + "photo-1534438327276-14e5300c3a48?w=400&h=300&fit=crop&q=80",
    _U + "photo-1544367567-0f2fcb009e0b?w=400&h=300&fit=crop&q=80",
]

_MEAL_NOISE_RE = re.compile(
    r"\b(baked|grilled|roasted|steamed|fried|sautéed|raw|boiled|poached|braised"
    r"|stir-fried|pan-seared|with|and)\b|&"
)
_EXERCISE_NOISE_RE = re.compile(r"\b(brisk|light|heavy|deep|wide|narrow|or|and)\b|&")


@dataclass(frozen=True)
class ImageResult:
    url: str
    provider: str


def name_hash(name: str) -> int:
    """Stable signed 32-bit string hash (h * 31 + c), same item -> same pick."""
    h = 0
    for ch in name:
        h = (h * 31 + ord(ch)) & 0xFFFFFFFF
    return h - (1 << 32) if h >= (1 << 31) else h


def pick(name: str, options: list) -> object:
    return options[abs(name_hash(name)) % len(options)]


def image_prompt(name: str, kind: ItemKind) -> str:
    if kind is ItemKind.MEAL:
        return (
            f"Generate a realistic, high-quality food photography image of: {name}. "
            "Show the meal beautifully plated, with good lighting, appetizing "
            "presentation, and professional food styling."
        )
    return (
        f"Generate a realistic, high-quality image of the exercise: {name}. "
        "Show proper form, lighting, and clarity."
    )


def search_query(name: str, kind: ItemKind) -> str:
    """
    "Baked Fish With Roasted Sweet Potato & Broccoli" -> "fish sweet potato broccoli"
    "Brisk Walk Or Light Jog" -> "walk jog exercise"
    """
    lower = name.strip().lower()
    if kind is ItemKind.MEAL:
        cleaned = " ".join(_MEAL_NOISE_RE.sub(" ", lower).split())
        return cleaned if len(cleaned) > 3 else lower
    cleaned = " ".join(_EXERCISE_NOISE_RE.sub(" ", lower).split())
    return f"{cleaned} exercise"


class ImageLookup:
    def __init__(self, http: httpx.AsyncClient, settings: Settings):
        self.http = http
        self.settings = settings

    def providers(self) -> list[str]:
        chain = []
        if self.settings.openai_api_key:
            chain.append("openai")
        chain.append("unsplash" if self.settings.unsplash_access_key else "curated")
        chain.append("placeholder")
        return chain

    async def _openai(self, name: str, kind: ItemKind) -> str:
        response = await self.http.post(
            OPENAI_IMAGES_URL,
            headers={"Authorization": f"Bearer {self.settings.openai_api_key}"},
            json={
                "model": "dall-e-3",
                "prompt": image_prompt(name, kind),
                "n": 1,
                "size": "1024x1024",
                "quality": "standard",
            },
        )
        response.raise_for_status()
        data = response.json().get("data") or [{}]
        url = data[0].get("url")
        if not url:
            raise LookupError("No image URL returned from OpenAI")
        return url

    async def _unsplash(self, name: str, kind: ItemKind) -> str:
        query = search_query(name, kind)
        response = await self.http.get(
            UNSPLASH_SEARCH_URL,
            params={
                "query": query,
                "per_page": 10,
                "orientation": "landscape",
                "client_id": self.settings.unsplash_access_key,
            },
        )
        response.raise_for_status()
        results = response.json().get("results") or []
        if not results:
            raise LookupError(f"No Unsplash results for {query!r}")
        urls = pick(name, results).get("urls") or {}
        url = urls.get("regular") or urls.get("small") or urls.get("thumb")
        if not url:
            raise LookupError("Unsplash result has no usable URL")
        logger.info("Unsplash: %d results for %r", len(results), query)
        return url

    async def _curated(self, name: str, kind: ItemKind) -> str:
        mapping = CURATED_FOOD if kind is ItemKind.MEAL else CURATED_EXERCISE
        lower = name.lower()
        match: Optional[str] = next((key for key in mapping if key in lower), None)
        if match is None:
            raise LookupError(f"No curated image for {name!r}")
        return mapping[match]

    async def _placeholder(self, name: str, kind: ItemKind) -> str:
        options = PLACEHOLDER_FOOD if kind is ItemKind.MEAL else PLACEHOLDER_FITNESS
        return pick(name, options)

    async def find(self, name: str, kind: ItemKind) -> ImageResult:
        sources = {
            "openai": self._openai,
            "unsplash": self._unsplash,
            "curated": self._curated,
            "placeholder": self._placeholder,
        }

        async def operation(provider: str):
            async def call() -> ImageResult:
                return ImageResult(url=await sources[provider](name, kind), provider=provider)
            return await attempt(call, IMAGE_POLICY)

        return await invoke_with_fallback(self.providers(), operation, label="image")
