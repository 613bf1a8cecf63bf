import logging
from typing import Optional

import httpx
from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, Field

from cache import ResponseCache
from classification import classify_item
from config import Settings, get_settings
from dependencies import get_http_client, get_image_cache
from imagery.lookup import ImageLookup

logger = logging.getLogger(__name__)

router = APIRouter(tags=["image"])


# ---------- Request / Response schemas ----------

class ImageRequest(BaseModel):
    name: str = Field(min_length=1)
    refresh: bool = False       # drop any cached URL first

    model_config = {"str_strip_whitespace": True}


class ImageResponse(BaseModel):
    url: str
    provider: str
    cached: bool = False
    note: Optional[str] = None


# ---------- Endpoint ----------

@router.post("/image", response_model=ImageResponse, response_model_exclude_none=True)
async def find_image(
    body: ImageRequest,
    http: httpx.AsyncClient = Depends(get_http_client),
    cache: ResponseCache = Depends(get_image_cache),
    settings: Settings = Depends(get_settings),
):
    """
    Returns an image URL for an exercise or meal.
    Served from the local cache when a fresh entry exists; otherwise looked
    up through the provider chain and cached for next time.
    """
    # Stores may hit the disk; keep that off the event loop
    if body.refresh:
        await run_in_threadpool(cache.invalidate, body.name)

    cached_url = await run_in_threadpool(cache.read, body.name)
    if cached_url:
        return ImageResponse(url=cached_url, provider="cache", cached=True)

    kind = classify_item(body.name)
    logger.info("Image for %r (%s)", body.name, kind.value)

    result = await ImageLookup(http, settings).find(body.name, kind)
    await run_in_threadpool(cache.write, body.name, result.url)

    note = None
    if result.provider != "openai":
        note = (
            "Using fallback image service. Configure OPENAI_API_KEY for "
            "AI-generated images."
        )
    return ImageResponse(url=result.url, provider=result.provider, note=note)
