"""
Per-request FastAPI dependencies for outbound HTTP and the image cache.

Nothing here is process-wide: each request gets its own httpx client, and
the cache is rebuilt over the configured store so tests can override it.
"""

from typing import AsyncIterator

import httpx
from fastapi import Depends

from cache import ResponseCache
from classification import CLASSIFIER_VERSION
from config import Settings, get_settings
from store import FileStore


async def get_http_client(
    settings: Settings = Depends(get_settings),
) -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(timeout=settings.http_timeout) as client:
        yield client


def get_image_cache(settings: Settings = Depends(get_settings)) -> ResponseCache:
    return ResponseCache(FileStore(settings.cache_dir), CLASSIFIER_VERSION)
