"""
Local response cache for resolved image URLs.

Entries are stored as {"url", "timestamp" (epoch ms), "version"} under
"exercise_image_<name>". An entry is only served while its version matches
the cache's version and it is younger than the TTL; anything else is
evicted on read. Storage failures of any sort count as a miss: caching is
best effort and never raises.
"""

import logging
import time
from datetime import timedelta
from typing import Callable, Optional

from pydantic import BaseModel, ValidationError

from store import KeyValueStore

logger = logging.getLogger(__name__)

CACHE_PREFIX = "exercise_image_"
CACHE_TTL = timedelta(days=7)


class CacheEntry(BaseModel):
    url: str
    timestamp: int      # Unix timestamp in milliseconds
    version: str


def _now_ms() -> int:
    return int(time.time() * 1000)


class ResponseCache:
    def __init__(
        self,
        store: KeyValueStore,
        version: str,
        *,
        ttl: timedelta = CACHE_TTL,
        prefix: str = CACHE_PREFIX,
        clock: Callable[[], int] = _now_ms,
    ):
        self.store = store
        self.version = version
        self.ttl_ms = int(ttl.total_seconds() * 1000)
        self.prefix = prefix
        self.clock = clock

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def read(self, key: str) -> Optional[str]:
        try:
            raw = self.store.get_item(self._key(key))
            if raw is None:
                return None
            entry = CacheEntry.model_validate_json(raw)
        except (OSError, ValueError, ValidationError) as exc:
            logger.warning("Cache read failed for %r, treating as miss: %s", key, exc)
            return None

        if entry.version != self.version:
            logger.info("Evicting %r: version %s != %s", key, entry.version, self.version)
            self.invalidate(key)
            return None

        if self.clock() - entry.timestamp >= self.ttl_ms:
            logger.info("Evicting %r: expired", key)
            self.invalidate(key)
            return None

        return entry.url

    def write(self, key: str, value: str) -> None:
        entry = CacheEntry(url=value, timestamp=self.clock(), version=self.version)
        try:
            self.store.set_item(self._key(key), entry.model_dump_json())
        except (OSError, ValueError) as exc:
            logger.warning("Cache write failed for %r: %s", key, exc)

    def invalidate(self, key: str) -> None:
        try:
            self.store.remove_item(self._key(key))
        except OSError as exc:
            logger.warning("Cache invalidate failed for %r: %s", key, exc)
