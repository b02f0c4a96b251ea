from __future__ import annotations

import asyncio
import logging
import threading
import time
from collections.abc import Callable

from pydantic import BaseModel, ConfigDict

from app.schemas.lookup import LookupResult

logger = logging.getLogger(__name__)


class CacheEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    result: LookupResult
    stored_at: float


class ResultCache:
    """TTL-bounded store of lookup results keyed by normalized phone number.

    Built once per process and shared by request handlers and the sweeper.
    ``get`` hides entries whose age reached the TTL; ``sweep`` physically
    removes them. There is no size bound.
    """

    def __init__(
        self,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def _is_expired(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.stored_at >= self._ttl

    def get(self, key: str) -> LookupResult | None:
        with self._lock:
            entry = self._entries.get(key)
        if entry is None or self._is_expired(entry, self._clock()):
            return None
        return entry.result

    def put(self, key: str, result: LookupResult) -> None:
        entry = CacheEntry(result=result, stored_at=self._clock())
        with self._lock:
            self._entries[key] = entry

    def sweep(self) -> int:
        """Remove expired entries, return how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [k for k, e in self._entries.items() if self._is_expired(e, now)]
            for key in expired:
                del self._entries[key]
        return len(expired)

    def clear(self) -> int:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        return count

    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def __len__(self) -> int:
        return self.size()


async def run_sweeper(cache: ResultCache, interval_seconds: float) -> None:
    """Sweep ``cache`` every ``interval_seconds`` until cancelled."""
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            removed = cache.sweep()
        except Exception:
            logger.exception("Cache sweep failed")
            continue
        if removed:
            logger.info("Auto-cleared %d expired cache entries", removed)
