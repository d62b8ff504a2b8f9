"""Time-bounded cache for signed access URLs."""

import asyncio
import time
from typing import Awaitable, Callable, Dict, Tuple
from ..utils.exceptions import SigningFailed
from ..utils.logger import get_logger

logger = get_logger(__name__)


class SignedURLCache:
    """
    Memoize signed URLs per object key for ttl_seconds.

    ttl_seconds must be lower than the expiry the signer uses, so a URL
    served from cache always has at least the difference left to live.
    Concurrent misses for the same key share one signing call; failures
    are not cached. Expired entries are swept whenever a new one is stored.
    """

    def __init__(
        self,
        sign: Callable[[str], Awaitable[str]],
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._sign = sign
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, Tuple[str, float]] = {}
        self._in_flight: Dict[str, "asyncio.Task[str]"] = {}

    async def get(self, key: str) -> str:
        """Return a signed URL for key, signing only on a miss."""
        entry = self._entries.get(key)
        if entry is not None:
            url, expires_at = entry
            if self._clock() < expires_at:
                return url
            del self._entries[key]

        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._sign_and_store(key))
            self._in_flight[key] = task
            task.add_done_callback(lambda done, key=key: self._forget(key, done))

        try:
            return await asyncio.shield(task)
        except SigningFailed:
            raise
        except Exception as exc:
            raise SigningFailed(f"Failed to sign URL for {key}: {exc}", exc) from exc

    async def _sign_and_store(self, key: str) -> str:
        logger.debug("Signed URL cache miss", key=key)
        url = await self._sign(key)
        now = self._clock()
        self._evict_expired(now)
        self._entries[key] = (url, now + self._ttl)
        return url

    def _evict_expired(self, now: float) -> None:
        expired = [key for key, (_, expires_at) in self._entries.items() if expires_at <= now]
        for key in expired:
            del self._entries[key]

    def _forget(self, key: str, task: "asyncio.Task[str]") -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]

    def invalidate(self, key: str) -> None:
        """Drop the cached URL for key."""
        self._entries.pop(key, None)

    def __len__(self) -> int:
        return len(self._entries)
