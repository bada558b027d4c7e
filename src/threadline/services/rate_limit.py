"""Fixed-window rate limiting for abusable forum actions.

Counters live in a ``RateLimitStore``. The in-memory store is process-local,
so with several server instances the effective limit multiplies by the
instance count; deployments that care use the Redis store instead.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from threading import Lock
from typing import Any, Protocol

import redis

from threadline.core.errors import RateLimitedError
from threadline.core.settings import settings
from threadline.schemas.auth import AuthSession

logger = logging.getLogger(__name__)

RATE_LIMITED_MESSAGE = "Rate limit exceeded. Please try again later."


@dataclass
class RateLimitEntry:
    """Counter for one ``action:client`` key in the current window."""

    count: int
    reset_time: int  # epoch milliseconds


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    reset_time: int | None = None


class RateLimitStore(Protocol):
    """Storage backend for rate-limit counters."""

    def get(self, key: str) -> RateLimitEntry | None: ...

    def put(self, key: str, entry: RateLimitEntry) -> None: ...

    def increment(self, key: str, reset_time: int) -> None: ...


class InMemoryRateLimitStore:
    """Process-local store.

    Expired entries are swept once the map grows past ``max_entries`` so
    high-cardinality identifiers cannot grow it without bound.
    """

    def __init__(
        self,
        max_entries: int | None = None,
        clock: Callable[[], int] | None = None,
    ) -> None:
        self._entries: dict[str, RateLimitEntry] = {}
        self._lock = Lock()
        self._max_entries = max_entries or settings.rate_limit_memory_max_entries
        self._clock = clock or _now_ms

    def get(self, key: str) -> RateLimitEntry | None:
        with self._lock:
            entry = self._entries.get(key)
            return RateLimitEntry(entry.count, entry.reset_time) if entry else None

    def put(self, key: str, entry: RateLimitEntry) -> None:
        with self._lock:
            self._entries[key] = RateLimitEntry(entry.count, entry.reset_time)
            if len(self._entries) > self._max_entries:
                self._evict_expired()

    def increment(self, key: str, reset_time: int) -> None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._entries[key] = RateLimitEntry(count=1, reset_time=reset_time)
            else:
                entry.count += 1

    def __len__(self) -> int:
        return len(self._entries)

    def _evict_expired(self) -> None:
        now = self._clock()
        stale = [key for key, entry in self._entries.items() if now > entry.reset_time]
        for key in stale:
            del self._entries[key]
        if stale:
            logger.debug("Evicted %d expired rate-limit entries", len(stale))


class RedisRateLimitStore:
    """Shared store backed by Redis hashes that expire at the window end."""

    def __init__(self, client: Any, prefix: str = "rl") -> None:
        self._redis = client
        self._prefix = prefix

    @classmethod
    def from_url(cls, url: str) -> RedisRateLimitStore:
        return cls(redis.from_url(url))

    def _key(self, key: str) -> str:
        return f"{self._prefix}:{key}"

    def get(self, key: str) -> RateLimitEntry | None:
        raw = self._redis.hgetall(self._key(key))
        values = {_decode(k): int(v) for k, v in raw.items()}
        # A hash without both fields is a half-written window; start a new one.
        if "count" not in values or "reset_time" not in values:
            return None
        return RateLimitEntry(count=values["count"], reset_time=values["reset_time"])

    def put(self, key: str, entry: RateLimitEntry) -> None:
        redis_key = self._key(key)
        pipe = self._redis.pipeline()
        pipe.hset(redis_key, mapping={"count": entry.count, "reset_time": entry.reset_time})
        pipe.pexpireat(redis_key, entry.reset_time)
        pipe.execute()

    def increment(self, key: str, reset_time: int) -> None:
        """Bump the counter and re-pin its window in one MULTI/EXEC.

        If the key expired after it was read, the hash is recreated with the
        window it was read with, so it still carries a reset time and expires.
        """
        redis_key = self._key(key)
        pipe = self._redis.pipeline()
        pipe.hincrby(redis_key, "count", 1)
        pipe.hsetnx(redis_key, "reset_time", reset_time)
        pipe.pexpireat(redis_key, reset_time)
        pipe.execute()


def _decode(value: bytes | str) -> str:
    return value.decode() if isinstance(value, bytes) else value


def _now_ms() -> int:
    return int(time.time() * 1000)


class RateLimiter:
    """Fixed-window counter keyed by ``action:client``."""

    def __init__(
        self,
        store: RateLimitStore,
        clock: Callable[[], int] | None = None,
    ) -> None:
        self.store = store
        self._clock = clock or _now_ms

    def check(
        self,
        action: str,
        *,
        window_ms: int,
        max_requests: int,
        identifier: str | None = None,
        actor_id: int | str | None = None,
    ) -> RateLimitResult:
        """Count one request against the caller's current window.

        Errors while talking to the store fail open: availability is preferred
        over strict enforcement.
        """
        try:
            client_id = identifier or (str(actor_id) if actor_id is not None else "anonymous")
            key = f"{action}:{client_id}"
            now = self._clock()
            entry = self.store.get(key)

            if entry is None or now > entry.reset_time:
                self.store.put(key, RateLimitEntry(count=1, reset_time=now + window_ms))
                return RateLimitResult(allowed=True)

            if entry.count >= max_requests:
                logger.warning("Rate limit hit for %s", key)
                return RateLimitResult(allowed=False, reset_time=entry.reset_time)

            self.store.increment(key, entry.reset_time)
            return RateLimitResult(allowed=True)
        except Exception:
            logger.exception("Rate limit check failed for %s; allowing request", action)
            return RateLimitResult(allowed=True)

    def enforce(self, action: str, session: AuthSession | None, identifier: str | None = None) -> None:
        """Apply the configured limit for ``action`` or raise ``RateLimitedError``."""
        window_ms, max_requests = settings.rate_limits[action]
        result = self.check(
            action,
            window_ms=window_ms,
            max_requests=max_requests,
            identifier=identifier,
            actor_id=session.user.id if session else None,
        )
        if not result.allowed:
            raise RateLimitedError(RATE_LIMITED_MESSAGE, reset_time=result.reset_time)


_rate_limiter: RateLimiter | None = None


def build_store() -> RateLimitStore:
    """Create the store selected by ``RATE_LIMIT_BACKEND``."""
    if settings.rate_limit_backend == "redis":
        return RedisRateLimitStore.from_url(settings.redis_url)
    return InMemoryRateLimitStore()


def get_rate_limiter() -> RateLimiter:
    """Return the process-wide rate limiter."""
    global _rate_limiter
    if _rate_limiter is None:
        _rate_limiter = RateLimiter(build_store())
    return _rate_limiter


def set_rate_limiter(limiter: RateLimiter | None) -> None:
    """Replace the process-wide limiter; tests use this to reset state."""
    global _rate_limiter
    _rate_limiter = limiter


def check_rate_limit(
    action: str,
    *,
    window_ms: int,
    max_requests: int,
    identifier: str | None = None,
    session: AuthSession | None = None,
) -> RateLimitResult:
    """Module-level convenience around the shared limiter."""
    return get_rate_limiter().check(
        action,
        window_ms=window_ms,
        max_requests=max_requests,
        identifier=identifier,
        actor_id=session.user.id if session else None,
    )
