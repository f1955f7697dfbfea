from __future__ import annotations

import json
import time
from dataclasses import dataclass
from threading import Lock
from typing import Callable, Dict, List, Optional, Tuple
from urllib.parse import quote

import redis

from config import EMAIL_CACHE_TTL_SECS, REDIS_URL, log
from schemas.email import Email

KEY_PREFIX = "emails"
QUERY_NAMESPACE = "q"
COUNT_NAMESPACE = "n"
ANONYMOUS_USER = "anonymous"


# =========================
# Keys
# =========================
@dataclass(frozen=True)
class CacheKey:
    namespace: str
    user_identity: str
    discriminator: str

    def serialize(self) -> str:
        return f"{KEY_PREFIX}:{self.user_identity}:{self.namespace}:{self.discriminator}"

    def __str__(self) -> str:
        return self.serialize()


def query_key(user_identity: Optional[str], query: str) -> CacheKey:
    # Same escaping as JavaScript's encodeURIComponent.
    return CacheKey(QUERY_NAMESPACE, user_identity or ANONYMOUS_USER, quote(query, safe="!*'()"))


def count_key(user_identity: Optional[str], count: int) -> CacheKey:
    return CacheKey(COUNT_NAMESPACE, user_identity or ANONYMOUS_USER, str(int(count)))


# =========================
# Backends
# =========================
class MemoryCacheBackend:
    """In-process TTL store used when no REDIS_URL is configured.

    Expired entries are dropped lazily on read and swept on every write, so
    keys that are never read again do not accumulate.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._data: Dict[str, Tuple[float, str]] = {}
        self._lock = Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def _purge_expired(self, now: float) -> None:
        expired = [k for k, (expires_at, _) in self._data.items() if expires_at <= now]
        for k in expired:
            del self._data[k]

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            item = self._data.get(key)
            if item is None:
                return None
            expires_at, value = item
            if self._clock() >= expires_at:
                self._data.pop(key, None)
                return None
            return value

    def setex(self, key: str, ttl_seconds: int, value: str) -> bool:
        with self._lock:
            now = self._clock()
            self._purge_expired(now)
            self._data[key] = (now + ttl_seconds, value)
        return True

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()


class RedisCacheBackend:
    def __init__(self, url: str) -> None:
        self._redis = redis.from_url(url, decode_responses=True)

    def get(self, key: str) -> Optional[str]:
        try:
            return self._redis.get(key)
        except redis.RedisError:
            log.exception("Redis GET failed key=%s", key)
            return None

    def setex(self, key: str, ttl_seconds: int, value: str) -> bool:
        try:
            return bool(self._redis.setex(key, ttl_seconds, value))
        except redis.RedisError:
            log.exception("Redis SETEX failed key=%s", key)
            return False

    def delete(self, key: str) -> None:
        try:
            self._redis.delete(key)
        except redis.RedisError:
            log.exception("Redis DEL failed key=%s", key)


_backend = None
_backend_lock = Lock()


def get_backend():
    global _backend
    if _backend is None:
        with _backend_lock:
            if _backend is None:
                if REDIS_URL:
                    _backend = RedisCacheBackend(REDIS_URL)
                else:
                    log.info("REDIS_URL not set; using in-memory email cache")
                    _backend = MemoryCacheBackend()
    return _backend


# =========================
# Email cache
# =========================
def get_cached_emails(key: CacheKey) -> Optional[List[Email]]:
    """Cached emails for key, or None on miss, expiry or unreadable payload."""
    raw = get_backend().get(key.serialize())
    if raw is None:
        return None
    try:
        items = json.loads(raw)
        return [Email.from_dict(item) for item in items]
    except (ValueError, TypeError, KeyError, AttributeError):
        log.warning("Discarding malformed cache entry key=%s", key)
        return None


def cache_emails(key: CacheKey, emails: List[Email], ttl_seconds: int = EMAIL_CACHE_TTL_SECS) -> bool:
    payload = json.dumps([e.to_dict() for e in emails], ensure_ascii=False)
    return get_backend().setex(key.serialize(), ttl_seconds, payload)
