import logging
import threading
import time
from abc import ABC, abstractmethod
from collections import defaultdict, deque
from uuid import uuid4

import redis
from fastapi import HTTPException, Request, Response, status

from pawpal.core.config import settings

logger = logging.getLogger(__name__)


class RateLimiter(ABC):
    @abstractmethod
    def allow(self, key: str, limit: int, window_seconds: int) -> tuple[bool, int]:
        raise NotImplementedError

    @abstractmethod
    def reset(self) -> None:
        raise NotImplementedError


class InMemoryRateLimiter(RateLimiter):
    """Sliding window kept per process. Used in tests and as the Redis fallback."""

    def __init__(self) -> None:
        self._hits: dict[str, deque[float]] = defaultdict(deque)
        self._lock = threading.Lock()

    def allow(self, key: str, limit: int, window_seconds: int) -> tuple[bool, int]:
        now = time.monotonic()
        with self._lock:
            hits = self._hits[key]
            while hits and hits[0] <= now - window_seconds:
                hits.popleft()

            if len(hits) >= limit:
                return False, max(1, int(hits[0] + window_seconds - now))

            hits.append(now)
            return True, 0

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()


class RedisRateLimiter(RateLimiter):
    def __init__(self, redis_url: str, prefix: str = "pawpal:rl") -> None:
        self._client = redis.Redis.from_url(
            redis_url,
            socket_connect_timeout=0.2,
            socket_timeout=0.2,
        )
        self._prefix = prefix

    def allow(self, key: str, limit: int, window_seconds: int) -> tuple[bool, int]:
        redis_key = f"{self._prefix}:{key}"
        now_ms = int(time.time() * 1000)
        window_ms = window_seconds * 1000

        pipe = self._client.pipeline()
        pipe.zremrangebyscore(redis_key, 0, now_ms - window_ms)
        pipe.zcard(redis_key)
        _, hits = pipe.execute()

        if hits >= limit:
            oldest = self._client.zrange(redis_key, 0, 0, withscores=True)
            if not oldest:
                return False, max(1, window_seconds)
            return False, max(1, int((int(oldest[0][1]) + window_ms - now_ms) / 1000))

        pipe = self._client.pipeline()
        pipe.zadd(redis_key, {f"{now_ms}:{uuid4().hex}": now_ms})
        pipe.expire(redis_key, window_seconds + 5)
        pipe.execute()
        return True, 0

    def reset(self) -> None:
        for redis_key in self._client.scan_iter(f"{self._prefix}:*"):
            self._client.delete(redis_key)


class FallbackRateLimiter(RateLimiter):
    def __init__(self, primary: RateLimiter, fallback: RateLimiter) -> None:
        self._primary = primary
        self._fallback = fallback

    def allow(self, key: str, limit: int, window_seconds: int) -> tuple[bool, int]:
        try:
            return self._primary.allow(key=key, limit=limit, window_seconds=window_seconds)
        except redis.RedisError:
            logger.warning("rate_limiter_fallback key=%s", key)
            return self._fallback.allow(key=key, limit=limit, window_seconds=window_seconds)

    def reset(self) -> None:
        try:
            self._primary.reset()
        except redis.RedisError:
            logger.warning("rate_limiter_reset_failed backend=redis")
        self._fallback.reset()


def _build_rate_limiter() -> RateLimiter:
    memory = InMemoryRateLimiter()
    if settings.rate_limit_backend.strip().lower() == "redis":
        return FallbackRateLimiter(primary=RedisRateLimiter(redis_url=settings.rate_limit_redis_url), fallback=memory)
    return memory


rate_limiter: RateLimiter = _build_rate_limiter()


def rate_limit_or_raise(endpoint: str, limit: int, request: Request, response: Response) -> None:
    client_ip = request.client.host if request.client else "unknown"
    allowed, retry_after = rate_limiter.allow(
        key=f"{endpoint}:{client_ip}",
        limit=limit,
        window_seconds=settings.auth_rate_limit_window_seconds,
    )
    if not allowed:
        response.headers["Retry-After"] = str(retry_after)
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many requests. Please try again later.",
            headers={"Retry-After": str(retry_after)},
        )
