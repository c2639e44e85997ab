# backend/fitstudio/ratelimit/admission.py
"""
Admission control for booking creation.

Sliding-window log per key: at most `limit` accepted attempts in any
`window` seconds. Denied attempts are not recorded. Protects against burst
volume only; double-booking is prevented by the ledger, not here.

Backends:
- SlidingWindowAdmission: in-process, volatile (resets on restart)
- RedisSlidingWindowAdmission: sorted set per key, shared by workers,
  fails open when Redis is unreachable
"""

import logging
import threading
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Union
from uuid import uuid4

from redis import Redis

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass(frozen=True)
class Allowed:
    remaining: int


@dataclass(frozen=True)
class Denied:
    retry_after: float  # seconds


Decision = Union[Allowed, Denied]


class AdmissionControl:
    """check(key) -> Allowed | Denied(retry_after)"""

    def __init__(self, limit: int = 5, window: float = 60.0, clock: Clock = time.monotonic):
        if limit <= 0:
            raise ValueError(f"limit must be positive, got {limit}")
        if window <= 0:
            raise ValueError(f"window must be positive, got {window}")
        self.limit = limit
        self.window = window
        self.clock = clock

    def check(self, key: str) -> Decision:
        raise NotImplementedError


class SlidingWindowAdmission(AdmissionControl):
    def __init__(
        self,
        limit: int = 5,
        window: float = 60.0,
        clock: Clock = time.monotonic,
        cleanup_interval: float = 300.0,
    ):
        super().__init__(limit, window, clock)
        self.cleanup_interval = cleanup_interval
        self._hits: dict[str, deque[float]] = {}
        self._lock = threading.Lock()
        self._last_cleanup = clock()

    def check(self, key: str) -> Decision:
        now = self.clock()
        with self._lock:
            # Idle origins are forgotten every cleanup_interval seconds
            if now - self._last_cleanup >= self.cleanup_interval:
                self._drop_idle(now)
                self._last_cleanup = now

            hits = self._hits.setdefault(key, deque())

            # Drop timestamps that left the window
            while hits and now - hits[0] >= self.window:
                hits.popleft()

            if len(hits) >= self.limit:
                retry_after = self.window - (now - hits[0])
                return Denied(retry_after=max(0.0, retry_after))

            hits.append(now)
            return Allowed(remaining=self.limit - len(hits))

    def prune(self) -> int:
        """Forget keys with no hits inside the window. Returns keys dropped."""
        now = self.clock()
        with self._lock:
            self._last_cleanup = now
            return self._drop_idle(now)

    def _drop_idle(self, now: float) -> int:
        dropped = 0
        for key in list(self._hits):
            hits = self._hits[key]
            while hits and now - hits[0] >= self.window:
                hits.popleft()
            if not hits:
                del self._hits[key]
                dropped += 1
        return dropped


# Trim, count and conditional insert as one atomic step, so workers sharing
# the key cannot all pass the count check together.
# KEYS[1] = key; ARGV = now_ms, window_ms, limit, member
# returns {allowed, remaining_or_retry_after_ms}
SLIDING_WINDOW_LUA = """
local key = KEYS[1]
local now_ms = tonumber(ARGV[1])
local window_ms = tonumber(ARGV[2])
local limit = tonumber(ARGV[3])

redis.call('ZREMRANGEBYSCORE', key, '-inf', now_ms - window_ms)
local count = redis.call('ZCARD', key)

if count >= limit then
  local oldest = redis.call('ZRANGE', key, 0, 0, 'WITHSCORES')
  local oldest_ms = now_ms
  if oldest[2] then
    oldest_ms = tonumber(oldest[2])
  end
  return {0, window_ms - (now_ms - oldest_ms)}
end

redis.call('ZADD', key, now_ms, ARGV[4])
redis.call('PEXPIRE', key, window_ms + 1000)
return {1, limit - count - 1}
"""


class RedisSlidingWindowAdmission(AdmissionControl):
    KEY_PREFIX = "rl"

    def __init__(
        self,
        redis: Redis,
        limit: int = 5,
        window: float = 60.0,
        clock: Clock = time.time,
    ):
        super().__init__(limit, window, clock)
        self.redis = redis

    def _key(self, key: str) -> str:
        return f"{self.KEY_PREFIX}:{key}"

    def check(self, key: str) -> Decision:
        now_ms = int(self.clock() * 1000)
        window_ms = int(self.window * 1000)

        try:
            res = self.redis.eval(
                SLIDING_WINDOW_LUA,
                1,
                self._key(key),
                now_ms,
                window_ms,
                self.limit,
                f"{now_ms}:{uuid4().hex}",
            )
            allowed, value = int(res[0]), int(res[1])
        except Exception as e:
            logger.error(f"Rate limit check failed: {e}")
            return Allowed(remaining=self.limit)  # fail open

        if not allowed:
            return Denied(retry_after=max(0.0, value / 1000.0))
        return Allowed(remaining=value)


def build_admission_control(
    backend: str,
    limit: int,
    window: float,
    redis: Redis | None = None,
) -> AdmissionControl:
    if backend == "redis":
        if redis is None:
            raise RuntimeError("RATE_LIMIT_BACKEND=redis requires REDIS_URL")
        return RedisSlidingWindowAdmission(redis, limit=limit, window=window)
    return SlidingWindowAdmission(limit=limit, window=window)
