# backend/fitstudio/redis_client.py

from typing import Optional

from redis import Redis

from .config import settings


def build_redis(url: Optional[str]) -> Optional[Redis]:
    """Redis is optional: without REDIS_URL the service runs on in-process fallbacks."""
    if not url:
        return None
    return Redis.from_url(
        url,
        decode_responses=True,
        socket_timeout=settings.redis_socket_timeout,
        socket_connect_timeout=settings.redis_socket_timeout,
    )


redis_client = build_redis(settings.redis_url)
