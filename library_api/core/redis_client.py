from __future__ import annotations
import logging
from functools import lru_cache
import redis
from redis import Redis
from library_api.core.config import settings

logger = logging.getLogger(__name__)


@lru_cache
def get_redis() -> Redis | None:
    """Shared Redis client for rate limiting, or None when disabled/unreachable."""
    if not settings.rate_limit_enabled or not settings.redis_url:
        return None
    try:
        client: Redis = redis.from_url(
            settings.redis_url, decode_responses=True, socket_connect_timeout=1
        )
        client.ping()
        return client
    except redis.RedisError as exc:
        logger.warning("Redis unavailable; rate limiting disabled: %s", exc)
        return None
