from __future__ import annotations

import logging
import time
from typing import Callable, cast

from fastapi import HTTPException, Request
from library_api.core.redis_client import get_redis
from redis import Redis, RedisError

logger = logging.getLogger(__name__)


def client_key(request: Request) -> str:
    fwd = request.headers.get("x-forwarded-for")
    if fwd:
        return fwd.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def rate_limiter(
    scope: str,
    *,
    limit: int,
    window_seconds: int,
) -> Callable[[Request], None]:
    """Simple fixed-window rate limiter using Redis INCR + EXPIRE, per client address.

    If Redis is unavailable, the limiter becomes a no-op (fail open).
    """

    def _dep(request: Request) -> None:
        r = get_redis()
        if r is None:
            return

        now = int(time.time())
        bucket = now // window_seconds
        key = f"rl:{scope}:{client_key(request)}:{bucket}"

        try:
            # redis-py typing can be `Awaitable[Any] | Any` in stubs; cast to satisfy mypy.
            count = cast(int, cast(Redis, r).incr(key))
            if count == 1:
                cast(Redis, r).expire(key, window_seconds)
        except RedisError as exc:
            logger.warning("rate limiter skipped for %s: %s", scope, exc)
            return

        if count > limit:
            retry_after = max(1, window_seconds - (now % window_seconds))
            raise HTTPException(
                status_code=429,
                detail="Rate limit exceeded",
                headers={"Retry-After": str(retry_after)},
            )

    return _dep
