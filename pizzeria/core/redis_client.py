"""
Pizzeria Orders — Redis connection (idempotency cache, health checks)
"""
from functools import lru_cache

import redis.asyncio as aioredis

from pizzeria.core.config import get_settings


@lru_cache()
def get_redis() -> aioredis.Redis:
    settings = get_settings()
    return aioredis.from_url(
        settings.redis_url,
        decode_responses=True,
        socket_connect_timeout=settings.HEALTH_CHECK_TIMEOUT,
    )


async def close_redis() -> None:
    if get_redis.cache_info().currsize:
        await get_redis().aclose()
        get_redis.cache_clear()
