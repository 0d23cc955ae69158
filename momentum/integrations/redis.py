from __future__ import annotations

from functools import lru_cache

import redis

from momentum.config import settings


@lru_cache
def get_redis_sync() -> redis.Redis:
    return redis.Redis.from_url(settings.REDIS_URL, decode_responses=True)
