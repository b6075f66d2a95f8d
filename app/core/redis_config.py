from typing import Optional

import redis

from app.core.config import settings

_client: Optional[redis.Redis] = None


def get_redis_url():
    return settings.REDIS_URL


def get_redis_client() -> redis.Redis:
    """Get the shared Redis client used for registration locks."""
    global _client
    if _client is None:
        _client = redis.from_url(get_redis_url(), decode_responses=True)
    return _client


def close_redis_client() -> None:
    global _client
    if _client is not None:
        _client.close()
        _client = None
