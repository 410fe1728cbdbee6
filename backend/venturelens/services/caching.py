from __future__ import annotations

import json
import logging
from typing import Any

import redis
import redis.asyncio as aioredis
from ..core.config import get_settings

logger = logging.getLogger(__name__)


def _get_redis() -> aioredis.Redis | None:
    """
    Create a fresh asyncio Redis client per call, or None when no REDIS_URL is
    configured (caching disabled).
    """
    url = get_settings().REDIS_URL
    if not url:
        return None
    return aioredis.from_url(
        str(url),
        decode_responses=True,
        socket_timeout=5,
        socket_connect_timeout=5,
    )


async def cached_get(
    key: str,
    set_value: Any | None = None,
    ttl: int | None = None,
) -> Any:
    """
    Async TTL cache backed by Redis.

    Usage:

        value = await cached_get("k")                  # read
        await cached_get("k", set_value=value, ttl=60) # write with TTL

    - On read: returns cached value (deserialized JSON) or None if missing/expired.
    - On write: stores value (serialized JSON) with optional TTL and returns it.
    - Without Redis, or on any Redis error, reads miss and writes are dropped.
    """
    client = _get_redis()
    if client is None:
        return None if set_value is None else set_value
    try:
        if set_value is None:
            # Read path
            val = await client.get(key)
            if val is not None:
                return json.loads(val)
            return None

        # Write path
        serialized = json.dumps(set_value)
        if ttl is not None:
            await client.set(key, serialized, ex=ttl)
        else:
            await client.set(key, serialized)
        return set_value

    except redis.RedisError as e:
        logger.warning("Redis cache unavailable for %s: %s", key, e)
        return None
    finally:
        try:
            await client.aclose()
        except redis.RedisError:
            pass
