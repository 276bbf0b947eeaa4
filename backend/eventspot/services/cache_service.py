"""
Redis caching service for event listings.

CACHING STRATEGY
================

What we cache:
  - Event list responses (already serialized to their JSON shape)
  - Cache key pattern: "events:list:{scope}" where scope is one of
    "all", "featured", "trending" or "category={id}"

Invalidation strategy:
  - On booking and cancellation (available_seats changed)
  - On event creation
  - TTL-based expiry as safety net (REDIS_CACHE_TTL)

  All event list keys share the "events:list:" prefix so we can SCAN and
  delete them in one pass.

Why NOT cache individual events:
  - The booking page needs real-time seat counts
  - Keeping a per-event cache consistent with every booking isn't worth it

Redis is optional: when it is disabled or failing, every call degrades to a
cache miss and the database answers.
"""

import json
from typing import Any, Optional

import redis.asyncio as redis

from eventspot.core.config import get_settings
from eventspot.core.logging import get_logger
from eventspot.core.metrics import record_cache_operation
from eventspot.infrastructure.redis_client import get_redis

logger = get_logger(__name__)
settings = get_settings()

EVENT_LIST_PREFIX = "events:list:"


def make_event_list_key(scope: str) -> str:
    return f"{EVENT_LIST_PREFIX}{scope}"


def category_scope(category_id: int) -> str:
    return f"category={category_id}"


async def get_cached_events(scope: str) -> Optional[list[dict[str, Any]]]:
    """Retrieve a cached event list."""
    client = await get_redis()
    if not client:
        return None

    key = make_event_list_key(scope)
    try:
        data = await client.get(key)
    except redis.RedisError as e:
        logger.error("cache_get_error", key=key, error=str(e))
        return None

    record_cache_operation("get", hit=data is not None)
    if data:
        logger.debug("cache_hit", key=key)
        return json.loads(data)
    logger.debug("cache_miss", key=key)
    return None


async def set_cached_events(scope: str, data: list[dict[str, Any]]) -> None:
    """Cache an event list with TTL."""
    client = await get_redis()
    if not client:
        return

    key = make_event_list_key(scope)
    try:
        await client.setex(key, settings.REDIS_CACHE_TTL, json.dumps(data, default=str))
        logger.debug("cache_set", key=key, ttl=settings.REDIS_CACHE_TTL)
    except redis.RedisError as e:
        logger.error("cache_set_error", key=key, error=str(e))


async def invalidate_event_cache() -> None:
    """
    Invalidate all cached event listings.
    Uses SCAN to find and delete all keys matching the prefix.
    """
    client = await get_redis()
    if not client:
        return

    try:
        deleted = 0
        async for key in client.scan_iter(match=f"{EVENT_LIST_PREFIX}*", count=100):
            await client.delete(key)
            deleted += 1
        logger.info("cache_invalidated", keys_deleted=deleted)
    except redis.RedisError as e:
        logger.error("cache_invalidation_error", error=str(e))


async def get_cache_stats() -> dict:
    """Get Redis cache statistics for monitoring."""
    client = await get_redis()
    if not client:
        return {"status": "disabled"}

    try:
        info = await client.info("stats")
        hits = info.get("keyspace_hits", 0)
        misses = info.get("keyspace_misses", 0)
        return {
            "status": "connected",
            "hits": hits,
            "misses": misses,
            "hit_rate": round(hits / max(hits + misses, 1) * 100, 2),
        }
    except redis.RedisError as e:
        return {"status": "error", "error": str(e)}
