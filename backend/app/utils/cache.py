"""
Redis cache utility - used for the computed employer dashboard summary.
If Redis is unavailable, caching is disabled and all ops no-op.
"""
import json
import logging
from typing import Any

from backend.app.core.config import settings

logger = logging.getLogger(__name__)
_client = None


def employer_dashboard_key(employer_ref: str) -> str:
    return f"employer_dashboard:{employer_ref}"


async def connect() -> None:
    global _client
    url = settings.redis_url
    if not url:
        logger.warning("redis_url not set, employer dashboard caching disabled")
        return
    try:
        from redis import asyncio as aioredis
        _client = aioredis.Redis.from_url(url, encoding="utf-8", decode_responses=True)
        await _client.ping()
        logger.info("Redis connected, caching enabled")
    except Exception as e:
        _client = None
        logger.warning("Redis connect failed: %s, caching disabled", e)


async def close() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None


async def get(key: str) -> Any:
    if not _client:
        return None
    try:
        val = await _client.get(key)
        return json.loads(val) if val else None
    except Exception as e:
        logger.warning("Cache get failed key=%s error=%s", key, e)
        return None


async def set(key: str, value: Any, ttl: int | None = None) -> None:
    if not _client:
        return
    ttl_val = ttl if ttl is not None else settings.employer_dashboard_cache_ttl
    try:
        await _client.set(key, json.dumps(value, default=str), ex=ttl_val)
    except Exception as e:
        logger.warning("Cache set failed key=%s error=%s", key, e)


async def delete(key: str) -> None:
    if not _client:
        return
    try:
        await _client.delete(key)
    except Exception as e:
        logger.warning("Cache delete failed key=%s error=%s", key, e)


async def invalidate_employer_dashboard(employer_ref: str | None) -> None:
    """Drop the cached dashboard for the employer owning a job that just changed."""
    if employer_ref:
        await delete(employer_dashboard_key(str(employer_ref)))
