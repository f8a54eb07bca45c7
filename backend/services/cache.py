"""Redis bookkeeping for remote backups."""

import logging
from typing import Any, Optional

import redis

from backend.utils.config import get_settings

LOGGER = logging.getLogger(__name__)
KEY_PREFIX = "scheduler:backup:"

settings = get_settings()

redis_client = redis.Redis.from_url(settings.redis_url, decode_responses=True)


def cache_set(key: str, value: Any, ex: Optional[int] = None) -> bool:
    """Set a value in Redis with optional expiration."""

    try:
        return bool(redis_client.set(name=key, value=value, ex=ex))
    except redis.RedisError as exc:
        LOGGER.warning("Redis set failed for %s: %s", key, exc)
        return False


def cache_get(key: str) -> Optional[str]:
    """Get a value from Redis by key."""

    try:
        return redis_client.get(name=key)
    except redis.RedisError as exc:
        LOGGER.warning("Redis get failed for %s: %s", key, exc)
        return None


def _backup_key(site: str, name: str) -> str:
    return f"{KEY_PREFIX}{site}:{name}"


def remember_blob_id(site: str, blob_id: str) -> bool:
    """Store the remote blob id created by the first push."""

    return cache_set(_backup_key(site, "blob_id"), blob_id)


def recall_blob_id(site: str) -> Optional[str]:
    """Return the remote blob id created by an earlier push, if any."""

    return cache_get(_backup_key(site, "blob_id")) or None


def record_backup_time(site: str, when: str) -> bool:
    """Remember when the last successful push happened."""

    return cache_set(_backup_key(site, "last_backup_at"), when)


def last_backup_time(site: str) -> Optional[str]:
    """Return the ISO timestamp of the last successful push, if any."""

    return cache_get(_backup_key(site, "last_backup_at")) or None
