"""Redis read-through cache with a fixed TTL.

Entries are never invalidated on write; readers may see data up to one TTL old.
"""

import json
import logging
from typing import Any

from fastapi import Request
from redis import Redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


class NoteCache:
    """JSON values in Redis; every failure degrades to a cache miss."""

    def __init__(self, client: Redis, ttl_seconds: int) -> None:
        self.client = client
        self.ttl_seconds = ttl_seconds

    @classmethod
    def from_url(cls, url: str, ttl_seconds: int) -> "NoteCache":
        return cls(Redis.from_url(url), ttl_seconds)

    def get(self, key: str) -> Any | None:
        try:
            data = self.client.get(key)
            return json.loads(data) if data else None
        except (RedisError, ValueError) as e:
            logger.warning("Error while reading cache key %s: %s", key, e)
            return None

    def set(self, key: str, value: Any) -> None:
        try:
            self.client.set(key, json.dumps(value), ex=self.ttl_seconds)
        except (RedisError, TypeError) as e:
            logger.warning("Error while writing cache key %s (%ss): %s", key, self.ttl_seconds, e)

    def ping(self) -> bool:
        try:
            return bool(self.client.ping())
        except RedisError as e:
            logger.warning("Redis ping failed: %s", e)
            return False

    def close(self) -> None:
        self.client.close()


def notes_cache_key(user_id: int) -> str:
    return f"notes:user:{user_id}"


def get_cache(request: Request) -> NoteCache | None:
    """Dependency returning the app's cache, or None when Redis is not configured."""
    return request.app.state.cache
