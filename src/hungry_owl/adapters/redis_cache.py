"""Redis-backed cache implementation."""

import json
import logging
from dataclasses import dataclass

import redis

from hungry_owl.services.cache import Cache

_logger = logging.getLogger(__name__)


@dataclass
class RedisCache(Cache):
    """Stores JSON-encoded values in Redis, treating errors as misses."""

    client: redis.Redis

    @classmethod
    def create(cls, url: str) -> "RedisCache":
        """Create a cache from a redis:// URL."""
        return cls(client=redis.Redis.from_url(url))

    def get(self, key: str) -> object | None:
        """Return the decoded value, or None on a miss or Redis error."""
        try:
            raw = self.client.get(key)
        except redis.RedisError:
            _logger.exception("Redis get failed for %s", key)
            return None
        if raw is None:
            return None
        return json.loads(raw)

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store a JSON-encoded value with an expiry."""
        try:
            self.client.setex(key, ttl_seconds, json.dumps(value))
        except redis.RedisError:
            _logger.exception("Redis set failed for %s", key)

    def delete_prefix(self, prefix: str) -> None:
        """Delete keys under a prefix."""
        try:
            keys = list(self.client.scan_iter(match=f"{prefix}*"))
            if keys:
                self.client.delete(*keys)
        except redis.RedisError:
            _logger.exception("Redis delete failed for prefix %s", prefix)

    def close(self) -> None:
        """Close the connection pool."""
        self.client.close()
