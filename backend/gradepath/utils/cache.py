"""
Catalog caching layer with Redis (production) and in-memory fallback (development).

Lesson catalog aggregates (terms per grade, subjects per grade) change only
when lessons are written, so they are cached and invalidated by prefix.

Usage:
    from gradepath.utils.cache import catalog_cache

    value = catalog_cache.get("terms:Grade 3")
    catalog_cache.set("terms:Grade 3", [...], ttl=60)
    catalog_cache.invalidate("terms:")
"""

import os
import json
import logging
import threading
from datetime import datetime, timedelta
from typing import Any, Optional

logger = logging.getLogger(__name__)


class TTLCache:
    """Thread-safe in-memory cache with TTL support."""

    def __init__(self, maxsize: int = 1000, default_ttl: int = 300):
        self._cache: dict = {}
        self._expiry: dict = {}
        self._lock = threading.Lock()
        self.maxsize = maxsize
        self.default_ttl = default_ttl

    def get(self, key: str) -> Optional[Any]:
        """Get value from cache if not expired."""
        with self._lock:
            if key in self._cache:
                if datetime.utcnow() < self._expiry[key]:
                    return self._cache[key]
                del self._cache[key]
                del self._expiry[key]
        return None

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        """Set value in cache with TTL."""
        ttl = ttl or self.default_ttl
        with self._lock:
            if len(self._cache) >= self.maxsize and key not in self._cache:
                self._evict_oldest()

            self._cache[key] = value
            self._expiry[key] = datetime.utcnow() + timedelta(seconds=ttl)

    def delete_prefix(self, prefix: str) -> int:
        """Delete every key starting with prefix."""
        with self._lock:
            keys = [k for k in self._cache if k.startswith(prefix)]
            for key in keys:
                del self._cache[key]
                del self._expiry[key]
        return len(keys)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()
            self._expiry.clear()

    def _evict_oldest(self) -> None:
        """Evict the entry closest to expiry."""
        if self._expiry:
            oldest_key = min(self._expiry.items(), key=lambda x: x[1])[0]
            del self._cache[oldest_key]
            del self._expiry[oldest_key]


class RedisCache:
    """Redis-based cache with JSON serialization."""

    def __init__(self, redis_url: Optional[str] = None, default_ttl: int = 300):
        self.default_ttl = default_ttl
        self._client = None
        self._redis_url = redis_url or os.getenv("REDIS_URL")

        if self._redis_url:
            try:
                import redis
                self._client = redis.from_url(
                    self._redis_url,
                    decode_responses=True,
                    socket_timeout=5,
                    socket_connect_timeout=5,
                )
                self._client.ping()
                logger.info("Redis cache connected successfully")
            except Exception as e:
                logger.warning("Redis connection failed, will use in-memory cache: %s", e)
                self._client = None

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    def get(self, key: str) -> Optional[Any]:
        if not self._client:
            return None
        try:
            data = self._client.get(key)
            if data:
                return json.loads(data)
        except Exception as e:
            logger.warning("Redis get error: %s", e)
        return None

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        if not self._client:
            return False
        try:
            self._client.setex(key, ttl or self.default_ttl, json.dumps(value, default=str))
            return True
        except Exception as e:
            logger.warning("Redis set error: %s", e)
            return False

    def delete_prefix(self, prefix: str) -> int:
        if not self._client:
            return 0
        try:
            keys = list(self._client.scan_iter(match=f"{prefix}*"))
            if keys:
                return self._client.delete(*keys)
        except Exception as e:
            logger.warning("Redis delete error: %s", e)
        return 0


class HybridCache:
    """
    Cache that uses Redis when available, falls back to in-memory.

    Keys are namespaced so several services can share one Redis database.
    """

    def __init__(self, namespace: str, maxsize: int = 1000, default_ttl: int = 300):
        self.namespace = namespace
        self.default_ttl = default_ttl
        self._redis = RedisCache(default_ttl=default_ttl)
        self._local = TTLCache(maxsize=maxsize, default_ttl=default_ttl)

    @property
    def backend(self) -> str:
        return "redis" if self._redis.is_connected else "memory"

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    def get(self, key: str) -> Optional[Any]:
        if self._redis.is_connected:
            return self._redis.get(self._key(key))
        return self._local.get(self._key(key))

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        ttl = ttl or self.default_ttl
        if self._redis.is_connected:
            self._redis.set(self._key(key), value, ttl)
        else:
            self._local.set(self._key(key), value, ttl)

    def invalidate(self, prefix: str = "") -> int:
        """Drop every entry whose key starts with prefix (all entries by default)."""
        if self._redis.is_connected:
            removed = self._redis.delete_prefix(self._key(prefix))
        else:
            removed = self._local.delete_prefix(self._key(prefix))
        logger.info("Invalidated %d cached catalog entries (prefix=%r)", removed, prefix)
        return removed


catalog_cache = HybridCache(
    namespace="catalog",
    maxsize=500,
    default_ttl=int(os.getenv("CATALOG_CACHE_TTL", "300")),
)
