"""
Schema metadata caching.

The cache is an explicit handle: callers create a ``SchemaCache`` and pass it
to the schema decoder. There is no global instance. Entries expire through
cachetools TTLCache and are dropped for a table whenever DDL runs against it.
"""
import logging
import threading
import time
from collections.abc import Callable
from typing import Any

import cachetools

logger = logging.getLogger(__name__)

__all__ = ['SchemaCache']


class SchemaCache:
    """TTL cache of catalog results keyed by (kind, schema, table).

    Args:
        maxsize: Maximum number of cached results
        ttl: Time-to-live in seconds
        timer: Clock used to age entries
    """

    def __init__(self, maxsize: int = 128, ttl: int = 600,
                 timer: Callable[[], float] = time.monotonic) -> None:
        self._cache = cachetools.TTLCache(maxsize=maxsize, ttl=ttl, timer=timer)
        self._lock = threading.RLock()

    @staticmethod
    def make_key(kind: str, table: str, schema: str) -> tuple[str, str, str]:
        """Create a case-insensitive cache key.

        >>> SchemaCache.make_key('columns', 'Users', 'main')
        ('columns', 'main', 'users')
        """
        return kind, schema.lower(), table.lower()

    def get_or_load(self, kind: str, table: str, schema: str,
                    loader: Callable[[], Any]) -> Any:
        """Return the cached result or compute and store it.

        Loader failures propagate and nothing is cached for them.
        """
        key = self.make_key(kind, table, schema)
        with self._lock:
            if key in self._cache:
                logger.debug(f'Cache hit for {kind}({schema}.{table})')
                return self._cache[key]
        logger.debug(f'Cache miss for {kind}({schema}.{table})')
        result = loader()
        with self._lock:
            self._cache[key] = result
        return result

    def invalidate(self, table: str, schema: str | None = None) -> None:
        """Drop every entry for a table, in one schema or in all of them.
        """
        table_lower = table.lower()
        schema_lower = schema.lower() if schema else None
        with self._lock:
            keys_to_clear = [
                key for key in list(self._cache.keys())
                if key[2] == table_lower and schema_lower in {None, key[1]}
            ]
            for key in keys_to_clear:
                self._cache.pop(key, None)
                logger.debug(f'Cleared cache entry {key} for table {table}')

    def clear(self) -> None:
        """Clear all cache entries.
        """
        with self._lock:
            self._cache.clear()

    def __contains__(self, key: tuple[str, str, str]) -> bool:
        with self._lock:
            return key in self._cache

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)
