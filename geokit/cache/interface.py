"""
Abstract cache interface for geokit.cache, dood!

Every cache used by the fetch pipeline offers the same four operations in an
async flavour (used from coroutines) and a sync flavour (used by the blocking
entry points and by tools that inspect the cache). Cache failures are never
raised to the caller: a failed read is a miss and a failed write is a False.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Optional

from .types import K, V


class CacheInterface(ABC, Generic[K, V]):
    """
    Generic cache interface for request/response storage, dood!

    Type Parameters:
        K: The key type (canonical request URI for the geocoding clients)
        V: The value type (raw response bytes for the geocoding clients)

    Example:
        >>> cache = DiskCache()
        >>> await cache.set("https://nominatim.example/search?q=Paris", b"[]")
        >>> await cache.get("https://nominatim.example/search?q=Paris")
        b'[]'
    """

    @abstractmethod
    async def get(self, key: K, maxAge: Optional[int] = None) -> Optional[V]:
        """
        Get cached value by key, dood!

        Args:
            key: The cache key to retrieve
            maxAge: Optional age limit in seconds. Entries older than this are
                treated as missing. None means entries never expire.

        Returns:
            Optional[V]: The cached value, or None on miss or read failure
        """
        pass

    @abstractmethod
    async def set(self, key: K, value: V) -> bool:
        """
        Store value in cache, overwriting any previous entry, dood!

        Returns:
            bool: True if the value was stored, False otherwise
        """
        pass

    @abstractmethod
    def load(self, key: K, maxAge: Optional[int] = None) -> Optional[V]:
        """Blocking counterpart of ``get``."""
        pass

    @abstractmethod
    def save(self, key: K, value: V) -> bool:
        """Blocking counterpart of ``set``."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove every cached entry, dood!"""
        pass

    @abstractmethod
    def getStats(self) -> Dict[str, Any]:
        """
        Get cache statistics, dood!

        Returns:
            Dict[str, Any]: Implementation specific figures, always including
            an ``enabled`` flag
        """
        pass
