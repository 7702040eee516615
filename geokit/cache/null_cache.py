"""
Null cache implementation for geokit.cache, dood!

Used when caching is disabled in the configuration and for requests whose
answer must never be reused (GeoIP lookups of the caller's own address).
"""

from typing import Any, Dict, Optional

from .interface import CacheInterface
from .types import K, V


class NullCache(CacheInterface[K, V]):
    """No-op cache that never stores anything, dood!"""

    async def get(self, key: K, maxAge: Optional[int] = None) -> Optional[V]:
        return None

    async def set(self, key: K, value: V) -> bool:
        # Nothing is kept, so the write is reported as not stored
        return False

    def load(self, key: K, maxAge: Optional[int] = None) -> Optional[V]:
        return None

    def save(self, key: K, value: V) -> bool:
        return False

    def clear(self) -> None:
        pass

    def getStats(self) -> Dict[str, Any]:
        """Return statistics indicating the cache is disabled, dood!"""
        return {"enabled": False}
