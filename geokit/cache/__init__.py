"""
geokit.cache - response cache for the geocoding clients, dood!

Core Components:
- CacheInterface: Abstract base class for all cache implementations
- DiskCache: One file per request URI under the user cache directory
- NullCache: No-op cache for disabled caching
- HashKeyGenerator: SHA-256 digest of the canonical request URI

Example Usage:
    >>> from geokit.cache import DiskCache
    >>>
    >>> cache = DiskCache()
    >>> await cache.set(uri, responseBytes)
    >>> cached = await cache.get(uri)
"""

from .disk_cache import DiskCache, getDefaultCacheDir
from .interface import CacheInterface
from .key_generator import HashKeyGenerator
from .null_cache import NullCache
from .types import K, KeyGenerator, T, V

__all__ = [
    # Core types
    "KeyGenerator",
    "K",
    "V",
    "T",
    # Interfaces
    "CacheInterface",
    # Implementations
    "DiskCache",
    "NullCache",
    "getDefaultCacheDir",
    # Key generators
    "HashKeyGenerator",
]
