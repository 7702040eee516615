"""
Core type definitions and protocols for geokit.cache, dood!

Type variables and the key generator protocol shared by every cache
implementation live here.
"""

from typing import Protocol, TypeVar

K = TypeVar("K")  # Key type, usually the canonical request URI
V = TypeVar("V")  # Value type, usually raw response bytes
T = TypeVar("T", contravariant=True)  # Object type accepted by key generators


class KeyGenerator(Protocol[T]):
    """
    Protocol for turning a cache key object into a file-system safe name, dood!

    Type Parameters:
        T: The type of objects that can be converted to cache keys

    Example:
        >>> generator = HashKeyGenerator()
        >>> generator.generateKey("https://example.org/search?q=Paris")
        '5b0c...'  # 64 lowercase hex characters
    """

    def generateKey(self, obj: T) -> str:
        """
        Generate string cache key from object, dood!

        Args:
            obj: The object to convert to a cache key

        Returns:
            str: A string usable as a file name
        """
        ...
