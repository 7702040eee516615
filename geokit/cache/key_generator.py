"""
Key generators for geokit.cache, dood!

Available Generators:
    - HashKeyGenerator: Hex digest of the key string (SHA-256 by default)
"""

import hashlib
from typing import Any

from .types import KeyGenerator


class HashKeyGenerator(KeyGenerator[Any]):
    """
    Hash key generator used for request URIs, dood!

    Strings are hashed as their UTF-8 bytes, so the digest of a canonical
    request URI is exactly ``sha256(uri)``. Any other object is hashed through
    its ``repr()``.

    Example:
        >>> generator = HashKeyGenerator()
        >>> key = generator.generateKey("http://where.yahooapis.com/geocode?location=Paris")
        >>> len(key)
        64
    """

    __slots__ = ("algorithm",)

    def __init__(self, algorithm: str = "sha256"):
        """
        Initialize HashKeyGenerator, dood!

        Args:
            algorithm: Any name accepted by ``hashlib.new``. Defaults to sha256.

        Raises:
            ValueError: If the algorithm is not supported by hashlib
        """
        if algorithm not in hashlib.algorithms_available:
            raise ValueError(f"Unsupported hash algorithm '{algorithm}', dood!")
        self.algorithm = algorithm

    def generateKey(self, obj: Any) -> str:
        """
        Generate lowercase hex digest for the given object, dood!

        Args:
            obj: Request URI string (or any object with a stable repr)

        Returns:
            str: Hexadecimal digest
        """
        if isinstance(obj, str):
            objStr = obj
        elif obj is None:
            objStr = "None"
        else:
            objStr = repr(obj)

        return hashlib.new(self.algorithm, objStr.encode("utf-8")).hexdigest()
