"""
Disk cache for raw geocoding responses, dood!

One file per request under a private directory, named by the hex digest of
the canonical request URI. Files hold the response bytes exactly as they came
off the wire, with no metadata sidecar. Entries never expire unless the
caller passes ``maxAge``.

Every failure in here is logged and reported as a miss (reads) or False
(writes). The cache is an optimisation, so it must never break a request.
"""

import logging
import os
import time
import uuid
from pathlib import Path
from typing import Any, Dict, Optional, Union

import aiofiles
import aiofiles.os

from .interface import CacheInterface
from .key_generator import HashKeyGenerator
from .types import KeyGenerator

logger = logging.getLogger(__name__)

APP_NAMESPACE = "geokit"
DIR_MODE = 0o700
FILE_MODE = 0o600


def getDefaultCacheDir() -> Path:
    """Return ``$XDG_CACHE_HOME/geokit``, falling back to ``~/.cache/geokit``."""
    xdgCache = os.environ.get("XDG_CACHE_HOME")
    base = Path(xdgCache) if xdgCache else Path.home() / ".cache"
    return base / APP_NAMESPACE


def _privateOpener(path: str, flags: int) -> int:
    return os.open(path, flags, FILE_MODE)


class DiskCache(CacheInterface[str, bytes]):
    """
    Content addressed response cache on the local file system, dood!

    Args:
        baseDir: Directory for cache files. Defaults to ``getDefaultCacheDir()``.
        keyGenerator: Maps a request URI to a file name. Defaults to SHA-256.

    Example:
        >>> cache = DiskCache("/tmp/geokit-cache")
        >>> cache.save("https://nominatim.example/reverse?lat=1&lon=2", b"{}")
        True
        >>> cache.load("https://nominatim.example/reverse?lat=1&lon=2")
        b'{}'
    """

    def __init__(
        self,
        baseDir: Optional[Union[str, Path]] = None,
        keyGenerator: Optional[KeyGenerator[str]] = None,
    ):
        self.baseDir = Path(baseDir) if baseDir is not None else getDefaultCacheDir()
        self.keyGenerator: KeyGenerator[str] = keyGenerator or HashKeyGenerator()

    def pathFor(self, key: str) -> Optional[Path]:
        """
        Get the cache file path for a request URI, dood!

        Creates the cache directory with mode 0700 when it is missing.

        Returns:
            Optional[Path]: ``baseDir / digest(key)``, or None when the
            directory could not be created (caching unavailable)
        """
        try:
            self.baseDir.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(f"Cannot create cache directory {self.baseDir}: {e}")
            return None

        if not self.baseDir.is_dir():
            logger.warning(f"Cache path {self.baseDir} exists but is not a directory")
            return None

        return self.baseDir / self.keyGenerator.generateKey(key)

    def _isExpired(self, mtime: float, maxAge: Optional[int]) -> bool:
        return maxAge is not None and time.time() - mtime > maxAge

    def _tempPathFor(self, filePath: Path) -> Path:
        # Unique per writer, so concurrent saves of one key never share a temp file
        return filePath.with_name(f".{filePath.name}.{uuid.uuid4().hex}.tmp")

    def load(self, key: str, maxAge: Optional[int] = None) -> Optional[bytes]:
        filePath = self.pathFor(key)
        if filePath is None:
            return None

        try:
            if self._isExpired(filePath.stat().st_mtime, maxAge):
                logger.debug(f"Cache entry {filePath.name} is older than {maxAge}s, ignoring it")
                return None
            with open(filePath, "rb") as f:
                return f.read()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning(f"Failed to read cache entry {filePath}: {e}")
            return None

    def save(self, key: str, value: bytes) -> bool:
        filePath = self.pathFor(key)
        if filePath is None:
            return False

        tempPath = self._tempPathFor(filePath)
        try:
            with open(tempPath, "wb", opener=_privateOpener) as f:
                f.write(value)
            tempPath.replace(filePath)
            return True
        except OSError as e:
            logger.warning(f"Failed to write cache entry {filePath}: {e}")
            tempPath.unlink(missing_ok=True)
            return False

    async def get(self, key: str, maxAge: Optional[int] = None) -> Optional[bytes]:
        filePath = self.pathFor(key)
        if filePath is None:
            return None

        try:
            stat = await aiofiles.os.stat(filePath)
            if self._isExpired(stat.st_mtime, maxAge):
                logger.debug(f"Cache entry {filePath.name} is older than {maxAge}s, ignoring it")
                return None
            async with aiofiles.open(filePath, "rb") as f:
                return await f.read()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning(f"Failed to read cache entry {filePath}: {e}")
            return None

    async def set(self, key: str, value: bytes) -> bool:
        filePath = self.pathFor(key)
        if filePath is None:
            return False

        tempPath = self._tempPathFor(filePath)
        try:
            async with aiofiles.open(tempPath, "wb", opener=_privateOpener) as f:
                await f.write(value)
            await aiofiles.os.replace(tempPath, filePath)
            return True
        except OSError as e:
            logger.warning(f"Failed to write cache entry {filePath}: {e}")
            tempPath.unlink(missing_ok=True)
            return False

    def _entries(self):
        if not self.baseDir.is_dir():
            return []
        return [p for p in self.baseDir.iterdir() if p.is_file() and not p.name.startswith(".")]

    def clear(self) -> None:
        """Delete every cache file (and stray temp files), dood!"""
        if not self.baseDir.is_dir():
            return
        for entry in self.baseDir.iterdir():
            if not entry.is_file():
                continue
            try:
                entry.unlink()
            except OSError as e:
                logger.warning(f"Failed to remove cache entry {entry}: {e}")

    def getStats(self) -> Dict[str, Any]:
        entries = self._entries()
        return {
            "enabled": True,
            "baseDir": str(self.baseDir),
            "entries": len(entries),
            "bytes": sum(p.stat().st_size for p in entries),
        }
