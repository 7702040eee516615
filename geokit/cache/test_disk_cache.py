"""
Tests for DiskCache, dood!
"""

import hashlib
import os
import stat
import tempfile
import time
from pathlib import Path

import pytest

from geokit.cache import DiskCache, HashKeyGenerator, NullCache, getDefaultCacheDir

URI = "https://nominatim.openstreetmap.org/search?accept-language=en-GB&format=jsonv2&q=Paris"


@pytest.fixture
def tempDir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def cache(tempDir: Path) -> DiskCache:
    return DiskCache(tempDir / "geokit")


class TestPathFor:
    """Tests for cache file naming"""

    def testPathIsSha256OfUri(self, cache: DiskCache):
        """File name is the lowercase hex SHA-256 of the URI, dood!"""
        path = cache.pathFor(URI)

        assert path is not None
        assert path.parent == cache.baseDir
        assert path.name == hashlib.sha256(URI.encode("utf-8")).hexdigest()

    def testPathIsStable(self, cache: DiskCache):
        assert cache.pathFor(URI) == cache.pathFor(URI)
        assert cache.pathFor(URI) != cache.pathFor(URI + "&limit=1")

    def testDirectoryCreatedPrivate(self, cache: DiskCache):
        assert not cache.baseDir.exists()

        cache.pathFor(URI)

        assert cache.baseDir.is_dir()
        assert stat.S_IMODE(cache.baseDir.stat().st_mode) & 0o077 == 0

    def testUnusableDirectoryMeansNoCache(self, tempDir: Path):
        """A file where the directory should be disables caching, dood!"""
        blocker = tempDir / "blocker"
        blocker.write_text("not a directory")
        cache = DiskCache(blocker / "geokit")

        assert cache.pathFor(URI) is None
        assert cache.load(URI) is None
        assert cache.save(URI, b"{}") is False


class TestSyncOperations:
    """Tests for load/save"""

    def testRoundTrip(self, cache: DiskCache):
        payload = b'{"places":{"place":[]}}'

        assert cache.save(URI, payload) is True
        assert cache.load(URI) == payload

    def testMissingEntryIsNone(self, cache: DiskCache):
        assert cache.load("https://example.org/never-saved") is None

    def testSaveOverwrites(self, cache: DiskCache):
        cache.save(URI, b"old")
        cache.save(URI, b"new")

        assert cache.load(URI) == b"new"

    def testFileIsPrivateAndNoTempLeftBehind(self, cache: DiskCache):
        cache.save(URI, b"data")

        path = cache.pathFor(URI)
        assert path is not None
        assert stat.S_IMODE(path.stat().st_mode) & 0o077 == 0
        assert [p.name for p in cache.baseDir.iterdir()] == [path.name]

    def testMaxAge(self, cache: DiskCache):
        cache.save(URI, b"data")
        path = cache.pathFor(URI)
        assert path is not None
        old = time.time() - 3600
        os.utime(path, (old, old))

        assert cache.load(URI) == b"data"
        assert cache.load(URI, maxAge=60) is None
        assert cache.load(URI, maxAge=7200) == b"data"


class TestAsyncOperations:
    """Tests for get/set"""

    @pytest.mark.asyncio
    async def testRoundTrip(self, cache: DiskCache):
        assert await cache.set(URI, b"[]") is True
        assert await cache.get(URI) == b"[]"

    @pytest.mark.asyncio
    async def testSharedWithSyncApi(self, cache: DiskCache):
        """Async and sync flavours read the same files, dood!"""
        await cache.set(URI, b"async")
        assert cache.load(URI) == b"async"

        cache.save(URI, b"sync")
        assert await cache.get(URI) == b"sync"

    @pytest.mark.asyncio
    async def testMissingEntryIsNone(self, cache: DiskCache):
        assert await cache.get(URI) is None


class TestHousekeeping:
    """Tests for clear/getStats"""

    def testClearAndStats(self, cache: DiskCache):
        cache.save(URI, b"12345")
        cache.save(URI + "&limit=1", b"678")

        stats = cache.getStats()
        assert stats["enabled"] is True
        assert stats["entries"] == 2
        assert stats["bytes"] == 8

        cache.clear()

        assert cache.getStats()["entries"] == 0
        assert cache.load(URI) is None

    def testClearOnMissingDirectory(self, cache: DiskCache):
        cache.clear()
        assert cache.getStats()["entries"] == 0


def testDefaultCacheDirFollowsXdg(monkeypatch, tempDir: Path):
    monkeypatch.setenv("XDG_CACHE_HOME", str(tempDir))
    assert getDefaultCacheDir() == tempDir / "geokit"

    monkeypatch.delenv("XDG_CACHE_HOME")
    assert getDefaultCacheDir() == Path.home() / ".cache" / "geokit"


def testHashKeyGenerator():
    generator = HashKeyGenerator()
    assert generator.generateKey("abc") == hashlib.sha256(b"abc").hexdigest()
    assert len(HashKeyGenerator("sha512").generateKey("abc")) == 128

    with pytest.raises(ValueError):
        HashKeyGenerator("no-such-hash")


@pytest.mark.asyncio
async def testNullCache():
    """NullCache never stores anything, dood!"""
    cache = NullCache()

    assert await cache.set(URI, b"data") is False
    assert await cache.get(URI) is None
    assert cache.save(URI, b"data") is False
    assert cache.load(URI) is None
    cache.clear()
    assert cache.getStats() == {"enabled": False}

