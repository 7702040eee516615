"""
Cache-then-network request pipeline, dood!

For one request URI:

1. Look the URI up in the cache. A hit that parses is the answer; a hit
   that fails to parse is treated as a miss.
2. Download the URI. Transport failures end the request.
3. Parse the download. Parse failures end the request and are not cached.
4. Store the downloaded bytes in the cache (best effort) and answer.

Cache problems are logged and never fail the request. Cancellation is an
``asyncio.Event``: once set, no network request is started and a running
one is abandoned with GeocodeCancelledError, without writing the cache.
"""

import asyncio
import contextlib
import logging
from functools import partial
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

import httpx

from ..cache import CacheInterface, DiskCache, NullCache
from .backend import DEFAULT_REQUEST_TIMEOUT, DEFAULT_USER_AGENT
from .errors import GeocodeCancelledError, GeocodeError, GeocodeNetworkError

logger = logging.getLogger(__name__)

T = TypeVar("T")

ParseFunc = Callable[[bytes], T]
ResultCallback = Callable[[Optional[Any], Optional[BaseException]], None]


def createCache(config: Dict[str, Any]) -> CacheInterface[str, bytes]:
    """
    Build the response cache from a ``[cache]`` config table, dood!

    Keys: ``enabled`` (default True) and ``dir`` (default user cache dir).
    """
    if not config.get("enabled", True):
        return NullCache()
    cacheDir = config.get("dir")
    return DiskCache(Path(cacheDir).expanduser() if cacheDir else None)


def scheduleTask(coro: Awaitable[T], callback: Optional[ResultCallback] = None) -> "asyncio.Task[T]":
    """
    Run a request as a Task and report its outcome to ``callback``, dood!

    The callback is called exactly once as ``callback(result, None)`` or
    ``callback(None, error)``, always from a later event loop iteration and
    never before this function returns. A cancelled task reports
    GeocodeCancelledError. Must be called from a running event loop.
    """
    task = asyncio.get_running_loop().create_task(coro)  # type: ignore[arg-type]
    if callback is not None:
        task.add_done_callback(partial(_dispatchResult, callback))
    return task


def _dispatchResult(callback: ResultCallback, task: "asyncio.Task[Any]") -> None:
    if task.cancelled():
        callback(None, GeocodeCancelledError("Request was cancelled"))
        return
    error = task.exception()
    if error is not None:
        callback(None, error)
    else:
        callback(task.result(), None)


class CachedFetcher:
    """
    Fetches request URIs through a response cache, dood!

    Args:
        cache: Response cache; None disables caching
        requestTimeout: HTTP timeout in seconds
        userAgent: User-Agent header for every request
    """

    def __init__(
        self,
        cache: Optional[CacheInterface[str, bytes]] = None,
        *,
        requestTimeout: float = DEFAULT_REQUEST_TIMEOUT,
        userAgent: str = DEFAULT_USER_AGENT,
    ):
        self.cache: CacheInterface[str, bytes] = cache if cache is not None else NullCache()
        self.requestTimeout = requestTimeout
        self.userAgent = userAgent

    async def fetch(
        self,
        uri: str,
        parse: ParseFunc[T],
        *,
        cancellable: Optional[asyncio.Event] = None,
        useCache: bool = True,
    ) -> T:
        """
        Answer a request from cache or network, dood!

        Args:
            uri: Canonical request URI, also the cache key
            parse: Turns response bytes into the result, raising GeocodeError
            cancellable: Set it to abandon the request
            useCache: False skips both cache lookup and cache write

        Raises:
            GeocodeError: Whatever ``parse`` raises for a fresh download
            GeocodeNetworkError: Transport failure
            GeocodeCancelledError: ``cancellable`` was set
        """
        self._checkCancelled(cancellable)

        if useCache:
            cachedData: Optional[bytes] = None
            try:
                cachedData = await self.cache.get(uri)
            except Exception as e:
                logger.warning(f"Cache error for {uri}: {e}")

            if cachedData is not None:
                try:
                    result = parse(cachedData)
                    logger.debug(f"Cache hit for {uri}")
                    return result
                except GeocodeError as e:
                    logger.warning(f"Ignoring unusable cache entry for {uri}: {e}")
            else:
                logger.debug(f"Cache miss for {uri}")

            self._checkCancelled(cancellable)

        data = await self._download(uri, cancellable)
        result = parse(data)

        if useCache:
            try:
                if not await self.cache.set(uri, data):
                    logger.debug(f"Response for {uri} was not cached")
            except Exception as e:
                logger.warning(f"Failed to cache response for {uri}: {e}")

        return result

    def fetchSync(self, uri: str, parse: ParseFunc[T], *, useCache: bool = True) -> T:
        """
        Blocking version of ``fetch`` with identical cache semantics.

        Must not be called from a running event loop.
        """
        return asyncio.run(self.fetch(uri, parse, useCache=useCache))

    def _checkCancelled(self, cancellable: Optional[asyncio.Event]) -> None:
        if cancellable is not None and cancellable.is_set():
            raise GeocodeCancelledError("Request was cancelled")

    async def _download(self, uri: str, cancellable: Optional[asyncio.Event]) -> bytes:
        if cancellable is None:
            return await self._makeRequest(uri)

        requestTask = asyncio.ensure_future(self._makeRequest(uri))
        cancelTask = asyncio.ensure_future(cancellable.wait())
        try:
            await asyncio.wait({requestTask, cancelTask}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            requestTask.cancel()
            raise
        finally:
            cancelTask.cancel()

        if requestTask.done():
            return requestTask.result()

        requestTask.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await requestTask
        logger.debug(f"Request for {uri} cancelled")
        raise GeocodeCancelledError("Request was cancelled")

    async def _makeRequest(self, uri: str) -> bytes:
        """
        Download a URI, dood!

        Creates a new session per request.

        Raises:
            GeocodeNetworkError: On timeout, connection problems or any
                status other than 200
        """
        headers = {"User-Agent": self.userAgent}
        logger.debug(f"Making request to {uri}")

        try:
            async with httpx.AsyncClient(timeout=self.requestTimeout) as session:
                response = await session.get(uri, headers=headers)
        except httpx.TimeoutException as e:
            logger.error(f"Request timeout for {uri}")
            raise GeocodeNetworkError("Request timeout", originalError=e)
        except httpx.RequestError as e:
            logger.error(f"Network error: {e}")
            raise GeocodeNetworkError(f"Network error: {e}", originalError=e)

        statusCode = response.status_code
        if statusCode == 200:
            logger.debug(f"Request successful: {statusCode}")
            return response.content

        if statusCode in (401, 403):
            message = "Access denied, check the api key"
        elif statusCode == 404:
            message = "Service endpoint not found"
        elif statusCode == 429:
            message = "Rate limit exceeded"
        elif statusCode >= 500:
            message = f"Server error: {statusCode}"
        else:
            message = f"Request failed: {statusCode}"
        logger.error(f"{message} ({uri})")
        raise GeocodeNetworkError(message, statusCode=statusCode)
