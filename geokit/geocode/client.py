"""
Geocoding client, dood!

GeocodeClient ties a Backend (service dialect) to a CachedFetcher (cache
and transport). Every operation comes in three flavours with identical
semantics: a coroutine, a blocking ``...Sync`` method and a ``...Task``
method that returns an asyncio.Task and reports to a callback.
"""

import asyncio
import logging
from functools import partial
from typing import Any, Dict, List, Optional, Union

from ..cache import CacheInterface
from .backend import Backend, BackendConfig, RequestKind, createBackend
from .errors import InvalidArgumentsError
from .fetcher import CachedFetcher, ResultCallback, createCache, scheduleTask
from .location import Location
from .place import Place
from .query import GeocodeQuery

logger = logging.getLogger(__name__)

QueryLike = Union[GeocodeQuery, str]


class GeocodeClient:
    """
    Forward and reverse geocoding with response caching, dood!

    Args:
        config: Backend selection and credentials; defaults to Nominatim
        cache: Response cache; None disables caching
        backend: Explicit backend instance, overrides ``config.name``

    Example:
        >>> client = GeocodeClient(BackendConfig(name="nominatim"), cache=DiskCache())
        >>> places = await client.search("Paris")
        >>> for place in places:
        ...     print(place.description, place.location.latitude, place.location.longitude)
        >>> place = client.reverseSync(Location(51.2371, -0.589669))
    """

    def __init__(
        self,
        config: Optional[BackendConfig] = None,
        cache: Optional[CacheInterface[str, bytes]] = None,
        *,
        backend: Optional[Backend] = None,
    ):
        self.config = config or (backend.config if backend is not None else BackendConfig())
        self.backend = backend or createBackend(self.config)
        self.fetcher = CachedFetcher(
            cache,
            requestTimeout=self.config.requestTimeout,
            userAgent=self.config.userAgent,
        )

    @classmethod
    def fromConfig(cls, backendConfig: BackendConfig, cacheConfig: Dict[str, Any]) -> "GeocodeClient":
        """Build from ``ConfigManager.getBackendConfig()`` and ``getCacheConfig()``."""
        return cls(backendConfig, createCache(cacheConfig))

    def _toQuery(self, query: QueryLike) -> GeocodeQuery:
        if isinstance(query, GeocodeQuery):
            return query
        return GeocodeQuery.forString(query, answerCount=self.config.answerCount)

    async def _request(self, query: GeocodeQuery, kind: RequestKind, cancellable: Optional[asyncio.Event]) -> Any:
        uri = self.backend.buildUri(query, kind)
        return await self.fetcher.fetch(uri, partial(self.backend.parse, kind=kind), cancellable=cancellable)

    async def search(self, query: QueryLike, *, cancellable: Optional[asyncio.Event] = None) -> List[Place]:
        """
        Find all places matching a query, dood!

        Descriptions are disambiguated across the result list, e.g.
        "Paris, France" next to "Paris, Texas, United States".

        Raises:
            InvalidArgumentsError: For reverse queries or unusable parameters
            NoMatchesError: Nothing found
            GeocodeError: Any other parse, service or network failure
        """
        geocodeQuery = self._toQuery(query)
        if geocodeQuery.isReverse:
            raise InvalidArgumentsError("Cannot search for a location, use resolve() or reverse()")
        return await self._request(geocodeQuery, RequestKind.SEARCH, cancellable)

    async def resolve(self, query: QueryLike, *, cancellable: Optional[asyncio.Event] = None) -> Place:
        """Best single match for a query (forward or reverse), dood!"""
        return await self._request(self._toQuery(query), RequestKind.RESOLVE, cancellable)

    async def reverse(self, location: Location, *, cancellable: Optional[asyncio.Event] = None) -> Place:
        """Place at a point."""
        return await self.resolve(GeocodeQuery.forLocation(location), cancellable=cancellable)

    def searchSync(self, query: QueryLike) -> List[Place]:
        return self.fetcher.fetchSync(*self._syncArgs(query, RequestKind.SEARCH))

    def resolveSync(self, query: QueryLike) -> Place:
        return self.fetcher.fetchSync(*self._syncArgs(query, RequestKind.RESOLVE))

    def reverseSync(self, location: Location) -> Place:
        return self.resolveSync(GeocodeQuery.forLocation(location))

    def _syncArgs(self, query: QueryLike, kind: RequestKind):
        geocodeQuery = self._toQuery(query)
        if kind == RequestKind.SEARCH and geocodeQuery.isReverse:
            raise InvalidArgumentsError("Cannot search for a location, use resolve() or reverse()")
        return self.backend.buildUri(geocodeQuery, kind), partial(self.backend.parse, kind=kind)

    def searchTask(
        self,
        query: QueryLike,
        callback: Optional[ResultCallback] = None,
        *,
        cancellable: Optional[asyncio.Event] = None,
    ) -> "asyncio.Task[List[Place]]":
        """
        Start a search in the background, dood!

        ``callback(places, None)`` or ``callback(None, error)`` runs exactly
        once, after this method has returned.
        """
        return scheduleTask(self.search(query, cancellable=cancellable), callback)

    def resolveTask(
        self,
        query: QueryLike,
        callback: Optional[ResultCallback] = None,
        *,
        cancellable: Optional[asyncio.Event] = None,
    ) -> "asyncio.Task[Place]":
        """Start a resolve in the background, see ``searchTask``."""
        return scheduleTask(self.resolve(query, cancellable=cancellable), callback)
