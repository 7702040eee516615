"""
GeoIP client, dood!

Locates an IP address (or, with no address, the caller itself) through a
GeoIP lookup service answering ``<server>?ip=<address>``.
"""

import asyncio
import ipaddress
import logging
from typing import Any, Dict, Optional

from ..cache import CacheInterface
from .backend import DEFAULT_REQUEST_TIMEOUT, DEFAULT_USER_AGENT
from .errors import InvalidArgumentsError
from .fetcher import CachedFetcher, ResultCallback, createCache, scheduleTask
from .geoip import parseIpJson
from .location import Location
from .query import buildUri

logger = logging.getLogger(__name__)


def checkIpAddress(ip: str) -> str:
    """
    Validate a public IP address, dood!

    Raises:
        InvalidArgumentsError: For malformed, private, loopback and other
            non-global addresses, which no GeoIP database can locate
    """
    try:
        address = ipaddress.ip_address(ip.strip())
    except ValueError as e:
        raise InvalidArgumentsError(f"Invalid IP address '{ip}'", originalError=e)
    if not address.is_global:
        raise InvalidArgumentsError(f"IP address {address} is not a public address")
    return str(address)


class GeoIpClient:
    """
    Location lookup for IP addresses, dood!

    Lookups of an explicit address are cached like any other request.
    Lookups of the caller's own address are never cached, since the answer
    follows the network the caller is on.

    Args:
        serverUri: GeoIP lookup endpoint
        cache: Response cache; None disables caching
        requestTimeout: HTTP timeout in seconds
        userAgent: User-Agent header

    Example:
        >>> client = GeoIpClient("https://geoip.example.org/lookup")
        >>> location = await client.search("8.8.8.8")
        >>> print(location.description, location.accuracy)
    """

    def __init__(
        self,
        serverUri: str,
        cache: Optional[CacheInterface[str, bytes]] = None,
        *,
        requestTimeout: float = DEFAULT_REQUEST_TIMEOUT,
        userAgent: str = DEFAULT_USER_AGENT,
    ):
        if not serverUri:
            raise InvalidArgumentsError("GeoIP server URI is not set")
        self.serverUri = serverUri
        self.fetcher = CachedFetcher(cache, requestTimeout=requestTimeout, userAgent=userAgent)

    @classmethod
    def fromConfig(cls, ipConfig: Dict[str, Any], cacheConfig: Dict[str, Any]) -> "GeoIpClient":
        """Build from ``ConfigManager.getIpClientConfig()`` and ``getCacheConfig()``."""
        return cls(
            ipConfig.get("server-uri", ""),
            createCache(cacheConfig),
            requestTimeout=float(ipConfig.get("request-timeout", DEFAULT_REQUEST_TIMEOUT)),
            userAgent=ipConfig.get("user-agent", DEFAULT_USER_AGENT),
        )

    def buildUri(self, ip: Optional[str] = None) -> str:
        if ip is None:
            return buildUri(self.serverUri, {})
        return buildUri(self.serverUri, {"ip": checkIpAddress(ip)})

    async def search(self, ip: Optional[str] = None, *, cancellable: Optional[asyncio.Event] = None) -> Location:
        """
        Locate an IP address, or the caller when ``ip`` is None, dood!

        Raises:
            InvalidArgumentsError: Invalid or non-public address
            NoMatchesError: Address unknown to the service
            InternalServiceError: Service database unavailable
            GeocodeError: Any other parse or network failure
        """
        uri = self.buildUri(ip)
        return await self.fetcher.fetch(uri, parseIpJson, cancellable=cancellable, useCache=ip is not None)

    def searchSync(self, ip: Optional[str] = None) -> Location:
        return self.fetcher.fetchSync(self.buildUri(ip), parseIpJson, useCache=ip is not None)

    def searchTask(
        self,
        ip: Optional[str] = None,
        callback: Optional[ResultCallback] = None,
        *,
        cancellable: Optional[asyncio.Event] = None,
    ) -> "asyncio.Task[Location]":
        """Start a lookup in the background; the callback runs exactly once."""
        return scheduleTask(self.search(ip, cancellable=cancellable), callback)
