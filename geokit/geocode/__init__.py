"""
geokit.geocode - forward, reverse and GeoIP geocoding, dood!

Turns free-form addresses, structured address parameters, coordinates or IP
addresses into Places and Locations through a pluggable web service
backend (OpenStreetMap Nominatim or Yahoo PlaceFinder/GeoPlanet), with raw
responses cached on disk by request URI.

Example Usage:
    >>> from geokit.cache import DiskCache
    >>> from geokit.geocode import BackendConfig, GeocodeClient, GeocodeQuery, Location
    >>>
    >>> client = GeocodeClient(BackendConfig(name="nominatim"), cache=DiskCache())
    >>> places = await client.search("Paris")
    >>> for place in places:
    ...     print(place.description)
    Paris, France
    Paris, Texas, United States
    >>>
    >>> place = await client.resolve(GeocodeQuery.forParams({"locality": "Guildford", "country": "UK"}))
    >>> place = await client.reverse(Location(51.2371, -0.589669))
"""

from .backend import Backend, BackendConfig, RequestKind, createBackend
from .client import GeocodeClient
from .errors import (
    GeocodeCancelledError,
    GeocodeError,
    GeocodeNetworkError,
    InternalServiceError,
    InvalidArgumentsError,
    NoMatchesError,
    NotSupportedError,
    ParseError,
)
from .fetcher import CachedFetcher, createCache
from .geoip import parseIpJson
from .ipclient import GeoIpClient
from .location import Accuracy, BoundingBox, Location
from .nominatim import NominatimBackend
from .place import OsmType, Place, PlaceType
from .query import GeocodeQuery, getLanguageForLocale
from .yahoo import YahooBackend

__all__ = [
    # Clients
    "GeocodeClient",
    "GeoIpClient",
    "CachedFetcher",
    "createCache",
    # Backends
    "Backend",
    "BackendConfig",
    "RequestKind",
    "createBackend",
    "NominatimBackend",
    "YahooBackend",
    "parseIpJson",
    # Model
    "Accuracy",
    "BoundingBox",
    "Location",
    "Place",
    "PlaceType",
    "OsmType",
    "GeocodeQuery",
    "getLanguageForLocale",
    # Errors
    "GeocodeError",
    "ParseError",
    "NotSupportedError",
    "NoMatchesError",
    "InvalidArgumentsError",
    "InternalServiceError",
    "GeocodeNetworkError",
    "GeocodeCancelledError",
]
