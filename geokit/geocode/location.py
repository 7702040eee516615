"""
Location value type, dood!

A Location is a point on the WGS84 ellipsoid with an accuracy radius, an
optional altitude, an optional display description and the time it was
created. Locations are immutable; use ``withDescription`` or
``dataclasses.replace`` to derive new ones.

Out-of-range coordinates are rejected with InvalidArgumentsError, never
clamped.
"""

import math
import re
import time
from dataclasses import dataclass, field, replace
from typing import Optional
from urllib.parse import unquote

from ..utils import formatDecimal
from .errors import InvalidArgumentsError

EARTH_RADIUS_KM = 6372.795


class Accuracy:
    """Accuracy buckets in meters, dood!"""

    UNKNOWN = -1
    STREET = 1000
    CITY = 25000
    REGION = 50000
    COUNTRY = 150000
    CONTINENT = 3000000


def _checkLatitude(value: float, name: str = "latitude") -> float:
    value = float(value)
    if not -90.0 <= value <= 90.0:
        raise InvalidArgumentsError(f"Invalid {name} {value}: must be within [-90, 90]")
    return value


def _checkLongitude(value: float, name: str = "longitude") -> float:
    value = float(value)
    if not -180.0 <= value <= 180.0:
        raise InvalidArgumentsError(f"Invalid {name} {value}: must be within [-180, 180]")
    return value


@dataclass(frozen=True)
class BoundingBox:
    """Rectangle given by its northern, southern, western and eastern edges."""

    top: float
    bottom: float
    left: float
    right: float

    def __post_init__(self):
        object.__setattr__(self, "top", _checkLatitude(self.top, "top"))
        object.__setattr__(self, "bottom", _checkLatitude(self.bottom, "bottom"))
        object.__setattr__(self, "left", _checkLongitude(self.left, "left"))
        object.__setattr__(self, "right", _checkLongitude(self.right, "right"))


@dataclass(frozen=True)
class Location:
    """
    Geographic point, dood!

    Attributes:
        latitude: Degrees within [-90, 90]
        longitude: Degrees within [-180, 180]
        accuracy: Radius in meters, or Accuracy.UNKNOWN
        description: Optional display string
        altitude: Meters above sea level, None when unknown
        timestamp: Creation time in seconds since the epoch. Not part of
            equality, so two parses of one payload compare equal.

    Example:
        >>> loc = Location(51.2371, -0.589669, accuracy=Accuracy.STREET)
        >>> loc.toUri()
        'geo:51.2371,-0.589669;crs=wgs84;u=1000'
    """

    latitude: float
    longitude: float
    accuracy: float = Accuracy.UNKNOWN
    description: Optional[str] = None
    altitude: Optional[float] = None
    timestamp: int = field(default_factory=lambda: int(time.time()), compare=False)

    def __post_init__(self):
        object.__setattr__(self, "latitude", _checkLatitude(self.latitude))
        object.__setattr__(self, "longitude", _checkLongitude(self.longitude))
        accuracy = float(self.accuracy)
        if not accuracy >= Accuracy.UNKNOWN:
            raise InvalidArgumentsError(f"Invalid accuracy {self.accuracy}")
        if accuracy < 0:
            accuracy = Accuracy.UNKNOWN
        object.__setattr__(self, "accuracy", accuracy)
        if self.altitude is not None:
            altitude = float(self.altitude)
            if math.isnan(altitude):
                raise InvalidArgumentsError("Invalid altitude: not a number")
            object.__setattr__(self, "altitude", altitude)

    def withDescription(self, description: Optional[str]) -> "Location":
        """Return a copy carrying another description."""
        return replace(self, description=description)

    def distanceFrom(self, other: "Location") -> float:
        """
        Great-circle distance to another location in kilometers (haversine), dood!

        Example:
            >>> a = Location(38.898556, -77.037852)
            >>> b = Location(38.897147, -77.043934)
            >>> round(a.distanceFrom(b), 3)
            0.549
        """
        lat1 = math.radians(self.latitude)
        lat2 = math.radians(other.latitude)
        dLat = lat2 - lat1
        dLon = math.radians(other.longitude - self.longitude)

        a = math.sin(dLat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dLon / 2) ** 2
        c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
        return EARTH_RADIUS_KM * c

    def toUri(self) -> str:
        """Format as RFC 5870 geo URI."""
        uri = f"geo:{formatDecimal(self.latitude)},{formatDecimal(self.longitude)}"
        if self.altitude is not None:
            uri += f",{formatDecimal(self.altitude)}"
        uri += ";crs=wgs84"
        if self.accuracy != Accuracy.UNKNOWN:
            uri += f";u={formatDecimal(self.accuracy)}"
        return uri

    @classmethod
    def fromUri(cls, uri: str) -> "Location":
        """
        Parse an RFC 5870 geo URI, dood!

        Also accepts the Android flavour ``geo:0,0?q=<lat>,<lon>(<description>)``.

        Raises:
            InvalidArgumentsError: If the URI is malformed or uses an
                unsupported coordinate reference system
        """
        return _parseGeoUri(uri)


_NUMBER = r"-?\d+(?:\.\d+)?"
_GEO_URI_RE = re.compile(
    rf"geo:(?P<lat>{_NUMBER}),(?P<lon>{_NUMBER})(?:,(?P<alt>{_NUMBER}))?"
    r"(?P<params>(?:;[^;?]*)*)(?:\?(?P<query>.*))?",
    re.IGNORECASE,
)
_NUMBER_RE = re.compile(_NUMBER)
_ANDROID_QUERY_RE = re.compile(rf"(?P<lat>{_NUMBER}),(?P<lon>{_NUMBER})\((?P<description>[^()]+)\)")


def _parseGeoUri(uri: str) -> Location:
    if any(ch.isspace() for ch in uri):
        raise InvalidArgumentsError(f"Invalid geo URI '{uri}': contains whitespace")

    match = _GEO_URI_RE.fullmatch(uri)
    if match is None:
        raise InvalidArgumentsError(f"Invalid geo URI '{uri}'")

    latitude = float(match.group("lat"))
    longitude = float(match.group("lon"))
    altitude = float(match.group("alt")) if match.group("alt") is not None else None
    accuracy: float = Accuracy.UNKNOWN
    description: Optional[str] = None

    params = match.group("params").split(";")[1:]
    seenUncertainty = False
    for index, param in enumerate(params):
        name, _, value = param.partition("=")
        name = name.lower()
        if name == "crs":
            if index != 0:
                raise InvalidArgumentsError(f"Invalid geo URI '{uri}': crs must be the first parameter")
            if value.lower() != "wgs84":
                raise InvalidArgumentsError(f"Invalid geo URI '{uri}': unsupported crs '{value}'")
        elif name == "u":
            if seenUncertainty:
                raise InvalidArgumentsError(f"Invalid geo URI '{uri}': repeated u parameter")
            if not _NUMBER_RE.fullmatch(value) or float(value) < 0:
                raise InvalidArgumentsError(f"Invalid geo URI '{uri}': bad uncertainty '{value}'")
            seenUncertainty = True
            accuracy = float(value)

    query = match.group("query")
    if query is not None:
        for item in query.split("&"):
            name, _, value = item.partition("=")
            if name != "q":
                continue
            if latitude != 0 or longitude != 0:
                raise InvalidArgumentsError(f"Invalid geo URI '{uri}': q is only allowed with geo:0,0")
            qMatch = _ANDROID_QUERY_RE.fullmatch(value)
            if qMatch is None:
                raise InvalidArgumentsError(f"Invalid geo URI '{uri}': bad q parameter")
            latitude = float(qMatch.group("lat"))
            longitude = float(qMatch.group("lon"))
            description = unquote(qMatch.group("description"))

    return Location(latitude, longitude, accuracy=accuracy, description=description, altitude=altitude)

