"""
Yahoo PlaceFinder / GeoPlanet backend, dood!

Resolve requests (one result, forward or reverse) go to PlaceFinder, whose
JSON reply is a ``ResultSet`` with an error code, a ``Found`` counter and a
``Results`` array. Searches go to GeoPlanet, which replies with
``places.place``: an array of flat objects with a nested ``centroid``.
"""

import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional, Tuple, cast
from urllib.parse import quote

from ..utils import parseDecimal
from .backend import Backend, RequestKind
from .errors import (
    GeocodeError,
    InternalServiceError,
    InvalidArgumentsError,
    NoMatchesError,
    NotSupportedError,
    ParseError,
)
from .grouping import GroupingTree, formatDescription
from .location import Accuracy
from .models import PlaceFinderResultSet
from .parsing import (
    FieldHandler,
    extractAttributes,
    getArrayMember,
    getObjectMember,
    loadJson,
    makeLocation,
    parseInt,
)
from .place import Place, PlaceType
from .query import GeocodeQuery, buildUri

logger = logging.getLogger(__name__)

PLACEFINDER_URI = "http://where.yahooapis.com/geocode"
GEOPLANET_URI = "http://where.yahooapis.com/v1/places"

# XEP-0080 parameter -> PlaceFinder parameter
FORWARD_PARAMS: Dict[str, str] = {
    "country": "country",
    "region": "state",
    "locality": "city",
    "area": "neighborhood",
    "postalcode": "postal",
    "street": "street",
    "building": "house",
    "room": "unit",
}

RESOLVE_FIELD_HANDLERS = {
    "radius": FieldHandler.NUMERIC,
    "quality": FieldHandler.NUMERIC,
}
SEARCH_FIELD_HANDLERS = {
    "woeid": FieldHandler.NUMERIC,
    "popRank": FieldHandler.NUMERIC,
    "areaRank": FieldHandler.NUMERIC,
    "centroid": FieldHandler.CENTROID,
    "boundingBox": FieldHandler.IGNORE,
}
IGNORED_SUFFIXES = (" attrs",)

SEARCH_GROUPING_KEYS = ("country", "admin1", "admin2", "admin3", "postal", "placeTypeName", "locality1")

# (service field, Place attribute); the first present field wins
RESOLVE_PLACE_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("line1", "streetAddress"),
    ("street", "street"),
    ("house", "building"),
    ("postal", "postalCode"),
    ("uzip", "postalCode"),
    ("area", "area"),
    ("neighborhood", "area"),
    ("city", "town"),
    ("county", "county"),
    ("state", "state"),
    ("country", "country"),
    ("countrycode", "countryCode"),
)
SEARCH_PLACE_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("country", "country"),
    ("admin1", "state"),
    ("admin2", "county"),
    ("admin3", "administrativeArea"),
    ("locality1", "town"),
    ("locality2", "area"),
    ("postal", "postalCode"),
)

# PlaceFinder error codes: (error class, message used when the service sends none)
ERROR_CODES: Dict[int, Tuple[type, str]] = {
    1: (NotSupportedError, "Query not supported"),
    100: (InvalidArgumentsError, "No input parameters"),
    102: (InvalidArgumentsError, "Address data not recognized as valid UTF-8"),
    103: (InvalidArgumentsError, "Insufficient address data"),
    104: (NotSupportedError, "Unknown language"),
    105: (NotSupportedError, "No country detected"),
    106: (NotSupportedError, "Country not supported"),
}
INTERNAL_ERROR_CODES = range(1000, 1100)

# WOEID place type codes
WOE_TYPES: Dict[int, Tuple[PlaceType, int]] = {
    6: (PlaceType.STREET, Accuracy.STREET),
    7: (PlaceType.TOWN, Accuracy.CITY),
    8: (PlaceType.UNKNOWN, Accuracy.REGION),
    9: (PlaceType.UNKNOWN, Accuracy.REGION),
    10: (PlaceType.UNKNOWN, Accuracy.REGION),
    11: (PlaceType.UNKNOWN, Accuracy.STREET),
    12: (PlaceType.UNKNOWN, Accuracy.COUNTRY),
    14: (PlaceType.AIRPORT, Accuracy.CITY),
    20: (PlaceType.BUILDING, Accuracy.STREET),
    22: (PlaceType.UNKNOWN, Accuracy.CITY),
    29: (PlaceType.UNKNOWN, Accuracy.CONTINENT),
    35: (PlaceType.TOWN, Accuracy.CITY),
}
PLACE_TYPE_NAMES: Dict[str, Tuple[PlaceType, int]] = {
    "Street": (PlaceType.STREET, Accuracy.STREET),
    "Town": (PlaceType.TOWN, Accuracy.CITY),
    "Historical Town": (PlaceType.TOWN, Accuracy.CITY),
    "State": (PlaceType.UNKNOWN, Accuracy.REGION),
    "County": (PlaceType.UNKNOWN, Accuracy.REGION),
    "LocalAdmin": (PlaceType.UNKNOWN, Accuracy.REGION),
    "Zip": (PlaceType.UNKNOWN, Accuracy.STREET),
    "Country": (PlaceType.UNKNOWN, Accuracy.COUNTRY),
    "Airport": (PlaceType.AIRPORT, Accuracy.CITY),
    "Point of Interest": (PlaceType.BUILDING, Accuracy.STREET),
    "Suburb": (PlaceType.UNKNOWN, Accuracy.CITY),
    "Continent": (PlaceType.UNKNOWN, Accuracy.CONTINENT),
}


def errorForCode(code: int, message: Optional[str]) -> GeocodeError:
    """
    Map a PlaceFinder error code to an exception, dood!

    The service's own message wins over the default text of the code.
    """
    if code in ERROR_CODES:
        errorClass, defaultMessage = ERROR_CODES[code]
        return errorClass(message or defaultMessage)
    if code in INTERNAL_ERROR_CODES:
        return InternalServiceError(message or "Internal problem detected")
    return ParseError(message or f"Unknown error code {code}")


def _mapFields(attrs: Dict[str, str], fields: Tuple[Tuple[str, str], ...]) -> Dict[str, str]:
    ret: Dict[str, str] = {}
    for serviceField, placeField in fields:
        if serviceField in attrs:
            ret.setdefault(placeField, attrs[serviceField])
    return ret


def _coordinates(attrs: Dict[str, str]) -> Tuple[float, float]:
    latitude = parseDecimal(attrs.get("latitude"))
    longitude = parseDecimal(attrs.get("longitude"))
    if latitude is None or longitude is None:
        raise ParseError("Result has no usable latitude/longitude")
    return latitude, longitude


def placeFromResolveAttributes(attrs: Dict[str, str]) -> Place:
    """Build a Place from flattened PlaceFinder result attributes."""
    latitude, longitude = _coordinates(attrs)

    placeType, accuracy = PlaceType.UNKNOWN, Accuracy.UNKNOWN
    if "woetype" in attrs:
        try:
            placeType, accuracy = WOE_TYPES.get(int(attrs["woetype"]), (placeType, accuracy))
        except ValueError:
            logger.debug(f"Ignoring invalid woetype {attrs['woetype']!r}")
    radius = parseDecimal(attrs.get("radius"))
    if radius is not None and radius >= 0:
        accuracy = radius

    lines = [attrs[key] for key in ("line1", "line2", "line3", "line4") if key in attrs]
    name = attrs.get("name") or attrs.get("line1") or attrs.get("neighborhood") or attrs.get("city") or ""
    description = ", ".join(lines) if lines else name or None

    location = makeLocation(latitude, longitude, accuracy=accuracy, description=description)
    return Place(name=name, location=location, placeType=placeType, **_mapFields(attrs, RESOLVE_PLACE_FIELDS))


def placeFromSearchAttributes(attrs: Dict[str, str]) -> Place:
    """Build a Place from flattened GeoPlanet place attributes."""
    latitude, longitude = _coordinates(attrs)
    placeType, accuracy = PLACE_TYPE_NAMES.get(attrs.get("placeTypeName", ""), (PlaceType.UNKNOWN, Accuracy.UNKNOWN))
    name = attrs.get("name", "")
    location = makeLocation(latitude, longitude, accuracy=accuracy, description=name or None)
    return Place(name=name, location=location, placeType=placeType, **_mapFields(attrs, SEARCH_PLACE_FIELDS))


def parseResolveJson(data: Any) -> Place:
    """
    Parse a PlaceFinder reply, dood!

    Raises:
        ParseError: Malformed reply or unknown service error code
        NotSupportedError: Service refused the query
        InvalidArgumentsError: Service found the input unusable
        InternalServiceError: Service side failure
        NoMatchesError: Nothing found
    """
    root = loadJson(data)
    resultSet = cast(PlaceFinderResultSet, getObjectMember(root, "ResultSet"))

    code = parseInt(resultSet.get("Error", 0), "Error")
    if code != 0:
        message = resultSet.get("ErrorMessage")
        raise errorForCode(code, message if isinstance(message, str) and message else None)

    if parseInt(resultSet.get("Found", 0), "Found") == 0:
        raise NoMatchesError("No matches found for request")

    results = getArrayMember(resultSet, "Results")
    if not results or not isinstance(results[0], dict):
        raise ParseError("Missing result object in response")

    attrs = extractAttributes(results[0], RESOLVE_FIELD_HANDLERS, IGNORED_SUFFIXES)
    return placeFromResolveAttributes(attrs)


def parseSearchJson(data: Any) -> List[Place]:
    """
    Parse a GeoPlanet reply into disambiguated Places, dood!

    Raises:
        ParseError: Malformed reply
        NoMatchesError: Empty place list
    """
    root = loadJson(data)
    places = getArrayMember(getObjectMember(root, "places"), "place")
    if not places:
        raise NoMatchesError("No matches found for request")

    tree: GroupingTree[Place] = GroupingTree(SEARCH_GROUPING_KEYS)
    for element in places:
        if not isinstance(element, dict):
            raise ParseError("Unexpected non-object entry in place list")
        attrs = extractAttributes(element, SEARCH_FIELD_HANDLERS, IGNORED_SUFFIXES)
        tree.insert(attrs, placeFromSearchAttributes(attrs))

    return [
        replace(place, location=place.location.withDescription(formatDescription(place.name, tokens)))
        for place, tokens in tree.walk()
    ]


class YahooBackend(Backend):
    """PlaceFinder for resolving, GeoPlanet for searching, dood!"""

    name = "yahoo"

    def _requireAppId(self) -> str:
        if not self.config.apiKey:
            raise InvalidArgumentsError("Yahoo backend needs an application id (api-key)")
        return self.config.apiKey

    def buildUri(self, query: GeocodeQuery, kind: RequestKind) -> str:
        if kind == RequestKind.SEARCH:
            return self._buildSearchUri(query)
        return self._buildResolveUri(query)

    def _buildResolveUri(self, query: GeocodeQuery) -> str:
        params: Dict[str, Optional[str]] = {
            "appid": self._requireAppId(),
            "flags": "QJT",
            "locale": self.getLanguage(query),
        }
        if query.location is not None:
            params["gflags"] = "R"
            params["location"] = f"{query.location.latitude:g}, {query.location.longitude:g}"
        elif query.text:
            params["location"] = query.text
        else:
            for key, value in query.params:
                if key in FORWARD_PARAMS:
                    params[FORWARD_PARAMS[key]] = value
        return buildUri(self.config.baseUri or PLACEFINDER_URI, params)

    def _buildSearchUri(self, query: GeocodeQuery) -> str:
        if query.isReverse:
            raise InvalidArgumentsError("GeoPlanet cannot search for coordinates, resolve them instead")
        term = query.getFreeText()
        if not term:
            raise InvalidArgumentsError("No location argument set")

        base = self.config.baseUri or GEOPLANET_URI
        path = f"{base}.q('{quote(term, safe='')}');start=0;count={query.answerCount}"
        return buildUri(
            path,
            {"appid": self._requireAppId(), "format": "json", "lang": self.getLanguage(query)},
        )

    def parseResolve(self, data: bytes) -> Place:
        return parseResolveJson(data)

    def parseSearch(self, data: bytes) -> List[Place]:
        return parseSearchJson(data)
