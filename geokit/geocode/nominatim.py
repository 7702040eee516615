"""
OpenStreetMap Nominatim backend, dood!

Searches use ``/search`` and reverse lookups use ``/reverse``, both with
``format=jsonv2&addressdetails=1``. A forward resolve is a search limited
to one result. Search results are disambiguated with the same grouping
tree as the Yahoo backend, keyed by Nominatim's address fields.
"""

import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional, Tuple

from ..utils import formatDecimal, parseDecimal
from .backend import Backend, RequestKind
from .errors import GeocodeError, InvalidArgumentsError, NoMatchesError, ParseError
from .grouping import GroupingTree, formatDescription
from .location import Accuracy, BoundingBox
from .models import NominatimResult
from .parsing import FieldHandler, extractAttributes, loadJson, makeLocation
from .place import OsmType, Place, PlaceType
from .query import GeocodeQuery, buildUri

logger = logging.getLogger(__name__)

NOMINATIM_URI = "https://nominatim.openstreetmap.org/"

# XEP-0080 parameter -> Nominatim structured search parameter
FORWARD_PARAMS: Dict[str, str] = {
    "country": "country",
    "region": "state",
    "locality": "city",
    "postalcode": "postalcode",
    "countrycode": "countrycodes",
}

FIELD_HANDLERS = {
    "place_id": FieldHandler.NUMERIC,
    "osm_id": FieldHandler.NUMERIC,
    "place_rank": FieldHandler.NUMERIC,
    "importance": FieldHandler.NUMERIC,
    "address": FieldHandler.FLATTEN,
    "boundingbox": FieldHandler.IGNORE,
    "extratags": FieldHandler.IGNORE,
    "namedetails": FieldHandler.IGNORE,
}

GROUPING_KEYS = ("country", "state", "county", "state_district", "postcode", "type", "city")

# (Nominatim field, Place attribute); the first present field wins
PLACE_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("road", "street"),
    ("building", "building"),
    ("house_name", "building"),
    ("postcode", "postalCode"),
    ("suburb", "area"),
    ("neighbourhood", "area"),
    ("quarter", "area"),
    ("city", "town"),
    ("town", "town"),
    ("village", "town"),
    ("hamlet", "town"),
    ("county", "county"),
    ("state", "state"),
    ("state_district", "administrativeArea"),
    ("country_code", "countryCode"),
    ("country", "country"),
    ("continent", "continent"),
)

# (category, type) -> PlaceType; type None matches every type of the category
PLACE_TYPES: Dict[Tuple[str, Optional[str]], PlaceType] = {
    ("place", "city"): PlaceType.TOWN,
    ("place", "town"): PlaceType.TOWN,
    ("place", "village"): PlaceType.TOWN,
    ("place", "hamlet"): PlaceType.TOWN,
    ("building", None): PlaceType.BUILDING,
    ("aeroway", "aerodrome"): PlaceType.AIRPORT,
    ("railway", "station"): PlaceType.RAILWAY_STATION,
    ("railway", "halt"): PlaceType.LIGHT_RAIL_STATION,
    ("railway", "tram_stop"): PlaceType.LIGHT_RAIL_STATION,
    ("highway", "bus_stop"): PlaceType.BUS_STOP,
    ("highway", None): PlaceType.STREET,
    ("amenity", "school"): PlaceType.SCHOOL,
    ("amenity", "place_of_worship"): PlaceType.PLACE_OF_WORSHIP,
    ("amenity", "restaurant"): PlaceType.RESTAURANT,
    ("amenity", "bar"): PlaceType.BAR,
    ("amenity", "pub"): PlaceType.BAR,
}

ACCURACY_BY_ADDRESS_TYPE: Dict[str, int] = {
    "house": Accuracy.STREET,
    "building": Accuracy.STREET,
    "road": Accuracy.STREET,
    "amenity": Accuracy.STREET,
    "suburb": Accuracy.CITY,
    "neighbourhood": Accuracy.CITY,
    "city": Accuracy.CITY,
    "town": Accuracy.CITY,
    "village": Accuracy.CITY,
    "hamlet": Accuracy.CITY,
    "county": Accuracy.REGION,
    "state_district": Accuracy.REGION,
    "state": Accuracy.REGION,
    "country": Accuracy.COUNTRY,
    "continent": Accuracy.CONTINENT,
}

OSM_TYPES = {"node": OsmType.NODE, "way": OsmType.WAY, "relation": OsmType.RELATION}


def errorFromEnvelope(error: Any) -> GeocodeError:
    """Map a ``{"error": ...}`` reply to an exception, dood!"""
    if isinstance(error, dict):
        message = str(error.get("message") or error.get("code") or "Unknown error")
    else:
        message = str(error)
    if message == "Unable to geocode":
        return NoMatchesError(message)
    return ParseError(message)


def _boundingBox(node: NominatimResult) -> Optional[BoundingBox]:
    raw = node.get("boundingbox")
    if not isinstance(raw, list) or len(raw) != 4:
        return None
    values = [parseDecimal(value) for value in raw]
    if any(value is None for value in values):
        logger.debug(f"Ignoring malformed bounding box {raw!r}")
        return None
    south, north, west, east = values
    try:
        return BoundingBox(top=north, bottom=south, left=west, right=east)  # type: ignore[arg-type]
    except InvalidArgumentsError:
        logger.debug(f"Ignoring out-of-range bounding box {raw!r}")
        return None


def _placeType(attrs: Dict[str, str]) -> PlaceType:
    category = attrs.get("category") or attrs.get("class") or ""
    osmType = attrs.get("type")
    return PLACE_TYPES.get((category, osmType)) or PLACE_TYPES.get((category, None), PlaceType.UNKNOWN)


def placeFromNode(node: NominatimResult) -> Tuple[Place, Dict[str, str]]:
    """
    Build a Place from one Nominatim result object, dood!

    Returns:
        The Place (described by ``display_name``) and its flattened attributes
    """
    attrs = extractAttributes(node, FIELD_HANDLERS)

    latitude = parseDecimal(attrs.get("lat"))
    longitude = parseDecimal(attrs.get("lon"))
    if latitude is None or longitude is None:
        raise ParseError("Result has no usable lat/lon")

    displayName = attrs.get("display_name")

    fields: Dict[str, str] = {}
    for serviceField, placeField in PLACE_FIELDS:
        if serviceField in attrs:
            fields.setdefault(placeField, attrs[serviceField])
    if "road" in attrs and "house_number" in attrs:
        fields["streetAddress"] = f"{attrs['house_number']} {attrs['road']}"
    name = attrs.get("name") or fields.get("streetAddress") or (displayName.split(",")[0].strip() if displayName else "")

    location = makeLocation(
        latitude,
        longitude,
        accuracy=ACCURACY_BY_ADDRESS_TYPE.get(attrs.get("addresstype", ""), Accuracy.UNKNOWN),
        description=displayName or name or None,
    )
    place = Place(
        name=name,
        location=location,
        placeType=_placeType(attrs),
        boundingBox=_boundingBox(node),
        osmId=attrs.get("osm_id"),
        osmType=OSM_TYPES.get(attrs.get("osm_type", ""), OsmType.UNKNOWN),
        **fields,
    )
    return place, attrs


def parseResolveJson(data: Any) -> Place:
    """
    Parse a ``/reverse`` object or a one-element ``/search`` array, dood!

    Raises:
        ParseError: Malformed reply or unexpected service error
        NoMatchesError: Nothing found
    """
    root = loadJson(data)
    if isinstance(root, list):
        if not root:
            raise NoMatchesError("No matches found for request")
        node = root[0]
    elif isinstance(root, dict):
        if "error" in root:
            raise errorFromEnvelope(root["error"])
        node = root
    else:
        raise ParseError("Expected an object or an array in response")

    if not isinstance(node, dict):
        raise ParseError("Unexpected non-object result")
    place, _ = placeFromNode(node)
    return place


def parseSearchJson(data: Any) -> List[Place]:
    """
    Parse a ``/search`` array into disambiguated Places, dood!

    Raises:
        ParseError: Malformed reply or service error
        NoMatchesError: Empty result list
    """
    root = loadJson(data)
    if isinstance(root, dict) and "error" in root:
        raise errorFromEnvelope(root["error"])
    if not isinstance(root, list):
        raise ParseError("Expected an array of results in response")
    if not root:
        raise NoMatchesError("No matches found for request")

    tree: GroupingTree[Place] = GroupingTree(GROUPING_KEYS)
    for node in root:
        if not isinstance(node, dict):
            raise ParseError("Unexpected non-object entry in result list")
        place, attrs = placeFromNode(node)
        tree.insert(attrs, place)

    return [
        replace(place, location=place.location.withDescription(formatDescription(place.name, tokens)))
        for place, tokens in tree.walk()
    ]


class NominatimBackend(Backend):
    """Nominatim search and reverse endpoints, dood!"""

    name = "nominatim"

    def _endpoint(self, path: str) -> str:
        base = self.config.baseUri or NOMINATIM_URI
        if not base.endswith("/"):
            base += "/"
        return base + path

    def _language(self, query: GeocodeQuery) -> Optional[str]:
        language = self.getLanguage(query)
        return language.replace("_", "-") if language else None

    def buildUri(self, query: GeocodeQuery, kind: RequestKind) -> str:
        params: Dict[str, Optional[str]] = {
            "format": "jsonv2",
            "addressdetails": "1",
            "accept-language": self._language(query),
        }

        if query.location is not None:
            params["lat"] = formatDecimal(query.location.latitude)
            params["lon"] = formatDecimal(query.location.longitude)
            return buildUri(self._endpoint("reverse"), params)

        params["limit"] = "1" if kind == RequestKind.RESOLVE else str(query.answerCount)
        if query.text:
            params["q"] = query.text
        else:
            structured = {FORWARD_PARAMS[key]: value for key, value in query.params if key in FORWARD_PARAMS}
            street = " ".join(v for v in (query.getParam("building"), query.getParam("street")) if v)
            if street:
                structured["street"] = street
            if any(key != "countrycodes" for key in structured):
                params.update(structured)
            elif query.getFreeText():
                params.update(structured)
                params["q"] = query.getFreeText()
            else:
                raise InvalidArgumentsError("No location argument set")
        return buildUri(self._endpoint("search"), params)

    def parseResolve(self, data: bytes) -> Place:
        return parseResolveJson(data)

    def parseSearch(self, data: bytes) -> List[Place]:
        return parseSearchJson(data)
