"""
Wire payload models

TypedDict shapes of the JSON the supported services send back. Parsers
treat payloads as untrusted and check every member; these models document
what is expected, dood!
"""

from typing import List

from typing_extensions import TypedDict


class PlaceFinderResult(TypedDict, total=False, closed=False):
    """One PlaceFinder result; all fields strings except radius and quality"""

    latitude: str
    longitude: str
    radius: int  # Accuracy radius in meters
    quality: int  # Match quality, 0-99
    name: str
    line1: str  # House number and street
    line2: str  # Town and postal code
    line3: str
    line4: str  # Country
    house: str
    street: str
    postal: str
    uzip: str
    neighborhood: str
    city: str
    county: str
    state: str
    country: str
    countrycode: str
    woeid: str
    woetype: str  # WOE place type code


class PlaceFinderResultSet(TypedDict, total=False, closed=False):
    """The ``ResultSet`` envelope of a PlaceFinder reply"""

    version: str
    Error: int  # 0 on success
    ErrorMessage: str
    Locale: str
    Quality: int
    Found: int
    Results: List[PlaceFinderResult]


class Centroid(TypedDict):
    latitude: float
    longitude: float


class GeoPlanetPlace(TypedDict, total=False, closed=False):
    """One GeoPlanet place; ``<field> attrs`` siblings carry codes and are ignored"""

    woeid: int
    placeTypeName: str
    name: str
    country: str
    admin1: str
    admin2: str
    admin3: str
    locality1: str
    locality2: str
    postal: str
    centroid: Centroid
    areaRank: int
    popRank: int
    uri: str
    lang: str


class NominatimResult(TypedDict, total=False, closed=False):
    """One ``format=jsonv2`` result of /search or /reverse"""

    place_id: int
    licence: str
    osm_type: str  # node/way/relation
    osm_id: int
    lat: str
    lon: str
    category: str
    type: str
    place_rank: int
    importance: float
    addresstype: str
    name: str
    display_name: str
    address: dict  # road, house_number, city, state, country, country_code, ...
    boundingbox: List[str]  # [south, north, west, east]


class GeoIpReply(TypedDict, total=False, closed=False):
    """GeoIP lookup reply; ``error_code``/``error_message`` replace everything else on failure"""

    ip: str
    latitude: float
    longitude: float
    accuracy: str  # country/region/city
    country_name: str
    country_code: str
    region_name: str
    city: str
    timezone: str
    attribution: str
    error_code: int
    error_message: str
