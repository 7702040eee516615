"""
Place value type, dood!

A Place is a named geocoding result: a Location plus the address hierarchy
around it. Equality is structural over every field, including the nested
Location (timestamps excluded) and BoundingBox.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .location import BoundingBox, Location


class PlaceType(Enum):
    """Kinds of places the backends can report"""

    UNKNOWN = "unknown"
    BUILDING = "building"
    TOWN = "town"
    AIRPORT = "airport"
    RAILWAY_STATION = "railway-station"
    BUS_STOP = "bus-stop"
    STREET = "street"
    SCHOOL = "school"
    PLACE_OF_WORSHIP = "place-of-worship"
    RESTAURANT = "restaurant"
    BAR = "bar"
    LIGHT_RAIL_STATION = "light-rail-station"


class OsmType(Enum):
    """OpenStreetMap object kinds"""

    UNKNOWN = "unknown"
    NODE = "node"
    WAY = "way"
    RELATION = "relation"


ICON_NAMES = {
    PlaceType.BUILDING: "poi-building",
    PlaceType.TOWN: "poi-town",
    PlaceType.AIRPORT: "poi-airport",
    PlaceType.RAILWAY_STATION: "poi-railway-station",
    PlaceType.BUS_STOP: "poi-bus-stop",
    PlaceType.STREET: "poi-car",
    PlaceType.SCHOOL: "poi-school",
    PlaceType.PLACE_OF_WORSHIP: "poi-place-of-worship",
    PlaceType.RESTAURANT: "poi-restaurant",
    PlaceType.BAR: "poi-bar",
    PlaceType.LIGHT_RAIL_STATION: "poi-light-rail-station",
}
DEFAULT_ICON_NAME = "poi-marker"


@dataclass(frozen=True)
class Place:
    """Geocoding result with its address components, dood!"""

    name: str
    location: Location
    placeType: PlaceType = PlaceType.UNKNOWN
    boundingBox: Optional[BoundingBox] = None

    streetAddress: Optional[str] = None  # "house number + street" line
    street: Optional[str] = None
    building: Optional[str] = None
    postalCode: Optional[str] = None
    area: Optional[str] = None  # Neighbourhood or suburb
    town: Optional[str] = None
    county: Optional[str] = None
    state: Optional[str] = None
    administrativeArea: Optional[str] = None
    countryCode: Optional[str] = None  # ISO 3166-1, upper case
    country: Optional[str] = None
    continent: Optional[str] = None

    osmId: Optional[str] = None
    osmType: OsmType = OsmType.UNKNOWN

    def __post_init__(self):
        if self.countryCode is not None:
            object.__setattr__(self, "countryCode", self.countryCode.upper())

    @property
    def iconName(self) -> str:
        """Themed icon name matching the place type."""
        return ICON_NAMES.get(self.placeType, DEFAULT_ICON_NAME)

    @property
    def description(self) -> Optional[str]:
        """Display text of the place, as computed by the parser."""
        return self.location.description
