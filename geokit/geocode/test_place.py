"""
Tests for Place, dood!
"""

import pytest

from geokit.geocode.location import BoundingBox, Location
from geokit.geocode.place import OsmType, Place, PlaceType


def makePlace(**kwargs) -> Place:
    values = dict(
        name="Guildford",
        location=Location(51.2371, -0.589669, timestamp=1),
        placeType=PlaceType.TOWN,
        town="Guildford",
        country="United Kingdom",
        countryCode="gb",
    )
    values.update(kwargs)
    return Place(**values)


class TestPlace:
    def testCountryCodeUpperCased(self):
        assert makePlace().countryCode == "GB"

    def testStructuralEquality(self):
        """Every field takes part in equality, nested values included, dood!"""
        assert makePlace() == makePlace(location=Location(51.2371, -0.589669, timestamp=99))
        assert makePlace() != makePlace(town="Godalming")
        assert makePlace() != makePlace(location=Location(51.2372, -0.589669))
        assert makePlace() != makePlace(boundingBox=BoundingBox(52, 51, -1, 0))
        assert makePlace() != makePlace(osmType=OsmType.WAY)

    def testDescriptionComesFromLocation(self):
        place = makePlace(location=Location(1, 2, description="Guildford, Surrey"))
        assert place.description == "Guildford, Surrey"

    @pytest.mark.parametrize(
        "placeType,iconName",
        [
            (PlaceType.TOWN, "poi-town"),
            (PlaceType.STREET, "poi-car"),
            (PlaceType.AIRPORT, "poi-airport"),
            (PlaceType.LIGHT_RAIL_STATION, "poi-light-rail-station"),
            (PlaceType.UNKNOWN, "poi-marker"),
        ],
    )
    def testIconName(self, placeType, iconName):
        assert makePlace(placeType=placeType).iconName == iconName
