"""
GeoIP reply parsing against recorded replies, dood!
"""

import pytest

from geokit.geocode.errors import InvalidArgumentsError, NoMatchesError, ParseError
from geokit.geocode.geoip import parseIpJson
from geokit.geocode.location import Accuracy


def testCityReply(loadFixture):
    location = parseIpJson(loadFixture("geoip-city.json"))

    assert location.latitude == pytest.approx(43.0653)
    assert location.longitude == pytest.approx(-76.0785)
    assert location.accuracy == Accuracy.CITY
    assert location.description == "East Syracuse, New York, United States"


def testErrorReply(loadFixture):
    with pytest.raises(NoMatchesError) as excInfo:
        parseIpJson(loadFixture("geoip-error.json"))
    assert excInfo.value.message == "Can not find the IP address in the database"


@pytest.mark.parametrize(
    "data, accuracy, description",
    [
        (b'{"latitude": 1, "longitude": 2, "country_name": "Chad"}', Accuracy.COUNTRY, "Chad"),
        (b'{"latitude": 1, "longitude": 2, "region_name": "Kanem", "country_name": "Chad"}', Accuracy.REGION, "Kanem, Chad"),
        (b'{"latitude": 1, "longitude": 2}', Accuracy.UNKNOWN, None),
        (b'{"latitude": "1", "longitude": "2", "accuracy": "country", "city": "Mao"}', Accuracy.COUNTRY, "Mao"),
    ],
)
def testAccuracyAndDescription(data, accuracy, description):
    location = parseIpJson(data)
    assert location.accuracy == accuracy
    assert location.description == description


@pytest.mark.parametrize("data", [b"[]", b'{"latitude": 1}', b'{"error_code": 9}', b"nope"])
def testMalformed(data):
    with pytest.raises(ParseError):
        parseIpJson(data)


def testOverflowingErrorCode():
    with pytest.raises(ParseError):
        parseIpJson(b'{"error_code": 1e400}')


def testCoordinatesOutOfRange():
    with pytest.raises(ParseError) as excInfo:
        parseIpJson(b'{"latitude": 43.0, "longitude": -190.0}')
    assert isinstance(excInfo.value.originalError, InvalidArgumentsError)


def testParseTwiceGivesEqualLocations(loadFixture):
    data = loadFixture("geoip-city.json")
    assert parseIpJson(data) == parseIpJson(data)
