"""
Tests for Location, BoundingBox and geo URI handling, dood!
"""

from dataclasses import FrozenInstanceError

import pytest

from geokit.geocode.errors import InvalidArgumentsError
from geokit.geocode.location import Accuracy, BoundingBox, Location


class TestLocation:
    """Construction, validation and equality"""

    def testDefaults(self):
        location = Location(51.2371, -0.589669)

        assert location.latitude == 51.2371
        assert location.longitude == -0.589669
        assert location.accuracy == Accuracy.UNKNOWN
        assert location.altitude is None
        assert location.description is None
        assert location.timestamp > 0

    @pytest.mark.parametrize(
        "latitude,longitude",
        [(95.0, 0.0), (-90.5, 0.0), (0.0, 180.5), (0.0, -200.0), (float("nan"), 0.0)],
    )
    def testOutOfRangeIsRejected(self, latitude, longitude):
        """Invalid coordinates raise, they are never clamped, dood!"""
        with pytest.raises(InvalidArgumentsError):
            Location(latitude, longitude)

    def testBoundariesAreAccepted(self):
        assert Location(90, 180).latitude == 90.0
        assert Location(-90, -180).longitude == -180.0

    def testNegativeAccuracyIsRejected(self):
        with pytest.raises(InvalidArgumentsError):
            Location(0, 0, accuracy=-5)

    def testImmutable(self):
        location = Location(1, 2)
        with pytest.raises(FrozenInstanceError):
            location.latitude = 3  # type: ignore[misc]

    def testEqualityIgnoresTimestamp(self):
        a = Location(1, 2, accuracy=Accuracy.CITY, description="x", timestamp=1)
        b = Location(1, 2, accuracy=Accuracy.CITY, description="x", timestamp=2)
        assert a == b
        assert a != Location(1, 2, accuracy=Accuracy.STREET, description="x")

    def testWithDescription(self):
        location = Location(1, 2, timestamp=42)
        described = location.withDescription("Somewhere")

        assert described.description == "Somewhere"
        assert described.timestamp == 42
        assert location.description is None

    def testDistance(self):
        """Haversine distance with a 6372.795 km earth radius, dood!"""
        whiteHouse = Location(38.898556, -77.037852)
        nearby = Location(38.897147, -77.043934)

        assert whiteHouse.distanceFrom(nearby) == pytest.approx(0.549311, abs=1e-3)
        assert whiteHouse.distanceFrom(whiteHouse) == 0.0

    def testDistanceIsSymmetric(self):
        paris = Location(48.856930, 2.341200)
        texas = Location(33.660939, -95.555130)
        assert paris.distanceFrom(texas) == pytest.approx(texas.distanceFrom(paris))


class TestBoundingBox:
    def testValid(self):
        box = BoundingBox(top=48.9, bottom=48.8, left=2.2, right=2.5)
        assert box == BoundingBox(48.9, 48.8, 2.2, 2.5)

    def testInvalid(self):
        with pytest.raises(InvalidArgumentsError):
            BoundingBox(top=91, bottom=0, left=0, right=0)
        with pytest.raises(InvalidArgumentsError):
            BoundingBox(top=0, bottom=0, left=0, right=181)


class TestGeoUri:
    """RFC 5870 parsing and formatting"""

    @pytest.mark.parametrize(
        "uri",
        [
            "geo:13.37,42.42",
            "geo:13.37,42.42,12.12",
            "geo:13.37,42.42;crs=wgs84",
            "geo:13.37,42.42,12.12;crs=wgs84;u=45.5",
            "geo:13.37,42.42;u=45.5",
            "GEO:13.37,42.42;CRS=WGS84",
            "geo:0,0?q=13.36,42.42(description)",
        ],
    )
    def testValid(self, uri):
        Location.fromUri(uri)

    @pytest.mark.parametrize(
        "uri",
        [
            "geo:13.37, 42.42",
            "geo:13.37,42.42;crs=wgs85",
            "geo:13.37,42.42;u=45.5;crs=wgs84",
            "geo:13.37,42.42;u=45.5;u=22",
            "geo:13.37,42.42;u=abc",
            "geo:13.37,42.42;u=-45.5",
            "gel:13.37,42.42",
            "geo:13.37a,42.42",
            "geo:,13.37,42.42",
            "geo:13.37",
            "geo:1,2?q=13.36,42.42(description)",
            "geo:0,0?q=13.36,42.42(description",
            "geo:0,0?q=13.36,42.42()",
            "geo:95,42.42",
        ],
    )
    def testInvalid(self, uri):
        with pytest.raises(InvalidArgumentsError):
            Location.fromUri(uri)

    def testFields(self):
        location = Location.fromUri("geo:48.198634,16.371648,5;crs=wgs84;u=40")

        assert location.latitude == pytest.approx(48.198634)
        assert location.longitude == pytest.approx(16.371648)
        assert location.altitude == 5.0
        assert location.accuracy == 40.0

    def testAndroidQuery(self):
        location = Location.fromUri("geo:0,0?q=13.36,42.42(Some%20place)")

        assert location.latitude == pytest.approx(13.36)
        assert location.longitude == pytest.approx(42.42)
        assert location.description == "Some place"

    def testToUri(self):
        assert Location(48.198634, 16.371648, accuracy=40, altitude=5).toUri() == (
            "geo:48.198634,16.371648,5;crs=wgs84;u=40"
        )
        assert Location(-22.97673, -43.19508).toUri() == "geo:-22.97673,-43.19508;crs=wgs84"

    def testUriRoundTrip(self):
        uri = "geo:48.198634,16.371648,5;crs=wgs84;u=40"
        assert Location.fromUri(uri).toUri() == uri
