"""
Tests for GeocodeQuery and canonical URIs, dood!
"""

import pytest

from geokit.geocode.errors import InvalidArgumentsError
from geokit.geocode.location import Location
from geokit.geocode.query import GeocodeQuery, buildUri, getDefaultLanguage, getLanguageForLocale


class TestGeocodeQuery:
    def testForString(self):
        query = GeocodeQuery.forString("  Paris  ")

        assert query.text == "Paris"
        assert query.isReverse is False
        assert query.answerCount == 10

    def testEmptyStringRejected(self):
        with pytest.raises(InvalidArgumentsError):
            GeocodeQuery.forString("   ")

    def testForParamsSortsAndFilters(self):
        query = GeocodeQuery.forParams(
            {"locality": "Guildford", "country": "UK", "speed": "12", "street": "", "language": "en_GB"}
        )

        assert query.params == (("country", "UK"), ("locality", "Guildford"))
        assert query.language == "en_GB"
        assert query.getParam("locality") == "Guildford"

    def testParamOrderDoesNotMatter(self):
        a = GeocodeQuery.forParams({"country": "UK", "locality": "Guildford"})
        b = GeocodeQuery.forParams({"locality": "Guildford", "country": "UK"})
        assert a == b

    @pytest.mark.parametrize("key", ["lat", "lon", "long", "alt"])
    def testCoordinatesRejected(self, key):
        """Coordinates next to an address are contradictory, dood!"""
        with pytest.raises(InvalidArgumentsError):
            GeocodeQuery.forParams({"locality": "Guildford", key: "51.2"})

    def testNothingUsableRejected(self):
        with pytest.raises(InvalidArgumentsError):
            GeocodeQuery.forParams({"language": "en"})

    def testFreeTextFallback(self):
        assert GeocodeQuery.forParams({"description": "Eiffel Tower"}).getFreeText() == "Eiffel Tower"
        assert GeocodeQuery.forParams({"country": "France"}).getFreeText() is None

    def testForLocation(self):
        query = GeocodeQuery.forLocation(Location(51.2371, -0.589669))
        assert query.isReverse is True
        assert query.answerCount == 1

    def testAnswerCountMustBePositive(self):
        with pytest.raises(InvalidArgumentsError):
            GeocodeQuery.forString("Paris", answerCount=0)
        assert GeocodeQuery.forString("Paris").withAnswerCount(3).answerCount == 3


class TestLanguage:
    @pytest.mark.parametrize(
        "localeStr,expected",
        [
            ("en_GB.UTF-8", "en_GB"),
            ("de_DE@euro", "de_DE"),
            ("fr", "fr"),
            ("pt_br", "pt_BR"),
            ("C", None),
            ("POSIX", None),
            ("", None),
            (None, None),
        ],
    )
    def testGetLanguageForLocale(self, localeStr, expected):
        assert getLanguageForLocale(localeStr) == expected

    def testDefaultLanguageFromEnvironment(self, monkeypatch):
        monkeypatch.delenv("LC_ALL", raising=False)
        monkeypatch.delenv("LC_MESSAGES", raising=False)
        monkeypatch.setenv("LANG", "cs_CZ.UTF-8")
        assert getDefaultLanguage() == "cs_CZ"

        monkeypatch.setenv("LC_ALL", "en_US.UTF-8")
        assert getDefaultLanguage() == "en_US"


class TestBuildUri:
    def testDeterministic(self):
        """Same parameters in any order give byte-identical URIs, dood!"""
        a = buildUri("https://example.org/search", {"q": "Paris", "format": "jsonv2", "limit": "10"})
        b = buildUri("https://example.org/search", {"limit": "10", "q": "Paris", "format": "jsonv2"})

        assert a == b
        assert a == "https://example.org/search?format=jsonv2&limit=10&q=Paris"

    def testEmptyValuesDropped(self):
        uri = buildUri("https://example.org/search", {"q": "Paris", "accept-language": None, "x": ""})
        assert uri == "https://example.org/search?q=Paris"
