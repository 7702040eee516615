"""
Geocoding queries and canonical request URIs, dood!

A GeocodeQuery is what the caller asks for: free text, structured address
parameters or a Location to reverse geocode. Backends turn it into a
request URI with ``buildUri``, which orders parameters so the same logical
query always yields the same URI (and so the same cache entry).
"""

import logging
import os
import re
from dataclasses import dataclass, replace
from typing import Dict, Mapping, Optional, Tuple

import httpx

from .errors import InvalidArgumentsError
from .location import Location

logger = logging.getLogger(__name__)

DEFAULT_ANSWER_COUNT = 10

# XEP-0080 / Telepathy location vocabulary accepted in structured queries
SUPPORTED_PARAMS = frozenset(
    {
        "country",
        "countrycode",
        "region",
        "locality",
        "area",
        "postalcode",
        "street",
        "building",
        "floor",
        "room",
        "text",
        "description",
        "uri",
        "language",
    }
)
COORDINATE_PARAMS = frozenset({"lat", "lon", "long", "alt"})

_LOCALE_RE = re.compile(
    r"(?P<language>[A-Za-z]{2,3})(?:_(?P<territory>[A-Za-z]{2}))?(?:\.[\w-]+)?(?:@[\w-]+)?"
)


def getLanguageForLocale(localeStr: Optional[str]) -> Optional[str]:
    """
    Turn a POSIX locale name into a language tag, dood!

    Example:
        >>> getLanguageForLocale("en_GB.UTF-8@euro")
        'en_GB'
        >>> getLanguageForLocale("C") is None
        True
    """
    if not localeStr:
        return None
    match = _LOCALE_RE.fullmatch(localeStr.strip())
    if match is None or localeStr in ("C", "POSIX"):
        return None
    language = match.group("language").lower()
    territory = match.group("territory")
    return f"{language}_{territory.upper()}" if territory else language


def getDefaultLanguage() -> Optional[str]:
    """Language of the process locale, from LC_ALL, LC_MESSAGES or LANG."""
    for variable in ("LC_ALL", "LC_MESSAGES", "LANG"):
        value = os.environ.get(variable)
        if value:
            return getLanguageForLocale(value)
    return None


def buildUri(base: str, params: Mapping[str, Optional[str]]) -> str:
    """
    Build the canonical request URI, dood!

    Parameters are sorted by name and empty values dropped, so equal
    queries produce byte-identical URIs.
    """
    items = sorted((key, value) for key, value in params.items() if value is not None and value != "")
    return str(httpx.URL(base, params=items))


@dataclass(frozen=True)
class GeocodeQuery:
    """
    Immutable description of one geocoding request, dood!

    Build instances with ``forString``, ``forParams`` or ``forLocation``.

    Attributes:
        text: Free-form address
        params: Structured XEP-0080 parameters, sorted by name
        location: Point to reverse geocode
        language: Language tag such as "en_GB"; None means backend default
        answerCount: Upper bound on search results
    """

    text: Optional[str] = None
    params: Tuple[Tuple[str, str], ...] = ()
    location: Optional[Location] = None
    language: Optional[str] = None
    answerCount: int = DEFAULT_ANSWER_COUNT

    def __post_init__(self):
        if self.answerCount < 1:
            raise InvalidArgumentsError(f"Answer count must be positive, got {self.answerCount}")

    @classmethod
    def forString(
        cls, text: str, *, language: Optional[str] = None, answerCount: int = DEFAULT_ANSWER_COUNT
    ) -> "GeocodeQuery":
        """Query for a free-form address such as "Paris, France"."""
        text = text.strip()
        if not text:
            raise InvalidArgumentsError("Empty search text")
        return cls(text=text, language=language, answerCount=answerCount)

    @classmethod
    def forParams(
        cls, params: Mapping[str, str], *, answerCount: int = DEFAULT_ANSWER_COUNT
    ) -> "GeocodeQuery":
        """
        Query for structured address parameters, dood!

        Args:
            params: XEP-0080 keys (country, region, locality, street, ...).
                Unknown keys are ignored; "language" sets the query language.

        Raises:
            InvalidArgumentsError: If coordinates are among the parameters or
                no usable parameter is left
        """
        coordinates = COORDINATE_PARAMS.intersection(params)
        if coordinates:
            raise InvalidArgumentsError(
                f"Coordinates ({', '.join(sorted(coordinates))}) are not allowed in address parameters, "
                "use a reverse query instead"
            )

        kept: Dict[str, str] = {}
        for key, value in params.items():
            if key not in SUPPORTED_PARAMS:
                logger.debug(f"Ignoring unsupported query parameter '{key}'")
                continue
            value = str(value).strip()
            if value:
                kept[key] = value

        language = kept.pop("language", None)
        if not kept:
            raise InvalidArgumentsError("No usable parameters given")

        return cls(params=tuple(sorted(kept.items())), language=language, answerCount=answerCount)

    @classmethod
    def forLocation(cls, location: Location, *, language: Optional[str] = None) -> "GeocodeQuery":
        """Reverse geocoding query for a point."""
        return cls(location=location, language=language, answerCount=1)

    @property
    def isReverse(self) -> bool:
        return self.location is not None

    def getParam(self, name: str) -> Optional[str]:
        return dict(self.params).get(name)

    def getFreeText(self) -> Optional[str]:
        """Free text of the query, falling back to the text/description parameters."""
        return self.text or self.getParam("text") or self.getParam("description")

    def withAnswerCount(self, answerCount: int) -> "GeocodeQuery":
        return replace(self, answerCount=answerCount)
