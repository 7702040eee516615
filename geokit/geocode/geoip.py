"""
GeoIP lookup reply parser, dood!

The lookup service answers ``?ip=<address>`` with either a location object
or an error envelope ``{"error_code": N, "error_message": "..."}``.
"""

import logging
from typing import Any, Dict, Optional, Tuple, cast

from ..utils import parseDecimal
from .errors import GeocodeError, InternalServiceError, InvalidArgumentsError, NoMatchesError, ParseError
from .location import Accuracy, Location
from .models import GeoIpReply
from .parsing import loadJson, makeLocation, parseInt

logger = logging.getLogger(__name__)

ERROR_CODES: Dict[int, Tuple[type, str]] = {
    0: (InvalidArgumentsError, "Invalid IP address"),
    1: (NoMatchesError, "Can not find the IP address in the database"),
    2: (InternalServiceError, "Can not open GeoIP database"),
}

ACCURACY_NAMES = {
    "country": Accuracy.COUNTRY,
    "region": Accuracy.REGION,
    "city": Accuracy.CITY,
}

DESCRIPTION_FIELDS = ("city", "region_name", "country_name")


def errorForCode(code: int, message: Optional[str]) -> GeocodeError:
    if code in ERROR_CODES:
        errorClass, defaultMessage = ERROR_CODES[code]
        return errorClass(message or defaultMessage)
    return ParseError(message or f"Unknown error code {code}")


def _stringField(root: GeoIpReply, name: str) -> Optional[str]:
    value = root.get(name)
    return value if isinstance(value, str) and value else None


def _accuracy(root: GeoIpReply) -> float:
    accuracyName = _stringField(root, "accuracy")
    if accuracyName is not None:
        if accuracyName in ACCURACY_NAMES:
            return ACCURACY_NAMES[accuracyName]
        logger.debug(f"Unknown accuracy '{accuracyName}' in GeoIP reply")
    if _stringField(root, "city"):
        return Accuracy.CITY
    if _stringField(root, "region_name"):
        return Accuracy.REGION
    if _stringField(root, "country_name"):
        return Accuracy.COUNTRY
    return Accuracy.UNKNOWN


def parseIpJson(data: Any) -> Location:
    """
    Parse a GeoIP reply into a Location, dood!

    The description joins city, region and country names that are present,
    e.g. "East Syracuse, New York, United States".

    Raises:
        InvalidArgumentsError: Error code 0, the address was invalid
        NoMatchesError: Error code 1, address unknown to the database
        InternalServiceError: Error code 2, database unavailable
        ParseError: Malformed reply or unknown error code
    """
    decoded = loadJson(data)
    if not isinstance(decoded, dict):
        raise ParseError("Expected an object in GeoIP reply")
    root = cast(GeoIpReply, decoded)

    if "error_code" in root:
        raise errorForCode(parseInt(root["error_code"], "error_code"), _stringField(root, "error_message"))

    latitude = parseDecimal(root.get("latitude"))
    longitude = parseDecimal(root.get("longitude"))
    if latitude is None or longitude is None:
        raise ParseError("GeoIP reply has no usable latitude/longitude")

    parts = [_stringField(root, name) for name in DESCRIPTION_FIELDS]
    description = ", ".join(part for part in parts if part) or None

    return makeLocation(latitude, longitude, accuracy=_accuracy(root), description=description)
