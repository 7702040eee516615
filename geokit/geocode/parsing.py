"""
Field dispatch shared by the response parsers, dood!

Service payloads carry whatever members the service felt like sending.
``extractAttributes`` walks them and dispatches each member through a
handler table, producing a flat ``{name: str}`` mapping:

- COPY: strings are copied as-is (the default for unlisted members)
- NUMERIC: numbers are rendered as decimal strings
- CENTROID: a nested {latitude, longitude} object becomes "latitude" and
  "longitude" strings with six fixed decimals
- FLATTEN: string members of a nested object are merged in
- IGNORE: dropped silently

Empty strings count as absent. Members that fit no rule are logged and
dropped, so new service fields never break parsing.
"""

import json
import logging
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from ..utils import formatDecimal, formatFixed, parseDecimal
from .errors import InvalidArgumentsError, ParseError
from .location import Location

logger = logging.getLogger(__name__)


class FieldHandler(Enum):
    """How a payload member ends up in the attribute mapping"""

    COPY = "copy"
    NUMERIC = "numeric"
    CENTROID = "centroid"
    FLATTEN = "flatten"
    IGNORE = "ignore"


def loadJson(contents: Union[bytes, str]) -> Any:
    """
    Decode a JSON document, dood!

    Raises:
        ParseError: With the decoder's message when the document is malformed
    """
    try:
        return json.loads(contents)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ParseError(str(e), originalError=e)


def getObjectMember(node: Any, name: str) -> Dict[str, Any]:
    """Return ``node[name]`` if it is a JSON object, else raise ParseError."""
    if not isinstance(node, dict):
        raise ParseError(f"Expected an object while looking for '{name}'")
    value = node.get(name)
    if not isinstance(value, dict):
        raise ParseError(f"Missing or invalid '{name}' object in response")
    return value


def getArrayMember(node: Any, name: str) -> List[Any]:
    """Return ``node[name]`` if it is a JSON array, else raise ParseError."""
    if not isinstance(node, dict):
        raise ParseError(f"Expected an object while looking for '{name}'")
    value = node.get(name)
    if not isinstance(value, list):
        raise ParseError(f"Missing or invalid '{name}' array in response")
    return value


def parseInt(value: Any, name: str) -> int:
    """Parse an integer given as JSON number or string, raising ParseError otherwise."""
    if isinstance(value, bool):
        raise ParseError(f"Invalid integer value for '{name}'")
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError) as e:
        raise ParseError(f"Invalid integer value for '{name}': {value!r}", originalError=e)


def makeLocation(latitude: float, longitude: float, **kwargs: Any) -> Location:
    """
    Build a Location from coordinates a service sent, dood!

    Raises:
        ParseError: If the coordinates or accuracy are out of range
    """
    try:
        return Location(latitude, longitude, **kwargs)
    except InvalidArgumentsError as e:
        raise ParseError(f"Unusable location in response: {e.message}", originalError=e)


def _numericToStr(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, int) or value.is_integer():
        return str(int(value))
    return formatDecimal(value)


def extractAttributes(
    node: Mapping[str, Any],
    handlers: Mapping[str, FieldHandler],
    ignoreSuffixes: Tuple[str, ...] = (),
) -> Dict[str, str]:
    """
    Flatten one result object into a string mapping, dood!

    Args:
        node: Decoded JSON object for one result
        handlers: Member name to handler; unlisted members use COPY
        ignoreSuffixes: Member name suffixes that are always IGNOREd

    Returns:
        Dict[str, str]: Non-empty string attributes
    """
    ret: Dict[str, str] = {}

    for name, value in node.items():
        handler = handlers.get(name)
        if handler is None:
            handler = FieldHandler.IGNORE if ignoreSuffixes and name.endswith(ignoreSuffixes) else FieldHandler.COPY

        if handler == FieldHandler.IGNORE:
            continue

        if handler == FieldHandler.NUMERIC:
            strValue = _numericToStr(value)
            if strValue is None:
                logger.debug(f"Dropping non-numeric value of '{name}': {value!r}")
            elif strValue:
                ret[name] = strValue

        elif handler == FieldHandler.CENTROID:
            latitude = parseDecimal(value.get("latitude")) if isinstance(value, dict) else None
            longitude = parseDecimal(value.get("longitude")) if isinstance(value, dict) else None
            if latitude is None or longitude is None:
                logger.debug(f"Dropping malformed '{name}': {value!r}")
            else:
                ret["latitude"] = formatFixed(latitude)
                ret["longitude"] = formatFixed(longitude)

        elif handler == FieldHandler.FLATTEN:
            if not isinstance(value, dict):
                logger.debug(f"Dropping malformed '{name}': {value!r}")
                continue
            for subName, subValue in value.items():
                if isinstance(subValue, str) and subValue:
                    ret[subName] = subValue

        elif isinstance(value, str):
            if value:
                ret[name] = value

        else:
            logger.debug(f"Dropping unrecognised field '{name}' of type {type(value).__name__}")

    return ret
