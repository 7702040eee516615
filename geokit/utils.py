"""
Different useful utilities for geokit, dood!
"""

import logging
import os
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


def formatDecimal(value: float, precision: int = 6) -> str:
    """
    Format a float with fixed precision, independent of the process locale.

    Trailing zeros are removed, so 5.0 becomes "5" and 51.2371 stays "51.2371".

    Args:
        value: Number to format
        precision: Maximum number of fractional digits
    """
    ret = f"{value:.{precision}f}"
    if "." in ret:
        ret = ret.rstrip("0").rstrip(".")
    if ret == "-0":
        ret = "0"
    return ret


def formatFixed(value: float, precision: int = 6) -> str:
    """Format a float with exactly ``precision`` fractional digits ("%f" style), dood!"""
    return f"{value:.{precision}f}"


def parseDecimal(value: Any) -> Optional[float]:
    """
    Parse a decimal number given as JSON number or string.

    Python's float() ignores the process locale, so "51.2371" always parses
    the same way. Returns None for anything that is not a finite number.
    """
    if isinstance(value, bool):
        return None
    try:
        ret = float(value)
    except (TypeError, ValueError):
        return None
    if ret != ret or ret in (float("inf"), float("-inf")):
        return None
    return ret


def load_dotenv(path: str = ".env", populateEnv: bool = True) -> Dict[str, str]:
    """
    Simple dotenv file loader.
    Just read file line by line and put key-value pairs into dictionary.
    A missing file yields an empty dictionary.

    Args:
        path: Path to .env file (default ".env")
        populateEnv: Whether to populate environment variables (default True).
            Variables already present in the environment are kept.

    Returns:
        Dictionary of key-value pairs from .env file
    """
    ret: Dict[str, str] = {}
    if not os.path.isfile(path):
        return ret

    with open(path, "rt") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            key, sep, value = line.partition("=")
            if sep:
                ret[key.strip()] = value.strip().strip('"')

    if populateEnv:
        for k, v in ret.items():
            os.environ.setdefault(k, v)
    logger.debug(f"Loaded {len(ret)} variables from {path}")
    return ret
