"""
Geocoding backend strategy, dood!

A Backend knows one service dialect: how to turn a GeocodeQuery into a
request URI and how to turn the response bytes into Places. Backends are
stateless apart from their BackendConfig and hold no network or cache
logic; the fetch pipeline drives them.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from .errors import InvalidArgumentsError
from .place import Place
from .query import DEFAULT_ANSWER_COUNT, GeocodeQuery, getDefaultLanguage, getLanguageForLocale

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "geokit/0.1 (+https://pypi.org/project/geokit/)"
DEFAULT_REQUEST_TIMEOUT = 10


class RequestKind(Enum):
    """Whether one result (resolve) or a list of results (search) is expected"""

    RESOLVE = "resolve"
    SEARCH = "search"


@dataclass(frozen=True)
class BackendConfig:
    """
    Backend selection and credentials, dood!

    Attributes:
        name: "nominatim" or "yahoo"
        baseUri: Service root; None uses the backend's default
        apiKey: Application id for services that need one
        locale: Language override such as "en_GB"; None uses the process locale
        userAgent: Sent with every request
        answerCount: Default number of search results
        requestTimeout: HTTP timeout in seconds
    """

    name: str = "nominatim"
    baseUri: Optional[str] = None
    apiKey: Optional[str] = None
    locale: Optional[str] = None
    userAgent: str = DEFAULT_USER_AGENT
    answerCount: int = DEFAULT_ANSWER_COUNT
    requestTimeout: float = DEFAULT_REQUEST_TIMEOUT

    @classmethod
    def fromDict(cls, config: Dict[str, Any]) -> "BackendConfig":
        """Build from a ``[backend]`` config table with kebab-case keys."""
        return cls(
            name=str(config.get("name", "nominatim")).lower(),
            baseUri=config.get("base-uri"),
            apiKey=config.get("api-key"),
            locale=config.get("locale"),
            userAgent=config.get("user-agent", DEFAULT_USER_AGENT),
            answerCount=int(config.get("answer-count", DEFAULT_ANSWER_COUNT)),
            requestTimeout=float(config.get("request-timeout", DEFAULT_REQUEST_TIMEOUT)),
        )


class Backend(ABC):
    """Service dialect: query building plus resolve and search parsing, dood!"""

    name: str = ""

    def __init__(self, config: BackendConfig):
        self.config = config

    def getLanguage(self, query: GeocodeQuery) -> Optional[str]:
        """Query language, else the configured locale, else the process locale."""
        return query.language or getLanguageForLocale(self.config.locale) or getDefaultLanguage()

    @abstractmethod
    def buildUri(self, query: GeocodeQuery, kind: RequestKind) -> str:
        """
        Build the canonical request URI.

        Raises:
            InvalidArgumentsError: If the query cannot be expressed for this service
        """
        pass

    @abstractmethod
    def parseResolve(self, data: bytes) -> Place:
        """Parse a single-result response."""
        pass

    @abstractmethod
    def parseSearch(self, data: bytes) -> List[Place]:
        """Parse a multi-result response, descriptions disambiguated."""
        pass

    def parse(self, data: bytes, kind: RequestKind) -> Any:
        if kind == RequestKind.RESOLVE:
            return self.parseResolve(data)
        return self.parseSearch(data)


def createBackend(config: BackendConfig) -> Backend:
    """
    Instantiate the backend named in the config, dood!

    Raises:
        InvalidArgumentsError: For unknown backend names
    """
    from .nominatim import NominatimBackend
    from .yahoo import YahooBackend

    backends = {
        NominatimBackend.name: NominatimBackend,
        YahooBackend.name: YahooBackend,
    }
    backendClass = backends.get(config.name)
    if backendClass is None:
        raise InvalidArgumentsError(f"Unknown geocoding backend '{config.name}'")
    logger.debug(f"Using {config.name} geocoding backend")
    return backendClass(config)
