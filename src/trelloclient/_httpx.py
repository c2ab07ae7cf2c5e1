from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Union
from urllib.parse import urlencode

import httpx

from trelloclient.exceptions import TrelloConfigurationError

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Generator

DEFAULT_BASE_URI = "https://api.trello.com/"
DEFAULT_USER_AGENT = "trelloclient (python-httpx)"
DEFAULT_TIMEOUT = 10.0
DEFAULT_API_VERSION = 1

TimeoutTypes = Union[float, int, dict, httpx.Timeout, None]


def encode_query(params: Mapping[str, Any]) -> str:
    """Form-encode a mapping the way the Trello API expects it.

    Values are UTF-8 percent-encoded with spaces as ``+``. ``None`` values are
    dropped and sequences become repeated keys.
    """
    items = [(k, v) for k, v in params.items() if v is not None]
    return urlencode(items, doseq=True)


def append_query(url: str, query: str) -> str:
    """Append an encoded query string to ``url`` with ``?`` or ``&``."""
    if not query:
        return url
    return f"{url}{'&' if '?' in url else '?'}{query}"


def construct_timeout(timeout: TimeoutTypes) -> httpx.Timeout:
    """Construct an httpx.Timeout object from a user-provided timeout value.

    Args:
        timeout: Seconds as a number, a dict of ``connect``/``read``/``write``/``pool``
            values, an ``httpx.Timeout``, or ``None`` for no timeout.

    Returns:
        httpx.Timeout: Configured timeout object.
    """
    if isinstance(timeout, httpx.Timeout):
        return timeout
    elif isinstance(timeout, dict):
        return httpx.Timeout(DEFAULT_TIMEOUT, **timeout)
    elif timeout is None:
        return httpx.Timeout(None)
    elif isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
        raise TrelloConfigurationError(f"Invalid timeout value: {timeout!r}")
    return httpx.Timeout(float(timeout))


def _validate_option(name: str, value: Any) -> Any:
    if name == "timeout":
        return construct_timeout(value)
    if name == "api_version":
        if isinstance(value, bool) or not isinstance(value, int):
            raise TrelloConfigurationError(f"api_version must be an integer, got {value!r}")
    elif not isinstance(value, str) or not value:
        raise TrelloConfigurationError(f"{name} must be a non-empty string, got {value!r}")
    return value


@dataclass(frozen=True)
class ClientConfig:
    """Connection settings for a Trello API client.

    Attributes:
        base_uri (str): Root URL of the API, including the trailing slash.
        user_agent (str): Value sent in the ``User-Agent`` header.
        timeout (httpx.Timeout): Timeout applied to every request.
        api_version (int): Version segment prefixed to every request path.

    Values are checked on construction; the timeout may be given in any form
    accepted by :func:`construct_timeout`.

    Raises:
        TrelloConfigurationError: If a value is invalid.
    """

    base_uri: str = DEFAULT_BASE_URI
    user_agent: str = DEFAULT_USER_AGENT
    timeout: httpx.Timeout = field(default_factory=lambda: httpx.Timeout(DEFAULT_TIMEOUT))
    api_version: int = DEFAULT_API_VERSION

    def __post_init__(self) -> None:
        for f in fields(self):
            object.__setattr__(self, f.name, _validate_option(f.name, getattr(self, f.name)))

    @classmethod
    def option_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    @classmethod
    def from_env(cls) -> ClientConfig:
        """Build the default configuration, letting ``TRELLOCLIENT_*`` variables override it."""
        overrides: Dict[str, Any] = {}
        if "TRELLOCLIENT_BASE_URI" in os.environ:
            overrides["base_uri"] = os.environ["TRELLOCLIENT_BASE_URI"]
        if "TRELLOCLIENT_USER_AGENT" in os.environ:
            overrides["user_agent"] = os.environ["TRELLOCLIENT_USER_AGENT"]
        try:
            if "TRELLOCLIENT_HTTP_TIMEOUT" in os.environ:
                overrides["timeout"] = float(os.environ["TRELLOCLIENT_HTTP_TIMEOUT"])
            if "TRELLOCLIENT_API_VERSION" in os.environ:
                overrides["api_version"] = int(os.environ["TRELLOCLIENT_API_VERSION"])
        except ValueError as e:
            raise TrelloConfigurationError(f"Invalid TRELLOCLIENT_* environment value: {e}") from e
        return cls().with_options(**overrides)

    def with_option(self, name: str, value: Any) -> ClientConfig:
        """Return a copy of this configuration with a single option replaced.

        Raises:
            TrelloConfigurationError: If the option is unknown or the value is invalid.
        """
        if name not in self.option_names():
            raise TrelloConfigurationError(f"Unknown option: {name}")
        return replace(self, **{name: value})

    def with_options(self, **options: Any) -> ClientConfig:
        config = self
        for name, value in options.items():
            config = config.with_option(name, value)
        return config

    def default_headers(self) -> Dict[str, str]:
        return {
            "Accept": "application/json",
            "User-Agent": self.user_agent,
        }


class AuthMethod(str, Enum):
    """Authentication schemes known to the client."""

    NONE = "none"
    URL_CLIENT_ID_AND_TOKEN = "url_client_id"
    URL_TOKEN = "url_token"
    # Declared for compatibility; signing with these raises TrelloConfigurationError
    HTTP_TOKEN = "http_token"
    HTTP_PASSWORD = "http_password"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def coerce(cls, method: Any) -> Any:
        """Return the matching member for ``method``, or ``method`` itself if none matches."""
        if method is None:
            return cls.NONE
        try:
            return cls(method)
        except ValueError:
            return method


@dataclass(frozen=True)
class AuthCredentials:
    """The active authentication method and the data needed to sign a request.

    Attributes:
        method (AuthMethod): Scheme used to sign requests.
        credential (str | None): Primary credential (application key or token).
        secret (str | None): Secondary secret bound to the other parameter.
    """

    method: AuthMethod = AuthMethod.NONE
    credential: Optional[str] = None
    secret: Optional[str] = field(default=None, repr=False)


class TrelloAuth(httpx.Auth):
    """Signs requests by adding credentials to the URL query string.

    ``URL_CLIENT_ID_AND_TOKEN`` binds the credential to ``key`` and the secret
    to ``token``; ``URL_TOKEN`` binds them the other way round. The input
    request is never modified; a new request is returned.
    """

    def __init__(self, credentials: Optional[AuthCredentials] = None):
        self._credentials = credentials or AuthCredentials()

    @property
    def credentials(self) -> AuthCredentials:
        return self._credentials

    @property
    def method(self) -> AuthMethod:
        return self._credentials.method

    def apply(self, request: httpx.Request) -> httpx.Request:
        method = self._credentials.method
        if method == AuthMethod.NONE:
            return request
        elif method == AuthMethod.URL_CLIENT_ID_AND_TOKEN:
            params = {"key": self._credentials.credential, "token": self._credentials.secret}
        elif method == AuthMethod.URL_TOKEN:
            params = {"token": self._credentials.credential, "key": self._credentials.secret}
        else:
            raise TrelloConfigurationError(f"{method} not yet implemented")
        return self._with_query(request, encode_query(params))

    def auth_flow(self, request: httpx.Request) -> "Generator[httpx.Request, httpx.Response, None]":
        yield self.apply(request)

    @staticmethod
    def _with_query(request: httpx.Request, query: str) -> httpx.Request:
        url = append_query(str(request.url), query)
        return httpx.Request(
            request.method,
            url,
            headers=request.headers,
            content=request.content or None,
            extensions=request.extensions,
        )
