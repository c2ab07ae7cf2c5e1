from __future__ import annotations

import logging
import threading
from functools import cached_property
from typing import Any, Dict, Mapping, Optional

import httpx

from trelloclient._httpx import (
    AuthCredentials,
    AuthMethod,
    ClientConfig,
    TimeoutTypes,
    TrelloAuth,
)
from trelloclient._request import Body, RequestBuilder, build_request_headers, update_headers
from trelloclient.decorators import use_client_session
from trelloclient.api import AbstractApi
from trelloclient.api.card.labels import Labels
from trelloclient.exceptions import (
    TRANSLATED_EXCEPTIONS,
    TrelloClientClosed,
    TrelloConfigurationError,
    trello_errors,
)

# Constants
CONTENT_TYPE_FORM = "application/x-www-form-urlencoded"

# Set up logger
logger = logging.getLogger("TrelloClient")


# Sentinel value for detecting unset timeout parameter
class _TimeoutUnsetType:
    def __repr__(self):
        return "_TIMEOUT_UNSET"


_TIMEOUT_UNSET = _TimeoutUnsetType()


class TrelloClient:
    """A Python client for the Trello REST API

    This class turns verb calls into authenticated HTTP requests and hands the
    raw ``httpx.Response`` back to the caller. It does not check status codes
    or decode payloads; the resource wrappers in :mod:`trelloclient.api` do.

    Initialization:
        TrelloClient can be used as a context manager, which keeps one
        connection pool open for all calls made inside the block

        >>> from trelloclient import TrelloClient, AuthMethod
        >>> with TrelloClient() as client:
        ...     client.authenticate("my-app-key", "my-token", AuthMethod.URL_CLIENT_ID_AND_TOKEN)
        ...     response = client.get("members/me/boards", {"fields": "name"})
        ...     boards = response.json()

        Outside a context manager every call opens and closes its own connection.

    The most recent successful request and response are kept in
    ``last_request`` and ``last_response``. A failed call leaves both untouched.

    The mutable state (configuration, headers, authentication and the last
    request/response pair) is guarded by a lock, so one instance may be shared
    between threads.

    Parameters:
        base_uri (str, optional), keyword-only: Root URL of the API.
        user_agent (str, optional), keyword-only: ``User-Agent`` header value.
        timeout (float | dict | httpx.Timeout | None, optional), keyword-only: Timeout
            configuration for HTTP requests. ``None`` disables the timeout.
        api_version (int, optional), keyword-only: Version segment prefixed to every path.
        transport (httpx.BaseTransport, optional), keyword-only: Transport used by the
            underlying ``httpx.Client``. Defaults to httpx's network transport.

    Unset options fall back to :meth:`ClientConfig.from_env`.
    """

    AUTH_URL_CLIENT_ID = AuthMethod.URL_CLIENT_ID_AND_TOKEN
    AUTH_URL_TOKEN = AuthMethod.URL_TOKEN
    AUTH_HTTP_TOKEN = AuthMethod.HTTP_TOKEN
    AUTH_HTTP_PASSWORD = AuthMethod.HTTP_PASSWORD

    def __init__(
        self,
        *,
        base_uri: str | None = None,
        user_agent: str | None = None,
        timeout: TimeoutTypes | _TimeoutUnsetType = _TIMEOUT_UNSET,
        api_version: int | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        overrides: Dict[str, Any] = {
            "base_uri": base_uri,
            "user_agent": user_agent,
            "api_version": api_version,
        }
        overrides = {k: v for k, v in overrides.items() if v is not None}
        if timeout is not _TIMEOUT_UNSET:
            overrides["timeout"] = timeout

        self._lock = threading.RLock()
        self._config: ClientConfig = ClientConfig.from_env().with_options(**overrides)
        self._headers: Dict[str, str] = self._config.default_headers()
        self._auth: TrelloAuth = TrelloAuth()
        self._transport = transport
        self._last_request: Optional[httpx.Request] = None
        self._last_response: Optional[httpx.Response] = None
        self.httpx_client: Optional[httpx.Client] = None
        self.is_closed = False

    def __repr__(self) -> str:
        return (
            f"TrelloClient for {self.config.base_uri} "
            f"(api version {self.config.api_version}, auth: {self.auth_method})"
        )

    def __enter__(self):
        """Context manager entry for TrelloClient.

        Returns:
            TrelloClient: The TrelloClient instance.

        Note:
            Instantiates the httpx.Client instance using `self.get_trello_http_client()`.
        """
        if self.is_closed:
            raise TrelloClientClosed()
        self.httpx_client = self.get_trello_http_client()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        """Context manager exit method. Closes the connection pool."""
        self.close()

    def close(self) -> None:
        """Close the connection pool and mark the client as closed.

        Any call made afterwards raises :class:`TrelloClientClosed`.
        """
        if self.httpx_client is not None and not self.httpx_client.is_closed:
            self.httpx_client.close()
            logger.debug("Closed httpx.Client session")
        self.is_closed = True

    def get_trello_http_client(self) -> httpx.Client:
        """Returns a httpx client for use in Trello communication.

        Base URI, headers, timeout and authentication are applied per request
        by the request builder, so the client only provides connection pooling.

        Returns:
            httpx.Client: HTTP client for Trello API calls.
        """
        return httpx.Client(transport=self._transport, timeout=self.config.timeout)

    @property
    def config(self) -> ClientConfig:
        with self._lock:
            return self._config

    @property
    def headers(self) -> Dict[str, str]:
        """A copy of the headers sent with every request."""
        with self._lock:
            return dict(self._headers)

    @property
    def auth_method(self) -> AuthMethod:
        with self._lock:
            return self._auth.method

    @property
    def last_request(self) -> Optional[httpx.Request]:
        """The request sent by the most recent successful call, or None."""
        with self._lock:
            return self._last_request

    @property
    def last_response(self) -> Optional[httpx.Response]:
        """The response received by the most recent successful call, or None."""
        with self._lock:
            return self._last_response

    def authenticate(
        self, credential: str | None, secret: str | None = None, method: Any = AuthMethod.NONE
    ) -> None:
        """Set the authentication used for all subsequent requests.

        Args:
            credential (str): Primary credential (application key or token).
            secret (str, optional): Secondary secret.
            method (AuthMethod | str): Scheme used to sign requests. Methods that
                are not implemented fail when the next request is built.
        """
        method = AuthMethod.coerce(method)
        with self._lock:
            self._auth = TrelloAuth(AuthCredentials(method, credential, secret))
        logger.info(f"Authentication method set to {method}")

    def set_option(self, name: str, value: Any) -> None:
        """Override a single configuration option, leaving the others untouched.

        Recognised options are ``base_uri``, ``user_agent``, ``timeout`` and
        ``api_version``. Changing ``user_agent`` also updates the header.

        Raises:
            TrelloConfigurationError: If the option is unknown or the value is invalid.
        """
        with self._lock:
            self._config = self._config.with_option(name, value)
            if name == "user_agent":
                update_headers(self._headers, {"User-Agent": self._config.user_agent})
        logger.debug(f"Option {name} updated")

    def set_headers(self, headers: Mapping[str, str]) -> None:
        """Merge ``headers`` into the headers sent with every request.

        Names are matched case-insensitively; a new value replaces the old one.
        """
        with self._lock:
            update_headers(self._headers, headers)

    def clear_headers(self) -> None:
        """Reset the headers to ``Accept`` and ``User-Agent`` only."""
        with self._lock:
            self._headers = self._config.default_headers()

    def get(
        self, path: str, body: Body = None, headers: Optional[Mapping[str, str]] = None
    ) -> httpx.Response:
        """Send a GET request. ``body`` is sent as the query string."""
        return self.request(path, body, "GET", headers)

    def post(
        self, path: str, body: Body = None, headers: Optional[Mapping[str, str]] = None
    ) -> httpx.Response:
        """Send a POST request, form-encoded unless ``Content-Type`` is given."""
        return self.request(path, body, "POST", build_request_headers(headers, CONTENT_TYPE_FORM))

    def put(
        self, path: str, body: Body = None, headers: Optional[Mapping[str, str]] = None
    ) -> httpx.Response:
        """Send a PUT request, form-encoded unless ``Content-Type`` is given."""
        return self.request(path, body, "PUT", build_request_headers(headers, CONTENT_TYPE_FORM))

    def patch(
        self, path: str, body: Body = None, headers: Optional[Mapping[str, str]] = None
    ) -> httpx.Response:
        """Send a PATCH request, form-encoded unless ``Content-Type`` is given."""
        return self.request(
            path, body, "PATCH", build_request_headers(headers, CONTENT_TYPE_FORM)
        )

    def delete(
        self, path: str, body: Body = None, headers: Optional[Mapping[str, str]] = None
    ) -> httpx.Response:
        """Send a DELETE request."""
        return self.request(path, body, "DELETE", headers)

    @trello_errors
    def request(
        self,
        path: str,
        body: Body = None,
        method: str = "GET",
        headers: Optional[Mapping[str, str]] = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> httpx.Response:
        """Build, sign and send a request to the Trello API.

        Args:
            path (str): Path relative to the API version, e.g. ``cards/abc/labels``.
            body (Mapping | str | bytes, optional): Form fields or raw content.
            method (str): HTTP verb. Defaults to GET.
            headers (Mapping[str, str], optional): Headers that override the defaults.
            options (Mapping[str, Any], optional): Per-request options (``timeout``).

        Returns:
            httpx.Response: The response, whatever its status code.

        Raises:
            TrelloConfigurationError: For unknown options or an unimplemented auth method.
            TrelloProtocolError: When the request or response is malformed.
            TrelloTransportError: For connection failures and timeouts.
            TrelloClientClosed: If the client has been closed.
        """
        request = self.request_builder().build(method, path, body, headers, options)
        try:
            response = self._send(request)
        except TRANSLATED_EXCEPTIONS as e:
            logger.warning(f"{request.method} {request.url.path} failed: {e}")
            raise

        with self._lock:
            self._last_request = request
            self._last_response = response
        return response

    def request_builder(self) -> RequestBuilder:
        """Returns a RequestBuilder bound to a snapshot of the current settings."""
        with self._lock:
            return RequestBuilder(self._config, self._headers, self._auth)

    @use_client_session
    def _send(self, request: httpx.Request, *, httpx_client: httpx.Client) -> httpx.Response:
        logger.debug(f"{request.method} {request.url.path}")
        response = httpx_client.send(request)
        logger.debug(f"{request.method} {request.url.path} -> {response.status_code}")
        return response

    @cached_property
    def card_labels(self) -> Labels:
        """Wrapper for the labels of a card."""
        return Labels(self)

    def api(self, name: str) -> AbstractApi:
        """Return a resource wrapper by name. Only ``"card_labels"`` is registered.

        Raises:
            TrelloConfigurationError: If no wrapper is registered under ``name``.
        """
        if name == "card_labels":
            return self.card_labels
        raise TrelloConfigurationError(f"Undefined api instance called: {name}")
