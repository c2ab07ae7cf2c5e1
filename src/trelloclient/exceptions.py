"""
Custom exceptions for the trelloclient package.

This module provides Trello-specific exceptions that wrap httpx exceptions
so callers never have to handle the HTTP library's own error types.
"""

import functools
from typing import Callable, Dict, Optional, ParamSpec, Type, TypeVar, cast

import httpx

P = ParamSpec("P")
T = TypeVar("T")


# Base Trello exceptions
class TrelloError(Exception):
    """Base exception for all Trello-related errors."""

    def __init__(self, message: str, *, request: Optional[httpx.Request] = None) -> None:
        super().__init__(message)
        self.message = message
        self.request = request


class TrelloClientClosed(TrelloError):
    """
    Raised when an operation is attempted on a closed TrelloClient.
    """

    def __init__(self, message: str = "The TrelloClient is closed") -> None:
        super().__init__(message)


class TrelloValidationError(TrelloError, ValueError):
    """
    Raised when the caller supplies a value outside a known-valid set.
    Always raised before any request reaches the wire.
    """


class TrelloConfigurationError(TrelloValidationError):
    """
    Raised for unsupported client configuration, such as an authentication
    method that is declared but not implemented. Not retryable.
    """

    def __str__(self) -> str:
        return f"Trello configuration error: {self.message}"


# Protocol errors
class TrelloProtocolError(TrelloError):
    """
    Raised when the HTTP layer rejects the request or response as malformed.
    Invalid URLs, unsupported schemes, illegal headers. Points to a client-side bug.
    """

    def __str__(self) -> str:
        return f"Trello protocol error: {self.message}"


# Transport errors
class TrelloTransportError(TrelloError):
    """
    Base class for I/O failures while talking to Trello.
    Recoverable only by retrying the call.
    """

    def __str__(self) -> str:
        return f"Trello transport error: {self.message}"


class TrelloSystemUnavailableError(TrelloTransportError):
    """
    Raised when Trello cannot be reached at all (connection refused, DNS failure).
    """

    def __str__(self) -> str:
        return f"Trello system unavailable: {self.message}"


class TrelloTimeoutError(TrelloTransportError):
    """
    Raised when a request to Trello times out.
    """

    def __str__(self) -> str:
        return f"Trello request timeout: {self.message}"


class TrelloNetworkError(TrelloTransportError):
    """
    Raised for general network failures: resets, broken connections, proxy issues.
    """

    def __str__(self) -> str:
        return f"Trello network error: {self.message}"


# HTTP Status-based exceptions
class TrelloHTTPError(TrelloError):
    """
    Base class for Trello HTTP status errors.

    The core client never raises these; resource wrappers do, after checking
    the status of a response.
    """

    def __init__(self, message: str, *, request: httpx.Request, response: httpx.Response) -> None:
        super().__init__(message, request=request)
        self.response = response

    @property
    def status_code(self) -> int:
        return self.response.status_code

    def __str__(self) -> str:
        return f"Trello HTTP error: {self.message} (HTTP {self.status_code})"


# 4xx Client Errors
class TrelloClientError(TrelloHTTPError):
    """
    Base class for 4xx client errors from Trello.
    """

    def __str__(self) -> str:
        return f"Trello client error: {self.message} (HTTP {self.status_code})"


class TrelloBadRequestError(TrelloClientError):
    """
    Raised for 400 bad request errors.
    Malformed request syntax or invalid parameters.
    """

    def __init__(
        self,
        message: str = "Bad request - malformed request or invalid parameters",
        *,
        request: httpx.Request,
        response: httpx.Response,
    ) -> None:
        super().__init__(message, request=request, response=response)

    def __str__(self) -> str:
        return f"Trello bad request: {self.message}"


class TrelloAuthenticationError(TrelloClientError):
    """
    Raised for 401 authentication failures.
    Invalid application key, or a token that was revoked or expired.
    """

    def __init__(
        self,
        message: str = "Authentication failed - invalid key or token",
        *,
        request: httpx.Request,
        response: httpx.Response,
    ) -> None:
        super().__init__(message, request=request, response=response)

    def __str__(self) -> str:
        return f"Trello authentication failed: {self.message}"


class TrelloPermissionError(TrelloClientError):
    """
    Raised for 403 permission denied errors.
    """

    def __init__(
        self,
        message: str = "Permission denied - token lacks access to this resource",
        *,
        request: httpx.Request,
        response: httpx.Response,
    ) -> None:
        super().__init__(message, request=request, response=response)

    def __str__(self) -> str:
        return f"Trello permission denied: {self.message}"


class TrelloResourceNotFoundError(TrelloClientError):
    """
    Raised for 404 not found errors.
    The board, card or label does not exist, or the endpoint is wrong for the verb.
    """

    def __init__(
        self,
        message: str = "Resource not found - Trello object or endpoint missing for the request",
        *,
        request: httpx.Request,
        response: httpx.Response,
    ) -> None:
        super().__init__(message, request=request, response=response)

    def __str__(self) -> str:
        return f"Trello resource not found: {self.message}"


class TrelloRateLimitError(TrelloClientError):
    """
    Raised for 429 rate limiting errors.
    """

    def __init__(
        self,
        message: str = "Rate limit exceeded - too many requests to Trello",
        *,
        request: httpx.Request,
        response: httpx.Response,
    ) -> None:
        super().__init__(message, request=request, response=response)

    def __str__(self) -> str:
        return f"Trello rate limit exceeded: {self.message}"


# 5xx Server Errors
class TrelloServerError(TrelloHTTPError):
    """
    Base class for 5xx server errors from Trello.
    """

    def __str__(self) -> str:
        return f"Trello server error: {self.message} (HTTP {self.status_code})"


class TrelloInternalServerError(TrelloServerError):
    """
    Raised for 500 internal server errors.
    """

    def __init__(
        self,
        message: str = "Internal server error - unexpected Trello error",
        *,
        request: httpx.Request,
        response: httpx.Response,
    ) -> None:
        super().__init__(message, request=request, response=response)

    def __str__(self) -> str:
        return f"Trello internal server error: {self.message}"


class TrelloBadGatewayError(TrelloServerError):
    """
    Raised for 502 bad gateway errors.
    """

    def __init__(
        self,
        message: str = "Bad gateway - invalid response from upstream",
        *,
        request: httpx.Request,
        response: httpx.Response,
    ) -> None:
        super().__init__(message, request=request, response=response)

    def __str__(self) -> str:
        return f"Trello bad gateway: {self.message}"


class TrelloServiceUnavailableError(TrelloServerError):
    """
    Raised for 503 service unavailable errors.
    """

    def __init__(
        self,
        message: str = "Service unavailable - Trello temporarily unavailable",
        *,
        request: httpx.Request,
        response: httpx.Response,
    ) -> None:
        super().__init__(message, request=request, response=response)

    def __str__(self) -> str:
        return f"Trello service unavailable: {self.message}"


class TrelloGatewayTimeoutError(TrelloServerError):
    """
    Raised for 504 gateway timeout errors.
    """

    def __init__(
        self,
        message: str = "Gateway timeout - upstream response timeout",
        *,
        request: httpx.Request,
        response: httpx.Response,
    ) -> None:
        super().__init__(message, request=request, response=response)

    def __str__(self) -> str:
        return f"Trello gateway timeout: {self.message}"


# Exception mapping dictionaries
_HTTP_STATUS_EXCEPTIONS: Dict[int, Type[TrelloHTTPError]] = {
    # 4xx Client Errors
    400: TrelloBadRequestError,
    401: TrelloAuthenticationError,
    403: TrelloPermissionError,
    404: TrelloResourceNotFoundError,
    429: TrelloRateLimitError,
    # 5xx Server Errors
    500: TrelloInternalServerError,
    502: TrelloBadGatewayError,
    503: TrelloServiceUnavailableError,
    504: TrelloGatewayTimeoutError,
}

# Order matters: subclasses before their httpx parents.
_PROTOCOL_EXCEPTIONS = (
    httpx.UnsupportedProtocol,
    httpx.LocalProtocolError,
    httpx.InvalidURL,
    httpx.DecodingError,
    httpx.TooManyRedirects,
    httpx.StreamError,
)

_TRANSPORT_EXCEPTIONS: Dict[Type[Exception], Type[TrelloTransportError]] = {
    httpx.ConnectError: TrelloSystemUnavailableError,
    httpx.TimeoutException: TrelloTimeoutError,
    httpx.RemoteProtocolError: TrelloNetworkError,
    httpx.ProxyError: TrelloNetworkError,
    httpx.NetworkError: TrelloNetworkError,
}

TRANSLATED_EXCEPTIONS = (httpx.HTTPError, httpx.InvalidURL, httpx.StreamError)


def _get_error_detail(response: Optional[httpx.Response]) -> str:
    """Extract error details from a Trello response, safely handling any exceptions."""
    if response is None:
        return "No response available"
    try:
        error_text = response.text or "No error details in response"
        # HTML error pages can be long
        return error_text[:500] + "..." if len(error_text) > 500 else error_text
    except (httpx.ResponseNotRead, UnicodeDecodeError, LookupError):
        return "Unable to read error details from response"


def _get_request(original_error: Exception) -> Optional[httpx.Request]:
    # httpx raises RuntimeError from .request when no request was attached
    try:
        return getattr(original_error, "request", None)
    except RuntimeError:
        return None


def _create_trello_exception(original_error: Exception) -> TrelloError:
    """Create the appropriate Trello exception based on the original httpx error."""
    request = _get_request(original_error)

    if isinstance(original_error, httpx.HTTPStatusError):
        response = original_error.response
        status_code = response.status_code
        error_detail = _get_error_detail(response)
        if status_code in _HTTP_STATUS_EXCEPTIONS:
            return _HTTP_STATUS_EXCEPTIONS[status_code](
                error_detail, request=original_error.request, response=response
            )
        if 400 <= status_code < 500:
            return TrelloClientError(
                f"Client error: {error_detail}", request=original_error.request, response=response
            )
        elif 500 <= status_code < 600:
            return TrelloServerError(
                f"Server error: {error_detail}", request=original_error.request, response=response
            )
        return TrelloHTTPError(
            f"HTTP error: {error_detail}", request=original_error.request, response=response
        )

    if isinstance(original_error, _PROTOCOL_EXCEPTIONS):
        return TrelloProtocolError(str(original_error), request=request)

    for error_type, exception_class in _TRANSPORT_EXCEPTIONS.items():
        if isinstance(original_error, error_type):
            return exception_class(str(original_error), request=request)

    # Fallback for unknown request errors
    return TrelloTransportError(f"Connection error: {original_error}", request=request)


def trello_errors(func: Callable[P, T]) -> Callable[P, T]:
    """
    Decorator that converts httpx exceptions to Trello-specific exceptions.

    Connection and timeout failures become :class:`TrelloTransportError`
    subclasses, malformed requests become :class:`TrelloProtocolError`, and
    ``httpx.HTTPStatusError`` raised by ``raise_for_status`` becomes the
    matching :class:`TrelloHTTPError` subclass. The original exception is
    kept as ``__cause__``.

    Usage:
        >>> @trello_errors
        ... def get_card(self, card_id: str):
        ...     response = self.client.get(f"cards/{card_id}")
        ...     response.raise_for_status()
        ...     return response.json()
    """

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
        try:
            return func(*args, **kwargs)
        except TRANSLATED_EXCEPTIONS as e:
            raise _create_trello_exception(e) from e

    return cast(Callable[P, T], wrapper)
