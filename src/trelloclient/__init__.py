"""trelloclient is a Python client for the Trello REST API.

It turns verb calls into authenticated HTTP requests, maps transport
failures onto a small set of Trello exceptions, and provides resource
wrappers such as card labels on top of the core client.
"""

import importlib.metadata

from trelloclient.exceptions import (
    # Base exceptions
    TrelloError,
    TrelloClientClosed,
    # Caller input
    TrelloValidationError,
    TrelloConfigurationError,
    # Protocol errors
    TrelloProtocolError,
    # Transport errors
    TrelloTransportError,
    TrelloSystemUnavailableError,
    TrelloTimeoutError,
    TrelloNetworkError,
    # HTTP errors
    TrelloHTTPError,
    # 4xx client errors
    TrelloClientError,
    TrelloBadRequestError,
    TrelloAuthenticationError,
    TrelloPermissionError,
    TrelloResourceNotFoundError,
    TrelloRateLimitError,
    # 5xx server errors
    TrelloServerError,
    TrelloInternalServerError,
    TrelloBadGatewayError,
    TrelloServiceUnavailableError,
    TrelloGatewayTimeoutError,
)
from trelloclient.TrelloClient import TrelloClient
from trelloclient._httpx import AuthCredentials, AuthMethod, ClientConfig, TrelloAuth
from trelloclient._request import RequestBuilder

__version__ = importlib.metadata.version("trelloclient")
__all__ = [
    # Core client
    "TrelloClient",
    "RequestBuilder",
    # Configuration and auth
    "ClientConfig",
    "AuthMethod",
    "AuthCredentials",
    "TrelloAuth",
    # Base exceptions
    "TrelloError",
    "TrelloClientClosed",
    # Caller input
    "TrelloValidationError",
    "TrelloConfigurationError",
    # Protocol errors
    "TrelloProtocolError",
    # Transport errors
    "TrelloTransportError",
    "TrelloSystemUnavailableError",
    "TrelloTimeoutError",
    "TrelloNetworkError",
    # HTTP errors
    "TrelloHTTPError",
    # 4xx client errors
    "TrelloClientError",
    "TrelloBadRequestError",
    "TrelloAuthenticationError",
    "TrelloPermissionError",
    "TrelloResourceNotFoundError",
    "TrelloRateLimitError",
    # 5xx server errors
    "TrelloServerError",
    "TrelloInternalServerError",
    "TrelloBadGatewayError",
    "TrelloServiceUnavailableError",
    "TrelloGatewayTimeoutError",
]
