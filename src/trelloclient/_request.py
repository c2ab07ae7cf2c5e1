"""Assembles outgoing requests for the Trello API."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Union

import httpx

from trelloclient._httpx import (
    ClientConfig,
    TrelloAuth,
    append_query,
    construct_timeout,
    encode_query,
)
from trelloclient.exceptions import TrelloConfigurationError, TrelloProtocolError

HTTP_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")

REQUEST_OPTIONS = ("timeout",)

Body = Union[Mapping[str, Any], str, bytes, None]


class RequestBuilder:
    """Turns caller input into a signed ``httpx.Request``.

    The builder holds a snapshot of the client configuration, default headers
    and authentication; building a request never changes any of them.

    Parameters:
        config (ClientConfig): Base URI, API version and default timeout.
        headers (Mapping[str, str]): Default headers sent with every request.
        auth (TrelloAuth): Signs the request once it is assembled.
    """

    def __init__(self, config: ClientConfig, headers: Mapping[str, str], auth: TrelloAuth):
        self.config = config
        self.headers = dict(headers)
        self.auth = auth

    def build(
        self,
        method: str,
        path: str,
        body: Body = None,
        headers: Optional[Mapping[str, str]] = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> httpx.Request:
        """Build the final request.

        Args:
            method (str): One of GET, POST, PUT, PATCH or DELETE.
            path (str): Path relative to the API version, e.g. ``cards/abc/labels``.
            body (Mapping | str | bytes, optional): Form fields or raw content. For GET
                requests it is moved into the query string.
            headers (Mapping[str, str], optional): Headers that override the defaults.
            options (Mapping[str, Any], optional): Per-request options. Only
                ``timeout`` is supported.

        Returns:
            httpx.Request: The signed request, ready to send.

        Raises:
            TrelloConfigurationError: For an unknown verb, an unknown option or an
                unimplemented authentication method.
        """
        method = method.upper()
        if method not in HTTP_METHODS:
            raise TrelloConfigurationError(f"Unsupported HTTP method: {method}")

        url = self.build_path(path)
        content: Optional[bytes] = None
        if body:
            if method == "GET":
                url = append_query(url, self._query_from_body(body))
            else:
                content = self._content_from_body(body)

        request = httpx.Request(
            method,
            self.config.base_uri.rstrip("/") + "/" + url,
            headers=self.merge_headers(headers),
            content=content,
            extensions={"timeout": self._timeout(options).as_dict()},
        )
        return self.auth.apply(request)

    def build_path(self, path: str) -> str:
        return f"{self.config.api_version}/{path.lstrip('/')}"

    def merge_headers(self, headers: Optional[Mapping[str, str]] = None) -> httpx.Headers:
        try:
            merged = httpx.Headers(self.headers)
            # httpx.Headers.update replaces case-insensitively, so caller keys win
            merged.update(headers or {})
        except UnicodeEncodeError as e:
            raise TrelloProtocolError(f"Header values must be ASCII: {e}") from e
        return merged

    def _timeout(self, options: Optional[Mapping[str, Any]]) -> httpx.Timeout:
        options = dict(options or {})
        unknown = set(options) - set(REQUEST_OPTIONS)
        if unknown:
            raise TrelloConfigurationError(f"Unknown request options: {', '.join(sorted(unknown))}")
        if "timeout" in options:
            return construct_timeout(options["timeout"])
        return self.config.timeout

    @staticmethod
    def _query_from_body(body: Body) -> str:
        if isinstance(body, Mapping):
            return encode_query(body)
        if isinstance(body, bytes):
            try:
                return body.decode("utf-8").lstrip("?")
            except UnicodeDecodeError as e:
                raise TrelloProtocolError(f"GET body is not a valid UTF-8 query string: {e}") from e
        return str(body).lstrip("?")

    @staticmethod
    def _content_from_body(body: Body) -> bytes:
        if isinstance(body, Mapping):
            return encode_query(body).encode("ascii")
        if isinstance(body, str):
            return body.encode("utf-8")
        return bytes(body)  # type: ignore[arg-type]


def build_request_headers(headers: Optional[Mapping[str, str]], content_type: str) -> Dict[str, str]:
    """Return ``headers`` with ``Content-Type`` defaulted when the caller did not set one."""
    merged = dict(headers or {})
    if not any(name.lower() == "content-type" for name in merged):
        merged["Content-Type"] = content_type
    return merged


def update_headers(target: Dict[str, str], headers: Mapping[str, str]) -> None:
    """Merge ``headers`` into ``target`` in place, replacing names case-insensitively."""
    replaced = {name.lower() for name in headers}
    for name in [name for name in target if name.lower() in replaced]:
        del target[name]
    target.update(headers)
