"""Base class for resource wrappers."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Mapping, Optional
from urllib.parse import quote

import httpx

from trelloclient.exceptions import trello_errors

if TYPE_CHECKING:  # pragma: no cover
    from trelloclient.TrelloClient import TrelloClient

logger = logging.getLogger(__name__)


class AbstractApi:
    """A wrapper bound to one Trello resource.

    Subclasses set ``path`` to a template relative to the API version, where
    ``#id#`` is replaced by the percent-encoded id of the parent object.
    Unlike the core client, wrappers check the response status and decode the
    JSON payload; HTTP error statuses surface as :class:`TrelloHTTPError`
    subclasses.
    """

    path: str = ""

    def __init__(self, client: TrelloClient):
        self.client = client

    def get_path(self, id: Optional[str] = None) -> str:
        if id is None:
            return self.path
        return self.path.replace("#id#", quote(str(id), safe=""))

    @trello_errors
    def _get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return self.handle_json_response(self.client.get(path, params))

    @trello_errors
    def _post(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return self.handle_json_response(self.client.post(path, params))

    @trello_errors
    def _put(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return self.handle_json_response(self.client.put(path, params))

    @trello_errors
    def _delete(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return self.handle_json_response(self.client.delete(path, params))

    @staticmethod
    def handle_json_response(response: httpx.Response) -> Any:
        """Check the status of ``response`` and decode its JSON body.

        Returns:
            Any: The decoded payload, or None for an empty body.

        Raises:
            httpx.HTTPStatusError: For 4xx and 5xx statuses (converted to Trello
                exceptions by the calling method's @trello_errors decorator).
            json.JSONDecodeError: If a non-empty body is not JSON.
        """
        response.raise_for_status()
        if not response.content:
            return None
        try:
            return response.json()
        except json.JSONDecodeError:
            logger.error(f"Failed to decode JSON response: {response.text[:200]}")
            raise
