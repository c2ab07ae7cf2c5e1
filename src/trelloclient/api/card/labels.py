"""Trello card labels API.

See https://developer.atlassian.com/cloud/trello/rest/api-group-cards/
"""

from __future__ import annotations

from typing import Any, Iterable
from urllib.parse import quote

from trelloclient.api.abstract_api import AbstractApi
from trelloclient.exceptions import TrelloValidationError

LABEL_COLORS = frozenset(
    ["all", "green", "yellow", "orange", "red", "purple", "blue", "sky", "lime", "pink", "black"]
)


class Labels(AbstractApi):
    path = "cards/#id#/labels"

    def set(self, id: str, labels: Iterable[str]) -> Any:
        """Set a given card's labels.

        Every label is checked before anything is sent, so an unknown color
        never reaches the API.

        Args:
            id (str): The card's id or short link.
            labels (Iterable[str]): Label colors to add to the card.

        Returns:
            Any: The card's labels as returned for the last label added,
                or None if ``labels`` is empty.

        Raises:
            TrelloValidationError: If a label is not a known color.
        """
        labels = list(labels)
        for label in labels:
            if label not in LABEL_COLORS:
                raise TrelloValidationError(f'Label "{label}" does not exist.')

        result = None
        for label in labels:
            result = self._post(self.get_path(id), {"value": label})
        return result

    def add(self, id: str, label_id: str) -> Any:
        """Add an existing board label to a given card."""
        return self._post(self._id_labels_path(id), {"value": label_id})

    def remove(self, id: str, label_id: str) -> Any:
        """Remove a given label from a given card.

        Uses the ``cards/{id}/idLabels/{idLabel}`` endpoint.
        """
        return self._delete(f"{self._id_labels_path(id)}/{quote(label_id, safe='')}")

    def _id_labels_path(self, id: str) -> str:
        return f"cards/{quote(str(id), safe='')}/idLabels"
