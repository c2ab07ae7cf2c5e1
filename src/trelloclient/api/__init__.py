"""Resource wrappers layered over :class:`trelloclient.TrelloClient`."""

from trelloclient.api.abstract_api import AbstractApi

__all__ = ["AbstractApi"]
