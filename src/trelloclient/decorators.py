"""This module contains decorators for the trelloclient package."""

from functools import wraps

from trelloclient.exceptions import TrelloClientClosed


def use_client_session(func):
    """
    Decorator to use or create an httpx.Client session for the TrelloClient
    if one is not already created or the existing httpx.Client is closed

    A temporary client only lives for the duration of the decorated call.
    This decorator assumes it is decorating an instance method on a TrelloClient object
    """

    @wraps(func)
    def wrapper(self, *args, **kwargs):
        if self.is_closed:
            raise TrelloClientClosed()
        needs_temp_client = (
            not hasattr(self, "httpx_client")
            or not self.httpx_client
            or self.httpx_client.is_closed
        )
        if needs_temp_client:
            with self.get_trello_http_client() as httpx_client:
                return func(self, *args, httpx_client=httpx_client, **kwargs)
        return func(self, *args, httpx_client=self.httpx_client, **kwargs)

    return wrapper
