import json

import httpx
import pytest

from .test_utils import RecordingTransport

from trelloclient import TrelloClient
from trelloclient.api.abstract_api import AbstractApi
from trelloclient.api.card.labels import LABEL_COLORS, Labels
from trelloclient.exceptions import (
    TrelloAuthenticationError,
    TrelloResourceNotFoundError,
    TrelloTimeoutError,
    TrelloValidationError,
)


def labels_handler(request):
    if request.method == "POST":
        value = dict(httpx.QueryParams(request.content.decode()))["value"]
        return httpx.Response(200, json=[{"color": value}])
    return httpx.Response(200, json={"id": "card1", "idLabels": []})


@pytest.fixture
def transport():
    return RecordingTransport(labels_handler)


@pytest.fixture
def labels(transport):
    return Labels(TrelloClient(transport=transport))


def test_label_colors():
    assert LABEL_COLORS == {
        "all", "green", "yellow", "orange", "red", "purple",
        "blue", "sky", "lime", "pink", "black",
    }


def test_get_path_substitutes_encoded_id(labels):
    assert labels.get_path("abc") == "cards/abc/labels"
    assert labels.get_path("a/b c") == "cards/a%2Fb%20c/labels"
    assert labels.get_path() == "cards/#id#/labels"


def test_set_posts_each_label(labels, transport):
    result = labels.set("card1", ["red", "blue"])
    assert [r.method for r in transport.requests] == ["POST", "POST"]
    assert [r.url.path for r in transport.requests] == ["/1/cards/card1/labels"] * 2
    assert [r.content for r in transport.requests] == [b"value=red", b"value=blue"]
    assert transport.requests[0].headers["Content-Type"] == "application/x-www-form-urlencoded"
    assert result == [{"color": "blue"}]


def test_set_unknown_color_sends_nothing(labels, transport):
    with pytest.raises(TrelloValidationError, match='Label "chartreuse" does not exist.'):
        labels.set("card1", ["chartreuse"])
    assert transport.requests == []
    assert labels.client.last_request is None


def test_set_validates_every_label_first(labels, transport):
    with pytest.raises(TrelloValidationError):
        labels.set("card1", ["red", "chartreuse"])
    assert transport.requests == []


def test_set_with_no_labels(labels, transport):
    assert labels.set("card1", []) is None
    assert transport.requests == []


def test_set_accepts_generators(labels, transport):
    labels.set("card1", (c for c in ["green"]))
    assert transport.requests[0].content == b"value=green"


def test_add_existing_label(labels, transport):
    labels.add("card1", "lbl9")
    sent = transport.requests[0]
    assert sent.method == "POST"
    assert sent.url.path == "/1/cards/card1/idLabels"
    assert sent.content == b"value=lbl9"


def test_remove(labels, transport):
    result = labels.remove("card1", "lbl9")
    sent = transport.requests[0]
    assert sent.method == "DELETE"
    assert sent.url.path == "/1/cards/card1/idLabels/lbl9"
    assert result == {"id": "card1", "idLabels": []}


def test_requests_are_authenticated(transport):
    client = TrelloClient(transport=transport)
    client.authenticate("k1", "t1", TrelloClient.AUTH_URL_CLIENT_ID)
    client.card_labels.set("card1", ["red"])
    assert transport.requests[0].url.query == b"key=k1&token=t1"


def test_not_found_status_is_raised():
    transport = RecordingTransport(lambda request: httpx.Response(404, text="card not found"))
    labels = Labels(TrelloClient(transport=transport))
    with pytest.raises(TrelloResourceNotFoundError) as exc_info:
        labels.remove("missing", "lbl9")
    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "card not found"


def test_unauthorized_status_is_raised():
    transport = RecordingTransport(lambda request: httpx.Response(401, text="invalid token"))
    labels = Labels(TrelloClient(transport=transport))
    with pytest.raises(TrelloAuthenticationError):
        labels.set("card1", ["red"])


def test_transport_errors_pass_through():
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    labels = Labels(TrelloClient(transport=RecordingTransport(handler)))
    with pytest.raises(TrelloTimeoutError):
        labels.set("card1", ["red"])


class Cards(AbstractApi):
    path = "cards/#id#"

    def show(self, id, params=None):
        return self._get(self.get_path(id), params)

    def update(self, id, params):
        return self._put(self.get_path(id), params)


class TestAbstractApiVerbs:
    def test_get_sends_params_as_query(self, transport):
        cards = Cards(TrelloClient(transport=transport))
        result = cards.show("card1", {"fields": "name"})
        sent = transport.requests[0]
        assert sent.method == "GET"
        assert sent.url.path == "/1/cards/card1"
        assert sent.url.params["fields"] == "name"
        assert result == {"id": "card1", "idLabels": []}

    def test_put_sends_form_body(self, transport):
        cards = Cards(TrelloClient(transport=transport))
        result = cards.update("card1", {"name": "new name"})
        sent = transport.requests[0]
        assert sent.method == "PUT"
        assert sent.content == b"name=new+name"
        assert sent.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert result == {"id": "card1", "idLabels": []}

    def test_get_error_status_is_raised(self):
        transport = RecordingTransport(lambda request: httpx.Response(404, text="card not found"))
        cards = Cards(TrelloClient(transport=transport))
        with pytest.raises(TrelloResourceNotFoundError):
            cards.show("missing")


class TestHandleJsonResponse:
    def make_response(self, status_code=200, **kwargs):
        request = httpx.Request("GET", "https://api.trello.com/1/cards/abc")
        return httpx.Response(status_code, request=request, **kwargs)

    def test_empty_body(self):
        assert AbstractApi.handle_json_response(self.make_response(200)) is None

    def test_json_body(self):
        assert AbstractApi.handle_json_response(self.make_response(json={"a": 1})) == {"a": 1}

    def test_invalid_json(self):
        with pytest.raises(json.JSONDecodeError):
            AbstractApi.handle_json_response(self.make_response(text="<html>"))

    def test_error_status_raises_httpx_error(self):
        with pytest.raises(httpx.HTTPStatusError):
            AbstractApi.handle_json_response(self.make_response(500))
