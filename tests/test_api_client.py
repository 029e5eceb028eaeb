import json
from dataclasses import dataclass
from typing import List

import httpx
import pytest
from pydantic import ValidationError

from emberwrap import EmberJsonFormatter, EnglishPluralizer, EnvelopeFormatError
from emberwrap.clients.api.client import EnvelopeApiClient
from emberwrap.clients.api.types import ApiConnection
from emberwrap.models.client_config import ApiClientConfig
from emberwrap.wiring.api_wiring import build_api_connection


@dataclass
class Customer:
    id: int
    first_name: str


def _client(handler) -> EnvelopeApiClient:
    conn = ApiConnection(base_url="https://api.example.test", timeout_seconds=5.0)
    http = httpx.Client(base_url=conn.base_url, transport=httpx.MockTransport(handler))
    return EnvelopeApiClient(EmberJsonFormatter(EnglishPluralizer()), conn, client=http)


def test_api_wiring_builds_connection_from_config():
    cfg = ApiClientConfig(
        base_url="https://api.example.test",
        headers={"X-Tenant": "acme"},
        bearer_token="t0k",
    )

    conn = build_api_connection(cfg)

    assert conn.base_url == "https://api.example.test"
    assert conn.timeout_seconds == 30.0
    assert conn.request_headers() == {
        "Accept": "application/json",
        "X-Tenant": "acme",
        "Authorization": "Bearer t0k",
    }


def test_request_headers_without_token():
    conn = ApiConnection(base_url="http://localhost", timeout_seconds=1.0)
    assert conn.request_headers() == {"Accept": "application/json"}


@pytest.mark.parametrize("bad", [{"base_url": "ftp://example.test"}, {"base_url": "http://x", "timeout_seconds": 0}])
def test_client_config_validation(bad):
    with pytest.raises(ValidationError):
        ApiClientConfig(**bad)


def test_get_unwraps_enveloped_response():
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"customers": [{"id": 1, "firstName": "Ada"}], "meta": {"total": 1}})

    with _client(handler) as api:
        customers = api.get("/customers", list[Customer], params={"page": 1})

    assert customers == [Customer(id=1, first_name="Ada")]
    assert seen[0].url.path == "/customers"
    assert seen[0].url.params["page"] == "1"


def test_send_writes_enveloped_body_and_reads_response():
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        assert request.headers["Content-Type"] == "application/json"
        return httpx.Response(201, json={"customer": {"id": 9, "firstName": "Ada"}})

    api = _client(handler)
    created = api.send("POST", "/customers", Customer(id=0, first_name="Ada"), target_type=Customer)

    assert bodies == [{"customer": {"id": 0, "firstName": "Ada"}}]
    assert created == Customer(id=9, first_name="Ada")


def test_send_without_target_type_returns_none():
    api = _client(lambda request: httpx.Response(204))
    assert api.send("DELETE", "/customers/1", None, declared_type=Customer) is None


def test_http_errors_propagate():
    api = _client(lambda request: httpx.Response(404, json={"error": "missing"}))
    with pytest.raises(httpx.HTTPStatusError):
        api.get("/customers/404", Customer)


def test_unreadable_response_is_logged_and_reraised(caplog):
    api = _client(lambda request: httpx.Response(200, json={"orders": [], "invoices": []}))

    with pytest.raises(EnvelopeFormatError):
        api.get("/customers/1", Customer)

    assert "Failed to read API response" in caplog.text
