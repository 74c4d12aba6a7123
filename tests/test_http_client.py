import json
from typing import Any, Dict, List

import httpx
import pytest

from apisearch.config import Settings
from apisearch.exceptions import ConfigError, FormatError, TransportError
from apisearch.http.client import HttpClient
from apisearch.model.entities import Category, Product
from apisearch.query.query import Query
from apisearch.result.result import Result

# ---------- Helpers ----------


def make_mock_client(responder: Any) -> httpx.AsyncClient:
    transport = httpx.MockTransport(responder)
    return httpx.AsyncClient(
        transport=transport,
        base_url="https://search.example.com",
        headers={"Accept": "application/json"},
    )


def patch_client_with_responder(client: HttpClient, responder: Any) -> None:
    # Patch the private _client factory to return our AsyncClient with MockTransport
    def _client() -> httpx.AsyncClient:  # type: ignore[override]
        return make_mock_client(responder)

    setattr(client, "_client", _client)


def make_client() -> HttpClient:
    return HttpClient(
        base_url="https://search.example.com/", app_id="app", token="secret", index="main"
    )


def sample_result() -> Dict[str, Any]:
    result = Result(total_elements=2, total_products=1, total_hits=2, min_price=5, max_price=5)
    result.add_category(Category(id="c1", name="Shoes"))
    result.add_product(Product(id="1", name="Sneaker", price=5.0))
    return result.to_array()


# ---------- Query ----------


@pytest.mark.asyncio
async def test_query_sends_wire_map_and_decodes_result() -> None:
    seen: List[httpx.Request] = []

    def responder(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.method == "GET" and request.url.path == "/v1":
            return httpx.Response(200, json=sample_result())
        return httpx.Response(404, json={"error": "not found"})

    client = make_client()
    patch_client_with_responder(client, responder)

    query = Query.create("sneaker").filter_by_brands(["b1"])
    result = await client.query(query)

    assert [type(r).__name__ for r in result.get_results()] == ["Category", "Product"]
    assert result.get_total_hits() == 2

    params = seen[0].url.params
    assert params["app_id"] == "app"
    assert params["token"] == "secret"
    assert params["index"] == "main"
    assert json.loads(params["query"]) == query.to_array()


@pytest.mark.asyncio
async def test_query_error_status_raises_transport_error() -> None:
    def responder(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"message": "invalid token"})

    client = make_client()
    patch_client_with_responder(client, responder)

    with pytest.raises(TransportError) as exc_info:
        await client.query(Query.create(""))
    assert isinstance(exc_info.value.__cause__, httpx.HTTPStatusError)


@pytest.mark.asyncio
async def test_query_non_json_body_raises_transport_error() -> None:
    def responder(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>maintenance</html>")

    client = make_client()
    patch_client_with_responder(client, responder)

    with pytest.raises(TransportError):
        await client.query(Query.create(""))


@pytest.mark.asyncio
async def test_query_undecodable_body_raises_transport_error() -> None:
    def responder(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"\xff\xfe\xfa")

    client = make_client()
    patch_client_with_responder(client, responder)

    with pytest.raises(TransportError):
        await client.query(Query.create(""))


@pytest.mark.asyncio
async def test_query_malformed_result_raises_format_error() -> None:
    def responder(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"total_elements": 1})

    client = make_client()
    patch_client_with_responder(client, responder)

    with pytest.raises(FormatError):
        await client.query(Query.create(""))


@pytest.mark.asyncio
async def test_query_connection_error_raises_transport_error() -> None:
    def responder(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client()
    patch_client_with_responder(client, responder)

    with pytest.raises(TransportError):
        await client.query(Query.create(""))


# ---------- Configuration ----------


def test_from_settings_requires_configuration(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("BASE_URL", "APP_ID", "TOKEN"):
        monkeypatch.delenv(f"APISEARCH_CLIENT__{name}", raising=False)
    with pytest.raises(ConfigError):
        HttpClient.from_settings(Settings())


def test_from_settings_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APISEARCH_CLIENT__BASE_URL", "https://search.example.com/")
    monkeypatch.setenv("APISEARCH_CLIENT__APP_ID", "app")
    monkeypatch.setenv("APISEARCH_CLIENT__TOKEN", "secret")
    monkeypatch.setenv("APISEARCH_CLIENT__TIMEOUT", "5")

    client = HttpClient.from_settings(Settings())
    assert client.base_url == "https://search.example.com"
    assert client.app_id == "app"
    assert client.token == "secret"
    assert client.timeout == 5.0
    assert client.index is None
