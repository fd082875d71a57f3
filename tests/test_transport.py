"""Tests for the httpx-backed transport."""

from __future__ import annotations

import json

import httpx
import pytest

from minigql.client import GraphQLClient
from minigql.exceptions import HttpStatusError, ServerError
from minigql.transport import FetchOptions, HttpxResponse, HttpxTransport, TransportResponse

URI = "https://api.example.com/graphql"


def _transport_for(handler) -> HttpxTransport:
    return HttpxTransport(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


class TestHttpxTransport:
    @pytest.mark.asyncio
    async def test_forwards_method_headers_and_body(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"data": {"ok": True}})

        transport = _transport_for(handler)
        options = FetchOptions(
            method="POST",
            headers={"content-type": "application/json", "x-trace": "abc"},
            body='{"query":"{ ok }"}',
        )
        response = await transport(URI, options)

        [request] = seen
        assert request.method == "POST"
        assert str(request.url) == URI
        assert request.headers["x-trace"] == "abc"
        assert request.headers["content-type"] == "application/json"
        assert request.content == b'{"query":"{ ok }"}'
        assert await response.json() == {"data": {"ok": True}}

    @pytest.mark.asyncio
    async def test_response_adapter(self) -> None:
        transport = _transport_for(lambda request: httpx.Response(503, text="busy"))
        response = await transport(URI, FetchOptions())

        assert isinstance(response, TransportResponse)
        assert response.ok is False
        assert response.status == 503
        assert response.status_text == "Service Unavailable"
        assert "503 Service Unavailable" in repr(response)

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self) -> None:
        transport = _transport_for(lambda request: httpx.Response(200, text="<html>"))
        response = await transport(URI, FetchOptions())
        with pytest.raises(json.JSONDecodeError):
            await response.json()

    @pytest.mark.asyncio
    async def test_does_not_close_injected_client(self) -> None:
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        async with HttpxTransport(client=client):
            pass
        assert not client.is_closed
        await client.aclose()

    @pytest.mark.asyncio
    async def test_closes_owned_client(self) -> None:
        transport = HttpxTransport(timeout=5)
        client = transport.client
        assert transport.client is client
        await transport.aclose()
        assert client.is_closed

    @pytest.mark.asyncio
    async def test_aclose_without_client_is_noop(self) -> None:
        await HttpxTransport().aclose()

    def test_wraps_raw_response(self) -> None:
        raw = httpx.Response(404)
        wrapped = HttpxResponse(raw)
        assert wrapped.raw is raw
        assert wrapped.status_text == "Not Found"


class TestClientOverHttpx:
    @pytest.mark.asyncio
    async def test_query_round_trip(self) -> None:
        bodies: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json={"data": {"node": {"id": "1"}}})

        async with _transport_for(handler) as transport:
            client = GraphQLClient(URI, transport=transport)
            first = await client.query("query($id: ID!) { node(id: $id) { id } }", {"id": "1"})
            second = await client.query("query($id: ID!) { node(id: $id) { id } }", {"id": "1"})

        assert first == second == {"data": {"node": {"id": "1"}}}
        assert bodies == [
            {"query": "query($id: ID!) { node(id: $id) { id } }", "variables": {"id": "1"}}
        ]

    @pytest.mark.asyncio
    async def test_retries_5xx_then_succeeds(self) -> None:
        statuses = iter([500, 502, 200])

        def handler(request: httpx.Request) -> httpx.Response:
            status = next(statuses)
            return httpx.Response(status, json={"data": {"n": status}})

        async with _transport_for(handler) as transport:
            client = GraphQLClient(URI, transport=transport, retry=2)
            assert await client.query("{ n }") == {"data": {"n": 200}}

    @pytest.mark.asyncio
    async def test_exhausted_5xx(self) -> None:
        transport = _transport_for(lambda request: httpx.Response(500))
        client = GraphQLClient(URI, transport=transport, retry=1)
        with pytest.raises(ServerError, match="500 Internal Server Error"):
            await client.query("{ n }")

    @pytest.mark.asyncio
    async def test_client_error(self) -> None:
        transport = _transport_for(lambda request: httpx.Response(401))
        client = GraphQLClient(URI, transport=transport, retry=3)
        with pytest.raises(HttpStatusError) as exc_info:
            await client.query("{ n }")
        assert exc_info.value.status == 401
        assert str(exc_info.value) == "401 Unauthorized"

    @pytest.mark.asyncio
    async def test_connection_error_propagates(self) -> None:
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            raise httpx.ConnectError("refused", request=request)

        client = GraphQLClient(URI, transport=_transport_for(handler), retry=2)
        with pytest.raises(httpx.ConnectError):
            await client.query("{ n }")
        assert calls == 3
