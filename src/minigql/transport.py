"""Transport contract and the default :mod:`httpx` implementation.

The request engine never talks to the network itself. It is handed a
*transport*: an async callable ``send(uri, options)`` returning an object
that satisfies :class:`TransportResponse`. Anything the transport raises is
treated as a retryable transport failure.

:class:`HttpxTransport` is the transport used by the CLI and the one most
applications will want. Tests and exotic environments can pass any other
callable that honours the contract.

Example::

    async with HttpxTransport(timeout=10) as transport:
        client = GraphQLClient("https://example.com/graphql", transport=transport)
        data = await client.query("{ viewer { login } }")
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol, runtime_checkable

import httpx


@dataclass
class FetchOptions:
    """Everything the transport needs to send one request.

    Attributes:
        method: HTTP method (e.g. ``"POST"``).
        headers: Fully merged request headers.
        credentials: Credentials mode. Meaningful to browser-like
            transports only; :class:`HttpxTransport` ignores it.
        body: Serialized JSON request body.
    """

    method: str = "POST"
    headers: dict[str, str] = field(default_factory=dict)
    credentials: str = "include"
    body: str = ""


@runtime_checkable
class TransportResponse(Protocol):
    """The subset of a response the request engine relies on."""

    @property
    def ok(self) -> bool: ...

    @property
    def status(self) -> int: ...

    @property
    def status_text(self) -> str: ...

    async def json(self) -> Any: ...


Transport = Callable[[str, FetchOptions], Awaitable[TransportResponse]]
"""Signature of an injected transport."""


class HttpxResponse:
    """Adapts an :class:`httpx.Response` to :class:`TransportResponse`."""

    def __init__(self, response: httpx.Response) -> None:
        self.raw = response

    @property
    def ok(self) -> bool:
        return self.raw.is_success

    @property
    def status(self) -> int:
        return self.raw.status_code

    @property
    def status_text(self) -> str:
        return self.raw.reason_phrase

    async def json(self) -> Any:
        return self.raw.json()

    def __repr__(self) -> str:
        return f"<HttpxResponse [{self.status} {self.status_text}]>"


class HttpxTransport:
    """Transport backed by :class:`httpx.AsyncClient`.

    Args:
        client: Optional pre-configured async client. When omitted one is
            created on first use and closed by :meth:`aclose`.
        timeout: Request timeout in seconds for an owned client.
        verify: Verify TLS certificates for an owned client.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
        verify: bool = True,
    ) -> None:
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout
        self._verify = verify

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the underlying :class:`httpx.AsyncClient`."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                verify=self._verify,
                follow_redirects=True,
            )
            self._owns_client = True
        return self._client

    async def __call__(self, uri: str, options: FetchOptions) -> HttpxResponse:
        response = await self.client.request(
            options.method,
            uri,
            headers=options.headers,
            content=options.body,
        )
        return HttpxResponse(response)

    async def aclose(self) -> None:
        """Close the client if we own it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> HttpxTransport:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()
