"""minigql -- a minimal asynchronous GraphQL-over-HTTP client.

Queries are opaque strings sent as ``{"query", "variables"}`` JSON bodies
through an injected transport. Successful, error-free responses are kept
in an in-memory cache keyed by a fingerprint of the request body, and
transient failures (HTTP 5xx, network errors) are retried a bounded number
of times.

Typical usage::

    from minigql import GraphQLClient, HttpxTransport

    async with HttpxTransport() as transport:
        client = GraphQLClient("https://example.com/graphql", transport=transport, retry=2)
        result = await client.query("{ viewer { login } }")

Modules:
    client: The request engine (:class:`GraphQLClient`).
    cache: The in-memory :class:`CacheStore`.
    fingerprint: Request body serialization and cache keys.
    transport: Transport contract and the httpx implementation.
    hooks: Request/response observers.
    models: Pydantic models shared across the package.
    exceptions: Exception hierarchy with exit-code mapping.
    app: Typer CLI entry point.
"""

__version__ = "0.1.0"

from minigql.cache import CacheStore  # noqa: E402
from minigql.client import GraphQLClient  # noqa: E402
from minigql.exceptions import (  # noqa: E402
    ConfigurationError,
    HttpStatusError,
    MiniGQLError,
    ServerError,
)
from minigql.hooks import Hooks, RequestHookContext, ResponseHookContext  # noqa: E402
from minigql.models import CacheEntry, CacheSettings, ClientConfig  # noqa: E402
from minigql.transport import FetchOptions, HttpxTransport  # noqa: E402

__all__ = [
    "CacheEntry",
    "CacheSettings",
    "CacheStore",
    "ClientConfig",
    "ConfigurationError",
    "FetchOptions",
    "GraphQLClient",
    "Hooks",
    "HttpStatusError",
    "HttpxTransport",
    "MiniGQLError",
    "RequestHookContext",
    "ResponseHookContext",
    "ServerError",
]
