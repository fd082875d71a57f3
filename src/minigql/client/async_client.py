"""Asynchronous GraphQL client with response caching, hooks, and retry.

This module provides :class:`GraphQLClient`, the request engine of
minigql. For every :meth:`~GraphQLClient.query` it:

1. fingerprints the serialized ``{query, variables}`` body,
2. serves a fresh cached response without touching the network,
3. otherwise runs the **retry loop** against the injected transport,
4. notifies the response hook, caches eligible bodies, and returns or
   raises.

Retry classification:

- transport raised -- retryable; the exception is what surfaces once
  attempts run out.
- HTTP 5xx -- retryable; a :class:`~minigql.exceptions.ServerError` built
  from the *last* 5xx is what surfaces once attempts run out.
- HTTP 2xx -- success; no further attempts are made.
- anything else -- :class:`~minigql.exceptions.HttpStatusError`, raised
  immediately without retrying.

There is no delay between attempts and no deduplication of concurrent
identical requests: two overlapping calls both miss the cache and both
run their own retry loop.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from typing import Any, Optional

from pydantic import ValidationError

from minigql.cache import CacheStore
from minigql.exceptions import ConfigurationError, HttpStatusError, ServerError
from minigql.fingerprint import fingerprint, serialize_request
from minigql.hooks import Hooks, RequestHookContext, ResponseHookContext
from minigql.models import CacheSettings, ClientConfig
from minigql.transport import FetchOptions, Transport, TransportResponse

_BASE_HEADERS = {"content-type": "application/json"}


class GraphQLClient:
    """Asynchronous client for a GraphQL HTTP endpoint.

    Args:
        uri: The GraphQL endpoint, e.g. ``https://example.com/graphql``.
        transport: Async callable performing the HTTP round-trip. See
            :mod:`minigql.transport`. There is no implicit default.
        method: HTTP method for every request.
        retry: Extra attempts after a 5xx or a transport failure.
            ``0`` means exactly one attempt.
        headers: Headers sent with every request. Per-call headers win.
        credentials: Credentials mode forwarded to the transport.
        cache: Cache settings (default duration and an optional snapshot
            to warm a new store from).
        cache_store: A store instance to use, e.g. one shared with another
            client. Takes precedence over ``cache.json_cache``.
        hooks: Optional request/response observers.
        logger: Logging sink for diagnostics and hook failures.
        clock: Returns the current Unix time; used for cache expiry.

    Raises:
        ConfigurationError: If ``uri`` is not a usable string, the
            transport is not callable, or another setting is invalid.

    Example::

        client = GraphQLClient(
            "https://example.com/graphql",
            transport=HttpxTransport(),
            retry=2,
            cache=CacheSettings(duration=60),
        )
        result = await client.query("query($id: ID!) { node(id: $id) { id } }", {"id": "1"})
    """

    def __init__(
        self,
        uri: str,
        transport: Transport,
        *,
        method: str = "POST",
        retry: int = 0,
        headers: Optional[Mapping[str, str]] = None,
        credentials: str = "include",
        cache: Optional[CacheSettings] = None,
        cache_store: Optional[CacheStore] = None,
        hooks: Optional[Hooks] = None,
        logger: Optional[logging.Logger] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not isinstance(uri, str):
            raise ConfigurationError("Missing `uri` argument")
        if not callable(transport):
            raise ConfigurationError("Missing `transport` argument: it must be callable")
        try:
            self._config = ClientConfig(
                uri=uri,
                method=method,
                retry=retry,
                headers=dict(headers or {}),
                credentials=credentials,
                cache=cache or CacheSettings(),
            )
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid client configuration: {exc}") from exc

        self._transport = transport
        self._hooks = hooks or Hooks()
        self._logger = logger or logging.getLogger(__name__)
        self._clock = clock

        settings = self._config.cache
        if cache_store is not None:
            self._cache = cache_store
        elif settings.json_cache is not None:
            self._cache = CacheStore.from_snapshot(settings.json_cache, settings.duration)
        else:
            self._cache = CacheStore(settings.duration)

    # ------------------------------------------------------------------ #
    # Properties
    # ------------------------------------------------------------------ #

    @property
    def config(self) -> ClientConfig:
        """The validated construction settings."""
        return self._config

    @property
    def cache(self) -> CacheStore:
        """The live cache store (can be handed to another client)."""
        return self._cache

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def clear_cache(self) -> None:
        """Drop every cached response."""
        self._cache.clear()

    def cache_to_json(self) -> list[list[Any]]:
        """Export the cache as a JSON-ready snapshot.

        Feed the result to ``CacheSettings(json_cache=...)`` or
        :meth:`CacheStore.from_snapshot` to warm another client.
        """
        return self._cache.dump_snapshot()

    async def query(
        self,
        query: Any,
        variables: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        cache_duration: Optional[float] = None,
    ) -> Any:
        """Execute a GraphQL query.

        Args:
            query: The query text, or a JSON-serializable structured query.
            variables: Optional query variables.
            headers: Per-call headers, merged over the client headers.
            cache_duration: Seconds to cache this response. Defaults to
                the client's cache duration; ``0`` or less bypasses the
                cache for both reading and writing.

        Returns:
            The decoded response body, usually a dict with ``data`` and
            possibly ``errors``, or ``{}`` when the body is empty or falsy.
            GraphQL errors are returned, not raised.

        Raises:
            ConfigurationError: If ``query`` is missing.
            HttpStatusError: On a non-ok, non-5xx response.
            ServerError: If the last attempt got a 5xx response.
            Exception: Whatever the transport raised on the last attempt.
        """
        if not query:
            raise ConfigurationError("Missing `query` argument")
        if cache_duration is None:
            cache_duration = self._config.cache.duration

        body = serialize_request(query, variables)
        key = fingerprint(body)

        if cache_duration > 0:
            cached = self._cache.lookup(key, now=self._clock())
            if cached is not None:
                self._logger.debug("Cache hit for request %s", key)
                return cached

        fetch_options = FetchOptions(
            method=self._config.method,
            headers={**_BASE_HEADERS, **self._config.headers, **(headers or {})},
            credentials=self._config.credentials,
            body=body,
        )
        uri = self._config.uri

        await self._hooks.run_request(
            RequestHookContext(
                query=query,
                variables=variables,
                cache_duration=cache_duration,
                uri=uri,
                fetch_options=fetch_options,
            ),
            self._logger,
        )

        response, json, error = await self._execute_with_retry(uri, fetch_options)

        await self._hooks.run_response(
            ResponseHookContext(
                query=query,
                variables=variables,
                cache_duration=cache_duration,
                uri=uri,
                fetch_options=fetch_options,
                response=response,
                json=json,
                error=error,
            ),
            self._logger,
        )

        if (
            cache_duration > 0
            and response is not None
            and response.ok
            and json
            and error is None
            and not _has_errors(json)
        ):
            self._cache.store(key, json, cache_duration, now=self._clock())
            self._logger.debug("Cached response for request %s", key)

        if error is not None:
            raise error
        return json if json else {}

    async def mutate(
        self,
        mutation: Any,
        variables: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        """Execute a GraphQL mutation.

        Identical to :meth:`query` except that the cache is never read or
        written.

        Raises:
            ConfigurationError: If ``mutation`` is missing.
        """
        if not mutation:
            raise ConfigurationError("Missing `mutation` argument")
        return await self.query(mutation, variables, headers, cache_duration=0)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    async def _execute_with_retry(
        self,
        uri: str,
        fetch_options: FetchOptions,
    ) -> tuple[Optional[TransportResponse], Any, Optional[BaseException]]:
        """Run the bounded, strictly sequential attempt loop.

        Returns:
            ``(last_response, decoded_body, pending_error)``.
        """
        attempts = self._config.retry + 1
        response: Optional[TransportResponse] = None
        json: Any = None
        error: Optional[BaseException] = None

        for attempt in range(1, attempts + 1):
            try:
                response = await self._transport(uri, fetch_options)

                if response.status >= 500:
                    error = ServerError(response.status, response.status_text)
                    self._logger.debug(
                        "Server error %s (attempt %d/%d)",
                        response.status, attempt, attempts,
                    )
                    continue

                if response.ok:
                    json = await response.json()
                    # a late success discards failures from earlier attempts
                    error = None
                    break

                error = HttpStatusError(response.status, response.status_text)
                self._logger.debug("Not retrying %s response", response.status)
                break

            except Exception as exc:
                error = exc
                self._logger.debug(
                    "Transport failure: %s (attempt %d/%d)", exc, attempt, attempts,
                )

        return response, json, error


def _has_errors(json: Any) -> bool:
    """Return ``True`` when a decoded body carries a non-empty ``errors`` collection."""
    if not isinstance(json, Mapping):
        return False
    return bool(json.get("errors"))
