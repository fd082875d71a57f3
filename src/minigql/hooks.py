"""Request/response observer hooks and the runner that invokes them.

This module provides three components:

* :class:`RequestHookContext` -- what the request hook sees just before the
  first attempt is sent.
* :class:`ResponseHookContext` -- what the response hook sees after the
  retry loop has finished, whatever its outcome.
* :class:`Hooks` -- the pair of optional callables plus the fire-and-log
  runner used by :class:`~minigql.client.GraphQLClient`.

Hooks are observers: they may be plain functions or coroutine functions,
their return values are ignored, and any exception they raise is logged
and swallowed so that a broken hook can never fail a request.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Optional

from minigql.transport import FetchOptions, TransportResponse

logger = logging.getLogger(__name__)


@dataclass
class RequestHookContext:
    """Context passed to the request hook.

    Attributes:
        query: The query or mutation exactly as the caller passed it.
        variables: The query variables, if any.
        cache_duration: Effective cache duration of this call, in seconds.
        uri: The endpoint the request is sent to.
        fetch_options: The options handed to the transport.
    """

    query: Any
    variables: Any
    cache_duration: float
    uri: str
    fetch_options: FetchOptions


@dataclass
class ResponseHookContext(RequestHookContext):
    """Context passed to the response hook.

    Attributes:
        response: The last response received, or ``None`` when every
            attempt failed at the transport level.
        json: The decoded body, if one was decoded.
        error: The error the call is about to raise, if any.
    """

    response: Optional[TransportResponse] = None
    json: Any = None
    error: Optional[BaseException] = None


HookCallable = Callable[[Any], Any]


@dataclass
class Hooks:
    """Optional observers invoked around each network round-trip.

    Example::

        async def log_timing(ctx: ResponseHookContext) -> None:
            print(ctx.uri, ctx.response and ctx.response.status)

        client = GraphQLClient(uri, transport=transport, hooks=Hooks(response=log_timing))
    """

    request: Optional[HookCallable] = None
    response: Optional[HookCallable] = None

    async def run_request(
        self, ctx: RequestHookContext, log: logging.Logger = logger
    ) -> None:
        """Invoke the request hook, if any. Never raises."""
        await _fire(self.request, ctx, "request", log)

    async def run_response(
        self, ctx: ResponseHookContext, log: logging.Logger = logger
    ) -> None:
        """Invoke the response hook, if any. Never raises."""
        await _fire(self.response, ctx, "response", log)


async def _fire(
    hook: Optional[HookCallable],
    ctx: RequestHookContext,
    name: str,
    log: logging.Logger,
) -> None:
    if hook is None:
        return
    try:
        result = hook(ctx)
        if inspect.isawaitable(result):
            await result
    except Exception:
        log.exception("The %s hook failed for %s", name, ctx.uri)
