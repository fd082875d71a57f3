"""Shared test fixtures for minigql.

Provides a scripted fake transport for exercising the retry loop without
any network, plus autouse fixtures that reset the global output manager
and the package logger between tests.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Optional

import pytest

from minigql.output import OutputLogHandler, reset_output
from minigql.transport import FetchOptions

STATUS_TEXTS = {
    200: "OK",
    400: "Bad Request",
    404: "Not Found",
    500: "Internal Server Error",
    502: "Bad Gateway",
    503: "Service Unavailable",
}


# ---------------------------------------------------------------------------
# Fake transport
# ---------------------------------------------------------------------------


class FakeResponse:
    """Minimal object satisfying :class:`minigql.transport.TransportResponse`."""

    def __init__(self, status: int = 200, body: Any = None, status_text: Optional[str] = None):
        self.status = status
        self.status_text = STATUS_TEXTS.get(status, "") if status_text is None else status_text
        self.ok = 200 <= status < 300
        self._body = {"data": {"bla": 1}} if body is None else body
        self.json_calls = 0

    async def json(self) -> Any:
        self.json_calls += 1
        if isinstance(self._body, BaseException):
            raise self._body
        return self._body


class FakeTransport:
    """Async transport that replays a script of outcomes.

    Each item of *script* is either an int status code, a
    :class:`FakeResponse`, or an exception instance to raise. When the
    script runs out, the last item is repeated.
    """

    def __init__(self, script: Sequence[Any] = (200,), body: Any = None):
        self.script = list(script)
        self.body = body
        self.calls: list[tuple[str, FetchOptions]] = []

    async def __call__(self, uri: str, options: FetchOptions) -> FakeResponse:
        index = min(len(self.calls), len(self.script) - 1)
        self.calls.append((uri, options))
        item = self.script[index]
        if isinstance(item, BaseException):
            raise item
        if isinstance(item, FakeResponse):
            return item
        return FakeResponse(item, self.body)

    @property
    def call_count(self) -> int:
        return len(self.calls)


@pytest.fixture
def fake_transport() -> FakeTransport:
    """A transport that always answers 200 with ``{"data": {"bla": 1}}``."""
    return FakeTransport()


# ---------------------------------------------------------------------------
# Global state isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_global_state():
    """Reset the global OutputManager and the ``minigql`` logger after each test.

    CLI tests attach an :class:`OutputLogHandler` and disable propagation
    on the package logger, which would hide records from ``caplog`` in
    later tests.
    """
    yield
    reset_output()
    log = logging.getLogger("minigql")
    for handler in list(log.handlers):
        if isinstance(handler, OutputLogHandler):
            log.removeHandler(handler)
    log.setLevel(logging.NOTSET)
    log.propagate = True
