"""Canonical Pydantic models shared across all minigql modules.

The models fall into two groups:

**Client models** -- validated at client construction time and stored in
the cache:
    :class:`CacheEntry`, :class:`CacheSettings`, and :class:`ClientConfig`.

**CLI configuration models** -- serialised as JSON in the user's config
directory:
    :class:`OutputConfig` and :class:`GlobalConfig`.

Durations are expressed in seconds and instants as Unix timestamps
(float seconds), matching :func:`time.time`.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_CACHE_DURATION: float = float(2**53 - 1)
"""Default cache duration in seconds. Large enough to never expire in practice
while still serialising to a finite JSON number."""


# --- Cache ---


class CacheEntry(BaseModel):
    """A cached response body and the instant after which it is stale.

    Example::

        CacheEntry(payload={"data": {"ok": True}}, expires_at=1700000300.0)
    """

    payload: Any = Field(description="Decoded response body")
    expires_at: float = Field(description="Unix timestamp after which the entry is stale")

    def is_fresh(self, now: float) -> bool:
        """Return ``True`` while *now* is strictly before :attr:`expires_at`."""
        return now < self.expires_at


class CacheSettings(BaseModel):
    """Cache section of :class:`ClientConfig`.

    ``json_cache`` is a snapshot as produced by
    :meth:`~minigql.cache.CacheStore.dump_snapshot`. It is only used to
    hydrate a new store when the client is not handed a store instance.
    """

    duration: float = Field(
        default=MAX_CACHE_DURATION,
        ge=0,
        description="Default cache duration for queries, in seconds",
    )
    json_cache: Optional[list[Any]] = Field(
        default=None, description="Snapshot used to warm up a new cache store"
    )


# --- Client ---


class ClientConfig(BaseModel):
    """Construction-time settings of :class:`~minigql.client.GraphQLClient`.

    Example::

        ClientConfig(
            uri="https://example.com/graphql",
            retry=2,
            headers={"authorization": "Bearer abc"},
            cache=CacheSettings(duration=60),
        )
    """

    model_config = ConfigDict(extra="forbid")

    uri: str = Field(description="The GraphQL HTTP endpoint")
    method: str = Field(default="POST", description="HTTP method used for every request")
    retry: int = Field(
        default=0,
        ge=0,
        description="Additional attempts after a 5xx response or a transport failure",
    )
    headers: dict[str, str] = Field(
        default_factory=dict, description="Headers sent with every request"
    )
    credentials: str = Field(
        default="include", description="Credentials mode forwarded to the transport"
    )
    cache: CacheSettings = Field(default_factory=CacheSettings)

    @field_validator("uri")
    @classmethod
    def _uri_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("uri must not be blank")
        return value

    @field_validator("method")
    @classmethod
    def _upper_method(cls, value: str) -> str:
        return value.upper()


# --- CLI config ---


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide CLI configuration persisted at ``~/.config/minigql/config.json``.

    Loaded by :func:`~minigql.config.load_global_config`. Fields here have
    the lowest precedence and can be overridden by environment variables
    or CLI flags. See :func:`~minigql.config.resolve_config`.
    """

    uri: Optional[str] = Field(default=None, description="Default GraphQL endpoint")
    headers: dict[str, str] = Field(default_factory=dict)
    retry: int = Field(default=0, ge=0)
    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")
    output: OutputConfig = Field(default_factory=OutputConfig)
