"""In-memory response caching for minigql.

This package provides :class:`CacheStore`, the fingerprint-keyed store
consulted by :class:`~minigql.client.GraphQLClient` before every query.
Only successful, error-free responses are written to it; mutations never
touch it.
"""

from minigql.cache.store import CacheStore

__all__ = ["CacheStore"]
