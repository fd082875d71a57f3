"""Request body serialization and cache-key fingerprints.

The fingerprint is the cache key under which a response is stored. It
must come out identical in every environment that reads the same cache
snapshot, which is why it hashes UTF-16 code units rather than Python code
points, and why the request body is serialized as compact JSON with
non-ASCII characters kept verbatim.

The hash is the classic DJB2-style multiplicative string hash. It is not
cryptographic: a few thousand distinct requests can be cached before a
collision becomes likely, and collisions are accepted rather than
detected.
"""

from __future__ import annotations

import json
import struct
from collections.abc import Mapping
from typing import Any, Optional

_SEED = 5381
_MASK = 0xFFFFFFFF


def serialize_request(query: Any, variables: Optional[Mapping[str, Any]] = None) -> str:
    """Serialize a query and its variables into the HTTP request body.

    ``variables`` is omitted from the body entirely when it is ``None``.
    Structured (non-string) queries are serialized as JSON as well, so they
    must have a stable key order for their fingerprint to be stable.

    Args:
        query: The query text, or a JSON-serializable structured query.
        variables: Optional query variables.

    Returns:
        Compact JSON text.
    """
    body: dict[str, Any] = {"query": query}
    if variables is not None:
        body["variables"] = variables
    return json.dumps(body, separators=(",", ":"), ensure_ascii=False)


def fingerprint(body: Optional[str]) -> str:
    """Return the 32-bit unsigned hash of *body* as a decimal string.

    Characters are consumed from the end of the string towards the start.
    An empty or ``None`` body fingerprints to ``""``.

    Example::

        >>> fingerprint('{"query":"{ bla }"}')
        '2421565178'
    """
    if not body:
        return ""
    encoded = body.encode("utf-16-le", "surrogatepass")
    units = struct.unpack(f"<{len(encoded) // 2}H", encoded)
    acc = _SEED
    for unit in reversed(units):
        acc = ((acc * 33) ^ unit) & _MASK
    return str(acc)
