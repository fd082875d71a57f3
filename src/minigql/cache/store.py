"""In-memory response cache keyed by request fingerprint.

Entries carry an absolute expiry instant. Expiry is lazy: a stale entry is
never returned by :meth:`CacheStore.lookup`, but it keeps its slot until it
is overwritten or the store is cleared. There is no background sweep.

A store can be exported to a snapshot and rebuilt from one, which lets
several clients share a warm cache or lets a cache travel between
processes as JSON.

See Also:
    :class:`~minigql.models.CacheEntry` -- the stored value type.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Iterable, Mapping
from typing import Any, Optional, Union

from minigql.models import MAX_CACHE_DURATION, CacheEntry

SnapshotItem = tuple[str, Union[CacheEntry, Mapping[str, Any]]]


class CacheStore:
    """Thread-safe mapping from fingerprint to :class:`~minigql.models.CacheEntry`.

    Args:
        default_duration: Seconds an entry stays fresh when :meth:`store`
            is not given an explicit duration.

    Example::

        store = CacheStore(default_duration=300)
        store.store("2421565178", {"data": {"bla": 1}})
        store.lookup("2421565178")  # {"data": {"bla": 1}}
    """

    def __init__(self, default_duration: float = MAX_CACHE_DURATION) -> None:
        self.default_duration = default_duration
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_snapshot(
        cls,
        snapshot: Iterable[SnapshotItem],
        default_duration: float = MAX_CACHE_DURATION,
    ) -> CacheStore:
        """Build a store pre-populated from a snapshot.

        Entries are taken as-is: expired entries are not filtered out here,
        they are simply never served by :meth:`lookup`.

        Args:
            snapshot: ``(fingerprint, entry)`` pairs where each entry is a
                :class:`~minigql.models.CacheEntry` or a mapping with
                ``payload`` and ``expires_at`` keys.
            default_duration: Default duration of the new store.

        Returns:
            A new :class:`CacheStore`.
        """
        store = cls(default_duration=default_duration)
        for key, entry in snapshot:
            if not isinstance(entry, CacheEntry):
                entry = CacheEntry.model_validate(entry)
            store._entries[str(key)] = entry
        return store

    def lookup(self, key: str, now: Optional[float] = None) -> Any:
        """Return the cached payload for *key*, or ``None`` on a miss.

        A miss is either an unknown key or an entry whose expiry instant is
        not after *now*. Stale entries are left in place.
        """
        if now is None:
            now = time.time()
        with self._lock:
            entry = self._entries.get(key)
        if entry is None or not entry.is_fresh(now):
            return None
        return entry.payload

    def store(
        self,
        key: str,
        payload: Any,
        duration: Optional[float] = None,
        now: Optional[float] = None,
    ) -> CacheEntry:
        """Insert or overwrite the entry for *key*.

        Args:
            key: Request fingerprint.
            payload: Decoded response body.
            duration: Seconds the entry stays fresh. Defaults to
                :attr:`default_duration`.
            now: Current instant. Defaults to :func:`time.time`.

        Returns:
            The stored :class:`~minigql.models.CacheEntry`.
        """
        if duration is None:
            duration = self.default_duration
        if now is None:
            now = time.time()
        entry = CacheEntry(payload=payload, expires_at=now + duration)
        with self._lock:
            self._entries[key] = entry
        return entry

    def clear(self) -> None:
        """Remove all entries."""
        with self._lock:
            self._entries.clear()

    def export_snapshot(self) -> list[tuple[str, CacheEntry]]:
        """Return every ``(fingerprint, entry)`` pair in insertion order.

        Expired entries are included.
        """
        with self._lock:
            return list(self._entries.items())

    def dump_snapshot(self) -> list[list[Any]]:
        """Return the snapshot as JSON-ready ``[fingerprint, {...}]`` pairs.

        The result can be passed through :func:`json.dumps`, shipped to
        another process, and fed back into :meth:`from_snapshot`.
        """
        return [
            [key, entry.model_dump(mode="json")]
            for key, entry in self.export_snapshot()
        ]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries
