"""
Cache Layer
===========

Key/value storage with an explicit time-to-live, used to avoid repeating
remote lookups. An absent or expired key is a miss and is reported with the
``MISS`` sentinel, so that ``None`` can be stored as a real value (the
fetcher uses it to remember failed requests).

Two backends are provided:
- InMemoryCache: a process-local dictionary
- SQLAlchemyCache: rows in the ``cache_entries`` table, values stored as JSON

Keys are built with ``make_cache_key``, which hashes the lookup target and
prefixes it with a namespace so arbitrary URLs never break key storage and
never collide with other users of the same store.
"""

import hashlib
import json
import logging
import time
from typing import Any, Callable, Dict, Tuple

from models import CacheEntry

logger = logging.getLogger(__name__)


class _Miss:
    """Marker returned by CacheStore.get when nothing usable is stored."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISS"


MISS = _Miss()


def make_cache_key(target: str, prefix: str = "gvsfp") -> str:
    """
    Build a deterministic cache key for a lookup target.

    Args:
        target (str): The value identifying the lookup, usually a URL
        prefix (str): Namespace tag prepended to the hash

    Returns:
        str: ``prefix`` followed by the SHA-1 hex digest of ``target``
    """
    return prefix + hashlib.sha1(target.encode("utf-8")).hexdigest()


class CacheStore:
    """
    Interface for TTL cache backends.

    Implementations must treat expired entries exactly like absent ones and
    must be able to store ``None``.
    """

    def get(self, key: str) -> Any:
        """Return the stored value, or ``MISS`` if absent or expired."""
        raise NotImplementedError("Subclasses must implement get")

    def set(self, key: str, value: Any, ttl: int) -> None:
        """Store ``value`` under ``key`` for ``ttl`` seconds."""
        raise NotImplementedError("Subclasses must implement set")

    def delete(self, key: str) -> None:
        raise NotImplementedError("Subclasses must implement delete")


class InMemoryCache(CacheStore):
    """Dictionary-backed cache. Suitable for a single process and for tests."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._entries: Dict[str, Tuple[Any, float]] = {}

    def get(self, key: str) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            return MISS

        value, expires_at = entry
        if expires_at <= self._clock():
            del self._entries[key]
            return MISS

        return value

    def set(self, key: str, value: Any, ttl: int) -> None:
        self._entries[key] = (value, self._clock() + ttl)

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def __len__(self) -> int:
        return len(self._entries)


class SQLAlchemyCache(CacheStore):
    """
    Cache backed by the ``cache_entries`` table.

    Values must be JSON serializable. Each operation opens and closes its own
    session from ``session_factory``, so the cache can be shared across
    requests.

    Args:
        session_factory: Callable returning a new SQLAlchemy Session
        clock: Callable returning the current unix time
    """

    def __init__(self, session_factory: Callable, clock: Callable[[], float] = time.time):
        self._session_factory = session_factory
        self._clock = clock

    def get(self, key: str) -> Any:
        db = self._session_factory()
        try:
            entry = db.get(CacheEntry, key)
            if entry is None:
                return MISS

            if entry.expires_at <= self._clock():
                db.delete(entry)
                db.commit()
                return MISS

            try:
                return json.loads(entry.value) if entry.value is not None else None
            except ValueError:
                logger.warning(f"Discarding undecodable cache entry {key}")
                return MISS
        finally:
            db.close()

    def set(self, key: str, value: Any, ttl: int) -> None:
        db = self._session_factory()
        try:
            db.merge(CacheEntry(
                key=key,
                value=json.dumps(value),
                expires_at=self._clock() + ttl,
                created_at=self._clock(),
            ))
            db.commit()
        finally:
            db.close()

    def delete(self, key: str) -> None:
        db = self._session_factory()
        try:
            db.query(CacheEntry).filter(CacheEntry.key == key).delete()
            db.commit()
        finally:
            db.close()
