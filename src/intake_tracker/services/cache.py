"""Cache abstractions for derived intake and template lists."""

import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from typing import Protocol
from uuid import UUID

_logger = logging.getLogger(__name__)


class Cache(Protocol):
    """Cache interface for simple key-value data."""

    def get(self, key: str) -> object | None:
        """Return a cached value if present and not expired."""

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store a cached value with a TTL in seconds."""

    def delete(self, key: str) -> None:
        """Remove a cached value, if present."""


@dataclass
class _CacheEntry:
    value: object
    expires_at: datetime


@dataclass
class InMemoryCache(Cache):
    """Process-local cache implementation."""

    _entries: dict[str, _CacheEntry]

    def __init__(self) -> None:
        self._entries = {}

    def get(self, key: str) -> object | None:
        """Return a cached value if it hasn't expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if datetime.now(tz=UTC) >= entry.expires_at:
            self._entries.pop(key, None)
            return None
        return entry.value

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store a cached value with a TTL, dropping entries that have expired."""
        now = datetime.now(tz=UTC)
        expired = [
            stale_key
            for stale_key, entry in self._entries.items()
            if now >= entry.expires_at
        ]
        for stale_key in expired:
            del self._entries[stale_key]
        expires_at = now + timedelta(seconds=ttl_seconds)
        self._entries[key] = _CacheEntry(value=value, expires_at=expires_at)

    def delete(self, key: str) -> None:
        """Drop a cached value."""
        self._entries.pop(key, None)


def intake_list_key(user_id: UUID, day: date | None) -> str:
    """Key for a user's intake list on a day, or for all days."""
    return f"intakes:{user_id}:{day.isoformat() if day else 'all'}"


def template_list_key(user_id: UUID) -> str:
    """Key for a user's template list."""
    return f"templates:{user_id}"


@dataclass
class SafeCache:
    """Wraps a cache so that failures are logged and never raised.

    Reads that fail behave like a miss; writes and evictions that fail are
    dropped.
    """

    cache: Cache

    def get(self, key: str) -> object | None:
        """Return a cached value, or None on miss or failure."""
        try:
            return self.cache.get(key)
        except Exception:
            _logger.exception("Failed to read cache key %s", key)
            return None

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store a value, ignoring failures."""
        try:
            self.cache.set(key, value, ttl_seconds)
        except Exception:
            _logger.exception("Failed to populate cache key %s", key)

    def evict(self, key: str) -> None:
        """Evict a key, ignoring failures."""
        try:
            self.cache.delete(key)
        except Exception:
            _logger.exception("Failed to evict cache key %s", key)
