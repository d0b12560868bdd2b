"""
Callback token cache for the atomizer.

Maps long external identifiers (issue ids, task ids, repository slugs) to
short tokens that fit in chat callback payloads. Each cache instance is
owned by the component that needs it; there is no process-wide instance.
"""

import hashlib
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass

from loguru import logger

TOKEN_LENGTH = 10


@dataclass
class CacheEntry:
    """Single cache entry with metadata."""

    token: str
    identifier: str
    created_at: float
    expires_at: float
    hits: int = 0


class CallbackTokenCache:
    """
    Bounded, expiring map from short tokens to long identifiers.

    Holds at most ``max_size`` entries and evicts the least recently used
    one beyond that. Entries expire ``ttl_seconds`` after they were last
    encoded.

    Usage:
        cache = CallbackTokenCache(max_size=1024, ttl_seconds=3600)
        token = cache.encode("linear-issue-0c1f6e2a-...")
        identifier = cache.resolve(token)
    """

    def __init__(
        self,
        max_size: int = 1024,
        ttl_seconds: float = 3600,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")

        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def __len__(self) -> int:
        return len(self._entries)

    @staticmethod
    def make_token(identifier: str) -> str:
        """Stable short token for an identifier."""
        return hashlib.sha1(identifier.encode()).hexdigest()[:TOKEN_LENGTH]

    def encode(self, identifier: str) -> str:
        """Store an identifier and return its token."""
        token = self.make_token(identifier)
        now = self._clock()

        existing = self._entries.get(token)
        if existing is not None and existing.identifier != identifier:
            logger.warning(f"Token collision on {token}, replacing previous identifier")

        self._entries[token] = CacheEntry(
            token=token,
            identifier=identifier,
            created_at=now,
            expires_at=now + self.ttl_seconds,
        )
        self._entries.move_to_end(token)

        while len(self._entries) > self.max_size:
            evicted, _ = self._entries.popitem(last=False)
            self._evictions += 1
            logger.debug(f"Evicted callback token {evicted}")

        return token

    def resolve(self, token: str) -> str | None:
        """Look up the identifier behind a token, or None if unknown or expired."""
        entry = self._entries.get(token)

        if entry is None:
            self._misses += 1
            return None

        if self._clock() >= entry.expires_at:
            del self._entries[token]
            self._misses += 1
            return None

        entry.hits += 1
        self._hits += 1
        self._entries.move_to_end(token)
        return entry.identifier

    def clear(self) -> None:
        """Clear entire cache."""
        self._entries.clear()

    def get_stats(self) -> dict:
        """Get cache statistics."""
        total = self._hits + self._misses
        return {
            "size": len(self._entries),
            "max_size": self.max_size,
            "hits": self._hits,
            "misses": self._misses,
            "evictions": self._evictions,
            "hit_rate": self._hits / total if total > 0 else 0,
        }
