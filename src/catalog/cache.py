"""Process-wide TTL cache for facet lookups."""

import time
from collections import OrderedDict
from typing import Any, Callable, Hashable, Optional


class TTLCache:
    """Simple TTL cache with max size limit.

    Entries expire after `ttl` seconds; there is no push invalidation.
    Setting `enabled=False` turns every lookup into a miss (development mode).
    """

    def __init__(
        self,
        maxsize: int = 128,
        ttl: int = 3600,
        enabled: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize cache.

        Args:
            maxsize: Maximum number of items to cache
            ttl: Time-to-live in seconds
            enabled: When False, nothing is stored or served
            clock: Time source, injectable for tests
        """
        self.maxsize = maxsize
        self.ttl = ttl
        self.enabled = enabled
        self._clock = clock
        self._cache: "OrderedDict[Hashable, tuple[float, Any]]" = OrderedDict()

    def get(self, key: Hashable) -> Optional[Any]:
        """Get item from cache if not expired."""
        if not self.enabled or key not in self._cache:
            return None

        timestamp, value = self._cache[key]
        if self._clock() - timestamp > self.ttl:
            del self._cache[key]
            return None

        # Move to end (most recently used)
        self._cache.move_to_end(key)
        return value

    def set(self, key: Hashable, value: Any) -> None:
        """Set item in cache."""
        if not self.enabled:
            return

        # Remove oldest items if at capacity
        while len(self._cache) >= self.maxsize:
            self._cache.popitem(last=False)

        self._cache[key] = (self._clock(), value)

    def get_or_set(self, key: Hashable, factory: Callable[[], Any]) -> Any:
        """Return the cached value, computing and storing it on a miss."""
        value = self.get(key)
        if value is not None:
            return value
        value = factory()
        self.set(key, value)
        return value

    def clear(self) -> None:
        """Clear all cached items."""
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)

    def stats(self) -> dict:
        """Get statistics about cache usage."""
        return {
            "size": len(self._cache),
            "maxsize": self.maxsize,
            "ttl": self.ttl,
            "enabled": self.enabled,
        }
