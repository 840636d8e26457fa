import logging
import time
from typing import Any, Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LookupMapCache(Generic[T]):
    """Long-lived in-process holder for the family lookup map.

    Keeps the live object (no serialization round trip) and a last-refresh
    timestamp; the value is rebuilt lazily once it is older than ``ttl``.
    """

    def __init__(self, ttl: float = 600, clock: Callable[[], float] = time.time):
        self.ttl = ttl
        self._clock = clock
        self._value: Optional[T] = None
        self._refreshed_at: Optional[float] = None
        self.refreshes = 0

    def is_stale(self) -> bool:
        if self._refreshed_at is None:
            return True
        return self._clock() - self._refreshed_at >= self.ttl

    def get(self, loader: Callable[[], T]) -> T:
        if self.is_stale():
            self._value = loader()
            self._refreshed_at = self._clock()
            self.refreshes += 1
            logger.debug("Lookup map refreshed (refresh #%d)", self.refreshes)
        return self._value

    def reset(self) -> None:
        """Force a refresh on the next access."""
        self._refreshed_at = None
