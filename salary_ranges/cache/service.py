import json
import logging
import time
from enum import Enum
from typing import Any, Callable, Optional

from .lookup import LookupMapCache
from .ttl import MISSING, CacheEntry, TTLCache

logger = logging.getLogger(__name__)


class CachePrefix(str, Enum):
    """Key namespaces, one per cache concern."""

    TABLE = "table:"
    BENCH_VALUE = "bench_val:"
    INTERNAL = "internal:"
    ALIAS = "alias:"
    EXEC_MAP = "execmap:"
    INDEX = "index:"


class CacheService:
    """The caches shared by every engine component.

    Construct once per process and pass it to the components that need it.
    """

    def __init__(self, ttl_seconds: float = 600, clock: Callable[[], float] = time.time):
        self.ttl_seconds = ttl_seconds
        self.store = TTLCache(default_ttl=ttl_seconds, clock=clock)
        self.lookup = LookupMapCache(ttl=ttl_seconds, clock=clock)

    @staticmethod
    def key(prefix: CachePrefix, *parts: Any) -> str:
        # JSON-encoded parts cannot collide the way plain concatenation can
        return prefix.value + json.dumps([str(p) for p in parts], ensure_ascii=False)

    def get(self, prefix: CachePrefix, *parts: Any, default: Any = MISSING) -> Any:
        return self.store.get(self.key(prefix, *parts), default)

    def entry(self, prefix: CachePrefix, *parts: Any) -> Optional[CacheEntry]:
        return self.store.entry(self.key(prefix, *parts))

    def put(self, prefix: CachePrefix, parts: tuple, value: Any, ttl_seconds: Optional[float] = None) -> None:
        self.store.put(self.key(prefix, *parts), value, ttl_seconds)

    def clear_all(self) -> int:
        """Remove every key under every known prefix and force a lookup-map refresh."""
        removed = sum(self.store.remove_prefix(prefix.value) for prefix in CachePrefix)
        self.lookup.reset()
        logger.info("Cleared %d cache entries", removed)
        return removed
