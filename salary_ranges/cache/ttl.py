# salary_ranges/cache/ttl.py
"""Process-wide key/value store with per-entry expiry.

Values are stored JSON-serialized, so a cached value can never be mutated in
place by a reader; every update is a full replacement.
"""

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import numpy as np

logger = logging.getLogger(__name__)

MISSING = object()


def _json_default(obj: Any) -> Any:
    if isinstance(obj, np.generic):
        return obj.item()
    if isinstance(obj, (set, tuple)):
        return list(obj)
    if hasattr(obj, "isoformat"):
        return obj.isoformat()
    return str(obj)


@dataclass
class CacheEntry:
    """A single cache entry holding a serialized payload."""

    key: str
    payload: str
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class TTLCache:
    """Time-to-live cache. ``get`` reports a miss with the ``default`` sentinel."""

    def __init__(self, default_ttl: float = 600, clock: Callable[[], float] = time.time):
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self.hits = 0
        self.misses = 0

    def get(self, key: str, default: Any = MISSING) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            self.misses += 1
            return default
        if entry.is_expired(self._clock()):
            del self._entries[key]
            self.misses += 1
            return default
        try:
            value = json.loads(entry.payload)
        except (TypeError, ValueError) as e:
            logger.warning("Dropping undecodable cache entry '%s': %s", key, e)
            del self._entries[key]
            self.misses += 1
            return default
        self.hits += 1
        return value

    def entry(self, key: str) -> Optional[CacheEntry]:
        """Live entry for ``key`` without decoding it; None when absent or expired."""
        entry = self._entries.get(key)
        if entry is not None and entry.is_expired(self._clock()):
            del self._entries[key]
            return None
        return entry

    def put(self, key: str, value: Any, ttl_seconds: Optional[float] = None) -> None:
        ttl = self.default_ttl if ttl_seconds is None else ttl_seconds
        payload = json.dumps(value, default=_json_default)
        self._entries[key] = CacheEntry(key, payload, self._clock() + ttl)

    def remove(self, key: str) -> None:
        self._entries.pop(key, None)

    def remove_prefix(self, prefix: str) -> int:
        doomed = [k for k in self._entries if k.startswith(prefix)]
        for key in doomed:
            del self._entries[key]
        return len(doomed)

    def keys(self) -> List[str]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
