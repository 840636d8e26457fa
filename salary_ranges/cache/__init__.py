from .lookup import LookupMapCache
from .service import CachePrefix, CacheService
from .ttl import MISSING, CacheEntry, TTLCache

__all__ = ["CacheEntry", "CachePrefix", "CacheService", "LookupMapCache", "MISSING", "TTLCache"]
