"""Expiring cache shared by every remote-data consumer."""

from .ttl import CACHE_PREFIX, DEFAULT_TTL_MS, CacheEntry, TTLCache

__all__ = ["CACHE_PREFIX", "DEFAULT_TTL_MS", "CacheEntry", "TTLCache"]
