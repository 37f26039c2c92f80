"""Two-tier TTL cache: in-process dict in front of a durable key/value store."""

from __future__ import annotations

import copy
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from careerpath.persistence import DurableStore, MemoryStore, SafeStore


logger = logging.getLogger(__name__)

CACHE_PREFIX = "nfl-game-"
DEFAULT_TTL_MS = 12 * 60 * 60 * 1000


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class CacheEntry:
    data: Any
    expires_at: int

    def is_valid(self, now: int) -> bool:
        return self.expires_at > now

    def to_json(self) -> str:
        return json.dumps({"data": self.data, "expiresAt": self.expires_at})

    @classmethod
    def from_json(cls, raw: str) -> "CacheEntry":
        payload = json.loads(raw)
        return cls(data=payload["data"], expires_at=int(payload["expiresAt"]))


class TTLCache:
    """Key/value cache with per-entry expiry.

    Values must be JSON-compatible (dicts, lists, strings, numbers). The cache
    keeps its own copy of every value and hands out copies on ``get`` so callers
    never alias a stored entry. One instance is created per process and shared
    by every remote-data consumer.
    """

    def __init__(
        self,
        store: DurableStore | None = None,
        *,
        prefix: str = CACHE_PREFIX,
        default_ttl_ms: int = DEFAULT_TTL_MS,
        clock: Callable[[], int] | None = None,
    ):
        inner = store if store is not None else MemoryStore()
        self._durable = inner if isinstance(inner, SafeStore) else SafeStore(inner)
        self._memory: Dict[str, CacheEntry] = {}
        self.prefix = prefix
        self.default_ttl_ms = default_ttl_ms
        self._clock = clock or _now_ms

    def _full_key(self, key: str) -> str:
        return self.prefix + key

    def get(self, key: str) -> Optional[Any]:
        full_key = self._full_key(key)
        now = self._clock()

        entry = self._memory.get(full_key)
        if entry is not None:
            if entry.is_valid(now):
                return copy.deepcopy(entry.data)
            del self._memory[full_key]

        raw = self._durable.get(full_key)
        if raw is None:
            return None
        try:
            durable_entry = CacheEntry.from_json(raw)
        except (ValueError, KeyError, TypeError):
            logger.warning("Dropping corrupt cache entry %s", full_key)
            self._durable.remove(full_key)
            return None

        if not durable_entry.is_valid(now):
            logger.debug("Cache entry %s expired", full_key)
            self._durable.remove(full_key)
            return None

        self._memory[full_key] = durable_entry
        return copy.deepcopy(durable_entry.data)

    def set(self, key: str, value: Any, ttl_ms: int | None = None) -> None:
        full_key = self._full_key(key)
        ttl = self.default_ttl_ms if ttl_ms is None else ttl_ms
        entry = CacheEntry(data=copy.deepcopy(value), expires_at=self._clock() + ttl)
        self._memory[full_key] = entry
        try:
            encoded = entry.to_json()
        except (TypeError, ValueError) as exc:
            logger.warning("Cache value for %s is not serializable; memory tier only: %s", full_key, exc)
            return
        self._durable.set(full_key, encoded)

    def invalidate(self, key: str) -> None:
        full_key = self._full_key(key)
        self._memory.pop(full_key, None)
        self._durable.remove(full_key)
