"""Per-difficulty consecutive-correct counters."""

from __future__ import annotations

import json
import logging
from typing import Dict

from pydantic import ValidationError

from careerpath.persistence import DurableStore, SafeStore
from careerpath.models import StreakData


logger = logging.getLogger(__name__)

STREAK_KEY_PREFIX = "nfl-game-streak-"


class StreakTracker:
    def __init__(self, store: DurableStore, *, key_prefix: str = STREAK_KEY_PREFIX):
        self._store = store if isinstance(store, SafeStore) else SafeStore(store)
        self.key_prefix = key_prefix
        self._streaks: Dict[str, StreakData] = {}

    def _key(self, tier: str) -> str:
        return f"{self.key_prefix}{tier}"

    def _load(self, tier: str) -> StreakData:
        raw = self._store.get(self._key(tier))
        if not raw:
            return StreakData()
        try:
            payload = json.loads(raw)
            current = max(0, int(payload.get("current", 0)))
            best = max(current, int(payload.get("best", 0)))
            return StreakData(current=current, best=best)
        except (ValueError, TypeError, AttributeError, ValidationError):
            logger.warning("Ignoring corrupt streak record for %s", tier)
            return StreakData()

    def _save(self, tier: str, data: StreakData) -> None:
        self._streaks[tier] = data
        self._store.set(self._key(tier), data.model_dump_json())

    def get(self, tier: str) -> StreakData:
        if tier not in self._streaks:
            self._streaks[tier] = self._load(tier)
        return self._streaks[tier]

    def record_correct(self, tier: str) -> StreakData:
        prev = self.get(tier)
        current = prev.current + 1
        data = StreakData(current=current, best=max(prev.best, current))
        self._save(tier, data)
        return data

    def record_incorrect(self, tier: str) -> StreakData:
        prev = self.get(tier)
        data = StreakData(current=0, best=prev.best)
        self._save(tier, data)
        return data
