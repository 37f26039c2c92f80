"""Single-player session wiring pool, rounds, guesses and streaks together."""

from __future__ import annotations

import json
import logging
import random
from typing import Callable, List, Optional

from careerpath.cache import TTLCache
from careerpath.config import DEFAULT_DIFFICULTY, get_rules, is_known_tier
from careerpath.config_loader import GameSettings
from careerpath.errors import PoolLoadError
from careerpath.game.state import GameState, GameStateMachine
from careerpath.game.streak import StreakTracker
from careerpath.ingest import CareerPathBuilder, PlayerDataSource
from careerpath.models import GamePlayer, RosterPlayer, StreakData
from careerpath.persistence import DurableStore, SafeStore
from careerpath.pool import PoolBuilder, RoundSampler
from careerpath.search import AutocompletePipeline


logger = logging.getLogger(__name__)

DIFFICULTY_KEY = "nfl-game-difficulty"


class GameSession:
    def __init__(
        self,
        source: PlayerDataSource,
        store: DurableStore,
        *,
        settings: GameSettings | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], int] | None = None,
    ):
        settings = settings or GameSettings()
        self.settings = settings
        self.store = store if isinstance(store, SafeStore) else SafeStore(store)
        self.cache = TTLCache(self.store, default_ttl_ms=settings.cache_ttl_ms, clock=clock)
        self.career_builder = CareerPathBuilder(source, self.cache)
        self.pool_builder = PoolBuilder(source, self.cache, ttl_ms=settings.cache_ttl_ms, rng=rng)
        self.sampler = RoundSampler(max_attempts=settings.round_attempts, rng=rng)
        self.machine = GameStateMachine(self.career_builder)
        self.streaks = StreakTracker(self.store)
        self.autocomplete = AutocompletePipeline(source.search, debounce_seconds=settings.debounce_seconds)
        self.difficulty = self._load_difficulty()
        self.pool: List[RosterPlayer] = []
        self.pool_error: Optional[str] = None

    def _load_difficulty(self) -> str:
        raw = self.store.get(DIFFICULTY_KEY)
        if raw:
            try:
                value = json.loads(raw)
            except ValueError:
                value = None
            if isinstance(value, str) and is_known_tier(value):
                return get_rules(value).tier
            logger.warning("Ignoring stored difficulty %r", raw)
        return DEFAULT_DIFFICULTY

    @property
    def state(self) -> GameState:
        return self.machine.state

    @property
    def streak(self) -> StreakData:
        return self.streaks.get(self.difficulty)

    async def set_difficulty(self, tier: str, *, force: bool = False) -> List[RosterPlayer]:
        rules = get_rules(tier)
        self.difficulty = rules.tier
        self.store.set(DIFFICULTY_KEY, json.dumps(rules.tier))
        self.sampler.reset()
        self.pool = []
        return await self.load_pool(force=force)

    async def load_pool(self, *, force: bool = False) -> List[RosterPlayer]:
        tier = self.difficulty
        if force:
            self.pool_builder.invalidate(tier)
        self.pool_error = None
        try:
            pool = await self.pool_builder.load_player_pool(tier)
        except PoolLoadError as exc:
            if tier == self.difficulty:
                self.pool_error = str(exc)
                self.pool = []
            raise
        if tier != self.difficulty:
            logger.debug("Discarding %s pool; difficulty changed to %s", tier, self.difficulty)
            return self.pool
        self.pool = pool
        return pool

    async def next_round(self) -> Optional[GamePlayer]:
        """Start a new round; raises ``RoundStartError`` when nobody is playable.

        An empty pool is rebuilt from the source first.
        """

        self.autocomplete.clear()
        if not self.pool:
            try:
                await self.load_pool(force=True)
            except PoolLoadError as exc:
                logger.warning("Pool reload before round failed: %s", exc)
        return await self.sampler.start_next_round(self.pool, self.machine)

    def guess(self, player_id: str) -> bool:
        is_correct = self.machine.submit_guess(player_id)
        if is_correct:
            self.streaks.record_correct(self.difficulty)
        else:
            self.streaks.record_incorrect(self.difficulty)
        self.autocomplete.clear()
        return is_correct

    def skip(self) -> None:
        self.machine.skip_player()
        self.streaks.record_incorrect(self.difficulty)
        self.autocomplete.clear()

    def close(self) -> None:
        self.autocomplete.close()
