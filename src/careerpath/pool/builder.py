"""Assemble the difficulty-scoped candidate pool."""

from __future__ import annotations

import asyncio
import logging
import random
import re
from typing import List, Sequence

from pydantic import TypeAdapter, ValidationError

from careerpath.cache import DEFAULT_TTL_MS, TTLCache
from careerpath.config import DifficultyRules, get_rules
from careerpath.errors import DataSourceError, PoolLoadError
from careerpath.ingest.source import DepthChart, PlayerDataSource
from careerpath.models import RosterEntry, RosterPlayer, TeamRecord


logger = logging.getLogger(__name__)

_POOL_ADAPTER = TypeAdapter(List[RosterPlayer])
_TRAILING_DIGITS = re.compile(r"\d+$")


def slot_position(slot_key: str) -> str:
    """``"wr2"`` -> ``"WR"``."""

    return _TRAILING_DIGITS.sub("", slot_key.strip()).upper()


def extract_starters(depth_chart: DepthChart, slot_keys: Sequence[str]) -> List[RosterPlayer]:
    """Take the first-listed athlete of every configured slot, once per athlete."""

    seen: set[str] = set()
    starters: List[RosterPlayer] = []
    for slot_key in slot_keys:
        athletes = depth_chart.get(slot_key.lower()) or []
        if not athletes:
            continue
        starter = athletes[0]
        if starter.id in seen:
            continue
        seen.add(starter.id)
        starters.append(
            RosterPlayer(
                id=starter.id,
                full_name=starter.full_name,
                position=slot_position(slot_key),
                headshot_url=starter.headshot_url,
            )
        )
    return starters


def experienced_players(roster: Sequence[RosterEntry], min_years: int) -> List[RosterPlayer]:
    return [
        RosterPlayer(
            id=entry.id,
            full_name=entry.full_name,
            position=entry.position,
            headshot_url=entry.headshot_url,
        )
        for entry in roster
        if entry.experience_years >= min_years
    ]


class PoolBuilder:
    def __init__(
        self,
        source: PlayerDataSource,
        cache: TTLCache,
        *,
        ttl_ms: int = DEFAULT_TTL_MS,
        rng: random.Random | None = None,
    ):
        self.source = source
        self.cache = cache
        self.ttl_ms = ttl_ms
        self._rng = rng or random.Random()

    @staticmethod
    def cache_key(tier: str) -> str:
        return f"player-pool-{tier}"

    def invalidate(self, tier: str) -> None:
        self.cache.invalidate(self.cache_key(get_rules(tier).tier))

    async def load_player_pool(self, tier: str) -> List[RosterPlayer]:
        rules = get_rules(tier)
        key = self.cache_key(rules.tier)
        cached = self.cache.get(key)
        if cached is not None:
            try:
                return _POOL_ADAPTER.validate_python(cached)
            except ValidationError:
                logger.warning("Discarding malformed cached pool for %s", rules.tier)
                self.cache.invalidate(key)

        try:
            teams = await self.source.list_teams()
        except DataSourceError as exc:
            raise PoolLoadError(f"Failed to load teams: {exc}") from exc

        if rules.uses_depth_chart:
            pool = await self._from_depth_charts(teams, rules)
        else:
            pool = await self._from_rosters(teams, rules)

        logger.info("Built %s pool with %d players from %d teams", rules.tier, len(pool), len(teams))
        if pool:
            self.cache.set(key, _POOL_ADAPTER.dump_python(pool, mode="json"), self.ttl_ms)
        return pool

    async def _safe_depth_chart(self, team: TeamRecord) -> DepthChart:
        try:
            return await self.source.get_depth_chart(team.id)
        except DataSourceError as exc:
            logger.warning("Depth chart for team %s unavailable: %s", team.id, exc)
            return {}

    async def _safe_roster(self, team: TeamRecord) -> List[RosterEntry]:
        try:
            return await self.source.get_roster(team.id)
        except DataSourceError as exc:
            logger.warning("Roster for team %s unavailable: %s", team.id, exc)
            return []

    async def _from_depth_charts(self, teams: Sequence[TeamRecord], rules: DifficultyRules) -> List[RosterPlayer]:
        charts = await asyncio.gather(*(self._safe_depth_chart(team) for team in teams))
        pool: List[RosterPlayer] = []
        for chart in charts:
            pool.extend(extract_starters(chart, rules.slot_keys))
        return pool

    async def _from_rosters(self, teams: Sequence[TeamRecord], rules: DifficultyRules) -> List[RosterPlayer]:
        count = min(rules.roster_team_count, len(teams))
        selected = self._rng.sample(list(teams), count)
        rosters = await asyncio.gather(*(self._safe_roster(team) for team in selected))
        pool: List[RosterPlayer] = []
        for roster in rosters:
            pool.extend(experienced_players(roster, rules.min_experience_years))
        return pool
