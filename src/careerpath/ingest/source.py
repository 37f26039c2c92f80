"""Contract of the upstream player data provider."""

from __future__ import annotations

from typing import Dict, List, Protocol

from careerpath.models import (
    AthleteBio,
    AthleteDetail,
    DepthChartAthlete,
    RosterEntry,
    SearchResult,
    TeamRecord,
)


# Slot key (lower-case, e.g. "qb", "wr2") -> athletes in depth order.
DepthChart = Dict[str, List[DepthChartAthlete]]


class PlayerDataSource(Protocol):
    """Every call may raise ``DataSourceError`` once its retries are spent."""

    async def list_teams(self) -> List[TeamRecord]:
        ...

    async def get_roster(self, team_id: str) -> List[RosterEntry]:
        ...

    async def get_depth_chart(self, team_id: str) -> DepthChart:
        ...

    async def get_athlete_detail(self, athlete_id: str) -> AthleteDetail:
        ...

    async def get_athlete_bio(self, athlete_id: str) -> AthleteBio:
        ...

    async def search(self, query: str, limit: int = 10) -> List[SearchResult]:
        ...
