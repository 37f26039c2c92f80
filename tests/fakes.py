"""In-process stand-ins for the upstream data source and durable store."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from careerpath.errors import DataSourceError
from careerpath.models import (
    AthleteBio,
    AthleteDetail,
    CollegeRef,
    DepthChartAthlete,
    RosterEntry,
    SearchResult,
    TeamHistoryEntry,
    TeamRecord,
)


def athlete(athlete_id: str, name: Optional[str] = None) -> DepthChartAthlete:
    return DepthChartAthlete(id=athlete_id, full_name=name or f"Player {athlete_id}")


def detail(athlete_id: str, *, college: Optional[str] = "State", college_id: Optional[str] = "99") -> AthleteDetail:
    return AthleteDetail(
        id=athlete_id,
        full_name=f"Player {athlete_id}",
        position="QB",
        college=CollegeRef(id=college_id, name=college) if college else None,
    )


def bio(*entries: tuple) -> AthleteBio:
    """Build a bio from ``(team_id, name, seasons)`` tuples, newest first."""

    return AthleteBio(
        team_history=[
            TeamHistoryEntry(team_id=team_id, display_name=name, logo_url=f"logo-{name}", seasons=seasons)
            for team_id, name, seasons in entries
        ]
    )


class FakeDataSource:
    def __init__(
        self,
        *,
        teams: Iterable[TeamRecord] = (),
        depth_charts: Optional[Dict[str, Dict[str, List[DepthChartAthlete]]]] = None,
        rosters: Optional[Dict[str, List[RosterEntry]]] = None,
        details: Optional[Dict[str, AthleteDetail]] = None,
        bios: Optional[Dict[str, AthleteBio]] = None,
        search_results: Optional[Dict[str, List[SearchResult]]] = None,
        failing: Iterable[str] = (),
    ):
        self.teams = list(teams)
        self.depth_charts = depth_charts or {}
        self.rosters = rosters or {}
        self.details = details or {}
        self.bios = bios or {}
        self.search_results = search_results or {}
        self.failing = set(failing)
        self.calls: List[tuple] = []

    def _check(self, *call: str) -> None:
        self.calls.append(call)
        key = ":".join(call)
        if key in self.failing or call[0] in self.failing:
            raise DataSourceError(f"boom: {key}")

    async def list_teams(self) -> List[TeamRecord]:
        self._check("teams")
        return list(self.teams)

    async def get_roster(self, team_id: str) -> List[RosterEntry]:
        self._check("roster", team_id)
        return list(self.rosters.get(team_id, []))

    async def get_depth_chart(self, team_id: str):
        self._check("depth", team_id)
        return dict(self.depth_charts.get(team_id, {}))

    async def get_athlete_detail(self, athlete_id: str) -> AthleteDetail:
        self._check("detail", athlete_id)
        if athlete_id not in self.details:
            raise DataSourceError(f"unknown athlete {athlete_id}")
        return self.details[athlete_id]

    async def get_athlete_bio(self, athlete_id: str) -> AthleteBio:
        self._check("bio", athlete_id)
        return self.bios.get(athlete_id, AthleteBio())

    async def search(self, query: str, limit: int = 10) -> List[SearchResult]:
        self._check("search", query)
        return list(self.search_results.get(query, []))[:limit]


class BrokenStore:
    """Durable store whose every call fails."""

    def get(self, key: str):
        raise OSError("storage unavailable")

    def set(self, key: str, value: str) -> None:
        raise OSError("quota exceeded")

    def remove(self, key: str) -> None:
        raise OSError("storage unavailable")


class FakeClock:
    def __init__(self, start: int = 1_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, millis: int) -> None:
        self.now += millis
