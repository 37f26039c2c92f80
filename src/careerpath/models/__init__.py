"""Data model shared by every layer of the game engine."""

from .player import CareerStop, GamePlayer, RosterPlayer, SearchResult, StreakData, StopKind
from .upstream import (
    AthleteBio,
    AthleteDetail,
    CollegeRef,
    DepthChartAthlete,
    RosterEntry,
    TeamHistoryEntry,
    TeamRecord,
)

__all__ = [
    "AthleteBio",
    "AthleteDetail",
    "CareerStop",
    "CollegeRef",
    "DepthChartAthlete",
    "GamePlayer",
    "RosterEntry",
    "RosterPlayer",
    "SearchResult",
    "StopKind",
    "StreakData",
    "TeamHistoryEntry",
    "TeamRecord",
]
