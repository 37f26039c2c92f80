"""Canonical player models shared across ingestion, pool and game layers."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict


StopKind = Literal["college", "affiliation"]


class CareerStop(BaseModel):
    """One normalized entry of a player's chronological history."""

    kind: StopKind
    name: str
    logo_url: str = ""
    seasons: str = ""
    affiliation_id: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class GamePlayer(BaseModel):
    """Player whose career path is shown during a round."""

    id: str = Field(..., min_length=1)
    full_name: str
    headshot_url: str = ""
    position: str = ""
    career_path: List[CareerStop]

    model_config = ConfigDict(frozen=True)

    @property
    def affiliation_stops(self) -> List[CareerStop]:
        return [stop for stop in self.career_path if stop.kind == "affiliation"]


class RosterPlayer(BaseModel):
    """Lightweight pool candidate used only for sampling."""

    id: str = Field(..., min_length=1)
    full_name: str
    position: str = ""
    headshot_url: str = ""

    model_config = ConfigDict(frozen=True)


class SearchResult(BaseModel):
    id: str = Field(..., min_length=1)
    full_name: str
    position: str = ""
    team_name: str = ""
    headshot_url: str = ""

    model_config = ConfigDict(frozen=True)


class StreakData(BaseModel):
    """Consecutive-correct counters for one difficulty tier."""

    current: int = Field(default=0, ge=0)
    best: int = Field(default=0, ge=0)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _best_covers_current(self) -> "StreakData":
        if self.best < self.current:
            raise ValueError("best streak must be >= current streak")
        return self
