"""Normalized shapes of the upstream (ESPN) records consumed by the engine."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class TeamRecord(BaseModel):
    id: str = Field(..., min_length=1)
    display_name: str = ""
    abbreviation: str = ""
    logo_url: str = ""

    model_config = ConfigDict(frozen=True)


class RosterEntry(BaseModel):
    id: str = Field(..., min_length=1)
    full_name: str
    position: str = ""
    headshot_url: str = ""
    experience_years: int = Field(default=0, ge=0)

    model_config = ConfigDict(frozen=True)


class DepthChartAthlete(BaseModel):
    id: str = Field(..., min_length=1)
    full_name: str
    headshot_url: str = ""

    model_config = ConfigDict(frozen=True)


class CollegeRef(BaseModel):
    id: Optional[str] = None
    name: str

    model_config = ConfigDict(frozen=True)


class AthleteDetail(BaseModel):
    id: str = Field(..., min_length=1)
    full_name: str
    headshot_url: str = ""
    position: str = ""
    college: Optional[CollegeRef] = None

    model_config = ConfigDict(frozen=True)


class TeamHistoryEntry(BaseModel):
    """A single stint as reported by the athlete bio (newest-first upstream)."""

    team_id: Optional[str] = None
    display_name: str = ""
    logo_url: str = ""
    seasons: str = ""

    model_config = ConfigDict(frozen=True)


class AthleteBio(BaseModel):
    team_history: List[TeamHistoryEntry] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)
