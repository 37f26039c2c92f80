"""Turn athlete detail + bio records into a chronological career path."""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import List, NamedTuple, Optional

from pydantic import ValidationError

from careerpath.cache import TTLCache
from careerpath.errors import NotPlayableError
from careerpath.ingest.espn import college_logo_url
from careerpath.ingest.source import PlayerDataSource
from careerpath.models import AthleteBio, AthleteDetail, CareerStop, GamePlayer, TeamHistoryEntry


logger = logging.getLogger(__name__)

PLAYER_TTL_MS = 24 * 60 * 60 * 1000

_SEASONS_RE = re.compile(r"(\d{4})(?:\s*[-–]\s*(\d{4}|present))?", re.IGNORECASE)


class SeasonSpan(NamedTuple):
    start: int
    end: int
    open_ended: bool = False


def parse_seasons(text: str) -> Optional[SeasonSpan]:
    """Parse ``"2019"``, ``"2019-2022"`` or ``"2021-Present"``; ``None`` if no year."""

    match = _SEASONS_RE.search(text or "")
    if not match:
        return None
    start = int(match.group(1))
    tail = match.group(2)
    if tail is None:
        return SeasonSpan(start, start)
    if tail.lower() == "present":
        return SeasonSpan(start, start, open_ended=True)
    end = int(tail)
    return SeasonSpan(min(start, end), max(start, end))


def format_seasons(span: Optional[SeasonSpan]) -> str:
    if span is None:
        return ""
    if span.open_ended:
        return f"{span.start}-Present"
    if span.start == span.end:
        return str(span.start)
    return f"{span.start}-{span.end}"


def merge_spans(first: Optional[SeasonSpan], second: Optional[SeasonSpan]) -> Optional[SeasonSpan]:
    if first is None:
        return second
    if second is None:
        return first
    return SeasonSpan(
        min(first.start, second.start),
        max(first.end, second.end),
        first.open_ended or second.open_ended,
    )


@dataclass
class _Stint:
    key: str
    team_id: Optional[str]
    name: str
    logo_url: str
    span: Optional[SeasonSpan]

    def to_stop(self) -> CareerStop:
        return CareerStop(
            kind="affiliation",
            name=self.name,
            logo_url=self.logo_url,
            seasons=format_seasons(self.span),
            affiliation_id=self.team_id,
        )


def _stint_key(entry: TeamHistoryEntry) -> str:
    return entry.team_id or entry.display_name.strip().lower()


def merge_team_history(history_newest_first: List[TeamHistoryEntry]) -> List[CareerStop]:
    """Reverse the bio history and collapse consecutive stints with one team.

    The merged stop spans every merged season and carries the display name and
    logo of the most recent stint, so a franchise that rebranded mid-tenure
    shows up once under its latest identity.
    """

    stints: List[_Stint] = []
    for entry in reversed(history_newest_first):
        key = _stint_key(entry)
        span = parse_seasons(entry.seasons)
        if stints and stints[-1].key == key:
            current = stints[-1]
            current.span = merge_spans(current.span, span)
            current.name = entry.display_name or current.name
            current.logo_url = entry.logo_url or current.logo_url
            continue
        stints.append(
            _Stint(
                key=key,
                team_id=entry.team_id,
                name=entry.display_name,
                logo_url=entry.logo_url,
                span=span,
            )
        )
    return [stint.to_stop() for stint in stints]


def build_career_path(detail: AthleteDetail, bio: AthleteBio) -> List[CareerStop]:
    path: List[CareerStop] = []
    if detail.college is not None:
        path.append(
            CareerStop(
                kind="college",
                name=detail.college.name,
                logo_url=college_logo_url(detail.college.id),
                seasons="",
            )
        )
    path.extend(merge_team_history(bio.team_history))
    return path


def assemble_game_player(detail: AthleteDetail, bio: AthleteBio) -> GamePlayer:
    """Build a playable GamePlayer or raise ``NotPlayableError``."""

    path = build_career_path(detail, bio)
    if not any(stop.kind == "affiliation" for stop in path):
        raise NotPlayableError(detail.id)
    return GamePlayer(
        id=detail.id,
        full_name=detail.full_name,
        headshot_url=detail.headshot_url,
        position=detail.position,
        career_path=path,
    )


class CareerPathBuilder:
    def __init__(self, source: PlayerDataSource, cache: TTLCache, *, ttl_ms: int = PLAYER_TTL_MS):
        self.source = source
        self.cache = cache
        self.ttl_ms = ttl_ms

    @staticmethod
    def cache_key(player_id: str) -> str:
        return f"player-{player_id}"

    async def build_game_player(self, player_id: str) -> GamePlayer:
        key = self.cache_key(player_id)
        cached = self.cache.get(key)
        if cached is not None:
            try:
                return GamePlayer.model_validate(cached)
            except ValidationError:
                logger.warning("Discarding malformed cached player %s", player_id)
                self.cache.invalidate(key)

        detail, bio = await asyncio.gather(
            self.source.get_athlete_detail(player_id),
            self.source.get_athlete_bio(player_id),
        )
        try:
            player = assemble_game_player(detail, bio)
        except NotPlayableError:
            logger.info("Athlete %s has no NFL team history; not playable", player_id)
            raise

        self.cache.set(key, player.model_dump(mode="json"), self.ttl_ms)
        return player
