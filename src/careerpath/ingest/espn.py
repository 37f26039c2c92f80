"""ESPN public API adapter: fetch with retry, then normalize raw payloads."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Mapping, Optional

import httpx

from careerpath.errors import DataSourceError
from careerpath.ingest.source import DepthChart
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


logger = logging.getLogger(__name__)

SITE_BASE = "https://site.api.espn.com/apis"
WEB_BASE = "https://site.web.api.espn.com/apis"
HEADSHOT_URL = "https://a.espncdn.com/i/headshots/nfl/players/full/{athlete_id}.png"
COLLEGE_LOGO_URL = "https://a.espncdn.com/i/teamlogos/ncaa/500/{college_id}.png"

MIN_QUERY_LENGTH = 2
DEFAULT_SEARCH_LIMIT = 10

Sleep = Callable[[float], Awaitable[Any]]


def headshot_url(athlete_id: str) -> str:
    return HEADSHOT_URL.format(athlete_id=athlete_id)


def college_logo_url(college_id: Optional[str]) -> str:
    return COLLEGE_LOGO_URL.format(college_id=college_id) if college_id else ""


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _athlete_id(raw: Mapping[str, Any]) -> str:
    return _text(raw.get("id"))


def _athlete_name(raw: Mapping[str, Any]) -> str:
    return _text(raw.get("displayName")) or _text(raw.get("fullName")) or "Unknown"


def _headshot(raw: Mapping[str, Any], athlete_id: str) -> str:
    headshot = raw.get("headshot")
    if isinstance(headshot, Mapping) and headshot.get("href"):
        return _text(headshot["href"])
    return headshot_url(athlete_id)


def _position_abbreviation(raw: Mapping[str, Any]) -> str:
    position = raw.get("position")
    if isinstance(position, Mapping):
        return _text(position.get("abbreviation"))
    return ""


def normalize_team(raw: Mapping[str, Any]) -> Optional[TeamRecord]:
    team_id = _text(raw.get("id"))
    if not team_id:
        return None
    logos = raw.get("logos") or []
    logo = _text(logos[0].get("href")) if logos and isinstance(logos[0], Mapping) else ""
    return TeamRecord(
        id=team_id,
        display_name=_text(raw.get("displayName")) or _text(raw.get("name")),
        abbreviation=_text(raw.get("abbreviation")),
        logo_url=logo,
    )


def normalize_teams(payload: Mapping[str, Any]) -> List[TeamRecord]:
    try:
        entries = payload["sports"][0]["leagues"][0]["teams"]
    except (KeyError, IndexError, TypeError):
        logger.warning("Team list payload has unexpected shape")
        return []
    teams: List[TeamRecord] = []
    for entry in entries:
        raw = entry.get("team", entry) if isinstance(entry, Mapping) else None
        if not isinstance(raw, Mapping):
            continue
        team = normalize_team(raw)
        if team is not None:
            teams.append(team)
    return teams


def normalize_roster_entry(raw: Mapping[str, Any]) -> Optional[RosterEntry]:
    athlete_id = _athlete_id(raw)
    if not athlete_id:
        return None
    experience = raw.get("experience")
    years = 0
    if isinstance(experience, Mapping):
        try:
            years = max(0, int(experience.get("years") or 0))
        except (TypeError, ValueError):
            years = 0
    return RosterEntry(
        id=athlete_id,
        full_name=_athlete_name(raw),
        position=_position_abbreviation(raw),
        headshot_url=_headshot(raw, athlete_id),
        experience_years=years,
    )


def normalize_roster(payload: Mapping[str, Any]) -> List[RosterEntry]:
    # Roster arrives in sections (offense, defense, special teams).
    sections = payload.get("athletes") or []
    entries: List[RosterEntry] = []
    for section in sections:
        if not isinstance(section, Mapping):
            continue
        items: Iterable[Any] = section.get("items") or []
        for item in items:
            if not isinstance(item, Mapping):
                continue
            entry = normalize_roster_entry(item)
            if entry is not None:
                entries.append(entry)
    return entries


def _depth_athlete(raw: Any) -> Optional[DepthChartAthlete]:
    if not isinstance(raw, Mapping):
        return None
    nested = raw.get("athlete")
    if isinstance(nested, Mapping):
        raw = nested
    athlete_id = _athlete_id(raw)
    if not athlete_id:
        return None
    return DepthChartAthlete(
        id=athlete_id,
        full_name=_athlete_name(raw),
        headshot_url=_headshot(raw, athlete_id),
    )


def normalize_depth_chart(payload: Mapping[str, Any]) -> DepthChart:
    """Flatten every formation into ``slot key -> athletes in depth order``.

    When a slot key appears in more than one formation the first formation
    listing it wins.
    """

    formations = payload.get("depthchart") or payload.get("items") or []
    chart: DepthChart = {}
    for formation in formations:
        if not isinstance(formation, Mapping):
            continue
        positions = formation.get("positions") or {}
        if not isinstance(positions, Mapping):
            continue
        for slot_key, slot in positions.items():
            key = _text(slot_key).lower()
            if not key or key in chart or not isinstance(slot, Mapping):
                continue
            athletes = [a for a in (_depth_athlete(item) for item in slot.get("athletes") or []) if a]
            chart[key] = athletes
    return chart


def normalize_athlete_detail(payload: Mapping[str, Any], athlete_id: str) -> AthleteDetail:
    athlete = payload.get("athlete") if isinstance(payload.get("athlete"), Mapping) else payload
    resolved_id = _athlete_id(athlete) or athlete_id
    college = None
    raw_college = athlete.get("college")
    if isinstance(raw_college, Mapping):
        name = _text(raw_college.get("name")) or _text(raw_college.get("shortName")) or "Unknown College"
        college = CollegeRef(id=_text(raw_college.get("id")) or None, name=name)
    return AthleteDetail(
        id=resolved_id,
        full_name=_athlete_name(athlete),
        headshot_url=_headshot(athlete, resolved_id),
        position=_position_abbreviation(athlete),
        college=college,
    )


def normalize_athlete_bio(payload: Mapping[str, Any] | None) -> AthleteBio:
    history = (payload or {}).get("teamHistory")
    if not isinstance(history, list):
        return AthleteBio()
    entries = []
    for raw in history:
        if not isinstance(raw, Mapping):
            continue
        logo = raw.get("logo")
        if isinstance(logo, Mapping):
            logo = logo.get("href")
        entries.append(
            TeamHistoryEntry(
                team_id=_text(raw.get("id")) or None,
                display_name=_text(raw.get("displayName")) or "Unknown Team",
                logo_url=_text(logo),
                seasons=_text(raw.get("seasons")),
            )
        )
    return AthleteBio(team_history=entries)


def normalize_search_item(raw: Any) -> Optional[SearchResult]:
    if not isinstance(raw, Mapping) or not raw.get("id"):
        return None
    athlete_id = _athlete_id(raw)
    relationships = raw.get("teamRelationships") or []
    team_name = ""
    if relationships and isinstance(relationships[0], Mapping):
        team_name = _text(relationships[0].get("displayName"))
    return SearchResult(
        id=athlete_id,
        full_name=_text(raw.get("displayName")) or "Unknown",
        position=_position_abbreviation(raw),
        team_name=team_name,
        headshot_url=_headshot(raw, athlete_id),
    )


class EspnDataSource:
    """``PlayerDataSource`` backed by the public ESPN JSON endpoints."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        timeout: float = 10.0,
        retries: int = 2,
        retry_delay: float = 1.0,
        sleep: Sleep | None = None,
    ):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)
        self.retries = max(0, retries)
        self.retry_delay = retry_delay
        self._sleep = sleep or asyncio.sleep

    async def __aenter__(self) -> "EspnDataSource":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _fetch_json(self, url: str, params: Dict[str, Any] | None = None) -> Mapping[str, Any]:
        last_exc: Exception | None = None
        for attempt in range(self.retries + 1):
            try:
                resp = await self._client.get(url, params=params)
                resp.raise_for_status()
                payload = resp.json()
            except (httpx.HTTPError, ValueError) as exc:
                last_exc = exc
                if attempt == self.retries:
                    break
                delay = self.retry_delay * (attempt + 1)
                logger.warning(
                    "Fetch %s failed (attempt %d/%d): %s; retrying in %.1fs",
                    url,
                    attempt + 1,
                    self.retries + 1,
                    exc,
                    delay,
                )
                await self._sleep(delay)
            else:
                if not isinstance(payload, Mapping):
                    logger.error("Fetch %s returned %s, expected a JSON object", url, type(payload).__name__)
                    raise DataSourceError(f"Unexpected payload shape from {url}", url=url)
                return payload

        status_code = None
        if isinstance(last_exc, httpx.HTTPStatusError):
            status_code = last_exc.response.status_code
        logger.error("Fetch %s failed after %d attempts: %s", url, self.retries + 1, last_exc)
        raise DataSourceError(f"Request to {url} failed: {last_exc}", url=url, status_code=status_code) from last_exc

    async def list_teams(self) -> List[TeamRecord]:
        payload = await self._fetch_json(f"{SITE_BASE}/site/v2/sports/football/nfl/teams")
        return normalize_teams(payload)

    async def get_roster(self, team_id: str) -> List[RosterEntry]:
        payload = await self._fetch_json(f"{SITE_BASE}/site/v2/sports/football/nfl/teams/{team_id}/roster")
        return normalize_roster(payload)

    async def get_depth_chart(self, team_id: str) -> DepthChart:
        payload = await self._fetch_json(f"{SITE_BASE}/site/v2/sports/football/nfl/teams/{team_id}/depthcharts")
        return normalize_depth_chart(payload)

    async def get_athlete_detail(self, athlete_id: str) -> AthleteDetail:
        payload = await self._fetch_json(f"{SITE_BASE}/common/v3/sports/football/nfl/athletes/{athlete_id}")
        return normalize_athlete_detail(payload, athlete_id)

    async def get_athlete_bio(self, athlete_id: str) -> AthleteBio:
        payload = await self._fetch_json(f"{WEB_BASE}/common/v3/sports/football/nfl/athletes/{athlete_id}/bio")
        return normalize_athlete_bio(payload)

    async def search(self, query: str, limit: int = DEFAULT_SEARCH_LIMIT) -> List[SearchResult]:
        if len(query.strip()) < MIN_QUERY_LENGTH:
            return []
        payload = await self._fetch_json(
            f"{SITE_BASE}/common/v3/search",
            params={
                "query": query,
                "limit": limit,
                "type": "player",
                "sport": "football",
                "league": "nfl",
            },
        )
        items = payload.get("items") or []
        return [result for result in (normalize_search_item(item) for item in items) if result]
