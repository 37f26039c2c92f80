"""Input adapters that fetch and normalize upstream player data."""

from .career import (
    CareerPathBuilder,
    SeasonSpan,
    assemble_game_player,
    build_career_path,
    format_seasons,
    merge_team_history,
    parse_seasons,
)
from .espn import EspnDataSource
from .source import DepthChart, PlayerDataSource

__all__ = [
    "CareerPathBuilder",
    "DepthChart",
    "EspnDataSource",
    "PlayerDataSource",
    "SeasonSpan",
    "assemble_game_player",
    "build_career_path",
    "format_seasons",
    "merge_team_history",
    "parse_seasons",
]
