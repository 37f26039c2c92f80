"""Difficulty tier configuration for candidate pool construction."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Tuple


@dataclass(frozen=True)
class DifficultyRules:
    tier: str
    label: str
    # Depth-chart slot keys in priority order; empty means roster sourcing.
    slot_keys: Tuple[str, ...]
    roster_team_count: int = 8
    min_experience_years: int = 1

    @property
    def uses_depth_chart(self) -> bool:
        return bool(self.slot_keys)


_EASY_SLOTS: Tuple[str, ...] = ("qb", "rb", "wr1", "wr2")
_MEDIUM_SLOTS: Tuple[str, ...] = _EASY_SLOTS + ("wr3", "te", "pk")
_HARD_SLOTS: Tuple[str, ...] = _MEDIUM_SLOTS + (
    "fb",
    "p",
    "lde",
    "ldt",
    "rdt",
    "rde",
    "wlb",
    "mlb",
    "slb",
    "lcb",
    "rcb",
    "ss",
    "fs",
)


_DIFFICULTY_RULES: Dict[str, DifficultyRules] = {
    "easy": DifficultyRules(tier="easy", label="Easy", slot_keys=_EASY_SLOTS),
    "medium": DifficultyRules(tier="medium", label="Medium", slot_keys=_MEDIUM_SLOTS),
    "hard": DifficultyRules(tier="hard", label="Hard", slot_keys=_HARD_SLOTS),
    "master": DifficultyRules(tier="master", label="Master", slot_keys=()),
}

DEFAULT_DIFFICULTY = "easy"


def iter_rules() -> Iterable[DifficultyRules]:
    """Return tiers from easiest to hardest."""

    return _DIFFICULTY_RULES.values()


def get_rules(tier: str) -> DifficultyRules:
    """Fetch rules for a tier name, raising KeyError if missing."""

    key = tier.strip().lower()
    if key not in _DIFFICULTY_RULES:
        raise KeyError(f"No difficulty rules configured for tier={tier!r}")
    return _DIFFICULTY_RULES[key]


def is_known_tier(tier: str) -> bool:
    return isinstance(tier, str) and tier.strip().lower() in _DIFFICULTY_RULES
