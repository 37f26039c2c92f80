"""Configuration helpers for difficulty tiers."""

from .difficulty import DEFAULT_DIFFICULTY, DifficultyRules, get_rules, is_known_tier, iter_rules

__all__ = [
    "DEFAULT_DIFFICULTY",
    "DifficultyRules",
    "get_rules",
    "is_known_tier",
    "iter_rules",
]
