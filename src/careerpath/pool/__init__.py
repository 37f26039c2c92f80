"""Candidate pool construction and round sampling."""

from .builder import PoolBuilder, experienced_players, extract_starters, slot_position
from .sampler import NO_PLAYER_MESSAGE, RoundSampler

__all__ = [
    "NO_PLAYER_MESSAGE",
    "PoolBuilder",
    "RoundSampler",
    "experienced_players",
    "extract_starters",
    "slot_position",
]
