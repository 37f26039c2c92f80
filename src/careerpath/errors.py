"""Exception hierarchy raised by the game engine."""

from __future__ import annotations


class CareerPathError(Exception):
    """Base class for engine errors."""


class DataSourceError(CareerPathError):
    """Upstream fetch failed after all retries."""

    def __init__(self, message: str, *, url: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class NotPlayableError(CareerPathError):
    """Athlete has no qualifying affiliation history."""

    def __init__(self, player_id: str, message: str = "No NFL team history"):
        super().__init__(message)
        self.player_id = player_id


class PoolLoadError(CareerPathError):
    """Candidate pool could not be assembled."""


class RoundStartError(CareerPathError):
    """No playable candidate could be found for a round."""
