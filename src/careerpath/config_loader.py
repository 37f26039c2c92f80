"""Environment-driven runtime settings."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path


logger = logging.getLogger(__name__)

_DB_PATH_ENV = "CAREERPATH_DB_PATH"
_CACHE_TTL_ENV = "CAREERPATH_CACHE_TTL_HOURS"
_HTTP_TIMEOUT_ENV = "CAREERPATH_HTTP_TIMEOUT"
_RETRIES_ENV = "CAREERPATH_RETRIES"
_RETRY_DELAY_ENV = "CAREERPATH_RETRY_DELAY"
_DEBOUNCE_ENV = "CAREERPATH_DEBOUNCE_MS"
_ROUND_ATTEMPTS_ENV = "CAREERPATH_ROUND_ATTEMPTS"

DEFAULT_DB_PATH = Path.home() / ".careerpath" / "careerpath.sqlite"


def _env_float(name: str, default: float, *, clamp_min: float | None = None) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid float for %s: %s; using default %.2f", name, raw, default)
        return default
    if clamp_min is not None:
        value = max(clamp_min, value)
    return value


def _env_int(name: str, default: int, *, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    return value


@dataclass(frozen=True)
class GameSettings:
    db_path: Path = DEFAULT_DB_PATH
    cache_ttl_hours: float = 12.0
    http_timeout: float = 10.0
    retries: int = 2
    retry_delay: float = 1.0
    debounce_ms: int = 300
    round_attempts: int = 5

    @property
    def cache_ttl_ms(self) -> int:
        return int(self.cache_ttl_hours * 60 * 60 * 1000)

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000.0

    @classmethod
    def from_env(cls, *, db_path: Path | str | None = None) -> "GameSettings":
        env_db = os.getenv(_DB_PATH_ENV)
        if db_path is not None:
            resolved = Path(db_path)
        elif env_db:
            resolved = Path(env_db)
        else:
            resolved = DEFAULT_DB_PATH
        return cls(
            db_path=resolved,
            cache_ttl_hours=_env_float(_CACHE_TTL_ENV, 12.0, clamp_min=0.0),
            http_timeout=_env_float(_HTTP_TIMEOUT_ENV, 10.0, clamp_min=0.1),
            retries=_env_int(_RETRIES_ENV, 2, min_value=0),
            retry_delay=_env_float(_RETRY_DELAY_ENV, 1.0, clamp_min=0.0),
            debounce_ms=_env_int(_DEBOUNCE_ENV, 300, min_value=0),
            round_attempts=_env_int(_ROUND_ATTEMPTS_ENV, 5, min_value=1),
        )
