from pathlib import Path

from careerpath.config_loader import GameSettings


def test_from_env_defaults(monkeypatch):
    for name in (
        "CAREERPATH_DB_PATH",
        "CAREERPATH_CACHE_TTL_HOURS",
        "CAREERPATH_HTTP_TIMEOUT",
        "CAREERPATH_RETRIES",
        "CAREERPATH_RETRY_DELAY",
        "CAREERPATH_DEBOUNCE_MS",
        "CAREERPATH_ROUND_ATTEMPTS",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = GameSettings.from_env(db_path="/tmp/game.sqlite")

    assert settings.db_path == Path("/tmp/game.sqlite")
    assert settings.cache_ttl_ms == 12 * 60 * 60 * 1000
    assert (settings.retries, settings.retry_delay) == (2, 1.0)
    assert settings.debounce_seconds == 0.3


def test_from_env_clamps_and_ignores_bad_values(monkeypatch):
    monkeypatch.setenv("CAREERPATH_RETRY_DELAY", "-4")
    monkeypatch.setenv("CAREERPATH_HTTP_TIMEOUT", "0")
    monkeypatch.setenv("CAREERPATH_CACHE_TTL_HOURS", "soon")
    monkeypatch.setenv("CAREERPATH_RETRIES", "three")
    monkeypatch.setenv("CAREERPATH_ROUND_ATTEMPTS", "0")

    settings = GameSettings.from_env()

    assert settings.retry_delay == 0.0
    assert settings.http_timeout == 0.1
    assert settings.cache_ttl_hours == 12.0
    assert settings.retries == 2
    assert settings.round_attempts == 1
