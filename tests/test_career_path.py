import pytest

from careerpath.cache import TTLCache
from careerpath.errors import DataSourceError, NotPlayableError
from careerpath.ingest import (
    CareerPathBuilder,
    assemble_game_player,
    build_career_path,
    format_seasons,
    merge_team_history,
    parse_seasons,
)
from careerpath.ingest.career import SeasonSpan
from careerpath.models import AthleteBio
from careerpath.persistence import MemoryStore

from tests.fakes import FakeClock, FakeDataSource, bio, detail


def test_parse_and_format_seasons():
    assert format_seasons(parse_seasons("2019")) == "2019"
    assert format_seasons(parse_seasons("2019-2022")) == "2019-2022"
    assert format_seasons(parse_seasons("2021-Present")) == "2021-Present"
    assert parse_seasons("") is None
    assert format_seasons(None) == ""


def test_single_season_span_formats_as_one_year():
    assert format_seasons(SeasonSpan(2020, 2020)) == "2020"


def test_consecutive_same_team_entries_merge():
    history = bio(("X", "Team X", "2020-2021"), ("X", "Team X", "2022")).team_history

    stops = merge_team_history(history)

    assert len(stops) == 1
    assert stops[0].seasons == "2020-2022"
    assert stops[0].affiliation_id == "X"


def test_history_is_reversed_to_chronological_order():
    history = bio(
        ("3", "Third", "2022-2023"),
        ("2", "Second", "2019-2021"),
        ("1", "First", "2016-2018"),
    ).team_history

    stops = merge_team_history(history)

    assert [stop.name for stop in stops] == ["First", "Second", "Third"]
    assert [stop.seasons for stop in stops] == ["2016-2018", "2019-2021", "2022-2023"]


def test_merged_stop_uses_most_recent_identity():
    history = bio(
        ("13", "Las Vegas Raiders", "2020-2021"),
        ("13", "Oakland Raiders", "2015-2019"),
    ).team_history

    stops = merge_team_history(history)

    assert len(stops) == 1
    assert stops[0].name == "Las Vegas Raiders"
    assert stops[0].logo_url == "logo-Las Vegas Raiders"
    assert stops[0].seasons == "2015-2021"


def test_merge_never_leaves_adjacent_duplicates():
    history = bio(
        ("A", "A", "2024"),
        ("B", "B", "2023"),
        ("B", "B", "2022"),
        ("A", "A", "2021"),
        ("A", "A", "2019-2020"),
    ).team_history

    stops = merge_team_history(history)

    ids = [stop.affiliation_id for stop in stops]
    assert ids == ["A", "B", "A"]
    assert all(a != b for a, b in zip(ids, ids[1:]))
    assert [stop.seasons for stop in stops] == ["2019-2021", "2022-2023", "2024"]


def test_open_ended_stint_stays_open_after_merge():
    history = bio(("K", "K", "2023-Present"), ("K", "K", "2020-2022")).team_history

    stops = merge_team_history(history)

    assert stops[0].seasons == "2020-Present"


def test_college_is_first_stop_with_synthesized_logo():
    path = build_career_path(detail("7", college="Alabama", college_id="333"), bio(("1", "One", "2020")))

    assert path[0].kind == "college"
    assert path[0].name == "Alabama"
    assert path[0].seasons == ""
    assert path[0].logo_url.endswith("/333.png")
    assert path[1].kind == "affiliation"


def test_college_without_id_has_empty_logo():
    path = build_career_path(detail("7", college_id=None), AthleteBio())
    assert path[0].logo_url == ""


@pytest.mark.parametrize(
    "athlete_bio",
    [AthleteBio(), bio()],
)
def test_college_only_careers_are_rejected(athlete_bio):
    with pytest.raises(NotPlayableError):
        assemble_game_player(detail("9"), athlete_bio)


def test_empty_record_is_rejected():
    with pytest.raises(NotPlayableError):
        assemble_game_player(detail("9", college=None), AthleteBio())


@pytest.mark.anyio
async def test_builder_caches_player_for_a_day():
    source = FakeDataSource(details={"5": detail("5")}, bios={"5": bio(("1", "One", "2020-2022"))})
    clock = FakeClock()
    builder = CareerPathBuilder(source, TTLCache(MemoryStore(), clock=clock))

    first = await builder.build_game_player("5")
    second = await builder.build_game_player("5")

    assert first == second
    assert source.calls.count(("detail", "5")) == 1

    clock.advance(24 * 60 * 60 * 1000)
    await builder.build_game_player("5")
    assert source.calls.count(("detail", "5")) == 2


@pytest.mark.anyio
async def test_builder_does_not_cache_rejections():
    source = FakeDataSource(details={"5": detail("5")})
    cache = TTLCache(MemoryStore(), clock=FakeClock())
    builder = CareerPathBuilder(source, cache)

    with pytest.raises(NotPlayableError):
        await builder.build_game_player("5")
    assert cache.get(CareerPathBuilder.cache_key("5")) is None


@pytest.mark.anyio
async def test_builder_propagates_upstream_errors():
    builder = CareerPathBuilder(FakeDataSource(failing={"bio"}), TTLCache(MemoryStore(), clock=FakeClock()))

    with pytest.raises(DataSourceError):
        await builder.build_game_player("5")
