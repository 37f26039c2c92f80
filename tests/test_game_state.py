import pytest

from careerpath.errors import DataSourceError, NotPlayableError
from careerpath.game import GamePhase, GameState, GameStateMachine
from careerpath.models import CareerStop, GamePlayer, RosterPlayer


CANDIDATE = RosterPlayer(id="42", full_name="Candidate")


class StaticBuilder:
    def __init__(self, result):
        self.result = result

    async def build_game_player(self, player_id: str) -> GamePlayer:
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


def _player(path=None) -> GamePlayer:
    return GamePlayer(
        id="42",
        full_name="Candidate",
        career_path=path if path is not None else [CareerStop(kind="affiliation", name="Team", seasons="2021")],
    )


def test_initial_state_is_loading():
    machine = GameStateMachine(StaticBuilder(_player()))
    assert machine.state == GameState()
    assert machine.phase is GamePhase.LOADING


@pytest.mark.anyio
async def test_successful_start_enters_guessing():
    machine = GameStateMachine(StaticBuilder(_player()))

    player = await machine.start_round(CANDIDATE)

    assert player.id == "42"
    assert machine.phase is GamePhase.GUESSING
    assert machine.state.load_error is None


@pytest.mark.anyio
async def test_failed_start_stays_loading_with_error():
    machine = GameStateMachine(StaticBuilder(DataSourceError("HTTP 500")))

    with pytest.raises(DataSourceError):
        await machine.start_round(CANDIDATE)

    assert machine.phase is GamePhase.LOADING
    assert machine.state.load_error == "HTTP 500"


@pytest.mark.anyio
async def test_empty_career_path_is_rejected():
    machine = GameStateMachine(StaticBuilder(_player(path=[])))

    with pytest.raises(NotPlayableError):
        await machine.start_round(CANDIDATE)

    assert machine.state.load_error == "No career data"


@pytest.mark.anyio
async def test_stale_completion_is_discarded():
    machine = GameStateMachine(StaticBuilder(_player()))

    assert await machine.start_round(CANDIDATE, is_current=lambda: False) is None
    assert machine.phase is GamePhase.LOADING
    assert machine.current_player is None


@pytest.mark.anyio
async def test_guess_outcomes():
    machine = GameStateMachine(StaticBuilder(_player()))
    await machine.start_round(CANDIDATE)

    assert machine.submit_guess("42") is True
    assert machine.phase is GamePhase.CORRECT
    assert machine.state.guessed_player_id == "42"

    await machine.start_round(CANDIDATE)
    assert machine.state.guessed_player_id is None
    assert machine.submit_guess("7") is False
    assert machine.phase is GamePhase.INCORRECT


@pytest.mark.anyio
async def test_skip_is_incorrect_without_guess():
    machine = GameStateMachine(StaticBuilder(_player()))
    await machine.start_round(CANDIDATE)

    machine.skip_player()

    assert machine.phase is GamePhase.INCORRECT
    assert machine.state.guessed_player_id is None
    assert machine.state.is_resolved


@pytest.mark.anyio
async def test_subscribers_see_every_transition():
    machine = GameStateMachine(StaticBuilder(_player()))
    phases = []
    unsubscribe = machine.subscribe(lambda state: phases.append(state.phase))

    await machine.start_round(CANDIDATE)
    machine.submit_guess("42")
    unsubscribe()
    machine.skip_player()

    assert phases == [GamePhase.LOADING, GamePhase.GUESSING, GamePhase.CORRECT]


@pytest.mark.anyio
async def test_failing_listener_does_not_break_transitions():
    machine = GameStateMachine(StaticBuilder(_player()))

    def broken(state):
        raise RuntimeError("listener bug")

    machine.subscribe(broken)
    await machine.start_round(CANDIDATE)

    assert machine.phase is GamePhase.GUESSING


def test_fail_round_records_message():
    machine = GameStateMachine(StaticBuilder(_player()))
    machine.fail_round("No player available")

    assert machine.phase is GamePhase.LOADING
    assert machine.state.load_error == "No player available"
