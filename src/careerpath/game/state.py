"""Round phase state machine with change notification."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, List, Optional, Protocol

from careerpath.errors import NotPlayableError
from careerpath.models import GamePlayer, RosterPlayer


logger = logging.getLogger(__name__)


class GamePhase(str, Enum):
    LOADING = "loading"
    GUESSING = "guessing"
    CORRECT = "correct"
    INCORRECT = "incorrect"


@dataclass(frozen=True)
class GameState:
    phase: GamePhase = GamePhase.LOADING
    current_player: Optional[GamePlayer] = None
    guessed_player_id: Optional[str] = None
    load_error: Optional[str] = None

    @property
    def is_resolved(self) -> bool:
        return self.phase in (GamePhase.CORRECT, GamePhase.INCORRECT)


class PlayerBuilder(Protocol):
    async def build_game_player(self, player_id: str) -> GamePlayer:
        ...


Listener = Callable[[GameState], None]


class GameStateMachine:
    """Tracks the phase of the current round.

    ``loading -> guessing -> correct | incorrect -> loading``. ``submit_guess``
    and ``skip_player`` are only meaningful while guessing; callers are
    expected to respect that, the machine does not check it.
    """

    def __init__(self, builder: PlayerBuilder):
        self.builder = builder
        self._state = GameState()
        self._listeners: List[Listener] = []

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def phase(self) -> GamePhase:
        return self._state.phase

    @property
    def current_player(self) -> Optional[GamePlayer]:
        return self._state.current_player

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _transition(self, **changes: object) -> None:
        self._state = replace(self._state, **changes)
        logger.debug("Game phase -> %s", self._state.phase.value)
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:  # noqa: BLE001
                logger.exception("Game state listener failed")

    async def start_round(
        self,
        candidate: RosterPlayer,
        *,
        is_current: Callable[[], bool] | None = None,
    ) -> Optional[GamePlayer]:
        """Load ``candidate`` and enter guessing.

        Returns ``None`` when ``is_current`` reports the request was superseded
        while the player was being built; nothing is applied in that case.
        Failures are recorded as the load error and re-raised so the caller can
        try another candidate.
        """

        still_current = is_current or (lambda: True)
        self._transition(phase=GamePhase.LOADING, guessed_player_id=None, load_error=None)
        try:
            player = await self.builder.build_game_player(candidate.id)
            if not player.career_path:
                raise NotPlayableError(candidate.id, "No career data")
        except Exception as exc:
            if still_current():
                self._transition(phase=GamePhase.LOADING, load_error=str(exc) or "Failed to load player")
            raise

        if not still_current():
            logger.debug("Discarding stale round result for %s", candidate.id)
            return None

        self._transition(phase=GamePhase.GUESSING, current_player=player, load_error=None)
        return player

    def fail_round(self, message: str) -> None:
        self._transition(phase=GamePhase.LOADING, guessed_player_id=None, load_error=message)

    def submit_guess(self, guessed_id: str) -> bool:
        current = self._state.current_player
        is_correct = current is not None and guessed_id == current.id
        self._transition(
            phase=GamePhase.CORRECT if is_correct else GamePhase.INCORRECT,
            guessed_player_id=guessed_id,
        )
        return is_correct

    def skip_player(self) -> None:
        self._transition(phase=GamePhase.INCORRECT, guessed_player_id=None)
