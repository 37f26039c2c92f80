"""Non-repeating candidate selection and round-start orchestration."""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence

from careerpath.errors import CareerPathError, RoundStartError
from careerpath.models import GamePlayer, RosterPlayer

if TYPE_CHECKING:
    from careerpath.game.state import GameStateMachine


logger = logging.getLogger(__name__)

NO_PLAYER_MESSAGE = "No player available"


class RoundSampler:
    def __init__(
        self,
        *,
        max_attempts: int = 5,
        recent_capacity: int = 50,
        recent_keep: int = 25,
        rng: random.Random | None = None,
    ):
        self.max_attempts = max_attempts
        self.recent_capacity = recent_capacity
        self.recent_keep = recent_keep
        self._rng = rng or random.Random()
        # Insertion-ordered so trimming keeps the most recent ids.
        self._recent: Dict[str, None] = {}
        self._round_token = 0

    @property
    def recently_shown(self) -> List[str]:
        return list(self._recent)

    @property
    def round_token(self) -> int:
        return self._round_token

    def reset(self) -> None:
        self._recent.clear()

    def pick_random_player(self, pool: Sequence[RosterPlayer]) -> Optional[RosterPlayer]:
        if not pool:
            return None

        available = [player for player in pool if player.id not in self._recent]
        if available:
            candidates = available
        else:
            # Whole pool was shown recently; start over rather than starve.
            candidates = list(pool)
            self._recent.clear()

        pick = self._rng.choice(candidates)
        self._recent.pop(pick.id, None)
        self._recent[pick.id] = None

        if len(self._recent) > self.recent_capacity:
            kept = list(self._recent)[-self.recent_keep:]
            self._recent = dict.fromkeys(kept)
        return pick

    async def start_next_round(
        self,
        pool: Sequence[RosterPlayer],
        machine: "GameStateMachine",
    ) -> Optional[GamePlayer]:
        """Try up to ``max_attempts`` candidates until one becomes playable.

        Returns the new player, or ``None`` if a newer round request superseded
        this one. Raises ``RoundStartError`` once every attempt has failed.
        """

        self._round_token += 1
        token = self._round_token

        def is_current() -> bool:
            return self._round_token == token

        last_error: Exception | None = None
        for attempt in range(1, self.max_attempts + 1):
            if not is_current():
                return None
            candidate = self.pick_random_player(pool)
            if candidate is None:
                break
            try:
                player = await machine.start_round(candidate, is_current=is_current)
            except CareerPathError as exc:
                last_error = exc
                logger.info(
                    "Round attempt %d/%d with %s failed: %s",
                    attempt,
                    self.max_attempts,
                    candidate.id,
                    exc,
                )
                continue
            return player

        if not is_current():
            return None
        machine.fail_round(NO_PLAYER_MESSAGE)
        raise RoundStartError(NO_PLAYER_MESSAGE) from last_error
