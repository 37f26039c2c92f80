"""Debounced, stale-safe player search feeding the guess input."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Literal, Optional, Sequence, Set, Tuple

from careerpath.models import SearchResult


logger = logging.getLogger(__name__)

Lookup = Callable[[str], Awaitable[Sequence[SearchResult]]]
Direction = Literal["up", "down"]

DEFAULT_DEBOUNCE_SECONDS = 0.3
MIN_QUERY_LENGTH = 2


class AutocompletePipeline:
    """Live query, results and keyboard highlight for the guess box.

    Every keystroke replaces the pending debounce timer. When a timer fires
    its lookup is tagged with the query text it was scheduled for; the result
    is applied only if that text is still the live query, so late answers to
    older keystrokes are dropped. Lookups already in flight are never
    interrupted.
    """

    def __init__(
        self,
        lookup: Lookup,
        *,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        min_query_length: int = MIN_QUERY_LENGTH,
        on_change: Callable[["AutocompletePipeline"], None] | None = None,
    ):
        self._lookup = lookup
        self.debounce_seconds = debounce_seconds
        self.min_query_length = min_query_length
        self._on_change = on_change
        self.query = ""
        self.results: Tuple[SearchResult, ...] = ()
        self.is_searching = False
        self.highlight_index = -1
        self._timer: asyncio.TimerHandle | None = None
        self._inflight: Set[asyncio.Task] = set()

    @property
    def highlighted(self) -> Optional[SearchResult]:
        if 0 <= self.highlight_index < len(self.results):
            return self.results[self.highlight_index]
        return None

    def _notify(self) -> None:
        if self._on_change is None:
            return
        try:
            self._on_change(self)
        except Exception:  # noqa: BLE001
            logger.exception("Autocomplete listener failed")

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def search(self, text: str) -> None:
        """Update the live query and (re)schedule the remote lookup.

        Must be called from a running event loop.
        """

        self.query = text
        self.highlight_index = -1
        self._cancel_timer()

        if len(text.strip()) < self.min_query_length:
            self.results = ()
            self.is_searching = False
            self._notify()
            return

        self.is_searching = True
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.debounce_seconds, self._fire, text)
        self._notify()

    def _fire(self, tag: str) -> None:
        self._timer = None
        task = asyncio.ensure_future(self._lookup_and_apply(tag))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    async def _lookup_and_apply(self, tag: str) -> None:
        try:
            results = tuple(await self._lookup(tag))
        except Exception as exc:  # noqa: BLE001
            logger.debug("Search for %r failed: %s", tag, exc)
            results = ()

        if self.query != tag:
            logger.debug("Dropping stale results for %r", tag)
            return
        self.results = results
        self.is_searching = False
        self._notify()

    def move_highlight(self, direction: Direction) -> int:
        count = len(self.results)
        if count == 0:
            self.highlight_index = -1
        elif direction == "down":
            self.highlight_index = self.highlight_index + 1 if self.highlight_index < count - 1 else 0
        else:
            self.highlight_index = self.highlight_index - 1 if self.highlight_index > 0 else count - 1
        self._notify()
        return self.highlight_index

    def clear(self) -> None:
        self._cancel_timer()
        self.query = ""
        self.results = ()
        self.highlight_index = -1
        self.is_searching = False
        self._notify()

    def close(self) -> None:
        self.clear()

    async def wait_idle(self) -> None:
        """Wait until no debounce timer is pending and no lookup is in flight."""

        loop = asyncio.get_running_loop()
        while True:
            if self._timer is not None:
                await asyncio.sleep(max(0.0, self._timer.when() - loop.time()))
                await asyncio.sleep(0)
            elif self._inflight:
                await asyncio.gather(*list(self._inflight), return_exceptions=True)
            else:
                return
