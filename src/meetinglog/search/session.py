"""
Interactive Search Session

State machine behind the archive's search overlay:

    CLOSED --open / "/" key--> OPEN_EMPTY
    OPEN_* --input (>= 2 chars)--> OPEN_QUERYING --debounce elapsed--> OPEN_RESULTS
    OPEN_* --input (< 2 chars)--> OPEN_EMPTY
    OPEN_* --Escape / outside click--> CLOSED (query, results and cursor cleared)

Within OPEN_RESULTS a single cursor moves over the hits with the arrow keys;
Enter navigates to the highlighted hit. Everything runs on one asyncio event
loop: input is coalesced by a call_later timer so at most one scoring pass
runs per quiet period.
"""

import asyncio
import logging
from enum import Enum
from typing import Callable

from meetinglog.core.config import settings
from meetinglog.search.searcher import (
    MIN_QUERY_LEN,
    SearchEngine,
    SearchResult,
    render_results,
)

logger = logging.getLogger(__name__)


class SearchState(str, Enum):
    """Search overlay state"""

    CLOSED = "closed"
    OPEN_EMPTY = "open-empty"
    OPEN_QUERYING = "open-querying"
    OPEN_RESULTS = "open-results"


class SearchSession:
    """One search overlay bound to a SearchEngine."""

    def __init__(
        self,
        engine: SearchEngine,
        navigate: Callable[[str], None] | None = None,
        debounce_ms: int | None = None,
    ):
        self.engine = engine
        self.navigate = navigate
        self.debounce_ms = (
            settings.SEARCH_DEBOUNCE_MS if debounce_ms is None else debounce_ms
        )
        self.state = SearchState.CLOSED
        self.query = ""
        self.result: SearchResult | None = None
        self.cursor: int | None = None
        self._timer: asyncio.TimerHandle | None = None
        self._pending: asyncio.Task | None = None
        self._loading: asyncio.Task | None = None
        self._generation = 0

    @property
    def is_open(self) -> bool:
        return self.state != SearchState.CLOSED

    @property
    def input_has_focus(self) -> bool:
        """The query field has focus whenever no hit is highlighted."""
        return self.is_open and self.cursor is None

    def open(self) -> None:
        """Open the overlay (trigger click, trigger focus or "/" shortcut)."""
        if self.is_open:
            return
        self.state = SearchState.OPEN_EMPTY
        # Shared with any fetch already in flight; a no-op once loaded
        self._loading = asyncio.get_running_loop().create_task(
            self.engine.load_index()
        )

    def close(self) -> None:
        """Close the overlay, clearing query text, results and cursor."""
        self._cancel_pending()
        self._generation += 1
        self.state = SearchState.CLOSED
        self.query = ""
        self.result = None
        self.cursor = None

    def outside_click(self) -> None:
        if self.is_open:
            self.close()

    def input(self, text: str) -> None:
        """Query text changed; re-score once input has been quiet for debounce_ms."""
        if not self.is_open:
            return
        self._cancel_pending()
        self._generation += 1
        self.query = text
        if len(text.strip()) < MIN_QUERY_LEN:
            self._show_empty()
            return

        self.cursor = None
        self.state = SearchState.OPEN_QUERYING

        generation = self._generation
        self._timer = asyncio.get_running_loop().call_later(
            self.debounce_ms / 1000.0, self._on_debounce, generation
        )

    def _on_debounce(self, generation: int) -> None:
        self._timer = None
        self._pending = asyncio.get_running_loop().create_task(
            self._run_query(generation)
        )

    async def _run_query(self, generation: int) -> None:
        entries = await self.engine.load_index()
        if generation != self._generation:
            # Superseded by newer input or a close while the index loaded
            return
        if entries is None:
            self._show_empty()
            return

        self.result = self.engine.search(self.query)
        self.cursor = None
        self.state = SearchState.OPEN_RESULTS
        logger.debug(f"Query {self.query!r}: {self.result.total} hits")

    def _show_empty(self) -> None:
        self.result = None
        self.cursor = None
        self.state = SearchState.OPEN_EMPTY

    def _cancel_pending(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    async def wait_idle(self) -> None:
        """Wait until no debounce timer or scoring pass is outstanding."""
        while self._timer is not None or (
            self._pending is not None and not self._pending.done()
        ):
            if self._pending is not None and not self._pending.done():
                await asyncio.gather(self._pending, return_exceptions=True)
            else:
                await asyncio.sleep(self.debounce_ms / 1000.0)

    def handle_key(self, key: str, input_focused: bool = False) -> bool:
        """
        Dispatch a keydown.

        Args:
            key: Key name ("/", "Escape", "ArrowDown", "ArrowUp", "Enter")
            input_focused: Whether some text input outside the overlay has
                focus; the "/" shortcut is ignored then.

        Returns:
            True when the key was consumed.
        """
        if key == "/":
            if self.is_open or input_focused:
                return False
            self.open()
            return True

        if not self.is_open:
            return False

        if key == "Escape":
            self.close()
            return True
        if key == "ArrowDown":
            return self._move_cursor(1)
        if key == "ArrowUp":
            return self._move_cursor(-1)
        if key == "Enter":
            return self._activate()
        return False

    def _hit_count(self) -> int:
        if self.state != SearchState.OPEN_RESULTS or self.result is None:
            return 0
        return len(self.result.hits)

    def _move_cursor(self, step: int) -> bool:
        count = self._hit_count()
        if count == 0:
            return False

        if step > 0:
            self.cursor = 0 if self.cursor is None else (self.cursor + 1) % count
        elif self.cursor is None:
            self.cursor = count - 1
        elif self.cursor == 0:
            # Back to the query field instead of wrapping
            self.cursor = None
        else:
            self.cursor -= 1
        return True

    def _activate(self) -> bool:
        if self.cursor is None or self.result is None:
            return False
        url = self.result.hits[self.cursor].url
        if self.navigate is not None:
            self.navigate(url)
        else:
            logger.debug(f"No navigate callback for {url}")
        return True

    def render(self) -> str:
        """Current result list HTML ("" unless showing results)."""
        if self.state != SearchState.OPEN_RESULTS or self.result is None:
            return ""
        return render_results(self.result, self.cursor)
