"""
Session controller - owns the terminal state and runs the submit pipeline.

The controller is UI-agnostic. The REPL feeds it keystroke-level intents
(buffer edits, submit, arrows, tab) and listens for SessionEvents to know
what to print. Classification, command execution and autocomplete are
delegated to the pure engine functions; the AI collaborator is the only
asynchronous dependency.

AI calls are serialized: a question submitted while another is pending gets
its own pending entry right away and waits in a FIFO queue drained by a
single worker task. Answers patch their originating entry by id.
"""

import asyncio
import itertools
import webbrowser
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from termfolio.config import Config
from termfolio.engine.catalog import SHOW_ALL, CatalogEntry, suggest
from termfolio.engine.classifier import InputMode, classify
from termfolio.engine.commands import process
from termfolio.engine.output import (
    PENDING,
    AIFailure,
    AIReply,
    ClearSignal,
    Payload,
    PendingReply,
)
from termfolio.logging import log
from termfolio.models import PortfolioData
from termfolio.services.ai import AIResponder, build_responder
from termfolio.services.portfolio import (
    PortfolioSource,
    PortfolioSourceError,
    get_portfolio_source,
)

DEFAULT_AI_CREDITS = 5


@dataclass
class LineEntry:
    """One exchange in the transcript."""

    id: int
    text: str
    mode: InputMode
    payload: Payload

    @property
    def is_pending(self) -> bool:
        return isinstance(self.payload, PendingReply)


class EventKind(Enum):
    APPENDED = "appended"
    RESOLVED = "resolved"
    CLEARED = "cleared"
    CREDITS = "credits"
    DATA_LOADED = "data_loaded"


@dataclass(frozen=True)
class SessionEvent:
    kind: EventKind
    entry: LineEntry | None = None


Listener = Callable[[SessionEvent], None]


class SessionController:
    """Mutable terminal state plus the operations that change it."""

    def __init__(
        self,
        responder: AIResponder,
        data: PortfolioData | None = None,
        *,
        credits: int = DEFAULT_AI_CREDITS,
        open_url: Callable[[str], object] = webbrowser.open,
    ):
        self.responder = responder
        self.data = data
        self.credits = credits
        self.credit_limit = credits

        self.lines: list[LineEntry] = []
        self.history: list[str] = []
        self.history_index = -1  # -1: not browsing
        self.input = ""
        self.autocomplete_index = -1  # -1: nothing highlighted

        self._open_url = open_url
        self._ids = itertools.count(1)
        self._entries: dict[int, LineEntry] = {}
        self._listeners: list[Listener] = []

        self._ai_queue: deque[int] = deque()
        self._ai_worker: asyncio.Task | None = None
        self._in_flight: int | None = None

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _emit(self, kind: EventKind, entry: LineEntry | None = None) -> None:
        event = SessionEvent(kind, entry)
        for listener in self._listeners:
            listener(event)

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    @property
    def matches(self) -> list[CatalogEntry]:
        """Autocomplete entries for the current buffer."""
        return suggest(self.input)

    @property
    def awaiting_ai(self) -> bool:
        return self._in_flight is not None or bool(self._ai_queue)

    @property
    def thinking_entry_id(self) -> int | None:
        """The single entry that shows the thinking indicator."""
        if not self.awaiting_ai:
            return None
        for entry in reversed(self.lines):
            if entry.is_pending:
                return entry.id
        return None

    def get_entry(self, entry_id: int) -> LineEntry | None:
        return self._entries.get(entry_id)

    def latest_equivalent(self) -> LineEntry | None:
        """Newest answered AI entry that offers an equivalent command."""
        for entry in reversed(self.lines):
            if isinstance(entry.payload, AIReply) and entry.payload.equivalent_command:
                return entry
        return None

    # ------------------------------------------------------------------
    # Input buffer, history and autocomplete
    # ------------------------------------------------------------------

    def set_input(self, text: str) -> None:
        """Replace the buffer. Any edit drops the autocomplete highlight."""
        self.input = text
        self.autocomplete_index = -1

    def history_previous(self) -> None:
        """Up arrow: move the dropdown highlight, or recall an older command."""
        matches = self.matches
        if matches:
            self.autocomplete_index = max(0, self.autocomplete_index - 1)
            return

        if not self.history:
            return

        if self.history_index == -1:
            self.history_index = len(self.history) - 1
        else:
            self.history_index = max(0, self.history_index - 1)
        self.set_input(self.history[self.history_index])

    def history_next(self) -> None:
        """Down arrow: move the dropdown highlight, or recall a newer command."""
        matches = self.matches
        if matches:
            self.autocomplete_index = min(len(matches) - 1, self.autocomplete_index + 1)
            return

        if self.history_index == -1:
            return

        next_index = self.history_index + 1
        if next_index >= len(self.history):
            self.history_index = -1
            self.set_input("")
        else:
            self.history_index = next_index
            self.set_input(self.history[next_index])

    def accept_autocomplete(self) -> bool:
        """Tab: take the highlighted match, else the first one. Returns True if applied."""
        matches = self.matches
        if not matches:
            return False

        index = self.autocomplete_index if self.autocomplete_index >= 0 else 0
        self.set_input(matches[index].command)
        return True

    # ------------------------------------------------------------------
    # Submit pipeline
    # ------------------------------------------------------------------

    def submit(self) -> LineEntry | None:
        """
        Enter: run the highlighted suggestion or the buffer.

        Returns the entry added to the log, or None when nothing was accepted
        (empty buffer, bare `/`) or when the command cleared the log.
        """
        matches = self.matches
        if matches and self.autocomplete_index >= 0:
            text = matches[self.autocomplete_index].command
        else:
            text = self.input.strip()
            if not text or text == SHOW_ALL:
                return None

        return self._accept(text)

    def submit_text(self, text: str, mode: InputMode | None = None) -> LineEntry | None:
        """Submit `text` as if typed, optionally forcing its route."""
        self.set_input(text)
        if mode is None:
            return self.submit()

        text = text.strip()
        if not text:
            return None
        return self._accept(text, mode)

    def run_equivalent(self, entry_id: int) -> LineEntry | None:
        """Run the command an AI answer offered, through the CLI route."""
        entry = self._entries.get(entry_id)
        if entry is None or not isinstance(entry.payload, AIReply):
            return None
        command = entry.payload.equivalent_command
        if not command:
            return None
        return self._accept(command, InputMode.CLI)

    def _accept(self, text: str, mode: InputMode | None = None) -> LineEntry | None:
        self.history.append(text)
        self.history_index = -1
        self.set_input("")

        mode = mode or classify(text)
        log("session", f"SUBMIT {mode.value}", text=text)

        if mode is InputMode.CLI:
            return self._run_cli(text)
        return self._start_ai(text)

    def _run_cli(self, text: str) -> LineEntry | None:
        output = process(text, self.data, self.history)

        if isinstance(output, ClearSignal):
            self.clear()
            return None

        entry = self._append(text, InputMode.CLI, output)
        if output.open_url:
            self._open(output.open_url)
        return entry

    def clear(self) -> None:
        """Discard the whole log. Pending answers for discarded entries are dropped."""
        self.lines.clear()
        self._entries.clear()
        log("session", "Log cleared")
        self._emit(EventKind.CLEARED)

    def _append(self, text: str, mode: InputMode, payload: Payload) -> LineEntry:
        entry = LineEntry(id=next(self._ids), text=text, mode=mode, payload=payload)
        self.lines.append(entry)
        self._entries[entry.id] = entry
        self._emit(EventKind.APPENDED, entry)
        return entry

    def _open(self, url: str) -> None:
        log("session", f"OPEN {url}")
        self._open_url(url)

    # ------------------------------------------------------------------
    # AI lifecycle
    # ------------------------------------------------------------------

    def _start_ai(self, text: str) -> LineEntry:
        entry = self._append(text, InputMode.AI, PENDING)
        self._ai_queue.append(entry.id)

        if self._ai_worker is None:
            self._ai_worker = asyncio.get_running_loop().create_task(self._drain_ai_queue())
        else:
            log("session", "AI call queued", entry=entry.id, queued=len(self._ai_queue))
        return entry

    async def _drain_ai_queue(self) -> None:
        try:
            while self._ai_queue:
                entry_id = self._ai_queue.popleft()
                self._in_flight = entry_id
                try:
                    await self._ask(entry_id)
                except Exception as e:
                    # Later entries are still asked
                    log("session", f"AI pipeline error: {e}", level="error", entry=entry_id)
                finally:
                    self._in_flight = None
        finally:
            self._ai_worker = None

    async def _ask(self, entry_id: int) -> None:
        entry = self._entries.get(entry_id)
        if entry is None:
            log("session", "Skipping AI call for cleared entry", entry=entry_id)
            return

        try:
            response = await self.responder.ask(entry.text)
        except Exception as e:
            log("session", f"AI call failed: {e}", level="error", entry=entry_id)
            self._resolve(entry_id, AIFailure())
            return

        reply = AIReply(
            message=response.message,
            equivalent_command=response.equivalent_cmd or "",
            open_url=response.open_url,
        )

        if response.remaining is not None:
            self._apply_side_effect(self._update_credits, response.remaining, entry_id)
        if response.open_url:
            self._apply_side_effect(self._open, response.open_url, entry_id)

        self._resolve(entry_id, reply)

    def _apply_side_effect(self, action: Callable[..., object], value, entry_id: int) -> None:
        try:
            action(value)
        except Exception as e:
            log("session", f"{action.__name__} failed: {e}", level="error", entry=entry_id)

    def _resolve(self, entry_id: int, payload: Payload) -> None:
        entry = self._entries.get(entry_id)
        if entry is None:
            log("session", "Dropping answer for cleared entry", entry=entry_id)
            return
        entry.payload = payload
        self._emit(EventKind.RESOLVED, entry)

    def _update_credits(self, remaining: int) -> None:
        # Reported values only ever lower the counter; a stale answer cannot raise it
        if remaining < self.credits:
            self.credits = remaining
            self._emit(EventKind.CREDITS)

    async def wait_for_ai(self) -> None:
        """Wait until every queued AI call has resolved."""
        while self._ai_worker is not None:
            await self._ai_worker

    # ------------------------------------------------------------------
    # Data
    # ------------------------------------------------------------------

    async def load_data(self, source: PortfolioSource) -> bool:
        """Fetch the portfolio once. On failure data stays absent (loading notice)."""
        try:
            self.data = await source.fetch()
        except PortfolioSourceError as e:
            log("api", f"Failed to fetch portfolio data: {e}", level="error")
            return False

        self._emit(EventKind.DATA_LOADED)
        return True


def create_session(config: Config) -> tuple[SessionController, PortfolioSource]:
    """Wire a controller to the configured AI backend and data source."""
    # The remote endpoint owns its quota; the local limit only applies to anthropic
    credits = config.ai_daily_limit if config.ai_backend == "anthropic" else DEFAULT_AI_CREDITS
    controller = SessionController(
        build_responder(config, lambda: controller.data),
        credits=credits,
    )
    return controller, get_portfolio_source(config)
