"""Selection engine: applies key events to filter and navigation state.

One call to ``handle_key_event`` processes one key to completion and returns
either ``Continue`` with a fresh view projection or ``Terminate`` with the
command to execute (``None`` when the user exited without a selection).
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Union

from .errors import ConfigError
from .fuzzy import RankedEntry, matching_count, rank
from .keybinds import CommandToken, KeybindTable, KeyEvent
from .model import Menu
from .state import InputBuffer, NavigationState

logger = logging.getLogger(__name__)

DEFAULT_VISIBLE_ROWS = 10


@dataclass(frozen=True)
class ViewState:
    """Read-only snapshot of everything the renderer needs for one frame.

    ``entries`` is only the visible window; ``active_entry_index`` is relative
    to that window and is ``None`` when nothing matches. ``overflow`` counts
    displayed entries ranked below the window.
    """

    menu_names: tuple[str, ...]
    active_menu_index: int
    prompt: str
    input_text: str
    input_cursor: int
    entries: tuple[RankedEntry, ...]
    active_entry_index: int | None
    overflow: int
    matching_count: int
    total_count: int


@dataclass(frozen=True)
class Continue:
    view: ViewState


@dataclass(frozen=True)
class Terminate:
    command: str | None = None


EngineOutcome = Union[Continue, Terminate]


class SelectionEngine:
    """Own filter text, navigation cursors, and ranked entries for all menus."""

    def __init__(
        self,
        menus: Sequence[Menu],
        keybinds: KeybindTable,
        *,
        visible_rows: int = DEFAULT_VISIBLE_ROWS,
        hide_unmatched: bool = False,
    ) -> None:
        if not menus:
            raise ConfigError("at least one menu must be defined")
        self.menus = tuple(menus)
        self.keybinds = keybinds
        self.hide_unmatched = hide_unmatched
        self.visible_rows = max(1, visible_rows)
        self.input = InputBuffer()
        self.nav = NavigationState(menu_count=len(self.menus))
        self.exiting = False
        self.command: str | None = None
        self._ranked: list[RankedEntry] = []
        self._matching_count = 0
        self._rerank()

    @property
    def active_menu(self) -> Menu:
        return self.menus[self.nav.active_menu_index]

    @property
    def ranked(self) -> tuple[RankedEntry, ...]:
        return tuple(self._ranked)

    @property
    def matching_count(self) -> int:
        return self._matching_count

    def _rerank(self) -> None:
        self._ranked = rank(self.active_menu.entries, self.input.text)
        self._matching_count = matching_count(self._ranked)

    def _displayed(self) -> list[RankedEntry]:
        if self.hide_unmatched:
            return self._ranked[: self._matching_count]
        return self._ranked

    def _filter_changed(self) -> None:
        self._rerank()
        self.nav.reset_entries()

    def reset(self) -> None:
        """Clear filter and cursors on the current menu and accept input again."""
        self.input.clear()
        self.nav.reset_entries()
        self.exiting = False
        self.command = None
        self._rerank()

    def resize(self, visible_rows: int) -> ViewState:
        """Update the window size supplied by the renderer."""
        self.visible_rows = max(1, visible_rows)
        max_start = max(0, len(self._displayed()) - self.visible_rows)
        self.nav.scroll_offset = min(self.nav.scroll_offset, max_start)
        self.nav.follow_cursor(self.visible_rows)
        return self.view()

    def active_entry(self) -> RankedEntry | None:
        """Return the highlighted ranked entry when it is a match."""
        idx = self.nav.active_entry_index
        if 0 <= idx < self._matching_count:
            return self._ranked[idx]
        return None

    def handle_key_event(self, event: KeyEvent) -> EngineOutcome:
        """Resolve ``event`` through the keybind table and apply it."""
        if self.exiting:
            return Terminate(self.command)
        command = self.keybinds.resolve(event.chord)
        if command is not None:
            return self.apply(command)
        if event.is_plain_text():
            if self.input.insert(event.text):
                self._filter_changed()
        else:
            logger.debug("ignoring unbound key %s", event.chord.label())
        return Continue(self.view())

    def apply(self, command: CommandToken) -> EngineOutcome:
        """Apply one command token to the current state."""
        if self.exiting:
            return Terminate(self.command)

        if command is CommandToken.EXIT:
            self.exiting = True
            self.command = None
            return Terminate(None)
        if command is CommandToken.SUBMIT:
            selected = self.active_entry()
            if selected is None:
                return Continue(self.view())
            self.exiting = True
            self.command = selected.entry.value
            logger.debug("submitted %r from menu %r", selected.entry.name, self.active_menu.name)
            return Terminate(self.command)
        if command is CommandToken.CLEAR:
            if self.input.clear():
                self._filter_changed()
        elif command is CommandToken.DELETE_NEXT:
            if self.input.delete_next():
                self._filter_changed()
        elif command is CommandToken.DELETE_BACK:
            if self.input.delete_back():
                self._filter_changed()
        elif command is CommandToken.INPUT_NEXT:
            self.input.move_next()
        elif command is CommandToken.INPUT_BACK:
            self.input.move_back()
        elif command is CommandToken.ENTRY_NEXT:
            self.nav.move_entry(1, self._matching_count, self.visible_rows)
        elif command is CommandToken.ENTRY_BACK:
            self.nav.move_entry(-1, self._matching_count, self.visible_rows)
        elif command is CommandToken.MENU_NEXT or command is CommandToken.MENU_BACK:
            delta = 1 if command is CommandToken.MENU_NEXT else -1
            if self.nav.move_menu(delta):
                self.input.clear()
                self._rerank()
        else:
            raise AssertionError(f"unhandled command {command!r}")
        return Continue(self.view())

    def view(self) -> ViewState:
        """Project the current state into a ``ViewState``."""
        displayed = self._displayed()
        start = self.nav.scroll_offset
        window = tuple(displayed[start : start + self.visible_rows])
        overflow = max(0, len(displayed) - (start + len(window)))
        active: int | None = None
        if self._matching_count > 0:
            active = self.nav.active_entry_index - start
        return ViewState(
            menu_names=tuple(menu.name for menu in self.menus),
            active_menu_index=self.nav.active_menu_index,
            prompt=self.active_menu.prompt,
            input_text=self.input.text,
            input_cursor=self.input.cursor,
            entries=window,
            active_entry_index=active,
            overflow=overflow,
            matching_count=self._matching_count,
            total_count=len(self._ranked),
        )
