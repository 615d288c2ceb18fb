"""Main interactive loop for the launcher.

Reads one key at a time, feeds it to the selection engine, and repaints
when the view changes. Transient sessions end at the first selection or on
focus loss; resident sessions execute selections in place and keep going.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from .engine import Continue, SelectionEngine
from .input import FOCUS_LOST, InputEvent
from .render import entry_rows, render_frame
from .theme import Theme

logger = logging.getLogger(__name__)

POLL_TIMEOUT_MS = 100


class Screen(Protocol):
    def size(self) -> tuple[int, int]: ...

    def write(self, frame: str) -> None: ...


class EventSource(Protocol):
    def read(self, timeout_ms: int | None = None) -> InputEvent | None: ...


@dataclass(frozen=True)
class SessionResult:
    """Outcome of one interactive session.

    ``selection`` is the submitted value still waiting to be executed, if
    any. ``executed`` counts selections already executed in resident mode.
    """

    selection: str | None = None
    executed: int = 0


def run_session(
    engine: SelectionEngine,
    theme: Theme,
    screen: Screen,
    events: EventSource,
    *,
    transient: bool = False,
    execute: Callable[[str], object] | None = None,
    poll_timeout_ms: int = POLL_TIMEOUT_MS,
) -> SessionResult:
    """Run the key/render loop until the engine terminates.

    Without ``execute`` (or in transient mode) the first submitted value is
    returned for the caller to execute after tearing down the terminal.
    Otherwise ``execute`` runs it immediately and the engine is reset.
    """
    resident = execute is not None and not transient
    executed = 0
    columns, rows = screen.size()
    view = engine.resize(entry_rows(rows))
    dirty = True

    while True:
        size = screen.size()
        if size != (columns, rows):
            columns, rows = size
            view = engine.resize(entry_rows(rows))
            dirty = True
        if dirty:
            screen.write(render_frame(view, theme, columns, rows))
            dirty = False

        event = events.read(poll_timeout_ms)
        if event is None:
            continue
        if isinstance(event, str):
            if event == FOCUS_LOST and transient:
                logger.debug("focus lost; ending transient session")
                return SessionResult(executed=executed)
            continue

        outcome = engine.handle_key_event(event)
        if isinstance(outcome, Continue):
            if outcome.view != view:
                view = outcome.view
                dirty = True
            continue

        if outcome.command is None:
            return SessionResult(executed=executed)
        if not resident:
            return SessionResult(selection=outcome.command, executed=executed)

        execute(outcome.command)
        executed += 1
        engine.reset()
        view = engine.view()
        dirty = True
