"""Single-consumer event loop for the selection menu.

Producers (key reader, row publishers, SIGWINCH) only ever put events on one
queue; this loop is the sole owner of menu state and the only writer to the
terminal while it runs.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from queue import SimpleQueue
from typing import Any

from .keys import decode_key
from .render import MENU_EXIT, MENU_START, render_pass
from .state import MenuState, handle_key
from .store import ItemStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RowEvent:
    row: Any


@dataclass(frozen=True)
class KeyEvent:
    chunk: str


@dataclass(frozen=True)
class ResizeEvent:
    pass


@dataclass(frozen=True)
class CancelEvent:
    pass


def run_menu_loop(
    events: SimpleQueue,
    terminal,
    state: MenuState,
    store: ItemStore,
    emit: Callable[[str], None],
    cancelled: threading.Event,
) -> None:
    """Consume events until submit, cancel key, or cancellation.

    Every row, key, or resize event is followed by exactly one redraw.
    """
    terminal.write(MENU_START)
    terminal.write(render_pass(state, store))
    try:
        while True:
            event = events.get()
            if isinstance(event, CancelEvent) or cancelled.is_set():
                logger.debug("menu cancelled")
                return

            if isinstance(event, RowEvent):
                store.upsert(event.row)
                state.clamp(len(store))
            elif isinstance(event, ResizeEvent):
                width, height = terminal.dimensions()
                state.resize(width, height)
                state.clamp(len(store))
            elif isinstance(event, KeyEvent):
                outcome = handle_key(state, decode_key(event.chunk), store)
                if outcome.echo:
                    terminal.write(outcome.echo)
                if outcome.result is not None:
                    emit(outcome.result)
                if outcome.done:
                    return
            else:
                continue

            terminal.write(render_pass(state, store))
    finally:
        terminal.write(MENU_EXIT)


__all__ = ["CancelEvent", "KeyEvent", "ResizeEvent", "RowEvent", "run_menu_loop"]
