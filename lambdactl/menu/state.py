"""Menu viewport state and the key-driven selection state machine.

``MenuState`` is created per menu invocation and owned by the loop thread.
``handle_key`` applies one decoded key and reports what the loop should do
next: emit a result, stop, and/or echo bytes to the terminal.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from . import keys as k
from .store import ItemStore

BACKSPACE_ECHO = "\x08 \x08"
ERASE_BELOW = "\x1b[G\x1b[J"


@dataclass
class MenuState:
    """Cursor, scroll window, terminal size, and typed text for one menu."""

    configured_lines: int
    width: int = 80
    height: int = 24
    visible_lines: int = 1
    selected: int = 0
    offset: int = 0
    input: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.resize(self.width, self.height)

    def resize(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.visible_lines = max(1, min(self.configured_lines, height))

    def input_text(self) -> str:
        return "".join(self.input)

    def clamp(self, count: int) -> None:
        """Restore viewport invariants for a list of ``count`` rows.

        The selection keeps its numeric index when rows disappear, moving up
        only when it would point past the end.
        """
        if count <= 0:
            self.selected = 0
            self.offset = 0
            return
        self.selected = max(0, min(self.selected, count - 1))
        max_offset = max(0, count - self.visible_lines)
        self.offset = max(0, min(self.offset, max_offset))
        if self.selected < self.offset:
            self.offset = self.selected
        elif self.selected >= self.offset + self.visible_lines:
            self.offset = self.selected - self.visible_lines + 1


@dataclass(frozen=True)
class KeyOutcome:
    result: str | None = None
    done: bool = False
    echo: str = ""


def selected_value(state: MenuState, store: ItemStore) -> str:
    """Identity of the highlighted row, or the typed text when none is."""
    if 0 <= state.selected < len(store):
        return store[state.selected].identity()
    return state.input_text()


def move_down(state: MenuState, count: int) -> None:
    state.selected = min(state.selected + 1, count - 1)
    if state.selected >= state.offset + state.visible_lines:
        state.offset += 1
    state.offset = max(0, min(state.offset, count - state.visible_lines))
    state.clamp(count)


def move_up(state: MenuState, count: int) -> None:
    state.selected = max(state.selected - 1, 0)
    if state.selected < state.offset:
        state.offset -= 1
    state.clamp(count)


def move_top(state: MenuState, count: int) -> None:
    state.offset = 0
    state.selected = 0
    state.clamp(count)


def move_bottom(state: MenuState, count: int) -> None:
    state.offset = max(0, count - state.visible_lines)
    state.selected = max(count - 1, 0)
    state.clamp(count)


def handle_key(state: MenuState, key: k.Key, store: ItemStore) -> KeyOutcome:
    count = len(store)
    action = key.action

    if action == k.DOWN:
        move_down(state, count)
    elif action == k.UP:
        move_up(state, count)
    elif action == k.TOP:
        move_top(state, count)
    elif action == k.BOTTOM:
        move_bottom(state, count)
    elif action == k.BACKSPACE:
        if state.input:
            state.input.pop()
            return KeyOutcome(echo=BACKSPACE_ECHO)
    elif action == k.SUBMIT_TEXT:
        return KeyOutcome(result=state.input_text(), echo=ERASE_BELOW)
    elif action == k.SUBMIT:
        return KeyOutcome(result=selected_value(state, store), done=True)
    elif action == k.CANCEL:
        return KeyOutcome(done=True)
    elif action == k.TEXT:
        state.input.extend(key.text)
        return KeyOutcome(echo=key.text)
    return KeyOutcome()


__all__ = [
    "BACKSPACE_ECHO",
    "ERASE_BELOW",
    "KeyOutcome",
    "MenuState",
    "handle_key",
    "move_bottom",
    "move_down",
    "move_top",
    "move_up",
    "selected_value",
]
