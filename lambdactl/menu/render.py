"""Render the menu in place below the input line.

Each pass redraws the input line and the visible rows, then moves the cursor
back up to the input line instead of clearing the screen.
"""

from __future__ import annotations

from .layout import RESET, draw_line, stretch
from .state import ERASE_BELOW, MenuState
from .store import ItemStore

MENU_START = RESET
MENU_EXIT = ERASE_BELOW
INPUT_LINE = "\x1b[G\x1b[2K"
CLEAR_BELOW = "\x1b[J"


def visible_lines_text(state: MenuState, store: ItemStore) -> list[str]:
    """Laid-out text of the rows currently inside the viewport."""
    rows = store.window(state.offset, state.visible_lines)
    return stretch([row.fields() or [] for row in rows], state.width)


def render_pass(state: MenuState, store: ItemStore) -> str:
    out = [INPUT_LINE, state.input_text()]
    lines = visible_lines_text(state, store)
    for idx, text in enumerate(lines):
        out.append(draw_line(text, state.offset + idx == state.selected, state.width))
    out.append(CLEAR_BELOW)
    if lines:
        # Cursor up n lines to column 1.
        out.append(f"\x1b[{len(lines)}F")
    out.append(f"\x1b[{len(state.input) + 1}G")
    return "".join(out)


__all__ = ["CLEAR_BELOW", "INPUT_LINE", "MENU_EXIT", "MENU_START", "render_pass", "visible_lines_text"]
