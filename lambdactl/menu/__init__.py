"""Interactive terminal selection menu.

Rows arrive from producer threads while the user navigates; one loop thread
serializes keys, row updates, and resizes and redraws in place.
"""

from .producers import InstancePoller, KeyReader, static_rows
from .session import DEFAULT_MENU_LINES, MenuSession, select_one
from .state import MenuState
from .store import ItemStore
from .terminal import TerminalController, open_tty

__all__ = [
    "DEFAULT_MENU_LINES",
    "InstancePoller",
    "ItemStore",
    "KeyReader",
    "MenuSession",
    "MenuState",
    "TerminalController",
    "open_tty",
    "select_one",
    "static_rows",
]
