"""Decode raw terminal input chunks into menu key actions.

A chunk is whatever a single terminal read returned. Control bytes and
ESC-prefixed meta combinations map to navigation actions; anything else is
typed text, filtered down to graphic code points.
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass

DOWN = "DOWN"
UP = "UP"
TOP = "TOP"
BOTTOM = "BOTTOM"
BACKSPACE = "BACKSPACE"
SUBMIT = "SUBMIT"
SUBMIT_TEXT = "SUBMIT_TEXT"
CANCEL = "CANCEL"
TEXT = "TEXT"
IGNORE = "IGNORE"

_CSI_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]|\x1bO[A-Za-z]")


def _ctrl(letter: str) -> str:
    return chr(0x40 ^ ord(letter))


KEY_ACTIONS: dict[str, str] = {
    _ctrl("D"): CANCEL,
    "\x1b": CANCEL,
    "\r": SUBMIT,
    "\x1b\r": SUBMIT_TEXT,
    "\x1b\n": SUBMIT_TEXT,
    _ctrl("N"): DOWN,
    _ctrl("J"): DOWN,
    "\x1bn": DOWN,
    "\x1bj": DOWN,
    "\x1b[B": DOWN,
    "\x1bOB": DOWN,
    _ctrl("P"): UP,
    _ctrl("K"): UP,
    "\x1bp": UP,
    "\x1bk": UP,
    "\x1b[A": UP,
    "\x1bOA": UP,
    _ctrl("G"): TOP,
    "\x1bg": TOP,
    "\x1bG": BOTTOM,
    _ctrl("H"): BACKSPACE,
    _ctrl("?"): BACKSPACE,
}


@dataclass(frozen=True)
class Key:
    action: str
    text: str = ""


def is_graphic(ch: str) -> bool:
    """Letters, marks, numbers, punctuation, symbols, and plain spaces."""
    category = unicodedata.category(ch)
    return category[0] in "LMNPS" or category == "Zs"


def decode_key(chunk: str) -> Key:
    action = KEY_ACTIONS.get(chunk)
    if action is not None:
        return Key(action)
    if _CSI_RE.fullmatch(chunk):
        return Key(IGNORE)
    text = "".join(ch for ch in chunk if is_graphic(ch))
    if not text:
        return Key(IGNORE)
    return Key(TEXT, text)


__all__ = [
    "BACKSPACE",
    "BOTTOM",
    "CANCEL",
    "DOWN",
    "IGNORE",
    "KEY_ACTIONS",
    "Key",
    "SUBMIT",
    "SUBMIT_TEXT",
    "TEXT",
    "TOP",
    "UP",
    "decode_key",
    "is_graphic",
]
