"""Column layout and fixed-width line shaping for menu rows.

``stretch`` spreads the visible rows across the terminal width so the last
column (usually a price or status) lines up on the right edge. ``fit_line``
then clips or pads each line to an exact number of cells.
"""

from __future__ import annotations

from collections.abc import Sequence

TAB_STOP = 8
LINE_PADDING = 2

CLEAR_LINE = "\n\x1b[2K"
REVERSE = "\x1b[7m"
RESET = "\x1b[0m"


def column_widths(rows: Sequence[Sequence[str]]) -> list[int]:
    """Return the widest field per column index across ``rows``."""
    widths: list[int] = []
    for fields in rows:
        for idx, value in enumerate(fields):
            if idx == len(widths):
                widths.append(0)
            widths[idx] = max(widths[idx], len(value))
    return widths


def stretch(rows: Sequence[Sequence[str]], width: int, padding: int = LINE_PADDING) -> list[str]:
    """Lay out ``rows`` as aligned text lines for a ``width``-column terminal.

    Space left over after the widest field of each column is split evenly
    between the non-final columns; the final column is right-justified. Short
    rows are treated as having empty trailing fields.
    """
    widths = column_widths(rows)
    columns = len(widths)
    if columns == 0:
        return ["" for _ in rows]

    remaining = width - padding - sum(widths)
    gap = max(1, remaining // (columns - 1)) if columns > 1 else 0

    lines: list[str] = []
    for fields in rows:
        cells: list[str] = []
        for idx in range(columns):
            value = fields[idx] if idx < len(fields) else ""
            if idx == columns - 1:
                cells.append(value.rjust(widths[idx]))
            else:
                cells.append(value.ljust(widths[idx] + gap))
        lines.append("".join(cells))
    return lines


def fit_line(text: str, cells: int) -> str:
    """Clip or pad ``text`` to exactly ``cells`` columns, expanding tabs."""
    if cells <= 0:
        return ""
    out: list[str] = []
    col = 0
    for ch in text:
        if col >= cells:
            break
        if ch == "\t":
            stop = min(cells, col + TAB_STOP - (col % TAB_STOP))
            out.append(" " * (stop - col))
            col = stop
            continue
        out.append(ch)
        col += 1
    if col < cells:
        out.append(" " * (cells - col))
    return "".join(out)


def draw_line(text: str, selected: bool, width: int, padding: int = LINE_PADDING) -> str:
    """Return one menu line, prefixed with newline-and-clear-line.

    The selected row is wrapped in reverse video.
    """
    body = fit_line(text, width - padding)
    if selected:
        return f"{CLEAR_LINE}{REVERSE} {body} {RESET}"
    return f"{CLEAR_LINE} {body} "


__all__ = [
    "CLEAR_LINE",
    "LINE_PADDING",
    "RESET",
    "REVERSE",
    "TAB_STOP",
    "column_widths",
    "draw_line",
    "fit_line",
    "stretch",
]
