"""Terminal control for the selection menu.

Owns the raw-mode lifecycle, the window-size probe, and SIGWINCH
subscriptions. The menu loop only relies on the small surface used by
``FakeTerminal``-style objects in tests: ``dimensions``, ``write``,
``subscribe_resize``.
"""

from __future__ import annotations

import contextlib
import fcntl
import logging
import os
import signal
import struct
import termios
from collections.abc import Callable

from ..errors import TerminalError

logger = logging.getLogger(__name__)

# termios attribute list indices.
IFLAG, OFLAG, CFLAG, LFLAG, ISPEED, OSPEED, CC = range(7)


def raw_attributes(attrs: list) -> list:
    """Return a copy of ``attrs`` with line editing, echo, and signals off.

    Output post-processing is left alone so ``\\n`` still returns the carriage.
    """
    raw = list(attrs)
    raw[CC] = list(attrs[CC])
    raw[IFLAG] &= ~(
        termios.BRKINT | termios.PARMRK | termios.ISTRIP | termios.INLCR | termios.IGNCR | termios.ICRNL | termios.IXON
    )
    raw[LFLAG] &= ~(termios.ECHO | termios.ECHONL | termios.IEXTEN | termios.ICANON | termios.ISIG)
    raw[CFLAG] &= ~(termios.CSIZE | termios.PARENB)
    raw[CFLAG] |= termios.CS8
    raw[CC][termios.VMIN] = 1
    raw[CC][termios.VTIME] = 0
    return raw


class TerminalController:
    """Raw-mode access to one controlling terminal.

    Raw mode may be held across several menus; each menu probes dimensions
    on its own.
    """

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state: list | None = None
        self._resize_callbacks: list[Callable[[], None]] = []
        self._previous_winch_handler: object = None

    def enter_raw_mode(self) -> None:
        if self._saved_tty_state is not None:
            return
        try:
            saved = termios.tcgetattr(self.stdin_fd)
            termios.tcsetattr(self.stdin_fd, termios.TCSANOW, raw_attributes(saved))
        except (OSError, termios.error) as exc:
            raise TerminalError(f"failed to enter raw mode: {exc}") from exc
        self._saved_tty_state = saved
        logger.debug("terminal fd %d in raw mode", self.stdin_fd)

    def restore(self) -> None:
        saved = self._saved_tty_state
        if saved is None:
            return
        self._saved_tty_state = None
        termios.tcsetattr(self.stdin_fd, termios.TCSANOW, saved)
        logger.debug("terminal fd %d restored", self.stdin_fd)

    @property
    def in_raw_mode(self) -> bool:
        return self._saved_tty_state is not None

    @contextlib.contextmanager
    def raw_mode(self):
        """Bracket a block with raw mode, restoring on every exit path."""
        self.enter_raw_mode()
        try:
            yield self
        finally:
            self.restore()

    def dimensions(self) -> tuple[int, int]:
        """Return ``(columns, rows)`` from the terminal's window-size query."""
        try:
            packed = fcntl.ioctl(self.stdin_fd, termios.TIOCGWINSZ, b"\0" * 8)
        except OSError as exc:
            raise TerminalError(f"failed to probe TTY size: {exc}") from exc
        rows, columns, _xpixel, _ypixel = struct.unpack("HHHH", packed)
        if columns <= 0 or rows <= 0:
            raise TerminalError(f"terminal reported empty size {columns}x{rows}")
        return columns, rows

    def write(self, text: str) -> None:
        data = text.encode("utf-8")
        while data:
            written = os.write(self.stdout_fd, data)
            data = data[written:]

    def subscribe_resize(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Call ``callback`` on every SIGWINCH until the returned function runs.

        Must be called from the main thread, where Python delivers signals.
        """
        if not self._resize_callbacks:
            self._previous_winch_handler = signal.signal(signal.SIGWINCH, self._on_winch)
        self._resize_callbacks.append(callback)

        def unsubscribe() -> None:
            if callback not in self._resize_callbacks:
                return
            self._resize_callbacks.remove(callback)
            if not self._resize_callbacks:
                previous = self._previous_winch_handler
                signal.signal(signal.SIGWINCH, previous if previous is not None else signal.SIG_DFL)
                self._previous_winch_handler = None

        return unsubscribe

    def _on_winch(self, _signum, _frame) -> None:
        for callback in list(self._resize_callbacks):
            callback()


@contextlib.contextmanager
def open_tty(path: str = "/dev/tty", output_fd: int | None = None):
    """Open the controlling terminal and yield a ``TerminalController`` for it.

    Menu output goes to ``output_fd`` (stderr by default) so stdout stays
    usable for results.
    """
    try:
        fd = os.open(path, os.O_RDWR | os.O_NOCTTY)
    except OSError as exc:
        raise TerminalError(f"failed to open tty: {exc}") from exc
    try:
        yield TerminalController(fd, output_fd if output_fd is not None else 2)
    finally:
        os.close(fd)


__all__ = ["TerminalController", "open_tty", "raw_attributes"]
