"""One menu invocation: producers, loop thread, results, and cancellation.

The caller owns the session. It reads results as they are submitted and
cancels when it has what it needs; the loop restores the display and every
producer stops at its next wait point.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Iterator
from queue import Queue, SimpleQueue
from typing import Any

from .loop import CancelEvent, KeyEvent, ResizeEvent, RowEvent, run_menu_loop
from .producers import KeyReader
from .state import MenuState
from .store import ItemStore

logger = logging.getLogger(__name__)

DEFAULT_MENU_LINES = 10
_CLOSED = object()

Producer = Callable[[Callable[[Any], None], threading.Event], None]


class MenuSession:
    """Run one selection menu on a background loop thread.

    ``start`` probes the terminal size before anything is drawn; a failure
    there is raised directly. Producer and loop errors are held until
    ``close`` so the terminal is left clean before they reach the caller.
    """

    def __init__(
        self,
        terminal,
        producers: Iterable[Producer] = (),
        *,
        lines: int = DEFAULT_MENU_LINES,
        key_reader: Producer | None = None,
        watch_resize: bool = True,
    ) -> None:
        self.terminal = terminal
        self.producers = list(producers)
        self.lines = lines
        self.key_reader = key_reader if key_reader is not None else KeyReader(terminal.stdin_fd)
        self.watch_resize = watch_resize
        self.cancelled = threading.Event()
        self.store = ItemStore()
        self.state: MenuState | None = None
        # SimpleQueue.put is reentrant, so the SIGWINCH handler may call it.
        self._events: SimpleQueue = SimpleQueue()
        self._results: Queue = Queue()
        self._threads: list[threading.Thread] = []
        self._loop_thread: threading.Thread | None = None
        self._errors: list[BaseException] = []
        self._errors_lock = threading.Lock()
        self._unsubscribe_resize: Callable[[], None] | None = None
        self._closed = False
        self._emitted = 0

    def __enter__(self) -> MenuSession:
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close(raise_errors=exc_type is None)

    def start(self) -> None:
        width, height = self.terminal.dimensions()
        self.state = MenuState(configured_lines=self.lines, width=width, height=height)
        if self.watch_resize:
            self._unsubscribe_resize = self.terminal.subscribe_resize(lambda: self._events.put(ResizeEvent()))

        self._loop_thread = threading.Thread(target=self._run_loop, name="lambdactl-menu-loop", daemon=True)
        self._loop_thread.start()
        self._spawn("lambdactl-menu-keys", self.key_reader, self._publish_key, cancel_on_return=True)
        for idx, producer in enumerate(self.producers):
            self._spawn(f"lambdactl-menu-rows-{idx}", producer, self._publish_row)
        logger.info("menu started (%dx%d, %d lines)", width, height, self.state.visible_lines)

    def _spawn(
        self,
        name: str,
        producer: Producer,
        publish: Callable[[Any], None],
        cancel_on_return: bool = False,
    ) -> None:
        def run() -> None:
            try:
                producer(publish, self.cancelled)
            except Exception as exc:
                logger.warning("%s stopped: %s", name, exc)
                self._record_error(exc)
            finally:
                if cancel_on_return and not self.cancelled.is_set():
                    # Input closed or failed: nothing else can end the menu.
                    self._events.put(CancelEvent())

        thread = threading.Thread(target=run, name=name, daemon=True)
        self._threads.append(thread)
        thread.start()

    def _record_error(self, exc: BaseException) -> None:
        with self._errors_lock:
            self._errors.append(exc)

    def _publish_row(self, row: Any) -> None:
        if not self.cancelled.is_set():
            self._events.put(RowEvent(row))

    def _publish_key(self, chunk: str) -> None:
        if not self.cancelled.is_set():
            self._events.put(KeyEvent(chunk))

    def _emit(self, result: str) -> None:
        if not self.cancelled.is_set():
            self._emitted += 1
            self._results.put(result)

    def _run_loop(self) -> None:
        assert self.state is not None
        try:
            run_menu_loop(self._events, self.terminal, self.state, self.store, self._emit, self.cancelled)
        except Exception as exc:
            logger.exception("menu loop failed")
            self._record_error(exc)
        finally:
            self.cancelled.set()
            self._results.put(_CLOSED)

    def results(self) -> Iterator[str]:
        """Yield submitted results until the menu ends."""
        if self._closed:
            return
        while True:
            item = self._results.get()
            if item is _CLOSED:
                self._results.put(_CLOSED)
                return
            yield item

    def first_result(self) -> str | None:
        """Wait for one result, then end the menu."""
        result = next(self.results(), None)
        self.cancel()
        return result

    def cancel(self) -> None:
        if self.cancelled.is_set():
            return
        self.cancelled.set()
        self._events.put(CancelEvent())

    def close(self, raise_errors: bool = True, timeout: float = 2.0) -> None:
        """Cancel, wait for every thread, and re-raise the first held error."""
        self.cancel()
        if self._loop_thread is not None:
            self._loop_thread.join(timeout)
        for thread in self._threads:
            thread.join(timeout)
        if self._unsubscribe_resize is not None:
            self._unsubscribe_resize()
            self._unsubscribe_resize = None
        self._closed = True
        logger.info(
            "menu closed with %d rows: %s",
            len(self.store),
            f"{self._emitted} result(s)" if self._emitted else "cancelled",
        )
        if raise_errors and self._errors:
            raise self._errors[0]


def select_one(
    terminal,
    producers: Iterable[Producer],
    *,
    lines: int = DEFAULT_MENU_LINES,
    key_reader: Producer | None = None,
    watch_resize: bool = True,
) -> str | None:
    """Run a menu until the first result or cancellation.

    Returns the selected identity or typed text, ``None`` when cancelled.
    """
    with MenuSession(
        terminal,
        producers,
        lines=lines,
        key_reader=key_reader,
        watch_resize=watch_resize,
    ) as session:
        return session.first_result()


__all__ = ["DEFAULT_MENU_LINES", "MenuSession", "Producer", "select_one"]
