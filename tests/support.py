"""Shared fakes for menu tests."""

from __future__ import annotations

import threading
from contextlib import contextmanager


class FakeTerminal:
    """Records writes and serves scripted dimensions."""

    stdin_fd = -1

    def __init__(self, width: int = 40, height: int = 24) -> None:
        self.sizes = [(width, height)]
        self.writes: list[str] = []
        self.resize_callbacks: list = []
        self.raw = False
        self._lock = threading.Lock()

    def dimensions(self) -> tuple[int, int]:
        if len(self.sizes) > 1:
            return self.sizes.pop(0)
        return self.sizes[0]

    def write(self, text: str) -> None:
        with self._lock:
            self.writes.append(text)

    def output(self) -> str:
        with self._lock:
            return "".join(self.writes)

    def subscribe_resize(self, callback):
        self.resize_callbacks.append(callback)

        def unsubscribe() -> None:
            self.resize_callbacks.remove(callback)

        return unsubscribe

    @contextmanager
    def raw_mode(self):
        self.raw = True
        try:
            yield self
        finally:
            self.raw = False


class ScriptedKeys:
    """Key producer that publishes chunks once ``ready`` is set.

    Waits on ``ready`` so row producers can enqueue first, then idles until
    the menu is cancelled like a real terminal reader.
    """

    def __init__(self, chunks: list[str], ready: threading.Event | None = None) -> None:
        self.chunks = list(chunks)
        self.ready = ready

    def __call__(self, publish, cancelled: threading.Event) -> None:
        if self.ready is not None:
            while not self.ready.wait(0.01):
                if cancelled.is_set():
                    return
        for chunk in self.chunks:
            publish(chunk)
        cancelled.wait(5.0)


def rows_then(rows, ready: threading.Event):
    """Row producer that publishes ``rows`` and then sets ``ready``."""

    def produce(publish, cancelled: threading.Event) -> None:
        for row in rows:
            publish(row)
        ready.set()

    return produce
