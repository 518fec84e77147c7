"""Producer tasks feeding the menu event queue.

A producer is a callable ``producer(publish, cancelled)`` run on its own
thread. It publishes until it runs out of work or ``cancelled`` is set;
exceptions it raises are held by the session and re-raised to the caller
after the menu ends.
"""

from __future__ import annotations

import codecs
import logging
import os
import select
import threading
from collections.abc import Callable, Iterable
from typing import Any

from ..rows import InstanceRow, RemovedRow

logger = logging.getLogger(__name__)

Publish = Callable[[Any], None]

DEFAULT_POLL_INTERVAL_SECONDS = 0.5


class KeyReader:
    """Read raw chunks from the terminal and publish them as decoded text.

    Multi-byte UTF-8 split across reads is reassembled before publishing.
    Returns when the input reaches EOF or the menu is cancelled.
    """

    def __init__(self, fd: int, poll_seconds: float = 0.05, chunk_size: int = 4096) -> None:
        self.fd = fd
        self.poll_seconds = poll_seconds
        self.chunk_size = chunk_size

    def __call__(self, publish: Publish, cancelled: threading.Event) -> None:
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        while not cancelled.is_set():
            ready, _, _ = select.select([self.fd], [], [], self.poll_seconds)
            if not ready:
                continue
            data = os.read(self.fd, self.chunk_size)
            if not data:
                return
            text = decoder.decode(data)
            if text:
                publish(text)


def static_rows(rows: Iterable[Any]) -> Callable[[Publish, threading.Event], None]:
    """Producer that publishes a fixed list of rows once."""
    snapshot = list(rows)

    def produce(publish: Publish, cancelled: threading.Event) -> None:
        for row in snapshot:
            if cancelled.is_set():
                return
            publish(row)

    return produce


class InstancePoller:
    """Poll the instance list and publish the difference since the last poll.

    Instances that disappear are published as ``RemovedRow`` tombstones.
    A failed poll publishes nothing and is retried after the usual interval.
    If no poll ever succeeded, the last error is raised when the menu ends.
    """

    def __init__(
        self,
        list_instances: Callable[[], list],
        interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
        keep: Callable[[Any], bool] | None = None,
    ) -> None:
        self.list_instances = list_instances
        self.interval = interval
        self.keep = keep

    def __call__(self, publish: Publish, cancelled: threading.Event) -> None:
        known: set[str] = set()
        succeeded = False
        last_error: Exception | None = None
        while not cancelled.is_set():
            try:
                instances = self.list_instances()
            except Exception as exc:
                logger.warning("instance poll failed, retrying in %.2fs: %s", self.interval, exc)
                last_error = exc
            else:
                succeeded = True
                seen: set[str] = set()
                for instance in instances:
                    if self.keep is not None and not self.keep(instance):
                        continue
                    seen.add(instance.id)
                    publish(InstanceRow(instance))
                for gone in sorted(known - seen):
                    publish(RemovedRow(gone))
                known = seen
            if cancelled.wait(self.interval):
                break
        if not succeeded and last_error is not None:
            raise last_error


__all__ = ["DEFAULT_POLL_INTERVAL_SECONDS", "InstancePoller", "KeyReader", "Publish", "static_rows"]
