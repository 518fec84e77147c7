"""Tests for key reading and row-producing tasks."""

from __future__ import annotations

import os
import threading
import unittest

from lambdactl.api.models import Instance, InstanceQuote
from lambdactl.errors import ApiError
from lambdactl.menu.producers import InstancePoller, KeyReader, static_rows
from lambdactl.rows import InstanceRow, RemovedRow, TextRow


def _instance(instance_id: str, status: str = "active", ip: str | None = "10.0.0.1") -> Instance:
    return Instance(
        id=instance_id,
        status=status,
        region="us-east-1",
        quote=InstanceQuote(name="gpu_1x_a10", price_cents_per_hour=75),
        name=f"box-{instance_id}",
        ip=ip,
    )


class KeyReaderTests(unittest.TestCase):
    def test_publishes_chunks_and_returns_on_eof(self) -> None:
        read_fd, write_fd = os.pipe()
        published: list[str] = []
        try:
            os.write(write_fd, b"ab")
            os.close(write_fd)
            write_fd = -1
            KeyReader(read_fd, poll_seconds=0.01)(published.append, threading.Event())
        finally:
            os.close(read_fd)
            if write_fd >= 0:
                os.close(write_fd)

        self.assertEqual("".join(published), "ab")

    def test_reassembles_utf8_split_across_reads(self) -> None:
        read_fd, write_fd = os.pipe()
        published: list[str] = []
        encoded = "é".encode("utf-8")
        try:
            os.write(write_fd, encoded[:1])
            reader = KeyReader(read_fd, poll_seconds=0.01, chunk_size=1)
            thread = threading.Thread(target=reader, args=(published.append, threading.Event()))
            thread.start()
            os.write(write_fd, encoded[1:])
            os.close(write_fd)
            write_fd = -1
            thread.join(2.0)
        finally:
            os.close(read_fd)
            if write_fd >= 0:
                os.close(write_fd)

        self.assertEqual(published, ["é"])

    def test_stops_when_cancelled(self) -> None:
        read_fd, write_fd = os.pipe()
        cancelled = threading.Event()
        try:
            reader = KeyReader(read_fd, poll_seconds=0.01)
            thread = threading.Thread(target=reader, args=(lambda _chunk: None, cancelled))
            thread.start()
            cancelled.set()
            thread.join(2.0)
            self.assertFalse(thread.is_alive())
        finally:
            os.close(read_fd)
            os.close(write_fd)


class StaticRowsTests(unittest.TestCase):
    def test_publishes_each_row_once(self) -> None:
        published: list = []

        static_rows([TextRow("a"), TextRow("b")])(published.append, threading.Event())

        self.assertEqual(published, [TextRow("a"), TextRow("b")])

    def test_publishes_nothing_once_cancelled(self) -> None:
        cancelled = threading.Event()
        cancelled.set()
        published: list = []

        static_rows([TextRow("a")])(published.append, cancelled)

        self.assertEqual(published, [])


class InstancePollerTests(unittest.TestCase):
    def test_publishes_updates_and_tombstones_between_polls(self) -> None:
        cancelled = threading.Event()
        polls = [
            [_instance("i-1"), _instance("i-2")],
            [_instance("i-2", status="booting")],
        ]
        published: list = []

        def list_instances() -> list[Instance]:
            result = polls.pop(0)
            if not polls:
                cancelled.set()
            return result

        InstancePoller(list_instances, interval=0.0)(published.append, cancelled)

        self.assertEqual(
            published,
            [
                InstanceRow(_instance("i-1")),
                InstanceRow(_instance("i-2")),
                InstanceRow(_instance("i-2", status="booting")),
                RemovedRow("i-1"),
            ],
        )

    def test_filtered_instances_are_not_published(self) -> None:
        cancelled = threading.Event()
        published: list = []

        def list_instances() -> list[Instance]:
            cancelled.set()
            return [_instance("i-1"), _instance("i-2", ip=None)]

        InstancePoller(list_instances, interval=0.0, keep=lambda inst: inst.ip is not None)(
            published.append, cancelled
        )

        self.assertEqual(published, [InstanceRow(_instance("i-1"))])

    def test_failed_poll_is_retried_without_removing_rows(self) -> None:
        cancelled = threading.Event()
        calls: list[int] = []
        published: list = []

        def list_instances() -> list[Instance]:
            calls.append(1)
            if len(calls) == 2:
                raise ApiError("transient", status=503)
            if len(calls) == 3:
                cancelled.set()
            return [_instance("i-1")]

        InstancePoller(list_instances, interval=0.0)(published.append, cancelled)

        self.assertEqual(len(calls), 3)
        self.assertEqual(published, [InstanceRow(_instance("i-1")), InstanceRow(_instance("i-1"))])

    def test_first_poll_failure_recovers_on_next_tick(self) -> None:
        cancelled = threading.Event()
        calls: list[int] = []
        published: list = []

        def list_instances() -> list[Instance]:
            calls.append(1)
            if len(calls) == 1:
                raise ApiError("transient", status=503)
            cancelled.set()
            return [_instance("i-1")]

        InstancePoller(list_instances, interval=0.0)(published.append, cancelled)

        self.assertEqual(published, [InstanceRow(_instance("i-1"))])

    def test_error_is_raised_when_no_poll_ever_succeeds(self) -> None:
        cancelled = threading.Event()
        calls: list[int] = []

        def list_instances() -> list[Instance]:
            calls.append(1)
            if len(calls) == 2:
                cancelled.set()
            raise ApiError("boom", status=500)

        with self.assertRaises(ApiError):
            InstancePoller(list_instances, interval=0.0)(lambda _row: None, cancelled)
        self.assertEqual(len(calls), 2)


if __name__ == "__main__":
    unittest.main()
