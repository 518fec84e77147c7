"""Insertion-ordered item store with reconcile-by-identity updates.

Rows are replaced in place when their identity is already known, appended
otherwise, and removed eagerly when an update carries no fields.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any


class ItemStore:
    """Ordered rows plus an identity -> position index that always agrees with it."""

    def __init__(self) -> None:
        self._items: list[Any] = []
        self._positions: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._items)

    def __getitem__(self, index: int) -> Any:
        return self._items[index]

    def __contains__(self, identity: object) -> bool:
        return identity in self._positions

    def position(self, identity: str) -> int | None:
        return self._positions.get(identity)

    def identities(self) -> list[str]:
        return [row.identity() for row in self._items]

    def window(self, start: int, count: int) -> list[Any]:
        return self._items[start : start + max(0, count)]

    def upsert(self, row: Any) -> None:
        """Apply one row update.

        A known identity keeps its position; a new identity goes to the end;
        a row whose ``fields()`` is ``None`` deletes its identity and shifts
        every later row up by one.
        """
        identity = row.identity()
        index = self._positions.get(identity)
        if row.fields() is None:
            if index is not None:
                self._remove_at(index)
            return
        if index is not None:
            self._items[index] = row
            return
        self._positions[identity] = len(self._items)
        self._items.append(row)

    def remove(self, identity: str) -> bool:
        index = self._positions.get(identity)
        if index is None:
            return False
        self._remove_at(index)
        return True

    def _remove_at(self, index: int) -> None:
        removed = self._items.pop(index)
        del self._positions[removed.identity()]
        for later in range(index, len(self._items)):
            self._positions[self._items[later].identity()] = later


__all__ = ["ItemStore"]
