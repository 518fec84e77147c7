"""Row kinds shown by the selection menu.

Every row answers ``identity()`` (stable key for reconciliation) and
``fields()`` (display columns, or ``None`` to remove that identity).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .api.models import Instance, InstanceQuote, Title

MAX_KEY_NAME_CHARS = 15
NO_LOCAL_PATH = "-"


@dataclass(frozen=True)
class SSHKeyRow:
    name: str
    local_path: str = NO_LOCAL_PATH

    def identity(self) -> str:
        return self.name

    def fields(self) -> list[str] | None:
        return [self.name, self.local_path]


@dataclass(frozen=True)
class OfferRow:
    title: Title
    quote: InstanceQuote

    def identity(self) -> str:
        return str(self.title)

    def fields(self) -> list[str] | None:
        return [self.title.model, self.title.region, self.quote.price_label()]


@dataclass(frozen=True)
class InstanceRow:
    instance: Instance

    def identity(self) -> str:
        return self.instance.id

    def fields(self) -> list[str] | None:
        instance = self.instance
        return [
            instance.name or "-",
            instance.ip or "-",
            instance.status,
            instance.region,
            instance.quote.name,
        ]


@dataclass(frozen=True)
class TextRow:
    """Plain single-column entry; identity is the text itself."""

    text: str

    def identity(self) -> str:
        return self.text

    def fields(self) -> list[str] | None:
        return [self.text]


@dataclass(frozen=True)
class RemovedRow:
    """Tombstone telling the item store to drop ``key``."""

    key: str

    def identity(self) -> str:
        return self.key

    def fields(self) -> list[str] | None:
        return None


Row = Union[SSHKeyRow, OfferRow, InstanceRow, TextRow, RemovedRow]


def offer_rows(offers: dict[Title, InstanceQuote]) -> list[OfferRow]:
    """Offer rows sorted by region, then model."""
    return [OfferRow(title=title, quote=offers[title]) for title in sorted(offers)]


def ssh_key_rows(cloud_keys: dict[str, list[str]], local_keys: dict[str, str]) -> list[SSHKeyRow]:
    """One row per cloud key name, annotated with a matching local key file.

    Names longer than ``MAX_KEY_NAME_CHARS`` are left out. Keys that have a
    local counterpart sort first, then rows sort by name.
    """
    rows: list[SSHKeyRow] = []
    for public_key, names in cloud_keys.items():
        local_path = local_keys.get(public_key, NO_LOCAL_PATH)
        for name in names:
            if len(name) > MAX_KEY_NAME_CHARS:
                continue
            rows.append(SSHKeyRow(name=name, local_path=local_path))
    rows.sort(key=lambda row: (row.local_path == NO_LOCAL_PATH, row.name))
    return rows


__all__ = [
    "InstanceRow",
    "MAX_KEY_NAME_CHARS",
    "NO_LOCAL_PATH",
    "OfferRow",
    "RemovedRow",
    "Row",
    "SSHKeyRow",
    "TextRow",
    "offer_rows",
    "ssh_key_rows",
]
