"""Typed views over cloud API payloads.

Regions are kept as plain strings validated against ``REGIONS``; offers are
addressed by ``Title`` (``<region>/<model>``). Parsing is strict for the
fields the CLI relies on and tolerant of anything else the API adds.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

REGIONS: tuple[str, ...] = (
    "asia-northeast-1",
    "asia-northeast-2",
    "asia-south-1",
    "australia-east-1",
    "europe-central-1",
    "me-west-1",
    "test-east-1",
    "test-west-1",
    "us-east-1",
    "us-east-2",
    "us-east-3",
    "us-midwest-1",
    "us-midwest-2",
    "us-south-1",
    "us-south-2",
    "us-south-3",
    "us-west-1",
    "us-west-2",
    "us-west-3",
)

INSTANCE_STATUSES: tuple[str, ...] = ("active", "booting", "terminated", "terminating", "unhealthy")


def parse_region(value: str) -> str:
    """Return ``value`` when it names a known region, else raise ``ValueError``."""
    if value not in REGIONS:
        raise ValueError(f"failed to parse region from {value!r}")
    return value


def _region_name(raw: Any) -> str:
    # Regions arrive either as a bare code or as {"name": ..., "description": ...}.
    if isinstance(raw, dict):
        raw = raw.get("name", "")
    return parse_region(str(raw))


@dataclass(frozen=True, order=True)
class Title:
    """An instance type offered in one region."""

    region: str
    model: str

    @classmethod
    def parse(cls, text: str) -> Title:
        region, sep, model = text.partition("/")
        if not sep:
            raise ValueError("'/' not found")
        if not model:
            raise ValueError(f"missing model in {text!r}")
        return cls(region=parse_region(region), model=model)

    def __str__(self) -> str:
        return f"{self.region}/{self.model}"


@dataclass(frozen=True)
class InstanceSpecs:
    gpus: int = 0
    memory_gib: int = 0
    storage_gib: int = 0
    vcpus: int = 0


@dataclass(frozen=True)
class InstanceQuote:
    """Instance type description and hourly price."""

    name: str
    description: str = ""
    gpu_description: str = ""
    price_cents_per_hour: int = 0
    specs: InstanceSpecs = field(default_factory=InstanceSpecs)

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> InstanceQuote:
        raw_specs = data.get("specs") or {}
        return cls(
            name=str(data["name"]),
            description=str(data.get("description", "")),
            gpu_description=str(data.get("gpu_description", "")),
            price_cents_per_hour=int(data.get("price_cents_per_hour", 0)),
            specs=InstanceSpecs(
                gpus=int(raw_specs.get("gpus", 0)),
                memory_gib=int(raw_specs.get("memory_gib", 0)),
                storage_gib=int(raw_specs.get("storage_gib", 0)),
                vcpus=int(raw_specs.get("vcpus", 0)),
            ),
        )

    def price_label(self) -> str:
        return "%5.2f" % (self.price_cents_per_hour / 100.0)


@dataclass(frozen=True)
class Instance:
    """One running (or recently terminated) compute instance."""

    id: str
    status: str
    region: str
    quote: InstanceQuote
    name: str | None = None
    ip: str | None = None
    private_ip: str | None = None
    hostname: str | None = None
    ssh_key_names: tuple[str, ...] = ()
    file_system_names: tuple[str, ...] = ()

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> Instance:
        status = str(data.get("status", ""))
        if status not in INSTANCE_STATUSES:
            raise ValueError(f"failed to parse instance status {status!r}")
        return cls(
            id=str(data["id"]),
            status=status,
            region=_region_name(data.get("region")),
            quote=InstanceQuote.from_json(data["instance_type"]),
            name=data.get("name") or None,
            ip=data.get("ip") or None,
            private_ip=data.get("private_ip") or None,
            hostname=data.get("hostname") or None,
            ssh_key_names=tuple(data.get("ssh_key_names") or ()),
            file_system_names=tuple(data.get("file_system_names") or ()),
        )


def parse_offers(data: dict[str, Any]) -> dict[Title, InstanceQuote]:
    """Flatten ``instance-types`` data into one quote per region-with-capacity."""
    offers: dict[Title, InstanceQuote] = {}
    for item in data.values():
        quote = InstanceQuote.from_json(item["instance_type"])
        for raw_region in item.get("regions_with_capacity_available") or ():
            try:
                region = _region_name(raw_region)
            except ValueError:
                continue
            offers[Title(region=region, model=quote.name)] = quote
    return offers


__all__ = [
    "INSTANCE_STATUSES",
    "REGIONS",
    "Instance",
    "InstanceQuote",
    "InstanceSpecs",
    "Title",
    "parse_offers",
    "parse_region",
]
