"""Command workflows built from menus and API calls.

Menu-driven helpers expect the terminal to already be in raw mode and
return plain values; anything that prints or spawns a process runs after
the caller has restored the terminal.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from collections.abc import Callable
from dataclasses import dataclass

from .api.client import CloudClient
from .api.models import Instance, Title
from .api.sshkeys import local_public_keys
from .menu.layout import stretch
from .menu.producers import InstancePoller, static_rows
from .menu.session import DEFAULT_MENU_LINES, select_one
from .rows import InstanceRow, offer_rows, ssh_key_rows

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MenuOptions:
    lines: int = DEFAULT_MENU_LINES
    poll_interval: float = 0.5


def choose_offer(terminal, client: CloudClient, options: MenuOptions) -> Title | None:
    """Pick an instance type and region; typed text must parse as a title."""
    rows = offer_rows(client.offers())
    choice = select_one(terminal, [static_rows(rows)], lines=options.lines)
    if choice is None:
        return None
    try:
        return Title.parse(choice)
    except ValueError as exc:
        logger.info("ignoring unparseable offer selection %r: %s", choice, exc)
        return None


def choose_ssh_key(terminal, client: CloudClient, options: MenuOptions) -> str | None:
    cloud_keys, _errors = client.ssh_keys()
    rows = ssh_key_rows(cloud_keys, local_public_keys())
    choice = select_one(terminal, [static_rows(rows)], lines=options.lines)
    return choice or None


def choose_name(terminal, options: MenuOptions) -> str | None:
    """Free-text prompt: an empty menu whose submit returns the typed text."""
    return select_one(terminal, [], lines=options.lines)


def choose_instance(
    terminal,
    client: CloudClient,
    options: MenuOptions,
    keep: Callable[[Instance], bool] | None = None,
) -> str | None:
    """Pick from the live instance list, refreshed every poll interval."""
    poller = InstancePoller(client.instances, interval=options.poll_interval, keep=keep)
    choice = select_one(terminal, [poller], lines=options.lines)
    return choice or None


def find_instance(client: CloudClient, instance_id: str) -> Instance | None:
    for instance in client.instances():
        if instance.id == instance_id:
            return instance
    return None


def is_reachable(instance: Instance) -> bool:
    return instance.status == "active" and bool(instance.ip)


def is_terminable(instance: Instance) -> bool:
    return instance.status not in {"terminated", "terminating"}


@dataclass(frozen=True)
class LaunchPlan:
    title: Title
    ssh_key_name: str
    name: str


def plan_launch(terminal, client: CloudClient, options: MenuOptions, name: str | None = None) -> LaunchPlan | None:
    """Walk the offer, SSH key, and name menus; ``None`` if any is cancelled."""
    title = choose_offer(terminal, client, options)
    if title is None:
        return None
    ssh_key_name = choose_ssh_key(terminal, client, options)
    if ssh_key_name is None:
        return None
    if name is None:
        name = choose_name(terminal, options)
        if name is None:
            return None
    return LaunchPlan(title=title, ssh_key_name=ssh_key_name, name=name)


def launch(
    client: CloudClient,
    plan: LaunchPlan,
    filesystems: list[str] | None = None,
    user_data: str = "",
) -> list[str]:
    instance_ids = client.launch(plan.title, plan.name, [plan.ssh_key_name], filesystems, user_data)
    logger.info("launched %s as %s", plan.title, ", ".join(instance_ids))
    return instance_ids


def ssh_command(instance: Instance, user: str) -> list[str]:
    return ["ssh", f"{user}@{instance.ip}"]


def run_ssh(instance: Instance, user: str) -> int:
    command = ssh_command(instance, user)
    logger.info("running %s", " ".join(command))
    return subprocess.call(command)


def format_table(rows: list[list[str]], width: int | None = None) -> str:
    """Lay rows out the way the menu does, one line each, for plain output."""
    if width is None:
        width = shutil.get_terminal_size((80, 24)).columns
    return "".join(line.rstrip() + "\n" for line in stretch(rows, width))


def offers_table(client: CloudClient, width: int | None = None) -> str:
    return format_table([row.fields() for row in offer_rows(client.offers())], width)


def keys_table(client: CloudClient, width: int | None = None) -> tuple[str, list[str]]:
    """Key table plus descriptions of cloud keys that failed to parse."""
    cloud_keys, errors = client.ssh_keys()
    return format_table([row.fields() for row in ssh_key_rows(cloud_keys, local_public_keys())], width), errors


def instances_table(client: CloudClient, width: int | None = None) -> str:
    return format_table([InstanceRow(instance).fields() for instance in client.instances()], width)


__all__ = [
    "LaunchPlan",
    "MenuOptions",
    "choose_instance",
    "choose_name",
    "choose_offer",
    "choose_ssh_key",
    "find_instance",
    "format_table",
    "instances_table",
    "is_reachable",
    "is_terminable",
    "keys_table",
    "launch",
    "offers_table",
    "plan_launch",
    "run_ssh",
    "ssh_command",
]
