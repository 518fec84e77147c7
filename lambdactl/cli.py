"""Command-line front door for lambdactl.

Parses arguments, builds the API client from config, and dispatches to the
command workflows. Interactive menus run inside one raw-mode block; output
and child processes only happen after the terminal has been restored.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from . import commands
from .api.client import CloudClient
from .config import (
    API_KEY_ENV,
    CONFIG_PATH,
    load_api_base_url,
    load_api_key,
    load_menu_lines,
    load_poll_interval,
    load_ssh_user,
    save_api_key,
)
from .errors import LambdaCtlError
from .logs import setup_logging
from .menu.terminal import open_tty


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lambdactl", description="Launch, reach, and retire cloud GPU instances.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Write debug records to the log file.")
    parser.add_argument("--lines", type=_positive_int, default=None, help="Menu rows shown at once.")
    sub = parser.add_subparsers(dest="command", required=True)

    launch = sub.add_parser("launch", help="Pick an offer and SSH key, then launch an instance.")
    launch.add_argument("--name", default=None, help="Instance name (prompted when omitted).")
    launch.add_argument("--user-data", type=Path, default=None, help="cloud-init user-data file.")
    launch.add_argument("--filesystem", action="append", default=[], help="Filesystem to attach.")

    sub.add_parser("ssh", help="Pick a running instance and open an SSH session.")
    sub.add_parser("terminate", help="Pick an instance and terminate it.")
    sub.add_parser("offers", help="Print instance types with capacity, by region.")
    sub.add_parser("keys", help="Print SSH keys registered with the cloud account.")
    sub.add_parser("instances", help="Print current instances.")

    configure = sub.add_parser("configure", help="Store the API key in the config file.")
    configure.add_argument("api_key", help="API key to store.")
    return parser


def _client() -> CloudClient:
    api_key = load_api_key()
    if not api_key:
        raise SystemExit(f"No API key: set {API_KEY_ENV} or run 'lambdactl configure <key>'.")
    return CloudClient(api_key, base_url=load_api_base_url())


def _menu_options(lines: int | None) -> commands.MenuOptions:
    return commands.MenuOptions(
        lines=lines if lines is not None else load_menu_lines(),
        poll_interval=load_poll_interval(),
    )


def _run_launch(args: argparse.Namespace) -> None:
    client = _client()
    options = _menu_options(args.lines)
    user_data = ""
    if args.user_data is not None:
        if not args.user_data.is_file():
            raise SystemExit(f"Path not found: {args.user_data}")
        user_data = args.user_data.read_text(encoding="utf-8")
    with open_tty() as terminal, terminal.raw_mode():
        plan = commands.plan_launch(terminal, client, options, name=args.name)
    if plan is None:
        return
    instance_ids = commands.launch(client, plan, filesystems=args.filesystem, user_data=user_data)
    for instance_id in instance_ids:
        print(instance_id)


def _run_ssh(args: argparse.Namespace) -> None:
    client = _client()
    options = _menu_options(args.lines)
    with open_tty() as terminal, terminal.raw_mode():
        instance_id = commands.choose_instance(terminal, client, options, keep=commands.is_reachable)
    if instance_id is None:
        return
    instance = commands.find_instance(client, instance_id)
    if instance is None or not commands.is_reachable(instance):
        raise SystemExit(f"Instance {instance_id} is not reachable.")
    raise SystemExit(commands.run_ssh(instance, load_ssh_user()))


def _run_terminate(args: argparse.Namespace) -> None:
    client = _client()
    options = _menu_options(args.lines)
    with open_tty() as terminal, terminal.raw_mode():
        instance_id = commands.choose_instance(terminal, client, options, keep=commands.is_terminable)
    if instance_id is None:
        return
    client.terminate([instance_id])
    print(f"terminating {instance_id}")


def _run_keys(_args: argparse.Namespace) -> None:
    table, errors = commands.keys_table(_client())
    sys.stdout.write(table)
    for error in errors:
        print(error, file=sys.stderr)


def main(argv: list[str] | None = None) -> None:
    """Parse arguments and run one command.

    ``LambdaCtlError`` is reported on stderr with exit status 1; by then any
    raw-mode block has already restored the terminal.
    """
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        if args.command == "configure":
            save_api_key(args.api_key)
            print(f"saved API key to {CONFIG_PATH}")
        elif args.command == "launch":
            _run_launch(args)
        elif args.command == "ssh":
            _run_ssh(args)
        elif args.command == "terminate":
            _run_terminate(args)
        elif args.command == "offers":
            sys.stdout.write(commands.offers_table(_client()))
        elif args.command == "keys":
            _run_keys(args)
        elif args.command == "instances":
            sys.stdout.write(commands.instances_table(_client()))
    except LambdaCtlError as exc:
        print(f"lambdactl: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
