"""lambdactl: terminal menus for launching, reaching, and terminating GPU instances.

The streaming selection menu lives in ``lambdactl.menu``; the cloud API
client in ``lambdactl.api``. ``main`` runs the command line.
"""

from __future__ import annotations

__version__ = "0.1.0"


def main(argv: list[str] | None = None) -> None:
    """Run the CLI; the import is deferred so ``lambdactl.menu`` users skip argparse setup."""
    from .cli import main as _main

    _main(argv)


__all__ = ["__version__", "main"]
