"""SSH public key normalization and local key discovery."""

from __future__ import annotations

import logging
import unicodedata
from pathlib import Path

from ..errors import KeyParseError

logger = logging.getLogger(__name__)

MAX_KEY_BODY_CHARS = 1000
_PRINTABLE_CATEGORY_PREFIXES = ("L", "N", "S", "M", "P")


def _is_printable(ch: str) -> bool:
    if ch.isspace():
        return True
    return unicodedata.category(ch).startswith(_PRINTABLE_CATEGORY_PREFIXES)


def parse_key(text: str | bytes) -> str:
    """Normalize an OpenSSH public key to ``"<type> <body>"``.

    The trailing comment, if any, is dropped so keys can be compared across
    machines. Raises ``KeyParseError`` for anything that is not plausibly a
    single public key line.
    """
    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="replace")
    if not text.startswith("ssh-"):
        raise KeyParseError("missing SSH prefix")
    if not all(_is_printable(ch) for ch in text):
        raise KeyParseError("contains non-printable characters")
    parts = text.split()
    if len(parts) < 2:
        raise KeyParseError("too short")
    if len(parts[1]) > MAX_KEY_BODY_CHARS:
        raise KeyParseError("hash string too long")
    return f"{parts[0]} {parts[1]}"


def local_public_keys(ssh_dir: Path | None = None, home: Path | None = None) -> dict[str, str]:
    """Map normalized public keys found in ``~/.ssh/*.pub`` to display paths.

    Paths under the home directory are shown with a ``~`` prefix. Unreadable
    or malformed files are skipped.
    """
    if home is None:
        home = Path.home()
    if ssh_dir is None:
        ssh_dir = home / ".ssh"
    try:
        candidates = sorted(ssh_dir.glob("*.pub"))
    except OSError:
        return {}

    try:
        human_dir = "~/" + ssh_dir.relative_to(home).as_posix()
    except ValueError:
        human_dir = str(ssh_dir)

    found: dict[str, str] = {}
    skipped = 0
    for candidate in candidates:
        try:
            key = parse_key(candidate.read_bytes())
        except (OSError, KeyParseError) as exc:
            logger.debug("skipping local public key %s: %s", candidate, exc)
            skipped += 1
            continue
        found[key] = f"{human_dir}/{candidate.name}"
    if skipped:
        logger.info("skipped %d unreadable or malformed local public keys", skipped)
    return found


__all__ = ["MAX_KEY_BODY_CHARS", "local_public_keys", "parse_key"]
