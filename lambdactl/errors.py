"""Exception types shared by the menu engine, API client, and CLI.

Everything user-facing derives from ``LambdaCtlError`` so the CLI can
report it once, after the terminal has been restored.
"""

from __future__ import annotations


class LambdaCtlError(Exception):
    """Base class for errors surfaced to the command line."""


class TerminalError(LambdaCtlError):
    """Raw mode or size probe failed; the menu cannot start."""


class ApiError(LambdaCtlError):
    """HTTP call to the cloud API failed or returned a non-2xx status."""

    def __init__(self, message: str, status: int | None = None, code: str = "", suggestion: str = "") -> None:
        super().__init__(message)
        self.status = status
        self.code = code
        self.suggestion = suggestion

    def __str__(self) -> str:
        text = super().__str__()
        if self.status is not None:
            text = f"{text} (HTTP {self.status})"
        if self.suggestion:
            text = f"{text}: {self.suggestion}"
        return text


class KeyParseError(LambdaCtlError):
    """SSH public key text could not be normalized."""


__all__ = ["ApiError", "KeyParseError", "LambdaCtlError", "TerminalError"]
