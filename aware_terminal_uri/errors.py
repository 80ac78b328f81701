"""Exceptions raised by the terminal URI codec."""

from __future__ import annotations

from typing import Optional


class TerminalUriError(ValueError):
    """Base class for terminal URI failures."""


class TerminalUriParseError(TerminalUriError):
    """Raised when a structured query value cannot be decoded."""

    def __init__(self, field: str, message: str, *, value: Optional[str] = None) -> None:
        super().__init__(f"Invalid '{field}' in terminal URI: {message}")
        self.field = field
        self.value = value


class TerminalUriConfigError(TerminalUriError):
    """Raised when codec configuration cannot be loaded or validated."""


__all__ = ["TerminalUriConfigError", "TerminalUriError", "TerminalUriParseError"]
