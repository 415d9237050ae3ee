"""Exceptions raised by govar-core."""

from __future__ import annotations


class GovarError(Exception):
    """Base class for every error raised by this package."""


class GovarParseError(GovarError):
    """Source text that the parser cannot turn into declarations."""

    def __init__(self, message: str, line: int | None = None, column: int | None = None) -> None:
        self.line = line
        self.column = column
        if line is not None:
            message = f"{line}:{column}: {message}"
        super().__init__(message)
