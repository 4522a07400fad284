"""
Error taxonomy for accession lookups.

Every error carries an ErrorKind tag plus the structured context that was
available where it was raised, so callers can branch on `err.kind` instead
of inspecting message text.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Category of lookup failure."""
    PARSE = "parse"
    EXTERNAL_TOOL = "external_tool"
    IO = "io"


class AccessionLookupError(Exception):
    """Base exception for accession lookup errors."""

    kind: ErrorKind = ErrorKind.PARSE

    def __init__(
        self,
        message: str,
        *,
        prefix: Optional[str] = None,
        target: Optional[str] = None,
        command: Optional[str] = None,
        path: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.prefix = prefix
        self.target = target
        self.command = command
        self.path = path

    def context(self) -> dict:
        """Structured context fields that are set."""
        fields = {
            "prefix": self.prefix,
            "target": self.target,
            "command": self.command,
            "path": self.path,
        }
        return {k: v for k, v in fields.items() if v is not None}

    def wrap(self, context: str) -> "AccessionLookupError":
        """
        Return a copy of this error with `context` prepended to the message.

        The copy keeps the same class, kind and structured fields, and is
        chained to the original via __cause__ when raised with `from`.
        """
        if not context.endswith("."):
            context += "."
        wrapped = self.__class__.__new__(self.__class__)
        wrapped.__dict__.update(self.__dict__)
        wrapped.message = f"{context} {self.message}"
        wrapped.args = (wrapped.message,)
        return wrapped

    def __str__(self) -> str:
        return self.message


class ParseError(AccessionLookupError):
    """Malformed integer or accession spec in the input."""

    kind = ErrorKind.PARSE


class ExternalToolError(AccessionLookupError):
    """The catalog search command failed or could not be started."""

    kind = ErrorKind.EXTERNAL_TOOL

    def __init__(
        self,
        message: str,
        *,
        returncode: Optional[int] = None,
        stderr: str = "",
        **context,
    ):
        super().__init__(message, **context)
        self.returncode = returncode
        self.stderr = stderr


class LookupIOError(AccessionLookupError):
    """Request or output file could not be opened, read or written."""

    kind = ErrorKind.IO
