"""Enumerations for ioblate type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, eliminating boilerplate __str__ methods.

Python 3.13+.
"""

from enum import StrEnum


class Command(StrEnum):
    """Top-level command accepted on the command line.

    StrEnum provides automatic string conversion: str(Command.LOAD) == "load"
    """

    LOAD = "load"
    """Extract literals from sources into per-locale datasets."""

    SAVE = "save"
    """Write per-locale datasets back into the source literals."""


class SourceFormat(StrEnum):
    """How a source file is scanned for dictionary literals."""

    SCRIPT = "script"
    """JavaScript file, parsed directly."""

    MARKUP = "markup"
    """HTML document, inline <script> blocks are parsed."""


class FileStatus(StrEnum):
    """Outcome of processing one file during a command run."""

    UPDATED = "updated"
    """File was written."""

    UNCHANGED = "unchanged"
    """File was processed but nothing needed writing."""

    SKIPPED = "skipped"
    """File was not processed (missing target, unsupported type)."""

    ERROR = "error"
    """Processing failed; see the attached error."""


__all__ = [
    "Command",
    "FileStatus",
    "SourceFormat",
]
