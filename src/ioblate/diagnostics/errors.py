"""ioblate exception hierarchy with structured diagnostics.

All exceptions store Diagnostic objects for rich error information.
Only CommandUsageError is fatal; every other error is logged by the
workflow and processing continues with the next match or file.

Python 3.13+.
"""

from .codes import Diagnostic


class IoblateError(Exception):
    """Base exception for all ioblate errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize IoblateError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.message)
        else:
            self.diagnostic = None
            super().__init__(message)


class CommandUsageError(IoblateError):
    """Missing or unknown command on the command line.

    Fatal: raised before any file is touched.
    """


class FileReadError(IoblateError):
    """A source or dataset file cannot be read or decoded.

    The file is skipped; the run continues.

    Attributes:
        path: Path of the file that failed
    """

    def __init__(self, message: str | Diagnostic, *, path: str = "") -> None:
        super().__init__(message)
        self.path = path


class FileWriteError(IoblateError):
    """A dataset or source file cannot be written.

    The file is left untouched; the run continues with the next file.

    Attributes:
        path: Path of the file that failed
    """

    def __init__(self, message: str | Diagnostic, *, path: str = "") -> None:
        super().__init__(message)
        self.path = path


class ParseError(IoblateError):
    """File content cannot be parsed as its expected format.

    Covers JavaScript sources, inline script blocks and dataset JSON.
    The whole file is skipped.
    """


class EvaluationError(IoblateError):
    """A located literal is not a self-contained static expression.

    Only the offending match is skipped; remaining matches and files
    are still processed.
    """


class MissingTargetFileError(IoblateError):
    """A persisted translation references a source file that no longer exists.

    Raised during save only. That file's translations are skipped.
    """


class SpliceError(IoblateError, ValueError):
    """Replacement spans are out of range or overlap.

    Applying such replacements would corrupt the file, so nothing is
    written for it.
    """


__all__ = [
    "CommandUsageError",
    "EvaluationError",
    "FileReadError",
    "FileWriteError",
    "IoblateError",
    "MissingTargetFileError",
    "ParseError",
    "SpliceError",
]
