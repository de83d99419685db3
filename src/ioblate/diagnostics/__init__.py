"""Diagnostic system for ioblate errors.

Provides structured error diagnostics with codes, spans and hints.
Inspired by Rust compiler diagnostics and Elm error messages.

Python 3.13+.
"""

from .codes import Diagnostic, DiagnosticCode, SourceSpan
from .errors import (
    CommandUsageError,
    EvaluationError,
    FileReadError,
    FileWriteError,
    IoblateError,
    MissingTargetFileError,
    ParseError,
    SpliceError,
)
from .formatter import DiagnosticFormatter, OutputFormat
from .templates import ErrorTemplate

__all__ = [
    "CommandUsageError",
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticFormatter",
    "ErrorTemplate",
    "EvaluationError",
    "FileReadError",
    "FileWriteError",
    "IoblateError",
    "MissingTargetFileError",
    "OutputFormat",
    "ParseError",
    "SourceSpan",
    "SpliceError",
]
