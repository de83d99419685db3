"""ioblate - ioBroker translation converter.

Moves the translations of ioBroker adapter admin pages between the
``systemDictionary`` literals embedded in JavaScript/HTML sources and
per-locale JSON datasets (``i18n/words-<locale>.json``) that translators
edit.

Public API:
    run_load - Extract literals from sources into the datasets
    run_save - Write the datasets back into the source literals
    IoblateConfig - Settings for one run
    RunSummary, FileResult - Per-file outcome of a run
    locate - Find dictionary literals in JavaScript text
    evaluate_literal - Turn literal text into Python data without executing it
    splice - Rewrite literal spans of a text

Exceptions:
    IoblateError - Base exception class
    CommandUsageError, FileReadError, FileWriteError, ParseError,
    EvaluationError, MissingTargetFileError, SpliceError

Submodules:
    ioblate.syntax - Locating, evaluating and rewriting literals
    ioblate.dataset - Persisted datasets and the merge engine
    ioblate.diagnostics - Error types, codes and formatting
    ioblate.cli - Command line entry point
"""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

from .config import IoblateConfig
from .diagnostics import (
    CommandUsageError,
    EvaluationError,
    FileReadError,
    FileWriteError,
    IoblateError,
    MissingTargetFileError,
    ParseError,
    SpliceError,
)
from .enums import Command, FileStatus, SourceFormat
from .syntax import evaluate_literal, locate, splice
from .workflow import FileResult, RunSummary, run, run_load, run_save

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
try:
    __version__ = _get_version("ioblate")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "Command",
    "CommandUsageError",
    "EvaluationError",
    "FileReadError",
    "FileResult",
    "FileStatus",
    "FileWriteError",
    "IoblateConfig",
    "IoblateError",
    "MissingTargetFileError",
    "ParseError",
    "RunSummary",
    "SourceFormat",
    "SpliceError",
    "__version__",
    "evaluate_literal",
    "locate",
    "run",
    "run_load",
    "run_save",
    "splice",
]
