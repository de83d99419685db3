"""The load and save commands.

load:
    Scan every JavaScript and HTML file below the project root, evaluate
    each dictionary literal and merge the translations into the per-locale
    datasets. Keys that disappeared from the sources are pruned.

save:
    Read the per-locale datasets, regroup them per source file and write
    the translations back into each file's dictionary literals.

Failures are isolated per file (and per literal for evaluation errors):
they are logged, recorded in the returned RunSummary and never stop the
run.

Python 3.13+.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from ioblate.config import IoblateConfig
from ioblate.dataset import DatasetStore, LoadAggregate, merge_for_load, merge_for_save, regroup
from ioblate.diagnostics import (
    DiagnosticFormatter,
    ErrorTemplate,
    EvaluationError,
    FileReadError,
    FileWriteError,
    IoblateError,
    MissingTargetFileError,
    ParseError,
    SpliceError,
)
from ioblate.enums import Command, FileStatus, SourceFormat
from ioblate.fileio import discover_files, read_text_file, write_text_file
from ioblate.locale_utils import display_name
from ioblate.syntax import LineOffsetCache, LiteralMatch, Replacement, evaluate, splice
from ioblate.syntax.locator import locate
from ioblate.syntax.markup import locate_in_document

__all__ = [
    "FileResult",
    "RunSummary",
    "run",
    "run_load",
    "run_save",
    "source_format",
]

logger = logging.getLogger(__name__)

_SCRIPT_SUFFIXES: frozenset[str] = frozenset({".js"})
_MARKUP_SUFFIXES: frozenset[str] = frozenset({".htm", ".html"})


@dataclass(frozen=True, slots=True)
class FileResult:
    """Outcome of processing one file.

    Attributes:
        path: Path relative to the project root
        status: What happened to the file
        error: Exception if status is ERROR or SKIPPED, None otherwise
        literals: Number of dictionary literals processed in the file
    """

    path: str
    status: FileStatus
    error: Exception | None = None
    literals: int = 0

    @property
    def is_updated(self) -> bool:
        """Check if the file was written."""
        return self.status == FileStatus.UPDATED

    @property
    def is_error(self) -> bool:
        """Check if processing the file failed."""
        return self.status == FileStatus.ERROR


@dataclass(frozen=True, slots=True)
class RunSummary:
    """Immutable aggregate of file results from one command run.

    Attributes:
        command: Command that produced the results
        results: Per-file results in processing order

    Example:
        >>> summary = run_load(IoblateConfig(root=Path(".")))
        >>> for result in summary.get_errors():
        ...     print(f"Failed: {result.path}: {result.error}")
    """

    command: Command
    results: tuple[FileResult, ...]

    def __repr__(self) -> str:
        """Return string representation for debugging."""
        return (
            f"RunSummary(command={self.command}, total={self.total}, "
            f"updated={self.updated}, errors={self.errors})"
        )

    @property
    def total(self) -> int:
        """Number of files processed."""
        return len(self.results)

    @property
    def updated(self) -> int:
        """Number of files written."""
        return sum(1 for r in self.results if r.is_updated)

    @property
    def unchanged(self) -> int:
        """Number of files that needed no write."""
        return sum(1 for r in self.results if r.status == FileStatus.UNCHANGED)

    @property
    def skipped(self) -> int:
        """Number of files not processed."""
        return sum(1 for r in self.results if r.status == FileStatus.SKIPPED)

    @property
    def errors(self) -> int:
        """Number of files that failed."""
        return sum(1 for r in self.results if r.is_error)

    def get_errors(self) -> tuple[FileResult, ...]:
        """Get all results with errors."""
        return tuple(r for r in self.results if r.is_error)

    def get_result(self, path: str) -> FileResult | None:
        """Result for path (relative to root), or None if it was not processed."""
        return next((r for r in self.results if r.path == path), None)


def source_format(path: Path) -> SourceFormat | None:
    """How path is scanned, or None if its type is not supported."""
    suffix = path.suffix.lower()
    if suffix in _SCRIPT_SUFFIXES:
        return SourceFormat.SCRIPT
    if suffix in _MARKUP_SUFFIXES:
        return SourceFormat.MARKUP
    return None


def _describe(error: IoblateError, formatter: DiagnosticFormatter, file_name: str) -> str:
    """Render error for a log line, attributing it to file_name."""
    diagnostic = error.diagnostic
    if diagnostic is None:
        return str(error)
    if diagnostic.file_path is None:
        diagnostic = replace(diagnostic, file_path=file_name)
    return formatter.format(diagnostic)


def _find_literals(
    text: str, file_name: str, path: Path, config: IoblateConfig
) -> Iterator[LiteralMatch]:
    """Locate dictionary literals according to the file type.

    Raises:
        ParseError: If the file type is unsupported or the file does not parse
    """
    match source_format(path):
        case SourceFormat.SCRIPT:
            return locate(text, config.identifiers)
        case SourceFormat.MARKUP:
            return locate_in_document(text, config.identifiers)
        case _:
            raise ParseError(ErrorTemplate.unsupported_file_type(file_name))


def _evaluated_literals(
    text: str,
    file_name: str,
    path: Path,
    config: IoblateConfig,
    *,
    indent: str = "",
    failures: list[EvaluationError] | None = None,
) -> Iterator[tuple[LiteralMatch, Any]]:
    """Yield (match, value) for every literal of text that evaluates.

    Literals that fail to evaluate are logged and skipped; their errors are
    appended to failures when given.
    """
    lines = LineOffsetCache(text)
    formatter = DiagnosticFormatter(output_format=config.output_format)

    for match in _find_literals(text, file_name, path, config):
        start_line, start_col = lines.get_line_col(match.match_span.start)
        end_line, end_col = lines.get_line_col(match.match_span.end)
        logger.info(
            "%sFound systemDictionary in %s from %d:%d to %d:%d",
            indent,
            file_name,
            start_line,
            start_col,
            end_line,
            end_col,
        )
        try:
            value = evaluate(text, match.value_span)
        except EvaluationError as e:
            logger.warning("%s%s", indent, _describe(e, formatter, file_name))
            if failures is not None:
                failures.append(e)
            continue
        yield match, value


# ============================================================================
# LOAD
# ============================================================================


def _scan_file(path: Path, config: IoblateConfig, aggregate: LoadAggregate) -> FileResult:
    """Collect the translations of one source file into aggregate.

    A file contributes all of its literals or none of them. When it cannot
    be read or parsed, or one of its literals does not evaluate, its
    persisted keys are protected from pruning.
    """
    file_name = config.relative_name(path)
    formatter = DiagnosticFormatter(output_format=config.output_format)
    failures: list[EvaluationError] = []

    try:
        text = read_text_file(path, config.legacy_encoding)
        values = [
            value
            for _match, value in _evaluated_literals(
                text, file_name, path, config, failures=failures
            )
        ]
    except (FileReadError, ParseError) as e:
        logger.error("Couldn't parse file %s: %s", file_name, _describe(e, formatter, file_name))
        aggregate.mark_failed(file_name)
        return FileResult(path=file_name, status=FileStatus.ERROR, error=e)

    for value in values:
        keys = aggregate.add_literal(file_name, value)
        logger.debug("  %d key(s) recorded from %s", keys, file_name)

    if failures:
        logger.warning("Keeping the existing translations of %s", file_name)
        aggregate.mark_failed(file_name)

    return FileResult(path=file_name, status=FileStatus.UNCHANGED, literals=len(values))


def _update_dataset(
    store: DatasetStore, locale: str, aggregate: LoadAggregate, config: IoblateConfig
) -> FileResult:
    """Merge the aggregate into one locale's dataset and persist it."""
    path = store.path_for(locale)
    file_name = config.relative_name(path)
    formatter = DiagnosticFormatter(output_format=config.output_format)

    try:
        existing = store.read(locale)
    except (FileReadError, ParseError) as e:
        logger.error("Couldn't read %s: %s", file_name, _describe(e, formatter, file_name))
        return FileResult(path=file_name, status=FileStatus.ERROR, error=e)

    if existing is None:
        logger.info("Creating %s (%s)", file_name, display_name(locale))
    else:
        logger.info("Updating %s (%s)", file_name, display_name(locale))

    all_keys = None if aggregate.is_empty else aggregate.all_keys
    outcome = merge_for_load(
        existing, aggregate.found.get(locale, {}), all_keys, aggregate.failed_files
    )

    if existing is not None:
        for key, translation in outcome.added:
            logger.info("  + %s: %s", key, translation)
        for key, translation in outcome.removed:
            logger.info("  - %s: %s", key, translation)

    if not outcome.needs_write:
        logger.info("  = no changes")
        return FileResult(path=file_name, status=FileStatus.UNCHANGED)

    try:
        store.write(locale, outcome.data)
    except FileWriteError as e:
        logger.error("Couldn't write %s: %s", file_name, _describe(e, formatter, file_name))
        return FileResult(path=file_name, status=FileStatus.ERROR, error=e)

    return FileResult(path=file_name, status=FileStatus.UPDATED)


def run_load(config: IoblateConfig) -> RunSummary:
    """Extract translations from all sources into the per-locale datasets.

    Returns:
        Summary with one result per scanned source file followed by one
        result per dataset file
    """
    aggregate = LoadAggregate()
    results: list[FileResult] = []

    patterns = config.script_patterns + config.markup_patterns
    for path in discover_files(config.root, patterns, config.excluded_dirs):
        results.append(_scan_file(path, config, aggregate))

    store = DatasetStore(
        config.dataset_dir, indent=config.indent, legacy_encoding=config.legacy_encoding
    )
    if aggregate.is_empty:
        logger.warning("No translatable strings found; existing datasets are not pruned")

    for locale in sorted(set(aggregate.locales) | set(store.list_locales())):
        results.append(_update_dataset(store, locale, aggregate, config))

    return RunSummary(command=Command.LOAD, results=tuple(results))


# ============================================================================
# SAVE
# ============================================================================


def _read_datasets(
    store: DatasetStore, config: IoblateConfig, results: list[FileResult]
) -> dict[str, dict[str, Any]]:
    """Read every dataset; unreadable ones are logged and recorded in results."""
    formatter = DiagnosticFormatter(output_format=config.output_format)
    datasets: dict[str, dict[str, Any]] = {}

    for locale in store.list_locales():
        file_name = config.relative_name(store.path_for(locale))
        try:
            data = store.read(locale)
        except (FileReadError, ParseError) as e:
            logger.error("Couldn't read %s: %s", file_name, _describe(e, formatter, file_name))
            results.append(FileResult(path=file_name, status=FileStatus.ERROR, error=e))
            continue
        if data is not None:
            datasets[locale] = data

    return datasets


def _update_source(
    file_name: str, supplied: dict[str, dict[str, Any]], config: IoblateConfig
) -> FileResult:
    """Write supplied translations into the literals of one source file."""
    formatter = DiagnosticFormatter(output_format=config.output_format)

    try:
        path = config.resolve(file_name)
    except MissingTargetFileError as e:
        logger.warning("%s", _describe(e, formatter, file_name))
        return FileResult(path=file_name, status=FileStatus.SKIPPED, error=e)

    if not path.is_file():
        error = MissingTargetFileError(ErrorTemplate.target_file_missing(file_name))
        logger.warning("%s", _describe(error, formatter, file_name))
        return FileResult(path=file_name, status=FileStatus.SKIPPED, error=error)

    logger.info("Updating %s", file_name)
    try:
        text = read_text_file(path, config.legacy_encoding)
        replacements = [
            Replacement(
                span=match.value_span,
                data=merge_for_save(value, supplied),
                indent=match.indentation(text),
            )
            for match, value in _evaluated_literals(text, file_name, path, config, indent="  ")
        ]
        logger.info("  Replacing %d section(s) of %s", len(replacements), file_name)
        new_text = splice(text, replacements, config.indent)
        if new_text == text:
            return FileResult(
                path=file_name, status=FileStatus.UNCHANGED, literals=len(replacements)
            )
        write_text_file(path, new_text)
    except (FileReadError, ParseError, SpliceError, FileWriteError) as e:
        logger.error("Couldn't update file %s: %s", file_name, _describe(e, formatter, file_name))
        return FileResult(path=file_name, status=FileStatus.ERROR, error=e)

    return FileResult(path=file_name, status=FileStatus.UPDATED, literals=len(replacements))


def run_save(config: IoblateConfig) -> RunSummary:
    """Write the per-locale datasets back into the source literals.

    Returns:
        Summary with one result per unreadable dataset followed by one
        result per source file named in the datasets
    """
    store = DatasetStore(
        config.dataset_dir, indent=config.indent, legacy_encoding=config.legacy_encoding
    )
    results: list[FileResult] = []
    grouped = regroup(_read_datasets(store, config, results))

    if not grouped:
        logger.warning("No translations found in %s", config.relative_name(store.directory))

    for file_name, supplied in grouped.items():
        results.append(_update_source(file_name, supplied, config))

    return RunSummary(command=Command.SAVE, results=tuple(results))


def run(command: Command, config: IoblateConfig) -> RunSummary:
    """Dispatch command."""
    match command:
        case Command.LOAD:
            return run_load(config)
        case Command.SAVE:
            return run_save(config)
