"""Command line interface.

Usage:
    ioblate load        extract translations into i18n/words-<locale>.json
    ioblate save        write i18n/words-<locale>.json back into the sources

Exit Codes:
    0   Run completed (individual files may have failed; see the log)
    2   Missing or unknown command, or invalid options

Python 3.13+.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

from ioblate import __version__
from ioblate.config import IoblateConfig
from ioblate.constants import DEFAULT_I18N_DIR, DEFAULT_LEGACY_ENCODING
from ioblate.diagnostics import CommandUsageError, ErrorTemplate, OutputFormat
from ioblate.enums import Command
from ioblate.workflow import RunSummary, run

if TYPE_CHECKING:
    from collections.abc import Sequence

__all__ = ["build_parser", "configure_logging", "main", "parse_command"]

logger = logging.getLogger(__name__)

BANNER = "ioblate: ioBroker translation converter"
USAGE = "Usage: ioblate load|save"

_HANDLER_NAME = "ioblate-cli"


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="ioblate",
        description="Move ioBroker adapter translations between source files and i18n datasets.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Collect systemDictionary literals into i18n/words-<locale>.json:
  ioblate load

  # Write edited translations back into the sources:
  ioblate save

  # Work on another checkout:
  ioblate -C ../ioBroker.example load
""",
    )
    parser.add_argument(
        "command",
        nargs="?",
        help='"load" or "save"',
    )
    parser.add_argument(
        "-C",
        "--root",
        type=Path,
        default=None,
        help="Project root (default: current directory)",
    )
    parser.add_argument(
        "--i18n-dir",
        type=Path,
        default=Path(DEFAULT_I18N_DIR),
        help=f"Dataset directory relative to the root (default: {DEFAULT_I18N_DIR})",
    )
    parser.add_argument(
        "--legacy-encoding",
        default=DEFAULT_LEGACY_ENCODING,
        help=(
            "Codec for files detected as an ISO-8859 or Windows code page "
            f"(default: {DEFAULT_LEGACY_ENCODING})"
        ),
    )
    parser.add_argument(
        "--diagnostic-format",
        choices=[f.value for f in OutputFormat],
        default=OutputFormat.RUST.value,
        help="How errors are rendered in the log (default: rust)",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show debug output",
    )
    verbosity.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Only show warnings and errors",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def parse_command(value: str | None) -> Command:
    """Map the positional argument to a Command.

    Raises:
        CommandUsageError: If value is missing or not a known command
    """
    if not value:
        raise CommandUsageError(ErrorTemplate.command_missing())
    try:
        return Command(value)
    except ValueError as e:
        raise CommandUsageError(ErrorTemplate.command_unknown(value)) from e


def configure_logging(level: int, stream: TextIO | None = None) -> None:
    """Send ioblate log records to stream as plain messages.

    Repeated calls replace the handler installed by a previous call.
    """
    package_logger = logging.getLogger("ioblate")
    for handler in list(package_logger.handlers):
        if handler.get_name() == _HANDLER_NAME:
            package_logger.removeHandler(handler)

    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter("%(message)s"))
    package_logger.addHandler(handler)
    package_logger.setLevel(level)


def _log_summary(summary: RunSummary) -> None:
    logger.info(
        "Done: %d file(s) updated, %d unchanged, %d skipped, %d failed",
        summary.updated,
        summary.unchanged,
        summary.skipped,
        summary.errors,
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    configure_logging(level)

    if not args.quiet:
        print(BANNER)

    try:
        command = parse_command(args.command)
    except CommandUsageError as e:
        print(f"{USAGE}\n", file=sys.stderr)
        print(str(e), file=sys.stderr)
        if e.diagnostic is not None and e.diagnostic.hint not in (None, USAGE):
            print(e.diagnostic.hint, file=sys.stderr)
        return 2

    try:
        config = IoblateConfig(
            root=args.root if args.root is not None else Path.cwd(),
            i18n_dir=args.i18n_dir,
            legacy_encoding=args.legacy_encoding,
            output_format=OutputFormat(args.diagnostic_format),
        )
    except ValueError as e:
        print(f"ioblate: error: {e}", file=sys.stderr)
        return 2

    if not config.root.is_dir():
        print(f"ioblate: error: not a directory: {config.root}", file=sys.stderr)
        return 2

    summary = run(command, config)
    _log_summary(summary)
    return 0
