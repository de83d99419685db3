"""File system collaborators: discovery, decoding reads and atomic writes.

Source files in ioBroker adapters are not always UTF-8; older ones were
saved in a Windows code page. Reads therefore sniff the encoding with
chardet. Everything is written back as UTF-8.

Python 3.13+.
"""

import fnmatch
import logging
import os
from collections.abc import Iterable
from pathlib import Path

import chardet

from ioblate.constants import DEFAULT_ENCODING, DEFAULT_LEGACY_ENCODING, EXCLUDED_DIRS
from ioblate.diagnostics import ErrorTemplate, FileReadError, FileWriteError

__all__ = [
    "detect_encoding",
    "discover_files",
    "ensure_directory",
    "read_text_file",
    "write_text_file",
]

logger = logging.getLogger(__name__)

# chardet names single-byte families "ISO-8859-x" and "Windows-125x"
_LEGACY_PREFIXES: tuple[str, ...] = ("ISO", "WINDOWS")


def discover_files(
    root: Path,
    patterns: Iterable[str],
    excluded_dirs: Iterable[str] = EXCLUDED_DIRS,
) -> list[Path]:
    """Find files below root whose names match one of patterns.

    Matching is case-insensitive. Excluded and hidden directories are not
    descended into.

    Returns:
        Matching paths, sorted
    """
    patterns = tuple(pattern.lower() for pattern in patterns)
    excluded = frozenset(excluded_dirs)
    found: list[Path] = []

    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = [d for d in dirnames if d not in excluded and not d.startswith(".")]
        for filename in filenames:
            lowered = filename.lower()
            if any(fnmatch.fnmatchcase(lowered, pattern) for pattern in patterns):
                found.append(Path(dirpath) / filename)

    found.sort()
    logger.debug("Discovered %d file(s) matching %s under %s", len(found), patterns, root)
    return found


def detect_encoding(raw: bytes, legacy_encoding: str = DEFAULT_LEGACY_ENCODING) -> str:
    """Pick the codec for raw file content.

    ISO-8859 and Windows code page detections are unreliable for short
    files, so they all map to legacy_encoding.

    Example:
        >>> detect_encoding(b"plain ascii")
        'ascii'
        >>> detect_encoding(b"")
        'utf-8'
    """
    detected = chardet.detect(raw).get("encoding")
    if not detected:
        return DEFAULT_ENCODING
    if detected.upper().startswith(_LEGACY_PREFIXES):
        return legacy_encoding
    return detected.lower()


def read_text_file(path: Path, legacy_encoding: str = DEFAULT_LEGACY_ENCODING) -> str:
    """Read and decode a text file.

    Line endings are returned unchanged.

    Raises:
        FileReadError: If the file cannot be read or decoded
    """
    try:
        raw = path.read_bytes()
    except OSError as e:
        diagnostic = ErrorTemplate.file_read_failed(str(path), str(e))
        raise FileReadError(diagnostic, path=str(path)) from e

    encoding = detect_encoding(raw, legacy_encoding)
    if encoding not in (DEFAULT_ENCODING, "ascii"):
        logger.debug("Decoding %s as %s", path, encoding)
    try:
        return raw.decode(encoding)
    except (UnicodeDecodeError, LookupError) as e:
        raise FileReadError(
            ErrorTemplate.file_decode_failed(str(path), encoding, str(e)), path=str(path)
        ) from e


def ensure_directory(path: Path) -> None:
    """Create path and its parents if missing.

    Raises:
        FileWriteError: If the directory cannot be created
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FileWriteError(
            ErrorTemplate.file_write_failed(str(path), str(e)), path=str(path)
        ) from e


def write_text_file(path: Path, text: str) -> None:
    """Write text as UTF-8, replacing path atomically.

    The content goes to a temporary sibling first and is moved over the
    target only once fully written, so a failure leaves the old file intact.

    Raises:
        FileWriteError: If writing or replacing fails
    """
    temp_path = path.with_name(f".{path.name}.tmp")
    try:
        with temp_path.open("w", encoding=DEFAULT_ENCODING, newline="") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_path, path)
    except OSError as e:
        try:
            temp_path.unlink(missing_ok=True)
        except OSError as cleanup_error:
            logger.warning("Failed to remove temp file %s: %s", temp_path, cleanup_error)
        raise FileWriteError(
            ErrorTemplate.file_write_failed(str(path), str(e)), path=str(path)
        ) from e
