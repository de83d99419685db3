"""Persisted per-locale datasets.

Each locale lives in its own file, ``<directory>/words-<locale>.json``,
holding a flat JSON object of qualified keys to translations.

Python 3.13+.
"""

import json
import logging
from pathlib import Path
from typing import Any

from ioblate.constants import (
    DATASET_PREFIX,
    DATASET_SUFFIX,
    DEFAULT_LEGACY_ENCODING,
    INDENT_WIDTH,
)
from ioblate.diagnostics import ErrorTemplate, ParseError
from ioblate.fileio import ensure_directory, read_text_file, write_text_file
from ioblate.locale_utils import validate_locale_code
from ioblate.syntax.position import source_span
from ioblate.syntax.serializer import serialize

__all__ = ["DatasetStore"]

logger = logging.getLogger(__name__)

type Dataset = dict[str, Any]


class DatasetStore:
    """Reads and writes the dataset files of one directory.

    Example:
        >>> store = DatasetStore(Path("i18n"))
        >>> store.path_for("de")
        PosixPath('i18n/words-de.json')
        >>> store.locale_from_path(Path("i18n/words-zh-cn.json"))
        'zh-cn'
    """

    __slots__ = ("_directory", "_indent", "_legacy_encoding")

    def __init__(
        self,
        directory: Path,
        *,
        indent: int = INDENT_WIDTH,
        legacy_encoding: str = DEFAULT_LEGACY_ENCODING,
    ) -> None:
        self._directory = directory
        self._indent = indent
        self._legacy_encoding = legacy_encoding

    @property
    def directory(self) -> Path:
        """Directory holding the dataset files."""
        return self._directory

    def path_for(self, locale: str) -> Path:
        """Dataset file path for locale.

        Raises:
            ValueError: If locale cannot be used in a file name
        """
        reason = validate_locale_code(locale)
        if reason is not None:
            msg = f"Invalid locale code {locale!r}: {reason}"
            raise ValueError(msg)
        return self._directory / f"{DATASET_PREFIX}{locale}{DATASET_SUFFIX}"

    @staticmethod
    def locale_from_path(path: Path) -> str | None:
        """Locale encoded in a dataset file name, or None for other files."""
        name = path.name
        if not (name.startswith(DATASET_PREFIX) and name.endswith(DATASET_SUFFIX)):
            return None
        locale = name[len(DATASET_PREFIX) : len(name) - len(DATASET_SUFFIX)]
        if validate_locale_code(locale) is not None:
            return None
        return locale

    def list_locales(self) -> list[str]:
        """Locales that currently have a dataset file, sorted."""
        if not self._directory.is_dir():
            return []
        locales = {
            locale
            for path in self._directory.glob(f"{DATASET_PREFIX}*{DATASET_SUFFIX}")
            if path.is_file() and (locale := self.locale_from_path(path)) is not None
        }
        return sorted(locales)

    def read(self, locale: str) -> Dataset | None:
        """Load the dataset of locale.

        Returns:
            The dataset, or None if no file exists for locale

        Raises:
            FileReadError: If the file cannot be read or decoded
            ParseError: If the file is not a JSON object
        """
        path = self.path_for(locale)
        if not path.is_file():
            return None

        text = read_text_file(path, self._legacy_encoding)
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ParseError(
                ErrorTemplate.dataset_parse_failed(str(path), e.msg, source_span(text, e.pos))
            ) from e

        if not isinstance(data, dict):
            raise ParseError(ErrorTemplate.dataset_not_mapping(str(path), type(data).__name__))

        logger.debug("Read %d entries from %s", len(data), path)
        return data

    def write(self, locale: str, data: Dataset) -> Path:
        """Persist data as the dataset of locale.

        Raises:
            FileWriteError: If the directory or file cannot be written
        """
        path = self.path_for(locale)
        ensure_directory(self._directory)
        write_text_file(path, serialize(data, self._indent))
        return path
