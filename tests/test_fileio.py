"""Tests for fileio.py: discovery, encoding detection and atomic writes."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from ioblate.diagnostics import DiagnosticCode, FileReadError, FileWriteError
from ioblate.fileio import (
    detect_encoding,
    discover_files,
    ensure_directory,
    read_text_file,
    write_text_file,
)

# Enough Cyrillic text for chardet to settle on a Windows code page
_CYRILLIC = (
    "systemDictionary = {\n"
    '    "Настройки": {"ru": "Настройки адаптера", "en": "Settings"},\n'
    '    "Сохранить": {"ru": "Сохранить и закрыть окно", "en": "Save"},\n'
    '    "Отмена": {"ru": "Отменить изменения", "en": "Cancel"},\n'
    '    "Описание": {"ru": "Этот адаптер позволяет управлять устройствами", "en": "About"},\n'
    '    "Пароль": {"ru": "Введите пароль для подключения к серверу", "en": "Password"},\n'
    "};\n"
)


def _touch(path: Path, text: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


# ============================================================================
# DISCOVERY
# ============================================================================


class TestDiscoverFiles:
    """discover_files()."""

    def test_matches_patterns_recursively(self, tmp_path: Path) -> None:
        """Files in subdirectories are found, sorted."""
        expected = [
            _touch(tmp_path / "admin" / "index.html"),
            _touch(tmp_path / "admin" / "words.js"),
            _touch(tmp_path / "main.js"),
        ]
        _touch(tmp_path / "README.md")

        assert discover_files(tmp_path, ["*.js", "*.html"]) == sorted(expected)

    def test_case_insensitive(self, tmp_path: Path) -> None:
        """Upper-case extensions still match."""
        path = _touch(tmp_path / "INDEX.HTM")

        assert discover_files(tmp_path, ["*.htm"]) == [path]

    def test_excluded_and_hidden_dirs(self, tmp_path: Path) -> None:
        """node_modules, .git and other dot directories are pruned."""
        kept = _touch(tmp_path / "lib" / "a.js")
        _touch(tmp_path / "node_modules" / "dep" / "b.js")
        _touch(tmp_path / ".git" / "c.js")
        _touch(tmp_path / ".idea" / "d.js")

        assert discover_files(tmp_path, ["*.js"]) == [kept]

    def test_custom_exclusions(self, tmp_path: Path) -> None:
        """The excluded set is configurable."""
        _touch(tmp_path / "build" / "a.js")
        kept = _touch(tmp_path / "src" / "b.js")

        assert discover_files(tmp_path, ["*.js"], {"build"}) == [kept]


# ============================================================================
# ENCODING
# ============================================================================


class TestDetectEncoding:
    """detect_encoding()."""

    def test_empty_is_utf8(self) -> None:
        """Nothing to detect defaults to UTF-8."""
        assert detect_encoding(b"") == "utf-8"

    def test_utf8(self) -> None:
        """UTF-8 text is reported as UTF-8."""
        assert detect_encoding(_CYRILLIC.encode("utf-8")) == "utf-8"

    def test_windows_code_page_maps_to_legacy(self) -> None:
        """Windows and ISO detections use the legacy codec."""
        raw = _CYRILLIC.encode("cp1251")

        assert detect_encoding(raw) == "cp1251"
        assert detect_encoding(raw, "koi8-r") == "koi8-r"


class TestReadTextFile:
    """read_text_file()."""

    def test_reads_utf8(self, tmp_path: Path) -> None:
        """UTF-8 content decodes as-is."""
        path = tmp_path / "a.js"
        path.write_bytes(_CYRILLIC.encode("utf-8"))

        assert read_text_file(path) == _CYRILLIC

    def test_reads_cp1251(self, tmp_path: Path) -> None:
        """Legacy Cyrillic files decode to the same text."""
        path = tmp_path / "a.js"
        path.write_bytes(_CYRILLIC.encode("cp1251"))

        assert read_text_file(path) == _CYRILLIC

    def test_line_endings_preserved(self, tmp_path: Path) -> None:
        """\\r\\n is not translated."""
        path = tmp_path / "a.js"
        path.write_bytes(b"a = 1;\r\nb = 2;\r\n")

        assert read_text_file(path) == "a = 1;\r\nb = 2;\r\n"

    def test_missing_file(self, tmp_path: Path) -> None:
        """OS errors become FileReadError."""
        with pytest.raises(FileReadError) as exc_info:
            read_text_file(tmp_path / "absent.js")

        assert exc_info.value.path.endswith("absent.js")
        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code == DiagnosticCode.FILE_READ_FAILED


# ============================================================================
# WRITING
# ============================================================================


class TestWriteTextFile:
    """write_text_file()."""

    def test_writes_utf8_verbatim(self, tmp_path: Path) -> None:
        """Text is written as UTF-8 with line endings untouched."""
        path = tmp_path / "a.js"

        write_text_file(path, "x = 'ü';\r\n")

        assert path.read_bytes() == "x = 'ü';\r\n".encode()

    def test_replaces_existing(self, tmp_path: Path) -> None:
        """Existing content is replaced and no temp file is left behind."""
        path = _touch(tmp_path / "a.js", "old")

        write_text_file(path, "new")

        assert path.read_text(encoding="utf-8") == "new"
        assert os.listdir(tmp_path) == ["a.js"]

    def test_failure_raises_write_error(self, tmp_path: Path) -> None:
        """A missing parent directory surfaces as FileWriteError."""
        path = tmp_path / "absent" / "a.js"

        with pytest.raises(FileWriteError) as exc_info:
            write_text_file(path, "x")

        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code == DiagnosticCode.FILE_WRITE_FAILED
        assert not path.exists()

    def test_ensure_directory(self, tmp_path: Path) -> None:
        """Parents are created; an existing directory is fine."""
        target = tmp_path / "a" / "b"

        ensure_directory(target)
        ensure_directory(target)

        assert target.is_dir()

    def test_ensure_directory_over_file(self, tmp_path: Path) -> None:
        """A file in the way raises FileWriteError."""
        blocker = _touch(tmp_path / "i18n")

        with pytest.raises(FileWriteError):
            ensure_directory(blocker)
