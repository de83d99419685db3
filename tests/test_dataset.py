"""Tests for the dataset package: qualified keys, persistence and merging."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
from hypothesis import given
from hypothesis import strategies as st

from ioblate.dataset import (
    DatasetStore,
    LoadAggregate,
    merge_for_load,
    merge_for_save,
    qualify,
    regroup,
    split_key,
)
from ioblate.diagnostics import DiagnosticCode, ParseError

from tests.strategies import dictionaries, translation_keys

# ============================================================================
# QUALIFIED KEYS
# ============================================================================


class TestQualifiedKeys:
    """qualify() / split_key()."""

    def test_qualify(self) -> None:
        """File and local key are joined with '#'."""
        assert qualify("admin/words.js", "Save") == "admin/words.js#Save"

    def test_split_at_first_separator(self) -> None:
        """Local keys may contain '#'."""
        assert split_key("index.html#Tab #1") == ("index.html", "Tab #1")

    def test_empty_local_key(self) -> None:
        """An empty local key is still a key."""
        assert split_key("a.js#") == ("a.js", "")

    @pytest.mark.parametrize("key", ["no separator", "#missing file"])
    def test_invalid(self, key: str) -> None:
        """Keys without a file part are rejected."""
        with pytest.raises(ValueError, match="Not a qualified key"):
            split_key(key)

    @given(st.from_regex(r"[a-z/]{1,12}\.js", fullmatch=True), translation_keys())
    def test_round_trip(self, file_path: str, local_key: str) -> None:
        """split_key() inverts qualify() for separator-free paths."""
        assert split_key(qualify(file_path, local_key)) == (file_path, local_key)


# ============================================================================
# DATASET STORE
# ============================================================================


class TestDatasetStore:
    """Reading and writing words-<locale>.json files."""

    def test_path_for(self, tmp_path: Path) -> None:
        """File name embeds the locale."""
        store = DatasetStore(tmp_path / "i18n")

        assert store.path_for("zh-cn") == tmp_path / "i18n" / "words-zh-cn.json"

    @pytest.mark.parametrize("locale", ["", "../evil", "a/b", ".hidden", " de"])
    def test_path_for_rejects_bad_locale(self, tmp_path: Path, locale: str) -> None:
        """Codes that would break out of the directory are refused."""
        with pytest.raises(ValueError, match="Invalid locale code"):
            DatasetStore(tmp_path).path_for(locale)

    def test_write_format(self, tmp_path: Path) -> None:
        """Two-space indent, raw UTF-8, no trailing newline."""
        store = DatasetStore(tmp_path / "i18n")

        path = store.write("ru", {"a.js#Hi": "Привет"})

        assert path.read_bytes() == '{\n  "a.js#Hi": "Привет"\n}'.encode()

    def test_write_creates_directory(self, tmp_path: Path) -> None:
        """The dataset directory is created on first write."""
        store = DatasetStore(tmp_path / "nested" / "i18n")

        store.write("en", {})

        assert store.path_for("en").is_file()

    def test_read_missing(self, tmp_path: Path) -> None:
        """A locale without a file reads as None."""
        assert DatasetStore(tmp_path).read("de") is None

    def test_read_write_round_trip(self, tmp_path: Path) -> None:
        """Order and content survive a round trip."""
        store = DatasetStore(tmp_path)
        data = {"b.js#Z": "z", "a.js#A": "a"}

        store.write("en", data)
        result = store.read("en")

        assert result == data
        assert list(result or {}) == ["b.js#Z", "a.js#A"]

    def test_read_invalid_json(self, tmp_path: Path) -> None:
        """Malformed JSON raises ParseError with a position."""
        (tmp_path / "words-en.json").write_text('{\n  "a": 1,\n}', encoding="utf-8")

        with pytest.raises(ParseError) as exc_info:
            DatasetStore(tmp_path).read("en")

        diagnostic = exc_info.value.diagnostic
        assert diagnostic is not None
        assert diagnostic.code == DiagnosticCode.DATASET_PARSE_FAILED
        assert diagnostic.span is not None
        assert diagnostic.span.line == 3

    def test_read_not_an_object(self, tmp_path: Path) -> None:
        """A JSON array is not a dataset."""
        (tmp_path / "words-en.json").write_text("[]", encoding="utf-8")

        with pytest.raises(ParseError) as exc_info:
            DatasetStore(tmp_path).read("en")

        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code == DiagnosticCode.DATASET_NOT_MAPPING

    def test_list_locales(self, tmp_path: Path) -> None:
        """Only words-*.json files with usable codes are listed."""
        for name in ("words-de.json", "words-en.json", "other.json", "words-.json"):
            (tmp_path / name).write_text("{}", encoding="utf-8")
        (tmp_path / "words-dir.json").mkdir()

        assert DatasetStore(tmp_path).list_locales() == ["de", "en"]

    def test_list_locales_missing_directory(self, tmp_path: Path) -> None:
        """No directory, no locales."""
        assert DatasetStore(tmp_path / "absent").list_locales() == []

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("words-pt.json", "pt"),
            ("words-zh-cn.json", "zh-cn"),
            ("words.json", None),
            ("words-de.txt", None),
        ],
    )
    def test_locale_from_path(self, name: str, expected: str | None) -> None:
        """Locale is parsed from the file name."""
        assert DatasetStore.locale_from_path(Path(name)) == expected


# ============================================================================
# LOAD MERGE
# ============================================================================


class TestLoadAggregate:
    """Collecting literals during load."""

    def test_transposes_by_locale(self) -> None:
        """Found translations are grouped by locale with qualified keys."""
        aggregate = LoadAggregate()

        count = aggregate.add_literal("a.js", {"Hi": {"en": "Hi", "de": "Hallo"}})

        assert count == 1
        assert aggregate.found == {"en": {"a.js#Hi": "Hi"}, "de": {"a.js#Hi": "Hallo"}}
        assert aggregate.locales == ["de", "en"]

    def test_empty_entry_counts_as_key(self) -> None:
        """A key with no translations still protects its dataset entries."""
        aggregate = LoadAggregate()

        aggregate.add_literal("a.js", {"Hi": {}})

        assert aggregate.all_keys == {"a.js#Hi"}
        assert aggregate.found == {}
        assert not aggregate.is_empty

    def test_skips_bad_entries(self, caplog: pytest.LogCaptureFixture) -> None:
        """Non-mapping entries and unusable locales are warned about."""
        aggregate = LoadAggregate()

        with caplog.at_level(logging.WARNING, logger="ioblate"):
            count = aggregate.add_literal("a.js", {"Bad": "text", "Ok": {"../x": "1", "en": "2"}})

        assert count == 1
        assert aggregate.found == {"en": {"a.js#Ok": "2"}}
        assert "Bad" in caplog.text
        assert "../x" in caplog.text

    def test_non_dict_literal(self, caplog: pytest.LogCaptureFixture) -> None:
        """A literal that is not an object contributes nothing."""
        aggregate = LoadAggregate()

        with caplog.at_level(logging.WARNING, logger="ioblate"):
            assert aggregate.add_literal("a.js", ["x"]) == 0

        assert aggregate.is_empty
        assert "not an object" in caplog.text

    def test_mark_failed(self) -> None:
        """Failed files are remembered without adding keys."""
        aggregate = LoadAggregate()

        aggregate.mark_failed("a.js")

        assert aggregate.failed_files == {"a.js"}
        assert aggregate.is_empty


class TestMergeForLoad:
    """Merging found translations into persisted datasets."""

    def test_create(self) -> None:
        """No persisted dataset: everything is added."""
        outcome = merge_for_load(None, {"a.js#Hi": "Hi"}, {"a.js#Hi"})

        assert outcome.created
        assert outcome.data == {"a.js#Hi": "Hi"}
        assert outcome.added == (("a.js#Hi", "Hi"),)
        assert outcome.needs_write

    def test_create_empty_not_written(self) -> None:
        """An empty new dataset is not worth a file."""
        assert not merge_for_load(None, {}, set()).needs_write

    def test_existing_translation_wins(self) -> None:
        """Persisted values are never overwritten by source values."""
        outcome = merge_for_load({"a.js#Hi": "Servus"}, {"a.js#Hi": "Hallo"}, {"a.js#Hi"})

        assert outcome.data == {"a.js#Hi": "Servus"}
        assert not outcome.needs_write

    def test_add_appends(self) -> None:
        """New keys go after existing ones."""
        outcome = merge_for_load({"a.js#B": "b"}, {"a.js#A": "a"}, {"a.js#A", "a.js#B"})

        assert list(outcome.data) == ["a.js#B", "a.js#A"]
        assert outcome.added == (("a.js#A", "a"),)

    def test_prunes_stale_keys(self) -> None:
        """Keys no scanned file has any more are removed."""
        outcome = merge_for_load(
            {"a.js#Old": "o", "b.js#Kept": "k"}, {}, {"b.js#Kept"}
        )

        assert outcome.data == {"b.js#Kept": "k"}
        assert outcome.removed == (("a.js#Old", "o"),)
        assert outcome.needs_write

    def test_pruning_uses_all_locales(self) -> None:
        """A key found in another locale only is not pruned here."""
        outcome = merge_for_load({"a.js#Hi": "Hi"}, {}, {"a.js#Hi"})

        assert outcome.data == {"a.js#Hi": "Hi"}
        assert outcome.removed == ()

    def test_no_pruning_when_disabled(self) -> None:
        """all_keys=None keeps every persisted entry."""
        outcome = merge_for_load({"a.js#Old": "o"}, {}, None)

        assert outcome.data == {"a.js#Old": "o"}
        assert not outcome.needs_write

    def test_protected_files_not_pruned(self) -> None:
        """Keys of files that failed to scan survive pruning."""
        existing = {"a.js#Hi": "Servus", "b.js#Old": "o", "unqualified": "u"}

        outcome = merge_for_load(existing, {"b.js#New": "n"}, {"b.js#New"}, {"a.js"})

        assert outcome.data == {"a.js#Hi": "Servus", "b.js#New": "n"}
        assert outcome.removed == (("b.js#Old", "o"), ("unqualified", "u"))

    def test_inputs_not_mutated(self) -> None:
        """merge_for_load returns new data."""
        existing = {"a.js#Old": "o"}

        merge_for_load(existing, {"a.js#New": "n"}, {"a.js#New"})

        assert existing == {"a.js#Old": "o"}

    @given(dictionaries(), dictionaries())
    def test_idempotent(
        self, persisted: dict[str, dict[str, str]], scanned: dict[str, dict[str, str]]
    ) -> None:
        """Merging the same scan twice changes nothing the second time."""
        aggregate = LoadAggregate()
        aggregate.add_literal("a.js", scanned)
        existing = {qualify("a.js", k): "x" for k in persisted}

        for locale in aggregate.locales or ["en"]:
            found = aggregate.found.get(locale, {})
            first = merge_for_load(existing, found, aggregate.all_keys)
            second = merge_for_load(first.data, found, aggregate.all_keys)

            assert second.data == first.data
            assert not second.needs_write
            assert set(first.data) <= aggregate.all_keys


# ============================================================================
# SAVE MERGE
# ============================================================================


class TestRegroup:
    """Per-locale datasets to per-file translations."""

    def test_regroup(self) -> None:
        """Qualified keys are split and transposed."""
        datasets = {
            "en": {"a.js#Hi": "Hi", "b/c.html#Bye": "Bye"},
            "de": {"a.js#Hi": "Hallo"},
        }

        assert regroup(datasets) == {
            "a.js": {"Hi": {"en": "Hi", "de": "Hallo"}},
            "b/c.html": {"Bye": {"en": "Bye"}},
        }

    def test_unqualified_keys_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        """Keys without a file part are warned about."""
        with caplog.at_level(logging.WARNING, logger="ioblate"):
            result = regroup({"en": {"stray": "x", "a.js#Hi": "Hi"}})

        assert result == {"a.js": {"Hi": {"en": "Hi"}}}
        assert "stray" in caplog.text


class TestMergeForSave:
    """Merging persisted translations into a literal."""

    def test_overwrite_and_add(self) -> None:
        """Existing locales are overwritten, missing ones appended."""
        supplied = {"Hi": {"en": "Hello", "de": "Hallo"}}

        result = merge_for_save({"Hi": {"en": "Hi", "ru": "Privet"}}, supplied)

        assert result == {"Hi": {"en": "Hello", "ru": "Privet", "de": "Hallo"}}
        assert list(result["Hi"]) == ["en", "ru", "de"]

    def test_overwritten_values_consumed(self) -> None:
        """An overwrite pops the value; an addition does not."""
        supplied = {"Hi": {"en": "Hello", "de": "Hallo"}}

        merge_for_save({"Hi": {"en": "Hi"}}, supplied)

        assert supplied == {"Hi": {"de": "Hallo"}}

    def test_duplicate_literals_in_one_file(self) -> None:
        """A second literal with the same key only gets unconsumed values."""
        supplied = {"Hi": {"en": "Hello", "de": "Hallo"}}

        first = merge_for_save({"Hi": {"en": "Hi"}}, supplied)
        second = merge_for_save({"Hi": {"en": "Hi"}}, supplied)

        assert first == {"Hi": {"en": "Hello", "de": "Hallo"}}
        assert second == {"Hi": {"en": "Hi", "de": "Hallo"}}

    def test_unknown_keys_ignored(self) -> None:
        """Supplied keys absent from the literal are not added."""
        assert merge_for_save({"A": {}}, {"B": {"en": "b"}}) == {"A": {}}

    def test_literal_not_mutated(self) -> None:
        """The evaluated literal is left as it was."""
        literal = {"Hi": {"en": "Hi"}}

        merge_for_save(literal, {"Hi": {"en": "Hello"}})

        assert literal == {"Hi": {"en": "Hi"}}

    def test_non_mapping_values_passed_through(self) -> None:
        """Entries that are not locale mappings are kept verbatim."""
        assert merge_for_save({"n": 1}, {"n": {"en": "x"}}) == {"n": 1}
        assert merge_for_save([1, 2], {}) == [1, 2]

    @given(dictionaries())
    def test_saving_own_translations_is_identity(self, literal: dict[str, dict[str, str]]) -> None:
        """Supplying exactly the literal's values reproduces it."""
        supplied = {key: dict(languages) for key, languages in literal.items()}

        assert merge_for_save(literal, supplied) == literal
