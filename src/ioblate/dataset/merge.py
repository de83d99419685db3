"""Dataset merge engine.

Load direction: literals found in source files are collected into a
LoadAggregate, then merged into each locale's persisted dataset. New keys
are added, and keys no longer present in any scanned file are pruned.
Keys of files that failed to scan are kept as they are.

Save direction: persisted datasets are regrouped per source file and merged
into that file's current literals. Persisted translations win over the ones
in the source.

All functions are pure apart from the explicit aggregate and supplied
mappings they are documented to mutate.

Python 3.13+.
"""

import logging
from collections.abc import Collection, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from ioblate.diagnostics import ErrorTemplate
from ioblate.locale_utils import validate_locale_code

from .keys import qualify, split_key

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Load direction
    "LoadAggregate",
    "MergeOutcome",
    "merge_for_load",
    # Save direction
    "regroup",
    "merge_for_save",
]

logger = logging.getLogger(__name__)

# file -> local key -> locale -> translation
type Translations = dict[str, dict[str, dict[str, Any]]]


@dataclass(slots=True)
class LoadAggregate:
    """Translations collected from every scanned source during one load.

    Mutability Note:
        Populated while scanning, consumed once by merge_for_load(), then
        discarded. Never shared between runs.

    Attributes:
        found: locale -> qualified key -> translation
        all_keys: Every qualified key seen in any scanned file
        failed_files: Files that could not be scanned completely; their
            persisted keys are never pruned
    """

    found: dict[str, dict[str, Any]] = field(default_factory=dict)
    all_keys: set[str] = field(default_factory=set)
    failed_files: set[str] = field(default_factory=set)

    def add_literal(self, file_path: str, data: Any) -> int:
        """Record one evaluated dictionary literal of file_path.

        Entries whose value is not a locale mapping and locale codes that
        cannot name a dataset file are skipped with a warning.

        Returns:
            Number of local keys recorded
        """
        if not isinstance(data, dict):
            logger.warning(
                "Dictionary in %s is a %s, not an object; ignoring it",
                file_path,
                type(data).__name__,
            )
            return 0

        recorded = 0
        for local_key, languages in data.items():
            if not isinstance(languages, dict):
                diagnostic = ErrorTemplate.entry_not_mapping(local_key, type(languages).__name__)
                logger.warning("%s: %s", file_path, diagnostic)
                continue

            qualified_key = qualify(file_path, local_key)
            self.all_keys.add(qualified_key)
            recorded += 1

            for locale, translation in languages.items():
                reason = validate_locale_code(locale)
                if reason is not None:
                    logger.warning(
                        "%s: %s", file_path, ErrorTemplate.locale_invalid(str(locale), reason)
                    )
                    continue
                self.found.setdefault(locale, {})[qualified_key] = translation

        return recorded

    def mark_failed(self, file_path: str) -> None:
        """Protect the persisted keys of file_path from pruning."""
        self.failed_files.add(file_path)

    @property
    def locales(self) -> list[str]:
        """Locales with at least one found translation, sorted."""
        return sorted(self.found)

    @property
    def is_empty(self) -> bool:
        """True when no key was found in any file."""
        return not self.all_keys


@dataclass(frozen=True, slots=True)
class MergeOutcome:
    """Result of merging found translations into one locale's dataset.

    Attributes:
        data: The merged dataset
        created: True if no dataset existed before
        added: (qualified key, translation) pairs that were added
        removed: (qualified key, translation) pairs that were pruned
    """

    data: dict[str, Any]
    created: bool
    added: tuple[tuple[str, Any], ...] = ()
    removed: tuple[tuple[str, Any], ...] = ()

    @property
    def needs_write(self) -> bool:
        """Check whether the dataset file has to be (re)written."""
        return (self.created and bool(self.data)) or bool(self.added) or bool(self.removed)


def merge_for_load(
    existing: Mapping[str, Any] | None,
    found: Mapping[str, Any],
    all_keys: Iterable[str] | None,
    protected_files: Collection[str] = frozenset(),
) -> MergeOutcome:
    """Merge found translations into a persisted dataset.

    Existing translations are never overwritten; the dataset is the place
    where translators edit them. Key order is preserved and new keys are
    appended.

    Args:
        existing: Persisted dataset, or None if the locale has no file yet
        found: qualified key -> translation found in sources for this locale
        all_keys: Every qualified key found in any file, for pruning;
            None disables pruning
        protected_files: Source files whose keys are kept even when absent
            from all_keys

    Example:
        >>> outcome = merge_for_load({"a.js#Old": "x"}, {"a.js#New": "y"}, {"a.js#New"})
        >>> outcome.data
        {'a.js#New': 'y'}
        >>> outcome.removed
        (('a.js#Old', 'x'),)
    """
    if existing is None:
        return MergeOutcome(data=dict(found), created=True, added=tuple(found.items()))

    data = dict(existing)
    added: list[tuple[str, Any]] = []
    for key, translation in found.items():
        if key not in data:
            data[key] = translation
            added.append((key, translation))

    removed: list[tuple[str, Any]] = []
    if all_keys is not None:
        keep = all_keys if isinstance(all_keys, (set, frozenset)) else set(all_keys)
        for key in list(data):
            if key not in keep and not _belongs_to(key, protected_files):
                removed.append((key, data.pop(key)))

    return MergeOutcome(data=data, created=False, added=tuple(added), removed=tuple(removed))


def _belongs_to(qualified_key: str, files: Collection[str]) -> bool:
    if not files:
        return False
    try:
        file_path, _local_key = split_key(qualified_key)
    except ValueError:
        return False
    return file_path in files


def regroup(datasets: Mapping[str, Mapping[str, Any]]) -> Translations:
    """Turn per-locale datasets into per-file translations.

    Args:
        datasets: locale -> qualified key -> translation

    Returns:
        file -> local key -> locale -> translation

    Example:
        >>> regroup({"de": {"a.js#Hi": "Hallo"}, "en": {"a.js#Hi": "Hi"}})
        {'a.js': {'Hi': {'de': 'Hallo', 'en': 'Hi'}}}
    """
    grouped: Translations = {}
    for locale, dataset in datasets.items():
        for qualified_key, translation in dataset.items():
            try:
                file_path, local_key = split_key(qualified_key)
            except ValueError:
                logger.warning(
                    "Ignoring %r in dataset %s: no file qualifier", qualified_key, locale
                )
                continue
            grouped.setdefault(file_path, {}).setdefault(local_key, {})[locale] = translation
    return grouped


def merge_for_save(literal: Any, supplied: dict[str, dict[str, Any]]) -> Any:
    """Merge supplied translations into a freshly evaluated literal.

    Only keys already in the literal are touched. For each of them, every
    locale the literal has is overwritten by the supplied translation, which
    is consumed from supplied. Supplied locales the literal lacks are
    appended. Locales without a supplied translation keep their value.

    Args:
        literal: Evaluated dictionary literal (local key -> locale -> text)
        supplied: local key -> locale -> translation; mutated

    Returns:
        A new literal; the argument is not modified

    Example:
        >>> supplied = {"Hi": {"en": "Hello", "de": "Hallo"}, "Gone": {"en": "x"}}
        >>> merge_for_save({"Hi": {"en": "Hi", "ru": "Привет"}}, supplied)
        {'Hi': {'en': 'Hello', 'ru': 'Привет', 'de': 'Hallo'}}
        >>> supplied
        {'Hi': {'de': 'Hallo'}, 'Gone': {'en': 'x'}}
    """
    if not isinstance(literal, dict):
        return literal

    merged: dict[str, Any] = {}
    for local_key, languages in literal.items():
        if not isinstance(languages, dict):
            merged[local_key] = languages
            continue

        pending = supplied.get(local_key, {})
        entry = dict(languages)
        for locale in languages:
            if locale in pending:
                entry[locale] = pending.pop(locale)
        for locale, translation in pending.items():
            entry.setdefault(locale, translation)
        merged[local_key] = entry

    return merged
