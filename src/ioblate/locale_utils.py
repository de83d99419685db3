"""Locale code utilities.

Locale codes come from two untrusted places: the keys of translation
objects inside source literals and the names of persisted dataset files.
Because a code becomes part of a file name, it is validated before use.
Babel is consulted only to recognize codes and name them in log output;
an unknown code is still a valid dataset locale.

Python 3.13+.
"""

from __future__ import annotations

import functools
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from babel import Locale

__all__ = [
    "display_name",
    "get_babel_locale",
    "is_known_locale",
    "normalize_locale",
    "validate_locale_code",
]

logger = logging.getLogger(__name__)

# Characters that would let a locale escape the dataset directory
# or break the file name.
_FORBIDDEN_CHARS: frozenset[str] = frozenset("/\\:\0")

_MAX_LOCALE_LENGTH: int = 35


def normalize_locale(locale_code: str) -> str:
    """Convert a locale code to POSIX format for Babel.

    ioBroker adapters use codes like "zh-cn"; Babel expects "zh_cn".

    Example:
        >>> normalize_locale("zh-cn")
        'zh_cn'
        >>> normalize_locale("de")
        'de'
    """
    return locale_code.replace("-", "_")


def validate_locale_code(locale_code: object) -> str | None:
    """Check whether locale_code can name a dataset file.

    Returns:
        None when the code is usable, otherwise the reason it is not

    Example:
        >>> validate_locale_code("en") is None
        True
        >>> validate_locale_code("../x")
        'contains a path separator or reserved character'
    """
    if not isinstance(locale_code, str):
        return f"expected a string, got {type(locale_code).__name__}"
    if not locale_code or locale_code.strip() != locale_code:
        return "empty or surrounded by whitespace"
    if len(locale_code) > _MAX_LOCALE_LENGTH:
        return f"longer than {_MAX_LOCALE_LENGTH} characters"
    if any(ch in _FORBIDDEN_CHARS for ch in locale_code):
        return "contains a path separator or reserved character"
    if locale_code in (".", "..") or locale_code.startswith("."):
        return "starts with a dot"
    return None


@functools.lru_cache(maxsize=128)
def get_babel_locale(locale_code: str) -> Locale:
    """Get a Babel Locale object with caching.

    Raises:
        babel.core.UnknownLocaleError: If locale is not recognized
        ValueError: If locale format is invalid

    Example:
        >>> get_babel_locale("pt-br").territory
        'BR'
    """
    # Lazy import: Babel loads CLDR data at import time; defer until needed
    from babel import Locale  # noqa: PLC0415

    return Locale.parse(normalize_locale(locale_code))


def is_known_locale(locale_code: str) -> bool:
    """Check whether CLDR knows locale_code."""
    from babel.core import UnknownLocaleError  # noqa: PLC0415

    try:
        get_babel_locale(locale_code)
    except (UnknownLocaleError, ValueError):
        return False
    return True


def display_name(locale_code: str) -> str:
    """English display name of locale_code, or the code itself if unknown.

    Example:
        >>> display_name("de")
        'German'
        >>> display_name("xx-unknown")
        'xx-unknown'
    """
    if not is_known_locale(locale_code):
        logger.debug("Locale %s is not known to CLDR", locale_code)
        return locale_code
    name = get_babel_locale(locale_code).get_display_name("en")
    return name or locale_code
