"""Shared constants for ioblate.

This module provides centralized configuration constants used across the
syntax, dataset and workflow packages. Placing constants here avoids
circular imports and provides a single source of truth.

Constants are grouped by domain:
- Literal targets: Identifier names that hold a translation dictionary
- Dataset layout: Where and how per-locale datasets are persisted
- Source discovery: Which files are scanned
- Limits: Recursion and size protection

Python 3.13+.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Literal targets
    "DICTIONARY_IDENTIFIERS",
    # Dataset layout
    "DEFAULT_I18N_DIR",
    "DATASET_PREFIX",
    "DATASET_SUFFIX",
    "KEY_SEPARATOR",
    "INDENT_WIDTH",
    # Source discovery
    "SCRIPT_PATTERNS",
    "MARKUP_PATTERNS",
    "EXCLUDED_DIRS",
    "SCRIPT_MIME_TYPES",
    # Encoding
    "DEFAULT_ENCODING",
    "DEFAULT_LEGACY_ENCODING",
    # Limits
    "MAX_DEPTH",
    "MAX_SOURCE_SIZE",
]

# ============================================================================
# LITERAL TARGETS
# ============================================================================

# Names bound to the translation dictionary in ioBroker admin pages.
# The underscore alias is used by adapters that wrap the global in a closure.
DICTIONARY_IDENTIFIERS: tuple[str, ...] = ("systemDictionary", "_systemDictionary")

# ============================================================================
# DATASET LAYOUT
# ============================================================================

# Dataset directory relative to the project root.
DEFAULT_I18N_DIR: str = "i18n"

# Persisted file name is DATASET_PREFIX + locale + DATASET_SUFFIX,
# e.g. "words-de.json".
DATASET_PREFIX: str = "words-"
DATASET_SUFFIX: str = ".json"

# Separates the owning file path from the local key: "admin/words.js#Hello".
KEY_SEPARATOR: str = "#"

# Indent width for serialized literals and persisted datasets.
INDENT_WIDTH: int = 2

# ============================================================================
# SOURCE DISCOVERY
# ============================================================================

SCRIPT_PATTERNS: tuple[str, ...] = ("*.js",)
MARKUP_PATTERNS: tuple[str, ...] = ("*.htm", "*.html")

# Directory names never descended into during discovery.
EXCLUDED_DIRS: frozenset[str] = frozenset({"node_modules", ".git"})

# <script type="..."> values treated as inline JavaScript.
# An absent or empty type attribute also counts as JavaScript.
SCRIPT_MIME_TYPES: frozenset[str] = frozenset(
    {
        "text/javascript",
        "application/javascript",
        "application/x-javascript",
        "text/ecmascript",
        "application/ecmascript",
        "module",
    }
)

# ============================================================================
# ENCODING
# ============================================================================

# Encoding of every file written by ioblate.
DEFAULT_ENCODING: str = "utf-8"

# Codec used when detection reports an ISO-8859 or Windows code page.
# Legacy ioBroker admin pages were authored in Windows-1251.
DEFAULT_LEGACY_ENCODING: str = "cp1251"

# ============================================================================
# LIMITS
# ============================================================================

# Maximum nesting depth accepted by the literal evaluator.
# Translation literals nest two levels; 100 is clearly malformed input.
MAX_DEPTH: int = 100

# Maximum source size in characters (10 MB).
MAX_SOURCE_SIZE: int = 10 * 1024 * 1024
