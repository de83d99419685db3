"""Qualified key handling.

Persisted datasets are flat: one JSON object per locale whose keys combine
the source file and the key used inside that file's literal, joined with
KEY_SEPARATOR ("admin/words.js#Save").

Python 3.13+.
"""

from ioblate.constants import KEY_SEPARATOR

__all__ = ["qualify", "split_key"]

type QualifiedKey = str


def qualify(file_path: str, local_key: str) -> QualifiedKey:
    """Join a source file path and a local key.

    Example:
        >>> qualify("admin/words.js", "Save")
        'admin/words.js#Save'
    """
    return f"{file_path}{KEY_SEPARATOR}{local_key}"


def split_key(qualified_key: QualifiedKey) -> tuple[str, str]:
    """Split a qualified key at the first separator.

    Local keys may contain the separator; file paths containing it are
    not supported.

    Raises:
        ValueError: If qualified_key has no separator

    Example:
        >>> split_key("index.html#Tab #1")
        ('index.html', 'Tab #1')
    """
    file_path, separator, local_key = qualified_key.partition(KEY_SEPARATOR)
    if not separator or not file_path:
        msg = f"Not a qualified key: {qualified_key!r}"
        raise ValueError(msg)
    return file_path, local_key
