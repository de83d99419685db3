"""Splice engine: apply literal replacements to source text.

Replacements are applied from the end of the text towards its start so the
offsets of the ones still pending stay valid.

Python 3.13+.
"""

import logging
from collections.abc import Iterable

from ioblate.constants import INDENT_WIDTH
from ioblate.diagnostics import ErrorTemplate, SpliceError

from .nodes import Replacement
from .serializer import render

__all__ = ["splice", "validate_replacements"]

logger = logging.getLogger(__name__)


def validate_replacements(
    text_length: int, replacements: Iterable[Replacement]
) -> list[Replacement]:
    """Return replacements sorted by descending end offset.

    Raises:
        SpliceError: If a span exceeds the text or two spans overlap
    """
    ordered = sorted(replacements, key=lambda r: (r.span.end, r.span.start), reverse=True)

    for replacement in ordered:
        if replacement.span.end > text_length:
            span = (replacement.span.start, replacement.span.end)
            raise SpliceError(ErrorTemplate.splice_out_of_range(span, text_length))

    for later, earlier in zip(ordered, ordered[1:], strict=False):
        if later.span.overlaps(earlier.span):
            raise SpliceError(
                ErrorTemplate.splice_overlap(
                    (earlier.span.start, earlier.span.end),
                    (later.span.start, later.span.end),
                )
            )

    return ordered


def splice(
    original_text: str, replacements: Iterable[Replacement], indent: int = INDENT_WIDTH
) -> str:
    """Replace each replacement's span with its rendered data.

    Text outside the spans is preserved exactly.

    Args:
        original_text: Text the spans refer to
        replacements: Non-overlapping replacements
        indent: Indent width of the rendered data

    Returns:
        The rewritten text

    Raises:
        SpliceError: If a span exceeds the text or two spans overlap

    Example:
        >>> from ioblate.syntax.nodes import Span
        >>> splice("x = {};", [Replacement(Span(4, 6), {"a": 1})])
        'x = {\\n  "a": 1\\n};'
    """
    ordered = validate_replacements(len(original_text), replacements)

    text = original_text
    for replacement in ordered:
        start, end = replacement.span.start, replacement.span.end
        text = text[:start] + render(replacement.data, replacement.indent, indent) + text[end:]

    logger.debug("Applied %d replacement(s)", len(ordered))
    return text
