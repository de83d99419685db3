"""Inline script extraction for HTML documents.

Finds <script> elements whose content is JavaScript, returns each block's
text together with its offset in the document, and runs the literal
locator over the blocks with offsets translated back to the document.

Uses BeautifulSoup with the stdlib "html.parser" builder, which records the
line and column at which every tag starts.

Python 3.13+.
"""

import logging
import re
from collections.abc import Iterable, Iterator

from bs4 import BeautifulSoup, ParserRejectedMarkup
from bs4.element import Tag

from ioblate.constants import DICTIONARY_IDENTIFIERS, MAX_SOURCE_SIZE, SCRIPT_MIME_TYPES
from ioblate.diagnostics import ErrorTemplate, ParseError

from .cursor import LineOffsetCache
from .locator import locate
from .nodes import LiteralMatch, ScriptBlock

__all__ = ["extract_scripts", "is_script_element", "locate_in_document"]

logger = logging.getLogger(__name__)

_SCRIPT_CLOSE = re.compile(r"</script", re.IGNORECASE)


def is_script_element(tag: Tag) -> bool:
    """Check whether tag is an inline script holding JavaScript.

    External scripts (src attribute) and data blocks such as
    ``type="text/template"`` or ``type="application/json"`` are excluded.
    """
    if tag.name != "script" or tag.has_attr("src"):
        return False
    script_type = tag.get("type")
    if script_type is None:
        return True
    if isinstance(script_type, list):
        script_type = " ".join(script_type)
    mime = script_type.split(";", 1)[0].strip().lower()
    return mime == "" or mime in SCRIPT_MIME_TYPES


def _parse_document(document_text: str) -> BeautifulSoup:
    if len(document_text) > MAX_SOURCE_SIZE:
        raise ParseError(ErrorTemplate.source_too_large(len(document_text), MAX_SOURCE_SIZE))
    try:
        return BeautifulSoup(document_text, "html.parser")
    except ParserRejectedMarkup as e:
        raise ParseError(ErrorTemplate.markup_parse_failed(str(e))) from e


def _content_offset(document_text: str, text: str, tag_offset: int) -> int:
    """Offset of a script's raw text, anchored on its closing tag.

    Raw script text cannot contain ``</script``, so the content is the text
    that ends right before one. Returns -1 if no such position exists.
    """
    for close in _SCRIPT_CLOSE.finditer(document_text, tag_offset):
        start = close.start() - len(text)
        if start > tag_offset and document_text.startswith(text, start):
            return start
    # Unterminated script: its content runs to the end of the document
    start = len(document_text) - len(text)
    if start > tag_offset and document_text.endswith(text):
        return start
    return -1


def extract_scripts(document_text: str) -> Iterator[ScriptBlock]:
    """Yield every inline JavaScript block of document_text in document order.

    Raises:
        ParseError: If the document cannot be parsed or a script's text
            cannot be mapped back to the document
    """
    soup = _parse_document(document_text)
    lines = LineOffsetCache(document_text)

    for tag in soup.find_all("script"):
        if not is_script_element(tag):
            continue
        text = tag.string
        if text is None or not text.strip():
            continue

        tag_offset = 0
        if tag.sourceline is not None and tag.sourcepos is not None:
            tag_offset = lines.get_offset(tag.sourceline, tag.sourcepos)

        offset = _content_offset(document_text, text, tag_offset)
        if offset < 0:
            raise ParseError(
                ErrorTemplate.markup_parse_failed(
                    f"Script content of <script> at line {tag.sourceline} "
                    "not found verbatim in document"
                )
            )
        logger.debug("Script block at offset %d (%d chars)", offset, len(text))
        yield ScriptBlock(text=str(text), offset=offset)


def locate_in_document(
    document_text: str, identifiers: Iterable[str] = DICTIONARY_IDENTIFIERS
) -> Iterator[LiteralMatch]:
    """Find dictionary literals inside the inline scripts of a document.

    Spans in the returned matches are document-absolute.

    Raises:
        ParseError: If the document or one of its scripts cannot be parsed
    """
    identifiers = tuple(identifiers)
    for block in extract_scripts(document_text):
        for match in locate(block.text, identifiers):
            yield match.shifted(block.offset)
